import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests
from fastapi.concurrency import run_in_threadpool

from aipulse.settings import SNAPSHOT_TIMEOUT
from aipulse.storage.models import NewsSnapshot
from aipulse.storage.repository import SnapshotError, parse_snapshot

logger = logging.getLogger(__name__)

# ---------- HTTP session global (sem retry: recarregar a página é a única nova tentativa) ----------
_SESSION = requests.Session()
_SESSION.headers.update({"User-Agent": "AIPulseReader/1.0", "Accept": "application/json"})


class SnapshotLoadError(Exception):
    """Falha ao carregar o snapshot; `message` vai literal para a tela."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoadStatus(str, Enum):
    loading = "loading"
    success = "success"
    failure = "failure"


@dataclass
class LoadResult:
    status: LoadStatus = LoadStatus.loading
    snapshot: Optional[NewsSnapshot] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, snapshot: NewsSnapshot) -> "LoadResult":
        return cls(status=LoadStatus.success, snapshot=snapshot)

    @classmethod
    def failure(cls, message: str) -> "LoadResult":
        return cls(status=LoadStatus.failure, error=message)


def fetch_snapshot(url: str, timeout: float = SNAPSHOT_TIMEOUT) -> NewsSnapshot:
    try:
        response = _SESSION.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise SnapshotLoadError(str(e)) from e

    if not 200 <= response.status_code < 300:
        raise SnapshotLoadError(f"Failed to load news: {response.status_code}")

    try:
        raw = response.json()
    except ValueError as e:
        raise SnapshotLoadError(f"Failed to load news: invalid JSON ({e})") from e

    try:
        return parse_snapshot(raw)
    except SnapshotError as e:
        raise SnapshotLoadError(f"Failed to load news: {e}") from e


async def load_snapshot(url: str) -> LoadResult:
    """Leitura única, fora do event loop; nunca levanta, devolve success ou failure."""
    try:
        snapshot = await run_in_threadpool(fetch_snapshot, url)
    except SnapshotLoadError as e:
        logger.warning("Snapshot load failed for %s: %s", url, e.message)
        return LoadResult.failure(e.message)
    return LoadResult.success(snapshot)
