import os, json
import logging
from threading import Lock
from typing import List, Optional, Set, Union

from pydantic import ValidationError

from aipulse.settings import SNAPSHOT_PATH, WHITELIST_PATH
from aipulse.storage.models import NewsArticle, NewsSnapshot, Whitelist
from aipulse.utils.date_format import utc_now_iso

logger = logging.getLogger(__name__)

snapshot_lock = Lock()


class StorageError(Exception):
    pass


class SnapshotError(StorageError):
    """data/current.json existe mas não respeita o contrato do snapshot."""


class WhitelistError(StorageError):
    """config/whitelist.json ausente ou inválido."""


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: str, payload) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def parse_snapshot(raw) -> NewsSnapshot:
    try:
        return NewsSnapshot.model_validate(raw)
    except ValidationError as e:
        raise SnapshotError(f"invalid snapshot: {e}") from e


def load_snapshot(path: Optional[str] = None) -> Optional[NewsSnapshot]:
    """Lê o snapshot; None se o arquivo não existe."""
    path = path or SNAPSHOT_PATH
    if not os.path.exists(path):
        return None
    with snapshot_lock:
        try:
            raw = _read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    return parse_snapshot(raw)


def save_snapshot(snapshot: NewsSnapshot, path: Optional[str] = None) -> None:
    path = path or SNAPSHOT_PATH
    with snapshot_lock:
        _write_json(path, snapshot.to_json_dict())


def ensure_snapshot(path: Optional[str] = None) -> NewsSnapshot:
    """Garante que existe um snapshot para o agente anexar; cria um vazio se preciso."""
    path = path or SNAPSHOT_PATH
    existing = load_snapshot(path)
    if existing is not None:
        return existing
    empty = NewsSnapshot(last_updated=utc_now_iso(), news=[])
    save_snapshot(empty, path)
    logger.info("Created empty snapshot at %s", path)
    return empty


def raw_snapshot_urls(path: Optional[str] = None) -> Set[str]:
    """
    URLs presentes no arquivo mesmo que ele viole o contrato (ex.: URL duplicada).
    Conjunto vazio se o arquivo não existe ou não é JSON legível.
    """
    path = path or SNAPSHOT_PATH
    try:
        with snapshot_lock:
            raw = _read_json(path)
    except (OSError, ValueError):
        return set()
    news = raw.get("news") if isinstance(raw, dict) else None
    if not isinstance(news, list):
        return set()
    return {item["url"] for item in news if isinstance(item, dict) and isinstance(item.get("url"), str)}


def new_articles(before: Union[NewsSnapshot, Set[str], None], after: NewsSnapshot) -> List[NewsArticle]:
    """Artigos de `after` cuja URL não estava em `before` (na ordem de `after`)."""
    if isinstance(before, NewsSnapshot):
        known = before.urls
    else:
        known = before or set()
    return [a for a in after.news if a.url not in known]


def load_whitelist(path: Optional[str] = None) -> Whitelist:
    path = path or WHITELIST_PATH
    try:
        raw = _read_json(path)
    except FileNotFoundError as e:
        raise WhitelistError(f"whitelist not found: {path}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WhitelistError(f"{path} is not valid JSON: {e}") from e
    try:
        whitelist = Whitelist.model_validate(raw)
    except ValidationError as e:
        raise WhitelistError(f"invalid whitelist: {e}") from e
    if not whitelist.sources:
        raise WhitelistError(f"whitelist has no sources: {path}")
    return whitelist
