import os, json
import logging
from typing import Optional

from pydantic import ValidationError

from aipulse.settings import SESSION_PATH
from aipulse.storage.models import SessionPointer
from aipulse.utils.date_format import utc_now_iso

logger = logging.getLogger(__name__)


def load(path: Optional[str] = None) -> Optional[SessionPointer]:
    """
    Lê o ponteiro da sessão anterior do agente.

    Nunca levanta exceção: arquivo ausente ou corrompido equivale a "sem sessão"
    (ambos logados como warning), e a coleta segue como sessão nova.
    """
    path = path or SESSION_PATH
    if not os.path.exists(path):
        logger.warning("No previous session file at %s, starting fresh", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        pointer = SessionPointer.model_validate(raw)
    # ValueError cobre JSONDecodeError e UnicodeDecodeError
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Session file %s is unreadable, starting fresh: %s", path, e)
        return None
    logger.info("Loaded previous session %s (last run %s)", pointer.session_id, pointer.last_run)
    return pointer


def save(session_id: str, path: Optional[str] = None) -> SessionPointer:
    """Sobrescreve o arquivo de sessão com o id novo e o horário atual."""
    path = path or SESSION_PATH
    pointer = SessionPointer(session_id=session_id, last_run=utc_now_iso())
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(pointer.to_json_dict(), f, ensure_ascii=False, indent=2)
    except OSError as e:
        logger.warning("Could not save session %s to %s: %s", session_id, path, e)
        return pointer
    logger.info("Saved session %s", session_id)
    return pointer
