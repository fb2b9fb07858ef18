from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from typing import Optional

from aipulse.settings import DISPLAY_TIMEZONE

DATE_FORMATS = ("short", "long", "full")


def parse_iso(iso_ts: Optional[str]) -> Optional[datetime]:
    """Converte string ISO 8601 (aceita sufixo 'Z') em datetime com timezone."""
    if not iso_ts:
        return None
    try:
        dt = datetime.fromisoformat(iso_ts.strip().replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def utc_to_local(dt_utc: datetime, tz_name: str = DISPLAY_TIMEZONE) -> datetime:
    """Converte datetime UTC para timezone local."""
    return dt_utc.astimezone(ZoneInfo(tz_name))


def format_date(iso_ts: Optional[str], fmt: str = "short", tz_name: str = DISPLAY_TIMEZONE) -> str:
    """
    Formata um timestamp ISO no estilo ja-JP.

    short: "1月5日"
    long:  "2024年1月5日"
    full:  "2024年1月5日 09:00"
    """
    if fmt not in DATE_FORMATS:
        raise ValueError(f"unknown date format: {fmt!r}")
    dt = parse_iso(iso_ts)
    if dt is None:
        return ""
    local = utc_to_local(dt, tz_name)
    if fmt == "short":
        return f"{local.month}月{local.day}日"
    if fmt == "long":
        return f"{local.year}年{local.month}月{local.day}日"
    return f"{local.year}年{local.month}月{local.day}日 {local:%H:%M}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
