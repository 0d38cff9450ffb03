from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from core.config import settings

IST = timezone(timedelta(minutes=settings.ist_offset_minutes), name="IST")


def _parse(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        dt = datetime.fromisoformat(raw)
    # Timestamps without an offset come from the store in UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_ist(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return _parse(value).astimezone(IST)


def format_ist(value: Union[str, datetime, None]) -> Optional[str]:
    """Render like "18 Oct 2026, 02:30 pm"."""
    dt = to_ist(value)
    if dt is None:
        return None
    return f"{dt.day} {dt.strftime('%b %Y')}, {dt.strftime('%I:%M')} {dt.strftime('%p').lower()}"
