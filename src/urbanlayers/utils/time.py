from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo


DEFAULT_TZ = ZoneInfo("Europe/Rome")

SECONDS_PER_DAY = 86400


def parse_datetime(value: str, default_tz: ZoneInfo = DEFAULT_TZ) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt


def to_local(dt: datetime, tz: Optional[ZoneInfo] = None) -> datetime:
    """Express `dt` in the local zone. Naive datetimes are taken to be local already."""
    local_tz = tz or DEFAULT_TZ
    if dt.tzinfo is None:
        return dt.replace(tzinfo=local_tz)
    return dt.astimezone(local_tz)


def seconds_since_midnight(dt: datetime, tz: Optional[ZoneInfo] = None) -> float:
    local = to_local(dt, tz)
    return local.hour * 3600 + local.minute * 60 + local.second + local.microsecond / 1_000_000
