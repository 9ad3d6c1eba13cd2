from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

from urbanlayers.features.collection import Feature, FeatureCollection
from urbanlayers.features.rows import is_missing
from urbanlayers.settings import AppConfig
from urbanlayers.utils.time import SECONDS_PER_DAY, parse_datetime, seconds_since_midnight


@dataclass(frozen=True)
class ActiveWindowSpec:
    timezone: str = "Europe/Rome"
    default_begin: float = 0
    default_end: float = SECONDS_PER_DAY


def active_window_spec_from_config(config: AppConfig) -> ActiveWindowSpec:
    return ActiveWindowSpec(
        timezone=config.app.timezone,
        default_begin=config.temporal.default_begin_seconds,
        default_end=config.temporal.default_end_seconds,
    )


def _coerce_seconds(value: Any, default: float) -> float:
    if is_missing(value) or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def window_bounds(properties: Mapping[str, Any], spec: Optional[ActiveWindowSpec] = None) -> tuple[float, float]:
    """Return the (begin, end) validity window in seconds since local midnight.

    Absent or non-numeric bounds fall back to the `ActiveWindowSpec` defaults (the whole day).
    """
    resolved = spec or ActiveWindowSpec()
    begin = _coerce_seconds(properties.get("begin"), resolved.default_begin)
    end = _coerce_seconds(properties.get("end"), resolved.default_end)
    return begin, end


def is_active(feature: Feature, seconds: float, spec: Optional[ActiveWindowSpec] = None) -> bool:
    begin, end = window_bounds(feature.properties, spec)
    return begin <= seconds <= end


def filter_active(
    collection: FeatureCollection,
    instant: datetime | str,
    spec: Optional[ActiveWindowSpec] = None,
) -> FeatureCollection:
    """Keep features whose [begin, end] window contains `instant` (both bounds inclusive).

    `instant` is reduced to seconds since local midnight in `spec.timezone`; naive datetimes and
    ISO strings without an offset are taken as already local. The input collection is left
    untouched and survivor order is preserved.
    """
    resolved = spec or ActiveWindowSpec()
    zone = ZoneInfo(resolved.timezone)
    if isinstance(instant, str):
        instant = parse_datetime(instant, default_tz=zone)
    seconds = seconds_since_midnight(instant, zone)
    return FeatureCollection(
        features=tuple(feature for feature in collection if is_active(feature, seconds, resolved))
    )
