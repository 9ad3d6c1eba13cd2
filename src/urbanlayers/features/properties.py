"""Canonical property resolution.

Source tables name the same attribute differently (`HEIGHT`, `height`, `h`, ...). Each layer kind
has an ordered alias table; the first alias present in a row supplies the canonical value, else
the attribute's default applies (attributes without a default are left out).

Merge precedence when building a feature's properties:
1. canonical attributes (alias-resolved value or default)
2. every original column under its own name, overriding a canonical key of the same name
   unless the original value is null

Null markers (None/NaN/NA/NaT) in original columns are written as None.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from urbanlayers.features.rows import Row, is_missing


class LayerKind(str, Enum):
    BUILDINGS = "buildings"
    ROADS = "roads"
    TRAFFIC = "traffic"


@dataclass(frozen=True)
class CanonicalAttribute:
    name: str
    aliases: tuple[str, ...]
    default: Optional[Any] = None

    @property
    def has_default(self) -> bool:
        return self.default is not None


_ID = CanonicalAttribute("id", ("id", "ID"))

ALIAS_TABLES: dict[LayerKind, tuple[CanonicalAttribute, ...]] = {
    LayerKind.BUILDINGS: (
        CanonicalAttribute("HEIGHT", ("HEIGHT", "height", "h"), default=10),
        CanonicalAttribute("POP", ("POP", "population", "pop"), default=0),
        _ID,
    ),
    LayerKind.ROADS: (_ID,),
    LayerKind.TRAFFIC: (
        _ID,
        CanonicalAttribute("vehicles", ("vehicles", "VEHICLES", "Vehicles"), default=0),
        CanonicalAttribute("speed", ("speed", "SPEED", "Speed"), default=0),
        CanonicalAttribute("HW_truck", ("HW_truck", "hw_truck"), default=0),
        CanonicalAttribute("LMV_passengers", ("LMV_passengers", "lmv_passengers"), default=0),
        CanonicalAttribute("MHV_deliver", ("MHV_deliver", "mhv_deliver"), default=0),
        CanonicalAttribute("PWA_moped", ("PWA_moped", "pwa_moped"), default=0),
        CanonicalAttribute("begin", ("begin", "BEGIN", "Begin")),
        CanonicalAttribute("end", ("end", "END", "End")),
    ),
}

MISSING = object()


def resolve_alias(row: Row, aliases: Sequence[str]) -> Any:
    """Return the first non-null value among `aliases`, or `MISSING`."""
    for alias in aliases:
        value = row.get(alias)
        if not is_missing(value):
            return value
    return MISSING


def canonical_properties(row: Row, kind: LayerKind | str) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    for attribute in ALIAS_TABLES[LayerKind(kind)]:
        value = resolve_alias(row, attribute.aliases)
        if value is not MISSING:
            properties[attribute.name] = value
        elif attribute.has_default:
            properties[attribute.name] = attribute.default
    return properties


def normalize_properties(row: Row, kind: LayerKind | str) -> dict[str, Any]:
    properties = canonical_properties(row, kind)
    for column, value in row.items():
        if is_missing(value):
            if column in properties:
                continue
            value = None
        properties[column] = value
    return properties
