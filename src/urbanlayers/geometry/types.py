"""Geometry value types.

A `Geometry` is an immutable tagged value: a `GeometryType` discriminator plus nested tuples of
coordinates. Coordinate pairs are always `(longitude, latitude)`.

Shapes by type:
- Point: `(lng, lat)`
- LineString: `((lng, lat), ...)`
- Polygon: `(ring, ...)`, ring 0 is the exterior boundary and later rings are holes
- MultiLineString: `(linestring, ...)`
- MultiPolygon: `(polygon, ...)`

Ring closure is not checked; whatever the source encodes passes through.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


Coordinate = tuple[float, float]
CoordinateSequence = tuple[Coordinate, ...]


class GeometryType(str, Enum):
    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"

    @classmethod
    def lookup(cls, value: Any) -> Optional["GeometryType"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


def freeze_coordinates(value: Any) -> Any:
    """Recursively turn lists into tuples so a geometry cannot be mutated through shared references."""
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, Sequence) or _is_array_like(value):
        return tuple(freeze_coordinates(item) for item in value)
    return value


def thaw_coordinates(value: Any) -> Any:
    """Inverse of `freeze_coordinates`: nested tuples become lists (GeoJSON arrays)."""
    if isinstance(value, tuple):
        return [thaw_coordinates(item) for item in value]
    return value


def _is_array_like(value: Any) -> bool:
    # numpy arrays produced by pandas/pyarrow for list columns.
    return hasattr(value, "tolist") and hasattr(value, "__iter__")


@dataclass(frozen=True)
class Geometry:
    type: GeometryType
    coordinates: Any

    @classmethod
    def point(cls, lng: float, lat: float) -> "Geometry":
        return cls(GeometryType.POINT, (float(lng), float(lat)))

    @classmethod
    def linestring(cls, coords: Sequence[Coordinate]) -> "Geometry":
        return cls(GeometryType.LINESTRING, tuple(coords))

    @classmethod
    def polygon(cls, rings: Sequence[CoordinateSequence]) -> "Geometry":
        return cls(GeometryType.POLYGON, tuple(tuple(ring) for ring in rings))

    @classmethod
    def multilinestring(cls, lines: Sequence[CoordinateSequence]) -> "Geometry":
        return cls(GeometryType.MULTILINESTRING, tuple(tuple(line) for line in lines))

    @classmethod
    def multipolygon(cls, polygons: Sequence[Sequence[CoordinateSequence]]) -> "Geometry":
        return cls(
            GeometryType.MULTIPOLYGON,
            tuple(tuple(tuple(ring) for ring in polygon) for polygon in polygons),
        )

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> Optional["Geometry"]:
        """Build from a GeoJSON-like mapping; returns None when `type` is not a known variant.

        Coordinates are copied into tuples but their shape is not validated.
        """
        geometry_type = GeometryType.lookup(value.get("type"))
        if geometry_type is None:
            return None
        return cls(geometry_type, freeze_coordinates(value.get("coordinates")))

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.type.value, "coordinates": thaw_coordinates(self.coordinates)}
