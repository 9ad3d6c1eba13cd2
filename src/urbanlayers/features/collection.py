from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

from urbanlayers.errors import GeometryDecodeError, UndecodableGeometryError
from urbanlayers.features.properties import MISSING, LayerKind, normalize_properties, resolve_alias
from urbanlayers.features.rows import Row
from urbanlayers.geometry.decoder import decode_geometry
from urbanlayers.geometry.types import Geometry


logger = logging.getLogger(__name__)

DEFAULT_GEOMETRY_FIELD_ALIASES: tuple[str, ...] = ("geometry", "GEOMETRY", "geom", "GEOM", "wkt", "WKT")


@dataclass(frozen=True)
class Feature:
    geometry: Geometry
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy into a read-only view so later edits to the source dict cannot leak in.
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": self.geometry.to_geojson(),
            "properties": dict(self.properties),
        }


@dataclass(frozen=True)
class FeatureCollection:
    features: tuple[Feature, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(self.features))

    @property
    def type(self) -> str:
        return "FeatureCollection"

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.type, "features": [feature.to_geojson() for feature in self.features]}


@dataclass(frozen=True)
class BuildStats:
    kind: str
    input_rows: int
    output_features: int
    dropped_rows: int


def resolve_geometry_value(row: Row, aliases: Sequence[str] = DEFAULT_GEOMETRY_FIELD_ALIASES) -> Any:
    value = resolve_alias(row, aliases)
    if value is MISSING:
        raise UndecodableGeometryError(f"No geometry column among {list(aliases)}")
    return value


def build_feature(
    row: Row,
    kind: LayerKind | str,
    *,
    geometry_field_aliases: Sequence[str] = DEFAULT_GEOMETRY_FIELD_ALIASES,
) -> Feature:
    """Decode one row into a Feature. Raises GeometryDecodeError when the geometry is unusable."""
    geometry = decode_geometry(resolve_geometry_value(row, geometry_field_aliases))
    return Feature(geometry=geometry, properties=normalize_properties(row, kind))


def build_feature_collection(
    rows: Iterable[Row],
    kind: LayerKind | str,
    *,
    geometry_field_aliases: Optional[Sequence[str]] = None,
) -> tuple[FeatureCollection, BuildStats]:
    """Assemble rows into a FeatureCollection, in source order.

    Rows whose geometry cannot be decoded are dropped and counted; they never abort the batch.
    """
    layer = LayerKind(kind)
    aliases = tuple(geometry_field_aliases or DEFAULT_GEOMETRY_FIELD_ALIASES)

    features: list[Feature] = []
    input_rows = 0
    dropped = 0
    for index, row in enumerate(rows):
        input_rows += 1
        try:
            features.append(build_feature(row, layer, geometry_field_aliases=aliases))
        except GeometryDecodeError as exc:
            dropped += 1
            row_id = resolve_alias(row, ("id", "ID"))
            logger.warning(
                "Dropping %s row %d (id=%s): %s",
                layer.value,
                index,
                None if row_id is MISSING else row_id,
                exc,
            )

    stats = BuildStats(
        kind=layer.value,
        input_rows=input_rows,
        output_features=len(features),
        dropped_rows=dropped,
    )
    if dropped:
        logger.info(
            "Built %d %s feature(s) from %d row(s); dropped %d with undecodable geometry.",
            stats.output_features,
            layer.value,
            input_rows,
            dropped,
        )
    return FeatureCollection(features=tuple(features)), stats
