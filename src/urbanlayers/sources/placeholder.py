"""Synthesized placeholder layers.

Used when a source table is unset or cannot be fetched, so a map can still show something
plausible. Rows are generated as WKT plus attribute columns and go through the normal builder,
so the output has the same shape as real data. Generation is deterministic for a given seed.
"""

from __future__ import annotations

import random
from typing import Any, Optional

from urbanlayers.features.collection import BuildStats, FeatureCollection, build_feature_collection
from urbanlayers.features.properties import LayerKind
from urbanlayers.settings import AppConfig, PlaceholderSection, get_config


TRAFFIC_SLICE_SECONDS = 900


def _wkt_pairs(coords: list[tuple[float, float]]) -> str:
    return ", ".join(f"{lng:.6f} {lat:.6f}" for lng, lat in coords)


def _random_point(rng: random.Random, spec: PlaceholderSection) -> tuple[float, float]:
    return (
        spec.center_lon + rng.uniform(-spec.spread_degrees, spec.spread_degrees),
        spec.center_lat + rng.uniform(-spec.spread_degrees, spec.spread_degrees),
    )


def _random_path(rng: random.Random, spec: PlaceholderSection) -> list[tuple[float, float]]:
    lng, lat = _random_point(rng, spec)
    step = spec.spread_degrees / 10
    coords = [(lng, lat)]
    for _ in range(rng.randint(1, 4)):
        lng += rng.uniform(-step, step)
        lat += rng.uniform(-step, step)
        coords.append((lng, lat))
    return coords


def building_rows(spec: PlaceholderSection) -> list[dict[str, Any]]:
    rng = random.Random(spec.seed)
    rows: list[dict[str, Any]] = []
    for index in range(spec.building_count):
        lng, lat = _random_point(rng, spec)
        half = rng.uniform(0.00005, 0.0002)
        ring = [
            (lng - half, lat - half),
            (lng + half, lat - half),
            (lng + half, lat + half),
            (lng - half, lat + half),
            (lng - half, lat - half),
        ]
        rows.append(
            {
                "id": f"B{index}",
                "geometry": f"POLYGON(({_wkt_pairs(ring)}))",
                "HEIGHT": round(rng.uniform(5.0, 60.0), 1),
                "POP": rng.randint(0, 200),
            }
        )
    return rows


def road_rows(spec: PlaceholderSection) -> list[dict[str, Any]]:
    rng = random.Random(spec.seed + 1)
    return [
        {"id": f"R{index}", "geometry": f"LINESTRING({_wkt_pairs(_random_path(rng, spec))})"}
        for index in range(spec.road_count)
    ]


def traffic_rows(spec: PlaceholderSection) -> list[dict[str, Any]]:
    """Traffic counts on random segments, each valid for one 15-minute slice of the day."""
    rng = random.Random(spec.seed + 2)
    slices_per_day = 86400 // TRAFFIC_SLICE_SECONDS
    rows: list[dict[str, Any]] = []
    for index in range(spec.traffic_count):
        begin = rng.randrange(slices_per_day) * TRAFFIC_SLICE_SECONDS
        counts = {
            "HW_truck": rng.randint(0, 10),
            "LMV_passengers": rng.randint(0, 80),
            "MHV_deliver": rng.randint(0, 15),
            "PWA_moped": rng.randint(0, 20),
        }
        rows.append(
            {
                "id": f"T{index}",
                "geometry": f"LINESTRING({_wkt_pairs(_random_path(rng, spec))})",
                "vehicles": sum(counts.values()),
                "speed": round(rng.uniform(10.0, 70.0), 1),
                **counts,
                "begin": begin,
                "end": begin + TRAFFIC_SLICE_SECONDS,
            }
        )
    return rows


_ROW_GENERATORS = {
    LayerKind.BUILDINGS: building_rows,
    LayerKind.ROADS: road_rows,
    LayerKind.TRAFFIC: traffic_rows,
}


def placeholder_layer(
    kind: LayerKind | str, config: Optional[AppConfig] = None
) -> tuple[FeatureCollection, BuildStats]:
    resolved = config or get_config()
    layer = LayerKind(kind)
    rows = _ROW_GENERATORS[layer](resolved.placeholder)
    return build_feature_collection(rows, layer)
