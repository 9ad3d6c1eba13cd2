from __future__ import annotations

import logging

import pytest

from urbanlayers.features.collection import Feature, FeatureCollection, build_feature_collection
from urbanlayers.features.properties import LayerKind
from urbanlayers.geometry.types import Geometry, GeometryType


def _rows() -> list[dict[str, object]]:
    return [
        {"id": "r1", "geometry": "LINESTRING(10.40 43.71, 10.41 43.72)", "vehicles": 12},
        {"id": "r2", "geometry": None, "vehicles": 5},
        {"id": "r3", "geometry": {"type": "Point", "coordinates": [10.4, 43.7]}},
    ]


def test_build_drops_undecodable_rows_and_keeps_order(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="urbanlayers.features.collection"):
        collection, stats = build_feature_collection(_rows(), LayerKind.TRAFFIC)

    assert [f.properties["id"] for f in collection] == ["r1", "r3"]
    assert collection.features[0].geometry.type is GeometryType.LINESTRING
    assert collection.features[0].geometry.coordinates == ((10.40, 43.71), (10.41, 43.72))
    assert collection.features[1].geometry == Geometry.point(10.4, 43.7)
    assert stats.input_rows == 3
    assert stats.output_features == 2
    assert stats.dropped_rows == 1
    assert "row 1" in caplog.text and "r2" in caplog.text


def test_geometry_column_aliases_are_tried_in_order() -> None:
    rows = [
        {"WKT": "POINT(1 2)"},
        {"geom": "POINT(3 4)", "wkt": "POINT(5 6)"},
        {"GEOMETRY": None, "wkt": "POINT(7 8)"},
    ]
    collection, stats = build_feature_collection(rows, "roads")
    assert [f.geometry.coordinates for f in collection] == [(1.0, 2.0), (3.0, 4.0), (7.0, 8.0)]
    assert stats.dropped_rows == 0


def test_custom_geometry_field_aliases() -> None:
    rows = [{"shape": "POINT(1 2)"}, {"geometry": "POINT(3 4)"}]
    collection, stats = build_feature_collection(rows, "roads", geometry_field_aliases=["shape"])
    assert len(collection) == 1
    assert stats.dropped_rows == 1


def test_total_failure_yields_empty_collection() -> None:
    rows = [{"geometry": b"\x00\x01"}, {"geometry": "POLYGON((10 10, 11 10, 11 11, 10 11"}, {}]
    collection, stats = build_feature_collection(rows, LayerKind.BUILDINGS)
    assert collection.to_geojson() == {"type": "FeatureCollection", "features": []}
    assert stats.dropped_rows == 3


def test_properties_include_canonical_and_original_columns() -> None:
    collection, _ = build_feature_collection(
        [{"wkt": "POINT(1 2)", "height": 25, "name": "Duomo"}], LayerKind.BUILDINGS
    )
    props = collection.features[0].properties
    assert props["HEIGHT"] == 25
    assert props["POP"] == 0
    assert props["name"] == "Duomo"
    assert props["wkt"] == "POINT(1 2)"


def test_feature_is_immutable() -> None:
    source = {"HEIGHT": 12}
    feature = Feature(geometry=Geometry.point(1, 2), properties=source)
    source["HEIGHT"] = 99
    assert feature.properties["HEIGHT"] == 12
    with pytest.raises(TypeError):
        feature.properties["HEIGHT"] = 1  # type: ignore[index]


def test_collection_to_geojson_shape() -> None:
    collection = FeatureCollection(
        features=[Feature(geometry=Geometry.linestring([(1.0, 2.0), (3.0, 4.0)]), properties={"id": 1})]
    )
    assert collection.to_geojson() == {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": [[1.0, 2.0], [3.0, 4.0]]},
                "properties": {"id": 1},
            }
        ],
    }
