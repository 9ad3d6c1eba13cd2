from __future__ import annotations

import copy

import pytest

from urbanlayers.errors import InvalidWktError, UndecodableGeometryError, UnsupportedEncodingError
from urbanlayers.geometry.decoder import decode_geometry
from urbanlayers.geometry.types import Geometry, GeometryType


def test_structured_geometry_passes_through_without_mutation() -> None:
    value = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}
    original = copy.deepcopy(value)

    first = decode_geometry(value)
    second = decode_geometry(value)

    assert first == second
    assert value == original
    assert first.type is GeometryType.POLYGON
    assert first.to_geojson() == original


def test_structured_geometry_shape_is_not_validated() -> None:
    geometry = decode_geometry({"type": "Point", "coordinates": [1, 2, 3, 4]})
    assert geometry.coordinates == (1, 2, 3, 4)


def test_geometry_instance_is_returned_as_is() -> None:
    geometry = Geometry.point(10.4, 43.7)
    assert decode_geometry(geometry) is geometry


def test_wkt_string_is_parsed() -> None:
    assert decode_geometry("POINT(10.4 43.7)") == Geometry.point(10.4, 43.7)


def test_invalid_wkt_propagates() -> None:
    with pytest.raises(InvalidWktError):
        decode_geometry("TRIANGLE(1 2)")


@pytest.mark.parametrize("value", [None, float("nan"), 42, {"type": "Circle"}, ["POINT(1 2)"]])
def test_undecodable_values(value: object) -> None:
    with pytest.raises(UndecodableGeometryError):
        decode_geometry(value)


def test_binary_geometry_is_unsupported() -> None:
    with pytest.raises(UnsupportedEncodingError):
        decode_geometry(b"\x01\x01\x00\x00\x00")
