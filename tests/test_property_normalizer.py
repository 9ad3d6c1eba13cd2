from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from urbanlayers.features.properties import LayerKind, canonical_properties, normalize_properties
from urbanlayers.features.rows import is_missing


def test_earlier_alias_wins() -> None:
    props = normalize_properties({"height": 5, "HEIGHT": 20}, LayerKind.BUILDINGS)
    assert props["HEIGHT"] == 20
    assert props["height"] == 5


def test_later_alias_used_when_earlier_absent() -> None:
    props = normalize_properties({"h": 7, "population": 120}, "buildings")
    assert props["HEIGHT"] == 7
    assert props["POP"] == 120
    assert props["h"] == 7


def test_building_defaults_and_absent_id() -> None:
    props = normalize_properties({"name": "Torre"}, LayerKind.BUILDINGS)
    assert props["HEIGHT"] == 10
    assert props["POP"] == 0
    assert "id" not in props
    assert props["name"] == "Torre"


def test_null_original_column_does_not_clobber_resolved_value() -> None:
    props = normalize_properties({"HEIGHT": None, "h": 7}, LayerKind.BUILDINGS)
    assert props["HEIGHT"] == 7


def test_null_markers_are_skipped_and_written_as_none() -> None:
    props = normalize_properties({"POP": float("nan"), "population": 12, "note": float("nan")}, "buildings")
    assert props["POP"] == 12
    assert props["note"] is None


def test_zero_is_a_present_value() -> None:
    props = normalize_properties({"vehicles": 0, "VEHICLES": 5}, LayerKind.TRAFFIC)
    assert props["vehicles"] == 0


def test_traffic_aliases_and_window_fields() -> None:
    row = {"ID": "seg-1", "Vehicles": 40, "SPEED": 32.5, "hw_truck": 3, "BEGIN": 25200, "End": 26100}
    props = canonical_properties(row, LayerKind.TRAFFIC)
    assert props == {
        "id": "seg-1",
        "vehicles": 40,
        "speed": 32.5,
        "HW_truck": 3,
        "LMV_passengers": 0,
        "MHV_deliver": 0,
        "PWA_moped": 0,
        "begin": 25200,
        "end": 26100,
    }


def test_traffic_window_absent_when_unresolved() -> None:
    props = normalize_properties({"vehicles": 3}, LayerKind.TRAFFIC)
    assert "begin" not in props
    assert "end" not in props


def test_roads_only_resolve_id() -> None:
    props = normalize_properties({"id": 9, "lanes": 2}, LayerKind.ROADS)
    assert props == {"id": 9, "lanes": 2}


@pytest.mark.parametrize(
    "value",
    [None, float("nan"), pd.NA, pd.NaT, np.float32("nan"), np.datetime64("NaT")],
)
def test_is_missing_recognizes_null_markers(value) -> None:
    assert is_missing(value)


@pytest.mark.parametrize("value", [0, "", False, b"", {"type": "Point"}, [1.0, 2.0], np.int64(0)])
def test_is_missing_keeps_present_values(value) -> None:
    assert not is_missing(value)


def test_numpy_nan_alias_falls_through_to_next() -> None:
    properties = canonical_properties({"HEIGHT": np.float32("nan"), "height": 7.5}, LayerKind.BUILDINGS)
    assert properties["HEIGHT"] == 7.5
