from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

import pandas as pd

from urbanlayers.geometry.types import Geometry


# Values a row may carry. Structured geometry arrives either as a `Geometry` or as a
# GeoJSON-like mapping (e.g. a Parquet struct column).
RowValue = Union[None, str, int, float, bool, bytes, Mapping[str, Any], Geometry]
Row = Mapping[str, RowValue]


def is_missing(value: Any) -> bool:
    """True for None and the null markers pandas/pyarrow hand back (NaN, NA, NaT)."""
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))
