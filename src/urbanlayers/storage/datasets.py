from __future__ import annotations

import io
import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from urbanlayers.features.collection import FeatureCollection


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def geojson_path(output_dir: Path, layer: str) -> Path:
    return output_dir / f"{layer}.geojson"


def load_parquet(path: Path) -> pd.DataFrame:
    try:
        return pd.read_parquet(path, dtype_backend="numpy_nullable")
    except ImportError as exc:
        raise RuntimeError("pyarrow is required to read Parquet files. Install the project dependencies.") from exc


def read_parquet_bytes(payload: bytes) -> pd.DataFrame:
    try:
        return pd.read_parquet(io.BytesIO(payload), dtype_backend="numpy_nullable")
    except ImportError as exc:
        raise RuntimeError("pyarrow is required to read Parquet files. Install the project dependencies.") from exc


def dataframe_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    """One dict per row, keyed by column name, in source row and column order.

    Frames read by `load_parquet` use nullable dtypes, so integer columns with nulls keep their
    exact values and nulls arrive as `pd.NA`.
    """
    if len(df) == 0:
        return []
    out = df.copy()
    out.columns = [str(c) for c in out.columns]
    return out.to_dict(orient="records")


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, "tolist"):
        return value.tolist()
    return str(value)


def dumps_geojson(collection: FeatureCollection) -> str:
    return json.dumps(collection.to_geojson(), ensure_ascii=False, default=_json_default)


def save_geojson(collection: FeatureCollection, path: Path) -> Path:
    ensure_parent_dir(path)
    tmp = path.with_suffix(f"{path.suffix}.tmp")
    tmp.write_text(dumps_geojson(collection), encoding="utf-8")
    tmp.replace(path)
    return path
