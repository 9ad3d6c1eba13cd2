from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from urbanlayers.errors import UndecodableGeometryError, UnsupportedEncodingError
from urbanlayers.features.rows import is_missing
from urbanlayers.geometry.types import Geometry
from urbanlayers.geometry.wkt import parse_wkt


def decode_geometry(value: Any) -> Geometry:
    """Decode a raw column value into a `Geometry`.

    Dispatch:
    - null/absent -> UndecodableGeometryError
    - `Geometry` -> returned as is
    - mapping with a known `type` -> copied into a `Geometry` (shape not validated)
    - str -> WKT parser (may raise InvalidWktError)
    - bytes-like -> UnsupportedEncodingError (WKB is not implemented)
    - anything else -> UndecodableGeometryError
    """
    if is_missing(value):
        raise UndecodableGeometryError("Geometry value is missing")

    if isinstance(value, Geometry):
        return value

    if isinstance(value, Mapping):
        geometry = Geometry.from_mapping(value)
        if geometry is None:
            raise UndecodableGeometryError(
                f"Structured geometry has unrecognized type: {value.get('type')!r}"
            )
        return geometry

    if isinstance(value, str):
        return parse_wkt(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        raise UnsupportedEncodingError(f"WKB geometry is not supported ({len(value)} bytes)")

    raise UndecodableGeometryError(f"Unsupported geometry value of type {type(value).__name__}")
