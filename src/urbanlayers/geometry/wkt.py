"""Well-known-text (WKT) geometry parser.

Supports the five geometry keywords used by the source tables: POINT, LINESTRING, POLYGON,
MULTILINESTRING and MULTIPOLYGON. Keywords are matched case-sensitively at the start of the
(trimmed) text.

Leniency rules:
- POINT never fails: an unparseable pair becomes `(0.0, 0.0)`. Do not read that as "origin".
- LINESTRING / MULTILINESTRING without a parenthesized body yield empty coordinate sequences.
- Empty sub-polygon groups in a MULTIPOLYGON are skipped.
- Coordinate tuples with more than two values (Z/M) keep only longitude and latitude.

POLYGON and MULTIPOLYGON bodies are split by an explicit depth-tracked scanner because ring
separators and coordinate separators are both commas.
"""

from __future__ import annotations

import re
from enum import Enum

from urbanlayers.errors import InvalidWktError
from urbanlayers.geometry.types import Coordinate, CoordinateSequence, Geometry


_POINT_RE = re.compile(r"POINT\s*\(([^)]+)\)")
_LINESTRING_RE = re.compile(r"LINESTRING\s*\(([^)]+)\)")
_POLYGON_RE = re.compile(r"POLYGON\s*\((.+)\)$", re.S)
_MULTIPOLYGON_RE = re.compile(r"MULTIPOLYGON\s*\((.+)\)$", re.S)
_PAREN_GROUP_RE = re.compile(r"\(([^()]+)\)")


class ScanState(Enum):
    OUTSIDE_RING = "outside_ring"
    INSIDE_RING = "inside_ring"
    INSIDE_SUBPOLYGON = "inside_subpolygon"


def parse_wkt(text: str) -> Geometry:
    """Parse a WKT literal into a `Geometry`.

    Raises:
        InvalidWktError: unknown keyword or a body that does not follow the grammar.
    """
    if not isinstance(text, str):
        raise InvalidWktError(f"WKT must be a string, got {type(text).__name__}")

    wkt = text.strip()
    # MULTI* first only for readability; no keyword is a prefix of another.
    if wkt.startswith("MULTILINESTRING"):
        return _parse_multilinestring(wkt)
    if wkt.startswith("MULTIPOLYGON"):
        return _parse_multipolygon(wkt)
    if wkt.startswith("POINT"):
        return _parse_point(wkt)
    if wkt.startswith("LINESTRING"):
        return _parse_linestring(wkt)
    if wkt.startswith("POLYGON"):
        return _parse_polygon(wkt)

    raise InvalidWktError(f"Unrecognized WKT geometry keyword: {_preview(wkt)!r}")


def parse_coordinate_pair(text: str) -> Coordinate:
    parts = text.split()
    if len(parts) < 2:
        raise InvalidWktError(f"Expected 'lng lat' pair, got {text.strip()!r}")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise InvalidWktError(f"Non-numeric coordinate in {text.strip()!r}") from exc


def parse_coordinate_sequence(text: str) -> CoordinateSequence:
    """Parse `"x1 y1, x2 y2, ..."` into coordinate pairs, preserving order."""
    if not text.strip():
        return ()
    return tuple(parse_coordinate_pair(pair) for pair in text.split(","))


def _parse_point(wkt: str) -> Geometry:
    match = _POINT_RE.search(wkt)
    if match is None:
        return Geometry.point(0.0, 0.0)
    try:
        lng, lat = parse_coordinate_pair(match.group(1))
    except InvalidWktError:
        return Geometry.point(0.0, 0.0)
    return Geometry.point(lng, lat)


def _parse_linestring(wkt: str) -> Geometry:
    match = _LINESTRING_RE.search(wkt)
    if match is None:
        return Geometry.linestring(())
    return Geometry.linestring(parse_coordinate_sequence(match.group(1)))


def _parse_multilinestring(wkt: str) -> Geometry:
    groups = _PAREN_GROUP_RE.findall(wkt)
    return Geometry.multilinestring([parse_coordinate_sequence(group) for group in groups])


def _parse_polygon(wkt: str) -> Geometry:
    match = _POLYGON_RE.search(wkt)
    if match is None:
        raise InvalidWktError(f"POLYGON without a balanced ring group: {_preview(wkt)!r}")
    rings = split_rings(match.group(1))
    return Geometry.polygon([parse_coordinate_sequence(ring) for ring in rings])


def _parse_multipolygon(wkt: str) -> Geometry:
    match = _MULTIPOLYGON_RE.search(wkt)
    if match is None:
        raise InvalidWktError(f"MULTIPOLYGON without a balanced polygon group: {_preview(wkt)!r}")
    polygons = []
    for chunk in split_polygons(match.group(1)):
        # Empty groups such as `()` or `(())` carry no polygon and are skipped.
        if not chunk[1:-1].strip():
            continue
        rings = parse_wkt("POLYGON" + chunk).coordinates
        if rings:
            polygons.append(rings)
    return Geometry.multipolygon(polygons)


def split_rings(body: str) -> list[str]:
    """Split the inside of `POLYGON( ... )` into the text of each ring.

    `body` is `"(x y, ...), (x y, ...)"`. Only one level of ring nesting is allowed. Empty rings
    `()` are skipped.
    """
    rings: list[str] = []
    current: list[str] = []
    state = ScanState.OUTSIDE_RING

    for offset, char in enumerate(body):
        if state is ScanState.OUTSIDE_RING:
            if char == "(":
                state = ScanState.INSIDE_RING
                current = []
            elif char == ")":
                raise InvalidWktError(f"Unbalanced ')' at offset {offset} in polygon body")
            elif char != "," and not char.isspace():
                raise InvalidWktError(f"Unexpected {char!r} between rings at offset {offset}")
        elif char == "(":
            raise InvalidWktError(f"Nested '(' inside a ring at offset {offset}")
        elif char == ")":
            ring_text = "".join(current)
            if ring_text.strip():
                rings.append(ring_text)
            state = ScanState.OUTSIDE_RING
        else:
            current.append(char)

    if state is not ScanState.OUTSIDE_RING:
        raise InvalidWktError("Unterminated ring in polygon body")
    return rings


def split_polygons(body: str) -> list[str]:
    """Split the inside of `MULTIPOLYGON( ... )` into parenthesized polygon bodies.

    Each returned chunk keeps its outer parentheses, e.g. `"((x y, ...), (x y, ...))"`.
    """
    polygons: list[str] = []
    current: list[str] = []
    depth = 0
    state = ScanState.OUTSIDE_RING

    for offset, char in enumerate(body):
        if state is ScanState.OUTSIDE_RING:
            if char == "(":
                state = ScanState.INSIDE_SUBPOLYGON
                depth = 1
                current = [char]
            elif char == ")":
                raise InvalidWktError(f"Unbalanced ')' at offset {offset} in multipolygon body")
            elif char != "," and not char.isspace():
                raise InvalidWktError(f"Unexpected {char!r} between polygons at offset {offset}")
            continue

        current.append(char)
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                polygons.append("".join(current))
                state = ScanState.OUTSIDE_RING

    if state is not ScanState.OUTSIDE_RING:
        raise InvalidWktError("Unterminated polygon in multipolygon body")
    return polygons


def _preview(text: str, limit: int = 40) -> str:
    return text if len(text) <= limit else text[:limit] + "..."
