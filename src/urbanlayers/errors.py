from __future__ import annotations

from dataclasses import dataclass

import httpx


class UrbanLayersError(Exception):
    """Base class for errors raised by urbanlayers."""


class GeometryDecodeError(UrbanLayersError):
    """A single row's geometry could not be decoded.

    These never escape a batch build: the builder drops the row, counts it and logs a warning.
    """


class InvalidWktError(GeometryDecodeError):
    """Malformed or unrecognized well-known-text geometry."""


class UndecodableGeometryError(GeometryDecodeError):
    """Absent geometry or a value shape the decoder does not understand."""


class UnsupportedEncodingError(GeometryDecodeError):
    """Binary geometry (WKB) for which no decoder is implemented."""


@dataclass(frozen=True)
class FetchErrorInfo:
    code: str
    kind: str
    message: str


class FetchError(UrbanLayersError):
    """Raised when a source table cannot be retrieved or decoded. Not retried."""

    def __init__(self, source: str, info: FetchErrorInfo) -> None:
        self.source = source
        self.info = info
        super().__init__(f"Failed to load {source} ({info.code}): {info.message}")

    @property
    def code(self) -> str:
        return self.info.code


def classify_fetch_error(exc: Exception) -> FetchErrorInfo:
    """Classify common source-loading failures into stable codes for callers/monitoring."""

    text = str(exc)
    lower = text.lower()

    if isinstance(exc, httpx.HTTPStatusError):
        status = int(exc.response.status_code)
        if status == 404:
            return FetchErrorInfo(code="not_found", kind="http", message=f"HTTP 404: {text}")
        if status in {401, 403}:
            return FetchErrorInfo(code="auth", kind="http", message=f"HTTP {status} auth error: {text}")
        return FetchErrorInfo(code=f"http_{status}", kind="http", message=f"HTTP {status}: {text}")

    if isinstance(exc, httpx.TimeoutException):
        return FetchErrorInfo(code="timeout", kind="network", message=text)

    if isinstance(exc, httpx.ConnectError):
        if "name or service not known" in lower or "temporary failure in name resolution" in lower:
            return FetchErrorInfo(code="dns", kind="network", message=text)
        return FetchErrorInfo(code="connect_error", kind="network", message=text)

    if isinstance(exc, httpx.TransportError):
        return FetchErrorInfo(code="transport_error", kind="network", message=text)

    if isinstance(exc, FileNotFoundError):
        return FetchErrorInfo(code="not_found", kind="file", message=text)

    if isinstance(exc, (ValueError, OSError)):
        # pyarrow's ArrowInvalid subclasses ValueError; truncated payloads surface as OSError.
        return FetchErrorInfo(code="invalid_payload", kind="decode", message=text)

    return FetchErrorInfo(code="unknown", kind="unknown", message=text)
