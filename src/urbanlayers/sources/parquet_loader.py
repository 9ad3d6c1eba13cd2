"""Columnar source loading.

Fetches a Parquet table (HTTP(S) URL or local path), turns it into rows and builds a
FeatureCollection for one layer kind.

Each call owns its HTTP client (unless one is passed in) and its result; nothing is cached
between calls, so concurrent loads of the same source are independent. Fetch and decode
failures surface as `FetchError` and are not retried here.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from urbanlayers.errors import FetchError, classify_fetch_error
from urbanlayers.features.collection import BuildStats, FeatureCollection, build_feature_collection
from urbanlayers.features.properties import LayerKind
from urbanlayers.settings import AppConfig, get_config
from urbanlayers.storage.datasets import dataframe_to_rows, load_parquet, read_parquet_bytes


logger = logging.getLogger(__name__)


def _is_remote(source: str | Path) -> bool:
    return isinstance(source, str) and urlparse(source).scheme in {"http", "https"}


def _local_path(source: str | Path) -> Path:
    if isinstance(source, str) and source.startswith("file://"):
        return Path(urlparse(source).path)
    return Path(source)


async def fetch_bytes(
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[AppConfig] = None,
) -> bytes:
    """GET `url` and return the body. HTTP and network errors are raised as-is."""

    if client is not None:
        response = await client.get(url)
        response.raise_for_status()
        return response.content

    resolved = config or get_config()
    async with httpx.AsyncClient(
        timeout=resolved.http.request_timeout_seconds,
        headers={"user-agent": resolved.http.user_agent},
        follow_redirects=True,
    ) as owned:
        response = await owned.get(url)
        response.raise_for_status()
        return response.content


async def load_rows(
    source: str | Path,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[AppConfig] = None,
) -> list[dict[str, Any]]:
    """Fetch and decode a Parquet table into rows.

    Raises:
        FetchError: retrieval failed or the payload is not a readable Parquet file.
    """
    label = str(source)
    try:
        if _is_remote(source):
            payload = await fetch_bytes(str(source), client=client, config=config)
            df = await asyncio.to_thread(read_parquet_bytes, payload)
        else:
            df = await asyncio.to_thread(load_parquet, _local_path(source))
    except (httpx.HTTPError, OSError, ValueError) as exc:
        info = classify_fetch_error(exc)
        logger.error("Failed to load %s (%s): %s", label, info.code, info.message)
        raise FetchError(label, info) from exc

    rows = dataframe_to_rows(df)
    logger.info("Loaded %d row(s) with %d column(s) from %s", len(rows), len(df.columns), label)
    if rows:
        logger.debug("Available fields: %s", list(rows[0].keys()))
    return rows


async def load_layer(
    source: str | Path,
    kind: LayerKind | str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[AppConfig] = None,
) -> tuple[FeatureCollection, BuildStats]:
    resolved = config or get_config()
    rows = await load_rows(source, client=client, config=resolved)
    collection, stats = build_feature_collection(
        rows,
        kind,
        geometry_field_aliases=resolved.decoding.geometry_field_aliases,
    )
    logger.info("%s features created: %d", stats.kind.capitalize(), stats.output_features)
    return collection, stats


async def load_buildings(source: str | Path, **kwargs: Any) -> tuple[FeatureCollection, BuildStats]:
    return await load_layer(source, LayerKind.BUILDINGS, **kwargs)


async def load_roads(source: str | Path, **kwargs: Any) -> tuple[FeatureCollection, BuildStats]:
    return await load_layer(source, LayerKind.ROADS, **kwargs)


async def load_traffic(source: str | Path, **kwargs: Any) -> tuple[FeatureCollection, BuildStats]:
    return await load_layer(source, LayerKind.TRAFFIC, **kwargs)
