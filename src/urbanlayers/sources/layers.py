from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from urbanlayers.errors import FetchError
from urbanlayers.features.collection import BuildStats, FeatureCollection
from urbanlayers.features.properties import LayerKind
from urbanlayers.settings import AppConfig, get_config
from urbanlayers.sources.parquet_loader import load_layer
from urbanlayers.sources.placeholder import placeholder_layer
from urbanlayers.storage.datasets import geojson_path, save_geojson


logger = logging.getLogger(__name__)


async def load_layer_with_fallback(
    source: Optional[str | Path],
    kind: LayerKind | str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[AppConfig] = None,
) -> tuple[FeatureCollection, BuildStats]:
    """Load a layer, substituting placeholder data when the source is unset or cannot be fetched.

    Raises:
        FetchError: the load failed and placeholders are disabled.
        ValueError: no source was given and placeholders are disabled.
    """
    resolved = config or get_config()
    layer = LayerKind(kind)

    if source is None:
        if not resolved.placeholder.enabled:
            raise ValueError(f"No source configured for {layer.value} and placeholders are disabled")
        logger.info("No source configured for %s; using placeholder data.", layer.value)
        return placeholder_layer(layer, resolved)

    try:
        return await load_layer(source, layer, client=client, config=resolved)
    except FetchError as exc:
        if not resolved.placeholder.enabled:
            raise
        logger.warning("Using placeholder %s data after fetch failure: %s", layer.value, exc)
        return placeholder_layer(layer, resolved)


def configured_source(kind: LayerKind | str, config: AppConfig) -> Optional[str]:
    layer = LayerKind(kind)
    return getattr(config.sources, f"{layer.value}_url")


async def load_configured_layers(
    config: Optional[AppConfig] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> dict[LayerKind, tuple[FeatureCollection, BuildStats]]:
    """Load every layer kind from `config.sources` concurrently.

    The loads are independent: each result reflects only its own source.
    """
    resolved = config or get_config()
    kinds = list(LayerKind)
    results = await asyncio.gather(
        *(
            load_layer_with_fallback(
                configured_source(kind, resolved), kind, client=client, config=resolved
            )
            for kind in kinds
        )
    )
    return dict(zip(kinds, results))


def export_layers(
    results: dict[LayerKind, tuple[FeatureCollection, BuildStats]],
    config: Optional[AppConfig] = None,
) -> dict[LayerKind, Path]:
    """Write each layer to `<paths.output_dir>/<kind>.geojson`."""
    resolved = config or get_config()
    written: dict[LayerKind, Path] = {}
    for kind, (collection, stats) in results.items():
        path = save_geojson(collection, geojson_path(resolved.paths.output_dir, kind.value))
        logger.info("Wrote %d %s feature(s) to %s", stats.output_features, kind.value, path)
        written[kind] = path
    return written
