from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Optional, Sequence

from urbanlayers.logging_config import configure_logging
from urbanlayers.settings import get_config, load_config
from urbanlayers.sources.layers import export_layers, load_configured_layers


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Load the building, road and traffic layers and write them as GeoJSON."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config YAML (default: URBANLAYERS_CONFIG or configs/config.yaml).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory (default: config.paths.output_dir).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    config = load_config(args.config) if args.config else get_config()
    if args.output_dir:
        config = config.model_copy(
            update={"paths": config.paths.model_copy(update={"output_dir": Path(args.output_dir)})}
        )
    configure_logging(config=config)

    results = asyncio.run(load_configured_layers(config))
    written = export_layers(results, config)
    for kind, path in written.items():
        _, stats = results[kind]
        print(
            f"[build-layers] {kind.value}: wrote {path} "
            f"features={stats.output_features:,} dropped={stats.dropped_rows:,}"
        )


if __name__ == "__main__":
    main()
