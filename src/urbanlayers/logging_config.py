"""Logging setup for urbanlayers runs.

The YAML file named by `URBANLAYERS_LOGGING_CONFIG` (default `configs/logging.yaml`) is applied
with `dictConfig` when it exists; otherwise a stderr console handler is installed. The `logging`
section of the app config is layered on top: it sets the level of the `urbanlayers` logger and,
when `dropped_rows_log` is set, copies the feature builder's per-row drop warnings to that file.
"""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from urbanlayers.settings import AppConfig, LoggingSection, get_config, project_root


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER = "urbanlayers"
DROPPED_ROWS_LOGGER = "urbanlayers.features.collection"
DROPPED_ROWS_HANDLER = "urbanlayers_dropped_rows"


def _console_config() -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "NOTSET",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            }
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }


def _route_dropped_rows(section: LoggingSection) -> None:
    logger = logging.getLogger(DROPPED_ROWS_LOGGER)
    for handler in list(logger.handlers):
        if handler.get_name() == DROPPED_ROWS_HANDLER:
            logger.removeHandler(handler)
            handler.close()

    if section.dropped_rows_log is None:
        return
    path = Path(section.dropped_rows_log)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name(DROPPED_ROWS_HANDLER)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


def configure_logging(
    logging_config_path: str | Path | None = None,
    config: Optional[AppConfig] = None,
) -> None:
    root = project_root()
    candidate = logging_config_path or os.getenv(
        "URBANLAYERS_LOGGING_CONFIG", "configs/logging.yaml"
    )
    path = Path(candidate)
    if not path.is_absolute():
        path = root / path
    if path.exists():
        data: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        logging.config.dictConfig(data)
    else:
        logging.config.dictConfig(_console_config())

    section = (config or get_config()).logging
    logging.getLogger(PACKAGE_LOGGER).setLevel(section.level.upper())
    _route_dropped_rows(section)
