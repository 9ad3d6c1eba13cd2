from __future__ import annotations

import logging

import pytest

from urbanlayers.features.collection import build_feature_collection
from urbanlayers.logging_config import DROPPED_ROWS_HANDLER, DROPPED_ROWS_LOGGER, configure_logging
from urbanlayers.settings import AppConfig, LoggingSection


def _config(**logging_options) -> AppConfig:
    return AppConfig(logging=LoggingSection(**logging_options))


@pytest.fixture(autouse=True)
def _reset_package_loggers():
    yield
    package = logging.getLogger("urbanlayers")
    builder = logging.getLogger(DROPPED_ROWS_LOGGER)
    package.setLevel(logging.NOTSET)
    builder.setLevel(logging.NOTSET)
    for handler in list(builder.handlers):
        if handler.get_name() == DROPPED_ROWS_HANDLER:
            builder.removeHandler(handler)
            handler.close()


def test_configure_logging_from_yaml(tmp_path) -> None:
    path = tmp_path / "logging.yaml"
    path.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  urbanlayers.features.collection:\n"
        "    level: ERROR\n",
        encoding="utf-8",
    )

    configure_logging(path, config=_config())

    assert logging.getLogger(DROPPED_ROWS_LOGGER).level == logging.ERROR
    assert logging.getLogger("urbanlayers").level == logging.INFO


def test_configure_logging_falls_back_to_console(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("URBANLAYERS_LOGGING_CONFIG", str(tmp_path / "missing.yaml"))
    configure_logging(config=_config())
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert any(isinstance(handler, logging.StreamHandler) for handler in root.handlers)


def test_package_level_comes_from_config(tmp_path) -> None:
    configure_logging(tmp_path / "missing.yaml", config=_config(level="debug"))
    assert logging.getLogger("urbanlayers").level == logging.DEBUG


def test_dropped_rows_are_written_to_configured_file(tmp_path) -> None:
    log_path = tmp_path / "logs" / "dropped.log"
    configure_logging(tmp_path / "missing.yaml", config=_config(dropped_rows_log=log_path))

    rows = [
        {"id": "r1", "geometry": "LINESTRING(0 0, 1 1)"},
        {"id": "r2", "geometry": "CIRCLE(1 2)"},
    ]
    _, stats = build_feature_collection(rows, "roads")

    assert stats.dropped_rows == 1
    text = log_path.read_text(encoding="utf-8")
    assert "Dropping roads row 1 (id=r2)" in text
    # The INFO summary stays on the console only.
    assert "Built 1 roads feature(s)" not in text


def test_reconfiguring_does_not_duplicate_dropped_rows_handler(tmp_path) -> None:
    config = _config(dropped_rows_log=tmp_path / "dropped.log")
    configure_logging(tmp_path / "missing.yaml", config=config)
    configure_logging(tmp_path / "missing.yaml", config=config)

    builder = logging.getLogger(DROPPED_ROWS_LOGGER)
    named = [h for h in builder.handlers if h.get_name() == DROPPED_ROWS_HANDLER]
    assert len(named) == 1
