from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


def project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(root: Path, value: str | Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else (root / path)


class AppSection(BaseModel):
    name: str = "urbanlayers"
    # Local zone used to compute "seconds since midnight" for traffic time windows.
    timezone: str = "Europe/Rome"


class PathsSection(BaseModel):
    output_dir: Path = Path("data/geojson")


class HttpSection(BaseModel):
    request_timeout_seconds: float = 30.0
    user_agent: str = "urbanlayers/0.1"


class SourcesSection(BaseModel):
    buildings_url: Optional[str] = None
    roads_url: Optional[str] = None
    traffic_url: Optional[str] = None


class DecodingSection(BaseModel):
    geometry_field_aliases: list[str] = Field(
        default_factory=lambda: ["geometry", "GEOMETRY", "geom", "GEOM", "wkt", "WKT"]
    )


class TemporalSection(BaseModel):
    default_begin_seconds: int = 0
    default_end_seconds: int = 86400


class LoggingSection(BaseModel):
    level: str = "INFO"
    # When set, per-row geometry drop warnings are also written to this file.
    dropped_rows_log: Optional[Path] = None


class PlaceholderSection(BaseModel):
    enabled: bool = True
    seed: int = 42
    center_lon: float = 10.4017
    center_lat: float = 43.7167
    spread_degrees: float = 0.01
    building_count: int = 50
    road_count: int = 20
    traffic_count: int = 40


class AppConfig(BaseModel):
    app: AppSection = Field(default_factory=AppSection)
    paths: PathsSection = Field(default_factory=PathsSection)
    http: HttpSection = Field(default_factory=HttpSection)
    sources: SourcesSection = Field(default_factory=SourcesSection)
    decoding: DecodingSection = Field(default_factory=DecodingSection)
    temporal: TemporalSection = Field(default_factory=TemporalSection)
    placeholder: PlaceholderSection = Field(default_factory=PlaceholderSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    def resolve_paths(self, root: Optional[Path] = None) -> "AppConfig":
        repo_root = project_root() if root is None else root
        updated_paths = self.paths.model_copy(
            update={"output_dir": _resolve_path(repo_root, self.paths.output_dir)}
        )
        update: dict[str, Any] = {"paths": updated_paths}
        if self.logging.dropped_rows_log is not None:
            update["logging"] = self.logging.model_copy(
                update={"dropped_rows_log": _resolve_path(repo_root, self.logging.dropped_rows_log)}
            )
        return self.model_copy(update=update)


def load_config(config_path: str | Path | None = None) -> AppConfig:
    load_dotenv()

    root = project_root()
    candidate = config_path or os.getenv("URBANLAYERS_CONFIG", "configs/config.yaml")
    path = _resolve_path(root, candidate)
    if not path.exists():
        path = root / "configs/config.example.yaml"

    data: dict[str, Any] = {}
    if path.exists():
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return AppConfig.model_validate(data).resolve_paths(root)


_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG
