"""Settings loading for the CLI and embedding applications."""
from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from discovery.engine.geo import DEFAULT_REFERENCE_POINT, GeoPoint
from discovery.engine.models import SORT_SMART

DEFAULT_SETTINGS_PATH = Path("config/settings.toml")
ENV_REF_LAT = "DISCOVERY_REF_LAT"
ENV_REF_LON = "DISCOVERY_REF_LON"


class EngineSettings(BaseModel):
    """Validated engine configuration."""

    reference_latitude: float = Field(default=DEFAULT_REFERENCE_POINT.latitude, ge=-90, le=90)
    reference_longitude: float = Field(default=DEFAULT_REFERENCE_POINT.longitude, ge=-180, le=180)
    default_sort: str = SORT_SMART
    logging_config_path: Path = Path("config/logging.yaml")

    @property
    def reference_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.reference_latitude, longitude=self.reference_longitude)


def _read_toml(path: Path) -> Dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def load_settings(path: Optional[Path] = None, *, env_file: Optional[Path] = None) -> EngineSettings:
    """Read settings from TOML, applying environment overrides from `.env` or the process.

    Without `env_file` the nearest `.env` above the working directory is used.
    """
    load_dotenv(env_file if env_file is not None else find_dotenv(usecwd=True))
    path = DEFAULT_SETTINGS_PATH if path is None else path
    raw = _read_toml(path) if path.exists() else {}
    engine = dict(raw.get("engine", {}))
    logging_section = raw.get("logging", {})
    if "config_path" in logging_section:
        engine["logging_config_path"] = logging_section["config_path"]
    if os.environ.get(ENV_REF_LAT):
        engine["reference_latitude"] = os.environ[ENV_REF_LAT]
    if os.environ.get(ENV_REF_LON):
        engine["reference_longitude"] = os.environ[ENV_REF_LON]
    try:
        return EngineSettings(**engine)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings in {path}: {exc}") from exc
