"""
Service configuration.

Defaults live on the Settings model. An optional config.yaml overrides them,
and SOLAR_CANVAS_* environment variables (a .env file is honored) override
both.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_PATH = BASE_DIR / "config.yaml"
ENV_PREFIX = "SOLAR_CANVAS_"

HAMQSL_URL = "https://www.hamqsl.com/solarxml.php"


class Settings(BaseModel):
    """Process-wide settings. Loaded once at startup, read-only afterwards."""
    feed_url: str = Field(HAMQSL_URL, description="Upstream solar XML feed")
    refresh_interval_seconds: float = Field(300.0, gt=0, description="Age after which the cached feed is refetched")
    fetch_timeout_seconds: float = Field(15.0, gt=0, description="Total timeout for one upstream fetch")
    font_path: str = Field("assets/UbuntuMono-Bold.ttf", description="TrueType font used for all text")
    font_family: str = Field("Ubuntu Mono", description="Font family name used by the HTML wrapper")
    host: str = Field("0.0.0.0")
    port: int = Field(3000)
    log_level: str = Field("INFO")
    default_width: int = Field(800, gt=0)
    default_height: int = Field(480, gt=0)
    max_dimension: int = Field(4096, gt=0, description="Upper bound for requested width/height")

    def resolved_font_path(self) -> Path:
        path = Path(self.font_path)
        return path if path.is_absolute() else BASE_DIR / path


def _env_overrides() -> Dict[str, str]:
    overrides = {}
    for name in Settings.model_fields:
        value = os.getenv(ENV_PREFIX + name.upper())
        if value not in (None, ""):
            overrides[name] = value
    return overrides


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Build Settings from defaults, config.yaml and the environment."""
    load_dotenv()

    config_path = Path(path) if path else CONFIG_PATH
    values: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            values = yaml.safe_load(f) or {}
        if not isinstance(values, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(values).__name__}")

    values.update(_env_overrides())
    return Settings(**values)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
