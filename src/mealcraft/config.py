"""
Configuration -- where data lives and how the cloud is reached.

Read from ``<home>/config.yaml``. A missing or unreadable file means
defaults; bad values are logged and ignored rather than fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from . import MEALCRAFT_HOME
from .telemetry import LogCategory

logger = logging.getLogger("mealcraft.config")

CONFIG_FILENAME = "config.yaml"


class MealcraftConfig(BaseModel):
    """Settings for the persistence core."""

    prefix: str = "mealcraft"
    api_base_url: str = "http://localhost:3000"
    request_timeout: float = 10.0

    # Connectivity probe used once at startup
    probe_host: str = "1.1.1.1"
    probe_port: int = 53
    probe_timeout: float = 1.0

    # Validation telemetry
    log_level: str = "WARNING"
    log_categories: list[LogCategory] = Field(
        default_factory=lambda: list(LogCategory)
    )


def resolve_home(home: Optional[Path] = None) -> Path:
    """Return the data home, defaulting to MEALCRAFT_HOME."""
    return Path(home or MEALCRAFT_HOME).expanduser()


def load_config(home: Optional[Path] = None) -> MealcraftConfig:
    """Load configuration from ``<home>/config.yaml``.

    Returns:
        MealcraftConfig from disk, or defaults.
    """
    config_file = resolve_home(home) / CONFIG_FILENAME
    if config_file.exists():
        try:
            data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
            return MealcraftConfig(**data)
        except (yaml.YAMLError, ValueError, TypeError) as exc:
            logger.warning("Failed to load config: %s, using defaults", exc)
    return MealcraftConfig()


def save_config(config: MealcraftConfig, home: Optional[Path] = None) -> Path:
    """Write ``config`` to ``<home>/config.yaml``."""
    home_path = resolve_home(home)
    home_path.mkdir(parents=True, exist_ok=True)
    config_file = home_path / CONFIG_FILENAME
    config_file.write_text(
        yaml.dump(config.model_dump(mode="json"), default_flow_style=False),
        encoding="utf-8",
    )
    return config_file
