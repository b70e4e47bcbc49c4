"""
Loading scheduler settings from a YAML file.

Keys may use the snake_case field names or the camelCase names of stored
settings (e.g. `newCardsPerDay`). Missing keys keep their defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .constants import SETTINGS_ENV_VAR
from .exceptions import SettingsError
from .models import Settings

logger = logging.getLogger(__name__)


def settings_from_mapping(data: Dict[str, Any]) -> Settings:
    """Validate a mapping into Settings, wrapping validation errors."""
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}", original_exception=e) from e


def resolve_settings_path(path: Optional[Path] = None) -> Optional[Path]:
    """Return the explicit path, else the VOCASRS_SETTINGS path, else None."""
    if path is not None:
        return path
    env_val = os.environ.get(SETTINGS_ENV_VAR)
    if env_val:
        return Path(env_val)
    return None


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from a YAML file.

    Parameters:
        path: YAML file to read. Falls back to the VOCASRS_SETTINGS
            environment variable; with neither, defaults are returned.

    Raises:
        SettingsError: If the file is missing, not valid YAML, not a mapping,
            or holds invalid values.
    """
    resolved = resolve_settings_path(path)
    if resolved is None:
        logger.debug("No settings file configured; using defaults")
        return Settings()

    try:
        content = resolved.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(
            f"Cannot read settings file {resolved}: {e}", original_exception=e
        ) from e

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsError(
            f"Invalid YAML in settings file {resolved}: {e}",
            original_exception=e,
        ) from e

    if raw is None:
        logger.warning(f"Settings file {resolved} is empty; using defaults")
        return Settings()
    if not isinstance(raw, dict):
        raise SettingsError(
            f"Settings file {resolved} must contain a mapping, "
            f"got {type(raw).__name__}"
        )

    settings = settings_from_mapping(raw)
    logger.info(f"Loaded settings from {resolved}")
    return settings
