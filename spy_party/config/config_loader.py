"""
Configuration loader for YAML-based session configurations.
"""

import logging
import os
import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .game_config import GameConfig, default_config

logger = logging.getLogger(__name__)

# Environment variable naming a YAML file to use when no path is given
CONFIG_ENV_VAR = "SPY_PARTY_CONFIG"

_NUMERIC_KEYS = {"min_players", "history_limit", "spy_found_bonus", "spy_guess_bonus"}


def _validate(config: GameConfig) -> None:
    """Reject values the session engine cannot work with."""
    for key in _NUMERIC_KEYS:
        value = getattr(config, key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Config key '{key}' must be a number, got {value!r}")
    if config.min_players < 1:
        raise ValueError(f"min_players must be at least 1, got {config.min_players}")
    if config.history_limit < 1:
        raise ValueError(f"history_limit must be at least 1, got {config.history_limit}")


def config_from_dict(config_dict: Dict[str, Any], source: str = "<dict>") -> GameConfig:
    """Build a config from a mapping, using defaults for missing values."""
    config = GameConfig()
    known = {f.name for f in fields(GameConfig)}

    for key, value in config_dict.items():
        if key in known:
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            logger.warning("Unknown config key '%s' in %s", key, source)

    _validate(config)
    return config


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load session configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If the file is not a mapping or holds unusable values
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return GameConfig()
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return config_from_dict(config_dict, source=str(config_file))


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from a YAML file, the SPY_PARTY_CONFIG file, or defaults.

    Args:
        config_path: Optional path to YAML config file. Falls back to the
            file named by SPY_PARTY_CONFIG, then to the default config.

    Returns:
        GameConfig instance
    """
    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return default_config

    return load_config_from_yaml(path)
