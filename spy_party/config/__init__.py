"""Game configuration module."""

from .game_config import GameConfig, default_config
from .config_loader import CONFIG_ENV_VAR, config_from_dict, load_config, load_config_from_yaml

__all__ = [
    'GameConfig',
    'default_config',
    'CONFIG_ENV_VAR',
    'config_from_dict',
    'load_config',
    'load_config_from_yaml',
]
