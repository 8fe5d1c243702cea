"""Configuration for linguaisync."""

from .loader import find_config_file, load_config, normalize_config
from .settings import LANGUAGE_NAMES, Settings

__all__ = [
    "LANGUAGE_NAMES",
    "Settings",
    "find_config_file",
    "load_config",
    "normalize_config",
]
