"""Configuration loading: config file discovery, key normalization, overrides."""

import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from linguaisync.errors import ConfigurationError

from .settings import Settings

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAMES = (
    "linguaisync.config.json",
    ".linguaisync.config.json",
    "linguaisync.config.yaml",
    "linguaisync.config.yml",
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def find_config_file(search_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the first known config file in ``search_dir`` (default: cwd)."""
    directory = search_dir or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a JSON or YAML config file into a dict."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}", config_key="config_file") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}", config_key="config_file") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping", config_key="config_file")
    return data


def normalize_config(raw: Mapping[str, Any], base_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Convert camelCase keys to Settings field names.

    ``openaiApiUrl`` may point at the full chat-completions endpoint; only the
    API base is kept. A relative ``localesDir`` is resolved against
    ``base_dir`` (the config file's directory).
    """
    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        field = _to_snake_case(key)
        if field == "openai_api_url":
            field = "openai_base_url"
            value = re.sub(r"/chat/completions/?$", "", str(value))
        normalized[field] = value

    locales_dir = normalized.get("locales_dir")
    if locales_dir is not None:
        locales_path = Path(locales_dir).expanduser()
        if not locales_path.is_absolute() and base_dir is not None:
            locales_path = base_dir / locales_path
        normalized["locales_dir"] = locales_path

    return normalized


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build Settings from a config file, CLI overrides and the environment.

    Precedence: overrides > config file > environment > defaults.

    Raises:
        ConfigurationError: if the file is unreadable or values are invalid
    """
    env = os.environ if env is None else env
    values: Dict[str, Any] = {}

    if config_file is not None:
        path = Path(config_file)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}", config_key="config_file")
    else:
        path = find_config_file()

    if path is not None:
        logger.info("Loading config", file=str(path))
        values.update(normalize_config(read_config_file(path), base_dir=path.parent.resolve()))

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    if not values.get("openai_api_key") and env.get("OPENAI_API_KEY"):
        values["openai_api_key"] = env["OPENAI_API_KEY"]

    try:
        return Settings(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", config_key="settings") from e
