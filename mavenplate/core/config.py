"""Configuration file loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ConfigInvalidError
from .models import GenerationConfig

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def read_config_data(path: Path) -> dict[str, Any]:
    """Read raw configuration data from a JSON or YAML file.

    Args:
        path: Configuration file path

    Returns:
        Parsed mapping
    """
    if not path.exists():
        raise ConfigInvalidError(f"Config file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigInvalidError(f"Unable to read {path}: {e}") from e

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigInvalidError(f"Unable to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigInvalidError(f"Config root must be a mapping: {path}")
    return data


def load_config(path: Path, overrides: dict[str, Any] | None = None) -> GenerationConfig:
    """Load and validate a generation config file.

    A relative ``basePath`` is anchored at the config file's directory, and a
    missing one defaults to that directory. Relative template files resolve
    against the base path at render time.

    Args:
        path: Configuration file path
        overrides: Values replacing keys from the file (camelCase or snake_case)

    Returns:
        Validated generation config
    """
    data = read_config_data(path)
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})

    config_dir = path.absolute().parent
    raw_base = data.pop("basePath", None) or data.pop("base_path", None)
    data.pop("base_path", None)
    base_path = Path(raw_base) if raw_base else config_dir
    if not base_path.is_absolute():
        base_path = config_dir / base_path
    data["basePath"] = base_path

    try:
        config = GenerationConfig.model_validate(data)
    except ValidationError as e:
        hint = ""
        if any(error["type"] == "string_type" for error in e.errors()):
            hint = "\nQuote numeric values such as versions (version: \"1.10\")."
        raise ConfigInvalidError(f"Invalid config {path}:\n{e}{hint}") from e

    logger.debug(
        f"Loaded {path}: {len(config.artifacts)} artifact(s), "
        f"{len(config.templates)} template(s)"
    )
    return config
