"""
Configuration loader for envview.

Handles loading configuration from JSON/YAML files and converting
to typed dataclass models.
"""

from __future__ import annotations

import json
import yaml
from pathlib import Path
from typing import Dict, Any
from dotenv import load_dotenv

from .models import EngineConfig, EnvViewConfig, LoggingConfig


def parse_config_text(content: str, path: Path | str) -> Dict[str, Any]:
    """
    Parse raw configuration content from JSON or YAML.

    Args:
        content: Config file content
        path: Path or filename used for extension detection
    """
    if isinstance(path, str):
        path = Path(path)

    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content) or {}
    if suffix == ".json":
        return json.loads(content)
    raise ValueError(
        f"Unsupported config format: {suffix}. "
        f"Use .json, .yaml, or .yml"
    )


def load_raw_config(path: Path) -> Dict[str, Any]:
    """
    Load raw configuration from JSON or YAML file.

    Also loads environment variables from .env file if present.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Dictionary with raw configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
    """
    load_dotenv()

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    return parse_config_text(path.read_text(encoding="utf-8"), path)


def build_engine_config(raw: Dict[str, Any]) -> EngineConfig:
    """
    Build EngineConfig from the ``"engine"`` sub-dict.
    """
    engine_raw = raw.get("engine") or {}
    if not isinstance(engine_raw, dict):
        raise ValueError("Config 'engine' must be an object")

    defaults = EngineConfig()
    return EngineConfig(
        comment_prefix=engine_raw.get("comment_prefix", defaults.comment_prefix),
        tag_namespace=engine_raw.get("tag_namespace", defaults.tag_namespace),
        legacy_overwritten=bool(engine_raw.get("legacy_overwritten", defaults.legacy_overwritten)),
        line_terminator=engine_raw.get("line_terminator", defaults.line_terminator),
        comment_chars=engine_raw.get("comment_chars", defaults.comment_chars),
    )


def build_logging_config(raw: Dict[str, Any]) -> LoggingConfig:
    """
    Build LoggingConfig from the ``"logging"`` sub-dict.
    """
    logging_raw = raw.get("logging") or {}
    if not isinstance(logging_raw, dict):
        raise ValueError("Config 'logging' must be an object")

    return LoggingConfig(
        level=logging_raw.get("level", "INFO"),
        file=logging_raw.get("file"),
    )


def build_config_from_raw(raw: Dict[str, Any], path: Path | str) -> EnvViewConfig:
    """
    Build and validate EnvViewConfig from raw configuration data.
    """
    if isinstance(path, str):
        path = Path(path)

    config = EnvViewConfig(
        engine=build_engine_config(raw),
        logging=build_logging_config(raw),
        config_path=path.expanduser().resolve(),
    )
    config.validate()
    return config


def load_config_from_file(path: Path | str) -> EnvViewConfig:
    """
    Load and validate envview configuration from file.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated EnvViewConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid

    Example:
        >>> config = load_config_from_file("envview.yaml")
        >>> config.engine.tag_namespace
        'env'
    """
    if isinstance(path, str):
        path = Path(path)

    path = path.expanduser().resolve()

    raw = load_raw_config(path)
    return build_config_from_raw(raw, path)


def config_to_raw(config: EnvViewConfig) -> Dict[str, Any]:
    """
    Serialize EnvViewConfig into a JSON/YAML-friendly dict.
    """
    return {
        "engine": {
            "comment_prefix": config.engine.comment_prefix,
            "tag_namespace": config.engine.tag_namespace,
            "legacy_overwritten": config.engine.legacy_overwritten,
            "line_terminator": config.engine.line_terminator,
            "comment_chars": config.engine.comment_chars,
        },
        "logging": {
            "level": config.logging.level,
            "file": str(config.logging.file) if config.logging.file else None,
        },
    }


def save_config_to_file(config: EnvViewConfig, path: Path | str) -> None:
    """
    Serialize and save configuration to JSON/YAML file.

    Args:
        config: EnvViewConfig instance to save
        path: Destination config file path
    """
    if isinstance(path, str):
        path = Path(path)

    path = path.expanduser().resolve()
    raw = config_to_raw(config)

    suffix = path.suffix.lower()
    if suffix == ".json":
        path.write_text(json.dumps(raw, indent=2), encoding="utf-8")
    elif suffix in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(raw, sort_keys=False), encoding="utf-8")
    else:
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .json, .yaml, or .yml"
        )
