"""
Configuration data models for envview.

This package provides typed dataclasses for configuration options and defaults.
"""

from .constants import (
    DEFAULT_COMMENT_PREFIX,
    DEFAULT_TAG_NAMESPACE,
    DEFAULT_COMMENT_CHARS,
    DEFAULT_LINE_TERMINATOR,
    DEFAULT_LOG_LEVEL,
)
from .engine import EngineConfig
from .logging_config import LoggingConfig
from .envview_config import EnvViewConfig

__all__ = [
    "DEFAULT_COMMENT_PREFIX",
    "DEFAULT_TAG_NAMESPACE",
    "DEFAULT_COMMENT_CHARS",
    "DEFAULT_LINE_TERMINATOR",
    "DEFAULT_LOG_LEVEL",
    "EngineConfig",
    "LoggingConfig",
    "EnvViewConfig",
]
