"""
Configuration management for envview.

This package provides typed configuration models and loaders.
"""

from .models import EngineConfig, EnvViewConfig, LoggingConfig
from .loader import load_config_from_file

__all__ = [
    "EngineConfig",
    "EnvViewConfig",
    "LoggingConfig",
    "load_config_from_file",
]
