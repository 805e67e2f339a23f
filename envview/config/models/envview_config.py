"""
Top-level configuration model for envview.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .engine import EngineConfig
from .logging_config import LoggingConfig


@dataclass
class EnvViewConfig:
    """
    Top-level configuration for envview.

    Combines engine and logging configuration.
    """

    engine: EngineConfig = field(default_factory=EngineConfig)
    """Tag grammar and parsing options."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    """CLI logging options."""

    config_path: Optional[Path] = None
    """Path to the config file the settings were loaded from."""

    def __post_init__(self):
        if isinstance(self.config_path, str):
            self.config_path = Path(self.config_path)

    def validate(self) -> None:
        self.engine.validate()
        self.logging.validate()
