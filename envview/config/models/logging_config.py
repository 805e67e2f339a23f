"""
Logging configuration model.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_LOG_LEVEL, VALID_LOG_LEVELS


@dataclass
class LoggingConfig:
    """
    Log level and optional log file for the CLI.
    """

    level: str = DEFAULT_LOG_LEVEL
    """Log level name."""

    file: Optional[Path] = None
    """Optional log file path."""

    def __post_init__(self):
        env_level = os.environ.get("ENVVIEW_LOG_LEVEL")
        if env_level:
            self.level = env_level
        self.level = str(self.level or DEFAULT_LOG_LEVEL).strip().upper()

        if isinstance(self.file, str):
            self.file = Path(self.file) if self.file.strip() else None
        if self.file is not None:
            self.file = self.file.expanduser()

    def validate(self) -> None:
        if self.level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"logging.level must be one of {VALID_LOG_LEVELS}, got '{self.level}'"
            )
