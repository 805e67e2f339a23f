"""
Engine configuration model.

Controls how annotation tags are recognized inside a document.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from .constants import (
    DEFAULT_COMMENT_CHARS,
    DEFAULT_COMMENT_PREFIX,
    DEFAULT_LINE_TERMINATOR,
    DEFAULT_TAG_NAMESPACE,
    FALSE_VALUES,
    TRUE_VALUES,
    VALID_LINE_TERMINATORS,
)

_NAMESPACE_RE = re.compile(r"^\w[\w-]*$")


@dataclass
class EngineConfig:
    """
    Configuration for the annotated-configuration engine.
    """

    comment_prefix: str = DEFAULT_COMMENT_PREFIX
    """Line-comment opener that precedes ``@<tag>`` markers."""

    tag_namespace: str = DEFAULT_TAG_NAMESPACE
    """Prefix of the tag names (``<ns>-template``, ``<ns>-mode``, ...)."""

    legacy_overwritten: bool = False
    """Treat the ``<ns>-overwritten`` block as the effective configuration."""

    line_terminator: str = DEFAULT_LINE_TERMINATOR
    """Terminator used when joining section lines for assignment parsing."""

    comment_chars: str = DEFAULT_COMMENT_CHARS
    """Characters stripped from the start of mode and value body lines."""

    def __post_init__(self):
        """Normalize values and load environment variable overrides."""
        self.comment_prefix = str(self.comment_prefix or "").strip()
        self.tag_namespace = str(self.tag_namespace or "").strip()

        env_legacy = os.environ.get("ENVVIEW_LEGACY_OVERWRITTEN")
        if env_legacy:
            lowered = env_legacy.strip().lower()
            if lowered in TRUE_VALUES:
                self.legacy_overwritten = True
            elif lowered in FALSE_VALUES:
                self.legacy_overwritten = False

    @property
    def tag_names(self) -> dict[str, str]:
        """Map of full tag name to tag kind value."""
        return {
            f"{self.tag_namespace}-{kind}": kind
            for kind in ("template", "mode", "value", "overwritten")
        }

    def validate(self) -> None:
        """Validate engine configuration.

        Raises:
            ValueError: If any field has an invalid value.
        """
        if not self.comment_prefix:
            raise ValueError("engine.comment_prefix must be set")
        if not _NAMESPACE_RE.match(self.tag_namespace):
            raise ValueError(
                f"engine.tag_namespace must be a word identifier, got '{self.tag_namespace}'"
            )
        if self.line_terminator not in VALID_LINE_TERMINATORS:
            raise ValueError(
                f"engine.line_terminator must be one of {VALID_LINE_TERMINATORS!r}"
            )
