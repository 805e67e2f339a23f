"""Exception taxonomy for the annotated-configuration engine."""

from __future__ import annotations

from typing import Iterable, Optional


class EnvViewError(Exception):
    """Base class for engine errors."""


class MalformedTagError(EnvViewError, ValueError):
    """Raised when a tag name or tag payload cannot be recognized."""

    def __init__(self, message: str, line: str = "", line_index: Optional[int] = None) -> None:
        self.line = line
        self.line_index = line_index
        super().__init__(message)


class UnknownModeError(EnvViewError, LookupError):
    """Raised when a mode selection names a scope/mode pair absent from the model."""

    def __init__(self, scope: str, mode: str, available: Iterable[str] = ()) -> None:
        self.scope = scope
        self.mode = mode
        self.available = tuple(available)
        message = f"Unknown mode '{scope}.{mode}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class UnknownKeyError(EnvViewError, KeyError):
    """Raised when a value is set for a key the editable block does not declare."""

    def __init__(self, key: str, block: str = "template") -> None:
        self.key = key
        self.block = block
        super().__init__(key)

    def __str__(self) -> str:
        return f"Key '{self.key}' is not declared in the {self.block} block"


class BusyError(EnvViewError, RuntimeError):
    """Raised when an override arrives while a previous patch round trip is pending."""


class PatchAlignmentError(EnvViewError, ValueError):
    """Raised when a patch target line does not assign the expected key."""

    def __init__(self, key: str, line_index: int, found: str) -> None:
        self.key = key
        self.line_index = line_index
        self.found = found
        super().__init__(
            f"Line {line_index + 1} was expected to assign '{key}' but reads {found!r}. "
            "Template assignments must stay contiguous and in their original order."
        )
