"""
CLI glue for `envview set` and `envview mode`.

Both commands run one override round trip against the file on disk.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from envview.config.models import EnvViewConfig
from envview.document import FileDocument
from envview.engine import (
    EnvDocumentSession,
    PatchAlignmentError,
    SelectMode,
    SetValue,
    UnknownKeyError,
    UnknownModeError,
)
from envview.engine.model import OverrideRequest
from envview.logging import format_exception_summary, get_logger

logger = get_logger(__name__)


def parse_mode_argument(value: str) -> tuple[str, str]:
    """Split ``scope.mode`` into its parts."""
    scope, sep, mode = str(value or "").strip().partition(".")
    if not sep or not scope or not mode or "." in mode:
        raise ValueError(f"Mode must be given as <scope>.<mode>, got '{value}'")
    return scope, mode


def _run_request(path: Path, request: OverrideRequest, config: EnvViewConfig) -> int:
    document = FileDocument(path)
    session = EnvDocumentSession(document.read_lines(), config.engine)

    try:
        asyncio.run(session.commit(request, document))
    except (UnknownKeyError, UnknownModeError, PatchAlignmentError) as exc:
        logger.error(format_exception_summary(exc))
        print(f"Error: {exc}")
        return 1

    changes = session.change_record
    if not changes:
        print("No changes.")
        return 0
    for key, value in changes.items():
        print(f"{key}={value}")
    return 0


def run_set(args: Any, config: EnvViewConfig) -> int:
    """Run the set command."""
    request = SetValue(key=args.key, value=args.value)
    return _run_request(Path(args.file).expanduser(), request, config)


def run_mode(args: Any, config: EnvViewConfig) -> int:
    """Run the mode command."""
    try:
        scope, mode = parse_mode_argument(args.mode)
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    request = SelectMode(scope=scope, mode=mode)
    return _run_request(Path(args.file).expanduser(), request, config)
