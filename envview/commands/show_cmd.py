"""
CLI glue for `envview show`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from envview.config.models import EnvViewConfig
from envview.document import FileDocument
from envview.engine import EnvDocumentSession, Model
from envview.logging import get_logger

logger = get_logger(__name__)


def model_to_dict(model: Model, effective: dict[str, str]) -> dict[str, Any]:
    """Serialize a model into a JSON-friendly dict."""
    keys = []
    for key, value in effective.items():
        constraint = model.constraint_for(key)
        keys.append({
            "key": key,
            "value": value,
            "kind": constraint.kind,
            "values": list(constraint.values),
            "flags": sorted(constraint.flags),
        })
    return {
        "keys": keys,
        "modes": model.scopes(),
        "diagnostics": [
            {
                "kind": diagnostic.kind,
                "line": None if diagnostic.line_index is None else diagnostic.line_index + 1,
                "message": diagnostic.message,
            }
            for diagnostic in model.diagnostics
        ],
    }


def format_model(model: Model, effective: dict[str, str]) -> str:
    """Render a model as plain text."""
    lines: list[str] = []
    if not effective:
        lines.append("No template keys found.")
    else:
        width = max(len(key) for key in effective)
        for key, value in effective.items():
            constraint = model.constraint_for(key)
            detail = constraint.kind
            if constraint.flags:
                detail += " " + " ".join(sorted(constraint.flags))
            row = f"{key.ljust(width)}  {value}  [{detail}]"
            if constraint.values:
                row += f"  options: {', '.join(constraint.values)}"
            lines.append(row)

    scopes = model.scopes()
    if scopes:
        lines.append("")
        lines.append("Modes:")
        for scope, modes in scopes.items():
            lines.append(f"  {scope}: {', '.join(modes)}")

    if model.diagnostics:
        lines.append("")
        lines.append("Diagnostics:")
        for diagnostic in model.diagnostics:
            lines.append(f"  {diagnostic}")

    return "\n".join(lines)


def run_show(args: Any, config: EnvViewConfig) -> int:
    """
    Run the show command.

    Args:
        args: Parsed command-line arguments
        config: Loaded configuration

    Returns:
        Exit code (0 for success)
    """
    path = Path(args.file).expanduser()
    document = FileDocument(path)
    session = EnvDocumentSession(document.read_lines(), config.engine)
    logger.info(f"Parsed {path}: {len(session.effective)} keys")

    if getattr(args, "json", False):
        print(json.dumps(model_to_dict(session.model, session.effective), indent=2))
    else:
        print(format_model(session.model, session.effective))
    return 0
