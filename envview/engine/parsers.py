"""
Section parsers: template, mode and value-constraint groups.

Assignment bodies are parsed with python-dotenv (quotes stripped, inline
comments dropped, no interpolation).
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from dotenv import dotenv_values

from envview.config.models import EngineConfig
from envview.logging import get_logger

from .errors import MalformedTagError
from .grammar import parse_mode_payload, parse_value_payload
from .model import Diagnostic, ModeGroup, ValueConstraint
from .sections import SectionGroup

logger = get_logger(__name__)

_ASSIGNMENT_KEY_RE = re.compile(r"^\s*(?:export\s+)?(?P<key>[^=#\s]+)\s*=")


def parse_assignments(lines: Sequence[str], line_terminator: str = "\n") -> dict[str, Optional[str]]:
    """Parse ``KEY=VALUE`` lines with dotenv conventions."""
    text = line_terminator.join(lines)
    return dict(dotenv_values(stream=io.StringIO(text), interpolate=False))


def assignment_key(line: str) -> Optional[str]:
    """Return the key assigned on ``line``, if any."""
    match = _ASSIGNMENT_KEY_RE.match(line)
    return match.group("key") if match else None


def serialize_assignment(key: str, value: str) -> str:
    """
    Render ``KEY=VALUE`` so that dotenv reads ``value`` back unchanged.
    """
    needs_quotes = (
        value != value.strip()
        or "#" in value
        or "\n" in value
        or "\r" in value
        or value[:1] in ("'", '"')
    )
    if not needs_quotes:
        return f"{key}={value}"

    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'{key}="{escaped}"'


def strip_comment_markers(line: str, comment_chars: str) -> str:
    """Remove leading whitespace and comment-marker characters."""
    return line.lstrip().lstrip(comment_chars).lstrip()


@dataclass
class TemplateParse:
    values: dict[str, str] = field(default_factory=dict)
    line_indices: dict[str, int] = field(default_factory=dict)
    tag_index: Optional[int] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


def parse_template(groups: Sequence[SectionGroup], config: EngineConfig) -> TemplateParse:
    """
    Parse the canonical template block.

    Only the first group is canonical; later tags of the same kind are
    reported and ignored. The same parser handles the legacy overwritten
    block.
    """
    result = TemplateParse()
    if not groups:
        return result

    canonical, *duplicates = groups
    for group in duplicates:
        result.diagnostics.append(
            Diagnostic(
                kind="duplicate_template",
                message=f"Additional '@{group.tag.name}' block ignored",
                line_index=group.tag.line_index,
                line=group.tag.line,
            )
        )

    result.tag_index = canonical.tag.line_index
    parsed = parse_assignments(canonical.body_text, config.line_terminator)

    positions: dict[str, int] = {}
    for source in canonical.body:
        key = assignment_key(source.text)
        if key is not None and key not in positions:
            positions[key] = source.index

    for key, value in parsed.items():
        if value is None:
            result.diagnostics.append(
                Diagnostic(
                    kind="unassigned_key",
                    message=f"'{key}' has no value assignment and was skipped",
                    line_index=positions.get(key),
                )
            )
            continue
        result.values[key] = value
        if key in positions:
            result.line_indices[key] = positions[key]

    return result


@dataclass
class ModesParse:
    modes: dict[tuple[str, str], ModeGroup] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def parse_modes(groups: Sequence[SectionGroup], config: EngineConfig) -> ModesParse:
    """
    Parse mode groups into ``(scope, mode) -> ModeGroup``.

    A malformed tag discards only its own group. Repeated ``scope.mode``
    groups merge in document order.
    """
    result = ModesParse()
    for group in groups:
        try:
            scope, mode = parse_mode_payload(group.tag)
        except MalformedTagError as exc:
            logger.warning(f"Discarding mode group at line {group.tag.line_index + 1}: {exc}")
            result.diagnostics.append(
                Diagnostic(
                    kind="malformed_tag",
                    message=str(exc),
                    line_index=group.tag.line_index,
                    line=group.tag.line,
                )
            )
            continue

        body = [strip_comment_markers(line, config.comment_chars) for line in group.body_text]
        values = {
            key: value
            for key, value in parse_assignments(body, config.line_terminator).items()
            if value is not None
        }

        existing = result.modes.get((scope, mode))
        if existing is not None:
            values = {**existing.values, **values}
            line_index = existing.line_index
        else:
            line_index = group.tag.line_index
        result.modes[(scope, mode)] = ModeGroup(
            scope=scope, mode=mode, values=values, line_index=line_index
        )

    return result


@dataclass
class ConstraintsParse:
    constraints: dict[str, ValueConstraint] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def parse_allowed_values(lines: Sequence[str], comment_chars: str) -> tuple[str, ...]:
    """Comma-split the comment-stripped body lines into allowed values."""
    joined = ",".join(strip_comment_markers(line, comment_chars) for line in lines)
    return tuple(item.strip() for item in joined.split(",") if item.strip())


def parse_value_constraints(groups: Sequence[SectionGroup], config: EngineConfig) -> ConstraintsParse:
    """
    Parse value groups and attach one constraint record to every named key.

    The input kind defaults to ``select`` when allowed values are listed and
    ``text`` otherwise.
    """
    result = ConstraintsParse()
    for group in groups:
        try:
            payload = parse_value_payload(group.tag)
        except MalformedTagError as exc:
            logger.warning(f"Discarding value group at line {group.tag.line_index + 1}: {exc}")
            result.diagnostics.append(
                Diagnostic(
                    kind="malformed_tag",
                    message=str(exc),
                    line_index=group.tag.line_index,
                    line=group.tag.line,
                )
            )
            continue

        values = parse_allowed_values(group.body_text, config.comment_chars)
        kind = payload.options.kind or ("select" if values else "text")
        constraint = ValueConstraint(kind=kind, values=values, flags=payload.options.flags)
        for key in payload.keys:
            result.constraints[key] = constraint

    return result
