"""
Tag grammar for annotated configuration documents.

A tag is a comment marker followed by ``@<name>`` somewhere on a line, e.g.::

    // @env-template
    // @env-mode:environment.prod
    // @env-value:(HOST,PORT)(select disabled)

The text after an optional ``:`` is the tag payload. Mode payloads are
``<scope>.<mode>``; value payloads name one or more keys plus an optional
options string of input kind and flag tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from envview.config.models import EngineConfig

from .errors import MalformedTagError


class TagKind(str, Enum):
    TEMPLATE = "template"
    MODE = "mode"
    VALUE = "value"
    OVERWRITTEN = "overwritten"  # legacy


INPUT_KINDS: tuple[str, ...] = ("text", "select", "boolean", "number")
FLAGS: tuple[str, ...] = ("disabled", "constant")

_MODE_PAYLOAD_RE = re.compile(r"^(?P<scope>\w+)\.(?P<mode>\w+)$")
_KEY = r"\w[\w.-]*"

# Tried in order; the first match wins.
_VALUE_PAYLOAD_FORMS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\((?P<keys>[^()]*)\)\s*\((?P<options>[^()]*)\)$"),
    re.compile(rf"^(?P<key>{_KEY})\s*\((?P<options>[^()]*)\)$"),
    re.compile(r"^\((?P<keys>[^()]*)\)$"),
    re.compile(rf"^(?P<key>{_KEY})$"),
)
_KEY_RE = re.compile(rf"^{_KEY}$")


@dataclass(frozen=True)
class Tag:
    """A recognized annotation on a single line."""

    kind: TagKind
    name: str
    payload: Optional[str]
    line_index: int
    line: str


@dataclass(frozen=True)
class ValueOptions:
    """Parsed options string of a value tag."""

    kind: Optional[str] = None
    flags: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ValuePayload:
    keys: tuple[str, ...]
    options: ValueOptions = ValueOptions()


@lru_cache(maxsize=16)
def _tag_pattern(comment_prefix: str) -> re.Pattern[str]:
    return re.compile(re.escape(comment_prefix) + r"\s*@(?P<name>[\w-]+)(?P<rest>.*)$")


def match_tag(line: str, line_index: int, config: EngineConfig) -> Optional[Tag]:
    """
    Recognize a tag anywhere on ``line``.

    Returns:
        The Tag, or None when the line carries no tag marker.

    Raises:
        MalformedTagError: If a marker is present but the tag name is unknown.
    """
    match = _tag_pattern(config.comment_prefix).search(line)
    if match is None:
        return None

    name = match.group("name")
    kind = config.tag_names.get(name)
    if kind is None:
        raise MalformedTagError(f"Unknown tag '@{name}'", line=line, line_index=line_index)

    rest = match.group("rest")
    payload = rest[1:].strip() if rest.startswith(":") else None
    return Tag(
        kind=TagKind(kind),
        name=name,
        payload=payload,
        line_index=line_index,
        line=line,
    )


def parse_mode_payload(tag: Tag) -> tuple[str, str]:
    """Return ``(scope, mode)`` from a mode tag."""
    match = _MODE_PAYLOAD_RE.match(tag.payload or "")
    if match is None:
        raise MalformedTagError(
            f"Mode tag payload must be '<scope>.<mode>', got {tag.payload!r}",
            line=tag.line,
            line_index=tag.line_index,
        )
    return match.group("scope"), match.group("mode")


def parse_options(text: str) -> ValueOptions:
    """
    Parse a space-separated options string.

    The first input-kind token wins; every flag token is recorded;
    anything else is ignored.
    """
    kind: Optional[str] = None
    flags: set[str] = set()
    for token in text.split():
        token = token.strip().lower()
        if token in INPUT_KINDS:
            if kind is None:
                kind = token
        elif token in FLAGS:
            flags.add(token)
    return ValueOptions(kind=kind, flags=frozenset(flags))


def split_key_list(text: str) -> tuple[str, ...]:
    """Split a comma-separated key list, dropping empty, invalid and duplicate entries."""
    keys: list[str] = []
    for entry in text.split(","):
        entry = entry.strip()
        if entry and _KEY_RE.match(entry) and entry not in keys:
            keys.append(entry)
    return tuple(keys)


def parse_value_payload(tag: Tag) -> ValuePayload:
    """Return the key list and options of a value tag."""
    payload = (tag.payload or "").strip()
    for form in _VALUE_PAYLOAD_FORMS:
        match = form.match(payload)
        if match is None:
            continue
        groups = match.groupdict()
        if groups.get("keys") is not None:
            keys = split_key_list(groups["keys"])
        else:
            keys = (groups["key"],)
        if not keys:
            break
        options = parse_options(groups.get("options") or "")
        return ValuePayload(keys=keys, options=options)

    raise MalformedTagError(
        f"Value tag payload {payload!r} does not name any key",
        line=tag.line,
        line_index=tag.line_index,
    )
