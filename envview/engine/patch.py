"""
Patch generator: turns an effective template back into line replacements.

The N template keys are expected on the N lines directly after the template
tag, in parse order. Each key produces one instruction replacing its line
with ``KEY=VALUE``; keys are never inserted or removed.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from envview.config.models import EngineConfig

from .errors import MalformedTagError, PatchAlignmentError
from .grammar import TagKind, match_tag
from .model import PatchInstruction, PatchInstructions
from .parsers import assignment_key, serialize_assignment


def locate_tag(
    lines: Sequence[str],
    config: EngineConfig,
    kind: TagKind = TagKind.TEMPLATE,
) -> Optional[int]:
    """Return the index of the first ``kind`` tag line, or None."""
    for index, line in enumerate(lines):
        try:
            tag = match_tag(line, index, config)
        except MalformedTagError:
            continue
        if tag is not None and tag.kind == kind:
            return index
    return None


def generate_patch(
    lines: Sequence[str],
    template: Mapping[str, str],
    *,
    tag_index: Optional[int] = None,
    kind: TagKind = TagKind.TEMPLATE,
    config: Optional[EngineConfig] = None,
) -> PatchInstructions:
    """
    Build one replacement per template key.

    Args:
        lines: Current document lines.
        template: New effective values, in template key order.
        tag_index: Index of the block's tag line (located when omitted).
        kind: Tag kind whose block is patched (``OVERWRITTEN`` for legacy).
        config: Engine configuration used to locate the tag. Required when
            ``tag_index`` is omitted.

    Returns:
        Instructions targeting ``[tag_index + 1, tag_index + 1 + len(template))``.

    Raises:
        PatchAlignmentError: If a target line does not assign the expected key.
        ValueError: If neither ``tag_index`` nor ``config`` is given.
    """
    if not template:
        return []
    if tag_index is None:
        if config is None:
            raise ValueError("generate_patch needs either tag_index or config to find the tag line")
        tag_index = locate_tag(lines, config, kind)
    if tag_index is None:
        raise PatchAlignmentError(next(iter(template)), 0, "<no tag line>")

    instructions: PatchInstructions = []
    for offset, (key, value) in enumerate(template.items()):
        line_index = tag_index + 1 + offset
        current = lines[line_index].rstrip("\r\n") if line_index < len(lines) else ""
        if assignment_key(current) != key:
            raise PatchAlignmentError(key, line_index, current)
        instructions.append(
            PatchInstruction(line_index=line_index, new_text=serialize_assignment(key, value))
        )
    return instructions


def apply_patch(lines: Sequence[str], instructions: PatchInstructions) -> list[str]:
    """Return a copy of ``lines`` with the instructions applied."""
    patched = list(lines)
    for instruction in instructions:
        patched[instruction.line_index] = instruction.new_text
    return patched
