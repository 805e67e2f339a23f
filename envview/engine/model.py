"""
Data model for parsed annotated configuration documents.

A Model is produced by ``envview.engine.loader.load`` and is never mutated;
override operations produce a new effective mapping and a change record
alongside it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from .grammar import TagKind


@dataclass(frozen=True)
class Diagnostic:
    """Informational parse problem reported alongside a Model."""

    kind: str
    """One of: malformed_tag, duplicate_template, ignored_section,
    non_contiguous_template, unassigned_key, unknown_mode_key."""

    message: str
    line_index: Optional[int] = None
    line: str = ""

    def __str__(self) -> str:
        if self.line_index is None:
            return f"[{self.kind}] {self.message}"
        return f"[{self.kind}] line {self.line_index + 1}: {self.message}"


@dataclass(frozen=True)
class ValueConstraint:
    """Input kind, allowed values and flags attached to a key."""

    kind: str = "text"
    values: tuple[str, ...] = ()
    flags: frozenset[str] = frozenset()

    @property
    def disabled(self) -> bool:
        return "disabled" in self.flags

    @property
    def constant(self) -> bool:
        return "constant" in self.flags


@dataclass(frozen=True)
class ModeGroup:
    """Override preset forcing key values when ``scope.mode`` is selected."""

    scope: str
    mode: str
    values: Mapping[str, str]
    line_index: Optional[int] = None

    @property
    def identifier(self) -> str:
        return f"{self.scope}.{self.mode}"


@dataclass(frozen=True)
class Model:
    """
    Parsed view of an annotated configuration document.

    ``template`` keeps the document order of its keys; patch generation
    relies on that order matching the physical assignment lines.
    """

    lines: tuple[str, ...]
    template: Mapping[str, str] = field(default_factory=dict)
    template_tag_index: Optional[int] = None
    template_line_indices: Mapping[str, int] = field(default_factory=dict)
    modes: Mapping[tuple[str, str], ModeGroup] = field(default_factory=dict)
    constraints: Mapping[str, ValueConstraint] = field(default_factory=dict)
    overwritten: Optional[Mapping[str, str]] = None
    overwritten_tag_index: Optional[int] = None
    legacy_overwritten: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def constant_keys(self) -> frozenset[str]:
        return frozenset(key for key, c in self.constraints.items() if c.constant)

    @property
    def patch_tag_index(self) -> Optional[int]:
        """Line index of the tag whose block receives patches."""
        if self.legacy_overwritten and self.overwritten is not None:
            return self.overwritten_tag_index
        return self.template_tag_index

    @property
    def editable_keys(self) -> tuple[str, ...]:
        """Keys of the block that receives patches, in line order."""
        if self.legacy_overwritten and self.overwritten is not None:
            return tuple(self.overwritten)
        return tuple(self.template)

    @property
    def editable_block(self) -> TagKind:
        if self.legacy_overwritten and self.overwritten is not None:
            return TagKind.OVERWRITTEN
        return TagKind.TEMPLATE

    def constraint_for(self, key: str) -> ValueConstraint:
        return self.constraints.get(key, ValueConstraint())

    def scopes(self) -> dict[str, list[str]]:
        """Return ``{scope: [mode, ...]}`` in document order."""
        result: dict[str, list[str]] = {}
        for scope, mode in self.modes:
            result.setdefault(scope, []).append(mode)
        return result

    def initial_effective(self) -> dict[str, str]:
        """
        Effective configuration right after parsing.

        In legacy mode the overwritten block is laid over the template.
        A constant key keeps its template value when the template declares it.
        """
        effective = dict(self.template)
        if self.legacy_overwritten and self.overwritten is not None:
            constants = self.constant_keys
            for key, value in self.overwritten.items():
                if key in constants and key in self.template:
                    continue
                effective[key] = value
        return effective


@dataclass(frozen=True)
class SetValue:
    key: str
    value: str


@dataclass(frozen=True)
class SelectMode:
    scope: str
    mode: str


OverrideRequest = Union[SetValue, SelectMode]


@dataclass(frozen=True)
class PatchInstruction:
    """Replace the full content of one document line."""

    line_index: int
    new_text: str


PatchInstructions = list[PatchInstruction]


@dataclass(frozen=True)
class OverrideResult:
    """Outcome of one override operation."""

    effective: dict[str, str]
    changes: dict[str, str]
    patch: PatchInstructions = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)
