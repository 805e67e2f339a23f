"""
Build a Model from the raw lines of an annotated document.
"""

from __future__ import annotations

from typing import Optional, Sequence

from envview.config.models import EngineConfig
from envview.logging import get_logger

from .grammar import TagKind
from .model import Diagnostic, Model, ModeGroup
from .parsers import parse_modes, parse_template, parse_value_constraints
from .sections import sectionize

logger = get_logger(__name__)


def normalize_lines(lines: Sequence[str]) -> tuple[str, ...]:
    """Drop trailing line terminators from each line."""
    return tuple(line.rstrip("\r\n") for line in lines)


def _contiguity_diagnostic(
    tag_index: Optional[int],
    line_indices: dict[str, int],
    keys: Sequence[str],
) -> Optional[Diagnostic]:
    if tag_index is None or not keys:
        return None
    for offset, key in enumerate(keys):
        expected = tag_index + 1 + offset
        if line_indices.get(key) != expected:
            return Diagnostic(
                kind="non_contiguous_template",
                message=(
                    f"'{key}' is not on line {expected + 1}; template assignments "
                    "must directly follow their tag, one per line"
                ),
                line_index=line_indices.get(key),
            )
    return None


def _drop_unknown_mode_keys(
    modes: dict[tuple[str, str], ModeGroup],
    known_keys: set[str],
    diagnostics: list[Diagnostic],
) -> dict[tuple[str, str], ModeGroup]:
    cleaned: dict[tuple[str, str], ModeGroup] = {}
    for ident, group in modes.items():
        unknown = [key for key in group.values if key not in known_keys]
        for key in unknown:
            logger.warning(f"Mode '{group.identifier}' sets '{key}' which the editable block does not declare")
            diagnostics.append(
                Diagnostic(
                    kind="unknown_mode_key",
                    message=f"Mode '{group.identifier}' sets undeclared key '{key}'; it will be ignored",
                    line_index=group.line_index,
                )
            )
        if unknown:
            group = ModeGroup(
                scope=group.scope,
                mode=group.mode,
                values={k: v for k, v in group.values.items() if k in known_keys},
                line_index=group.line_index,
            )
        cleaned[ident] = group
    return cleaned


def load(lines: Sequence[str], config: Optional[EngineConfig] = None) -> Model:
    """
    Parse a document into a Model.

    Never raises for malformed annotations: problems are collected in
    ``Model.diagnostics`` and the affected group is dropped. A document
    without tags yields an empty model.

    Args:
        lines: Document lines, with or without terminators.
        config: Engine configuration (defaults apply when omitted).

    Returns:
        Parsed Model.
    """
    config = config or EngineConfig()
    source = normalize_lines(lines)
    sections = sectionize(source, config)
    diagnostics: list[Diagnostic] = list(sections.diagnostics)

    template = parse_template(sections.of(TagKind.TEMPLATE), config)
    diagnostics.extend(template.diagnostics)

    overwritten_values = None
    overwritten_tag_index = None
    overwritten_groups = sections.of(TagKind.OVERWRITTEN)
    if overwritten_groups and config.legacy_overwritten:
        overwritten = parse_template(overwritten_groups, config)
        diagnostics.extend(overwritten.diagnostics)
        overwritten_values = overwritten.values
        overwritten_tag_index = overwritten.tag_index
        contiguity = _contiguity_diagnostic(
            overwritten.tag_index, overwritten.line_indices, list(overwritten.values)
        )
    else:
        for group in overwritten_groups:
            diagnostics.append(
                Diagnostic(
                    kind="ignored_section",
                    message="Legacy overwritten block ignored (legacy_overwritten is off)",
                    line_index=group.tag.line_index,
                    line=group.tag.line,
                )
            )
        contiguity = _contiguity_diagnostic(
            template.tag_index, template.line_indices, list(template.values)
        )
    if contiguity is not None:
        logger.warning(str(contiguity))
        diagnostics.append(contiguity)

    # Modes can only change keys of the block that receives patches
    known_keys = set(template.values if overwritten_values is None else overwritten_values)

    modes = parse_modes(sections.of(TagKind.MODE), config)
    diagnostics.extend(modes.diagnostics)
    mode_groups = _drop_unknown_mode_keys(modes.modes, known_keys, diagnostics)

    constraints = parse_value_constraints(sections.of(TagKind.VALUE), config)
    diagnostics.extend(constraints.diagnostics)

    model = Model(
        lines=source,
        template=template.values,
        template_tag_index=template.tag_index,
        template_line_indices=template.line_indices,
        modes=mode_groups,
        constraints=constraints.constraints,
        overwritten=overwritten_values,
        overwritten_tag_index=overwritten_tag_index,
        legacy_overwritten=config.legacy_overwritten,
        diagnostics=tuple(diagnostics),
    )
    logger.debug(
        f"Loaded model: {len(model.template)} template keys, {len(model.modes)} modes, "
        f"{len(model.constraints)} constrained keys, {len(model.diagnostics)} diagnostics"
    )
    return model
