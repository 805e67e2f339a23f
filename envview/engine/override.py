"""
Override engine: computes a new effective configuration for a value change
or a mode selection.

All functions are pure. Keys flagged ``constant`` never change, whichever
operation is applied.
"""

from __future__ import annotations

from typing import Mapping

from envview.logging import get_logger

from .errors import UnknownKeyError, UnknownModeError
from .grammar import TagKind
from .model import Model, OverrideRequest, OverrideResult, PatchInstructions, SelectMode, SetValue
from .patch import generate_patch

logger = get_logger(__name__)


def patch_for(model: Model, effective: Mapping[str, str]) -> PatchInstructions:
    """Generate the write-back patch of ``effective`` against the model's lines."""
    tag_index = model.patch_tag_index
    if tag_index is None:
        return []
    kind = model.editable_block
    parsed = model.overwritten if kind is TagKind.OVERWRITTEN else model.template
    block = {key: effective.get(key, parsed[key]) for key in model.editable_keys}
    return generate_patch(model.lines, block, tag_index=tag_index, kind=kind)


def set_value(model: Model, effective: Mapping[str, str], key: str, value: str) -> OverrideResult:
    """
    Set a single key.

    Writing a constant key is a silent no-op that yields no changes and
    an empty patch.

    Raises:
        UnknownKeyError: If the key is not declared in the block that
            receives patches (the template, or the legacy overwritten block).
    """
    if key in model.constant_keys:
        logger.debug(f"Ignoring write to constant key '{key}'")
        return OverrideResult(effective=dict(effective), changes={})
    if key not in model.editable_keys:
        raise UnknownKeyError(key, block=model.editable_block.value)

    updated = dict(effective)
    updated[key] = value
    return OverrideResult(
        effective=updated,
        changes={key: value},
        patch=patch_for(model, updated),
    )


def select_mode(model: Model, effective: Mapping[str, str], scope: str, mode: str) -> OverrideResult:
    """
    Merge a mode's values over the effective configuration.

    Constant keys are removed from the mode's map before merging. Keys the
    mode does not mention keep their current value.

    Raises:
        UnknownModeError: If ``scope.mode`` is not declared.
    """
    group = model.modes.get((scope, mode))
    if group is None:
        raise UnknownModeError(scope, mode, available=[g.identifier for g in model.modes.values()])

    constants = model.constant_keys
    editable = set(model.editable_keys)
    candidate = {
        key: value
        for key, value in group.values.items()
        if key not in constants and key in editable
    }
    if not candidate:
        return OverrideResult(effective=dict(effective), changes={})

    updated = {**effective, **candidate}
    return OverrideResult(
        effective=updated,
        changes=candidate,
        patch=patch_for(model, updated),
    )


def override(model: Model, effective: Mapping[str, str], request: OverrideRequest) -> OverrideResult:
    """Apply a SetValue or SelectMode request."""
    if isinstance(request, SetValue):
        return set_value(model, effective, request.key, request.value)
    if isinstance(request, SelectMode):
        return select_mode(model, effective, request.scope, request.mode)
    raise TypeError(f"Unsupported override request: {request!r}")
