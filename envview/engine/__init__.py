"""
Annotated-configuration engine.

Parses documents that carry ``// @env-*`` annotations into a Model,
computes overrides and generates line-preserving patches.
"""

from .errors import (
    BusyError,
    EnvViewError,
    MalformedTagError,
    PatchAlignmentError,
    UnknownKeyError,
    UnknownModeError,
)
from .grammar import Tag, TagKind
from .loader import load
from .model import (
    Diagnostic,
    Model,
    ModeGroup,
    OverrideResult,
    PatchInstruction,
    PatchInstructions,
    SelectMode,
    SetValue,
    ValueConstraint,
)
from .override import override, select_mode, set_value
from .patch import apply_patch, generate_patch
from .session import DocumentEditor, EnvDocumentSession

__all__ = [
    "BusyError",
    "EnvViewError",
    "MalformedTagError",
    "PatchAlignmentError",
    "UnknownKeyError",
    "UnknownModeError",
    "Tag",
    "TagKind",
    "load",
    "Diagnostic",
    "Model",
    "ModeGroup",
    "OverrideResult",
    "PatchInstruction",
    "PatchInstructions",
    "SelectMode",
    "SetValue",
    "ValueConstraint",
    "override",
    "select_mode",
    "set_value",
    "apply_patch",
    "generate_patch",
    "DocumentEditor",
    "EnvDocumentSession",
]
