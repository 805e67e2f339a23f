"""
Document session: the single active model for one open document.

The session owns the current Model, the effective configuration and the
change record of the last accepted override. Overrides return patch
instructions for an external editor to apply; until that round trip ends
with a re-parse, the session is busy and rejects further overrides.

Host contract:
- Call ``load(lines)`` on open.
- Call ``set_value`` / ``select_mode``, hand the instructions to the editor,
  save, then call ``on_external_change(lines)`` with the saved lines.
- Or let ``commit(request, editor)`` drive the whole round trip.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol, Sequence

from envview.config.models import EngineConfig
from envview.logging import get_logger

from .errors import BusyError
from .loader import load
from .model import Diagnostic, Model, OverrideRequest, PatchInstructions, SelectMode, SetValue
from .override import override

logger = get_logger(__name__)


class DocumentEditor(Protocol):
    """Host-side document capable of applying line replacements."""

    def read_lines(self) -> list[str]:
        ...

    async def apply(self, instructions: PatchInstructions) -> None:
        ...

    async def save(self) -> None:
        ...


class EnvDocumentSession:
    """
    Stateful wrapper around the pure load/override functions.

    At most one override may be in flight: a second request before the
    previous patch has been re-parsed raises BusyError.
    """

    def __init__(self, lines: Optional[Sequence[str]] = None, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        self._lock = threading.Lock()
        self._pending = False
        self._change_record: dict[str, str] = {}
        self._model = load(lines or [], self.config)
        self._effective = self._model.initial_effective()

    @property
    def model(self) -> Model:
        return self._model

    @property
    def effective(self) -> dict[str, str]:
        with self._lock:
            return dict(self._effective)

    @property
    def change_record(self) -> dict[str, str]:
        with self._lock:
            return dict(self._change_record)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._model.diagnostics

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def load(self, lines: Sequence[str]) -> Model:
        """Parse a fresh model, discarding any in-flight state."""
        return self._reload(lines, keep_change_record=False)

    def on_external_change(self, lines: Sequence[str]) -> Model:
        """
        Re-parse after the document changed on disk.

        Clears the in-flight marker; the change record of the last accepted
        override is kept so the host can still highlight it.
        """
        logger.info("Document changed externally, re-parsing")
        return self._reload(lines, keep_change_record=True)

    def _reload(self, lines: Sequence[str], keep_change_record: bool) -> Model:
        model = load(lines, self.config)
        with self._lock:
            self._model = model
            self._effective = model.initial_effective()
            self._pending = False
            if not keep_change_record:
                self._change_record = {}
        for diagnostic in model.diagnostics:
            logger.debug(str(diagnostic))
        return model

    def set_value(self, key: str, value: str) -> PatchInstructions:
        return self.request(SetValue(key=key, value=value))

    def select_mode(self, scope: str, mode: str) -> PatchInstructions:
        return self.request(SelectMode(scope=scope, mode=mode))

    def request(self, request: OverrideRequest) -> PatchInstructions:
        """
        Compute an override and return its patch instructions.

        Raises:
            BusyError: If a previous patch has not been re-parsed yet.
            UnknownModeError: For an undeclared mode.
            UnknownKeyError: For an undeclared key.
        """
        with self._lock:
            if self._pending:
                raise BusyError(
                    "Cannot apply a new override while the previous patch is still being saved"
                )
            result = override(self._model, self._effective, request)
            if not result.changed:
                # A mode selection always replaces the change record;
                # a write to a constant key leaves it alone.
                if isinstance(request, SelectMode):
                    self._change_record = {}
                return []

            self._effective = result.effective
            self._change_record = dict(result.changes)
            if result.patch:
                self._pending = True

        logger.info(
            f"Accepted {type(request).__name__}: {', '.join(sorted(result.changes))} "
            f"({len(result.patch)} line(s) to write)"
        )
        return list(result.patch)

    async def commit(self, request: OverrideRequest, editor: DocumentEditor) -> Model:
        """
        Run one override round trip against ``editor``.

        Applies and saves the patch, then re-parses the saved lines. When the
        editor fails, the session re-parses the editor's current lines before
        re-raising so it does not stay busy.
        """
        instructions = self.request(request)
        if not instructions:
            return self._model

        try:
            await editor.apply(instructions)
            await editor.save()
        except Exception:
            logger.exception("Applying patch failed; re-parsing current document")
            self._reload(editor.read_lines(), keep_change_record=False)
            raise

        return self.on_external_change(editor.read_lines())
