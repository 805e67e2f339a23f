"""
File-backed document for applying engine patches outside an editor.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from envview.engine.model import PatchInstructions
from envview.engine.patch import apply_patch
from envview.logging import get_logger

logger = get_logger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


def detect_newline(text: str) -> str:
    """Return the first line terminator used in ``text`` (``\\n`` if none)."""
    index = text.find("\n")
    if index > 0 and text[index - 1] == "\r":
        return "\r\n"
    if index == -1 and "\r" in text:
        return "\r"
    return "\n"


class FileDocument:
    """
    A text file held in memory as lines.

    ``apply`` edits the in-memory copy; ``save`` writes it back with the
    file's original newline style and trailing-newline state.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._lines: list[str] = []
        self._newline = "\n"
        self._trailing_newline = True
        self.reload()

    def reload(self) -> list[str]:
        if not self.path.exists():
            raise FileNotFoundError(f"Document not found: {self.path}")
        with self.path.open("r", encoding="utf-8", newline="") as handle:
            text = handle.read()
        self._newline = detect_newline(text)
        self._trailing_newline = text.endswith(("\n", "\r"))
        lines = _LINE_BREAK_RE.split(text) if text else []
        if self._trailing_newline:
            lines = lines[:-1]
        self._lines = lines
        logger.debug(f"Read {len(self._lines)} lines from {self.path}")
        return list(self._lines)

    def read_lines(self) -> list[str]:
        return list(self._lines)

    async def apply(self, instructions: PatchInstructions) -> None:
        for instruction in instructions:
            if not 0 <= instruction.line_index < len(self._lines):
                raise IndexError(
                    f"Patch targets line {instruction.line_index + 1} "
                    f"but {self.path.name} has {len(self._lines)} lines"
                )
        self._lines = apply_patch(self._lines, instructions)

    async def save(self) -> None:
        text = self._newline.join(self._lines)
        if self._trailing_newline and self._lines:
            text += self._newline
        await asyncio.to_thread(self._write, text)
        logger.info(f"Saved {self.path}")

    def _write(self, text: str) -> None:
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
