"""
Sectionizer: splits a document's lines into tagged section groups.

Every line belongs to the section of the most recent recognized tag
(``template`` before any tag). Within a section, each tag line opens a
new group whose body runs up to the next tag line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence

from envview.config.models import EngineConfig
from envview.logging import get_logger

from .errors import MalformedTagError
from .grammar import Tag, TagKind, match_tag
from .model import Diagnostic

logger = get_logger(__name__)


class SourceLine(NamedTuple):
    index: int
    text: str


@dataclass(frozen=True)
class SectionGroup:
    """A tag together with the body lines it governs."""

    tag: Tag
    body: tuple[SourceLine, ...] = ()

    @property
    def kind(self) -> TagKind:
        return self.tag.kind

    @property
    def body_text(self) -> list[str]:
        return [line.text for line in self.body]


@dataclass
class Sections:
    """Grouped sections of one document, plus diagnostics from the walk."""

    groups: dict[TagKind, list[SectionGroup]] = field(
        default_factory=lambda: {kind: [] for kind in TagKind}
    )
    preamble: list[SourceLine] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def of(self, kind: TagKind) -> list[SectionGroup]:
        return self.groups[kind]


def sectionize(lines: Sequence[str], config: EngineConfig) -> Sections:
    """
    Walk ``lines`` once and build per-kind section groups.

    Lines with an unknown tag name are reported as ``malformed_tag`` and
    skipped; the active section stays unchanged. Untagged lines before the
    first tag of the template section form the preamble, which carries no
    data.
    """
    sections = Sections()
    current: TagKind = TagKind.TEMPLATE
    open_groups: dict[TagKind, Optional[tuple[Tag, list[SourceLine]]]] = {
        kind: None for kind in TagKind
    }

    def close(kind: TagKind) -> None:
        pending = open_groups[kind]
        if pending is not None:
            tag, body = pending
            sections.groups[kind].append(SectionGroup(tag=tag, body=tuple(body)))
            open_groups[kind] = None

    for index, text in enumerate(lines):
        try:
            tag = match_tag(text, index, config)
        except MalformedTagError as exc:
            logger.warning(f"Skipping line {index + 1}: {exc}")
            sections.diagnostics.append(
                Diagnostic(kind="malformed_tag", message=str(exc), line_index=index, line=text)
            )
            continue

        if tag is not None:
            close(tag.kind)
            current = tag.kind
            open_groups[current] = (tag, [])
            continue

        pending = open_groups[current]
        if pending is None:
            # Content with no leading tag line: only possible for the
            # template section before its first tag.
            sections.preamble.append(SourceLine(index, text))
        else:
            pending[1].append(SourceLine(index, text))

    for kind in TagKind:
        close(kind)

    counts = ", ".join(f"{kind.value}={len(groups)}" for kind, groups in sections.groups.items())
    logger.debug(f"Sectionized {len(lines)} lines: {counts}")
    return sections
