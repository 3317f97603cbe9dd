"""A minimal POD document model organised by top-level ``=head1`` sections.

Only POD is kept when a Perl source is parsed. ``=pod`` and ``=cut``
commands are structural and dropped; serialization emits a single trailing
``=cut``.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path

COMMAND_RE = re.compile(r"^=([a-zA-Z]\w*)")
BLANK_RE = re.compile(r"^\s*$")
HEAD1_RE = re.compile(r"^=head1(?:\s+(.*))?$", re.DOTALL)


@dataclass
class PodSection:
    """A ``=head1`` heading and the paragraphs that follow it."""

    title: str
    paragraphs: list[str] = field(default_factory=list)

    def render(self) -> list[str]:
        """Return the section as POD paragraphs."""
        return [f"=head1 {self.title}", *self.paragraphs]


@dataclass
class PodDocument:
    """POD split into leading paragraphs and top-level sections."""

    preamble: list[str] = field(default_factory=list)
    sections: list[PodSection] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "PodDocument":
        """Parse POD embedded in (or making up) ``text``."""
        doc = cls()
        current: PodSection | None = None
        for para in extract_pod_paragraphs(text):
            m = HEAD1_RE.match(para)
            if m:
                title = " ".join((m.group(1) or "").split())
                current = PodSection(title=title)
                doc.sections.append(current)
            elif current is None:
                doc.preamble.append(para)
            else:
                current.paragraphs.append(para)
        return doc

    @classmethod
    def parse_file(cls, path: Path) -> "PodDocument":
        """Parse the POD contained in a file."""
        return cls.parse(Path(path).read_text(encoding="utf-8", errors="replace"))

    def top_level_sections(self) -> list[PodSection]:
        """Return the ``=head1`` sections in declaration order."""
        return list(self.sections)

    def insert_before(self, index: int, section: PodSection) -> None:
        """Insert ``section`` ahead of the section at ``index``."""
        self.sections.insert(index, section)

    def insert_after(self, index: int, section: PodSection) -> None:
        """Insert ``section`` following the section at ``index``."""
        self.sections.insert(index + 1, section)

    def append(self, section: PodSection) -> None:
        """Add ``section`` at the end of the document."""
        self.sections.append(section)

    def copy(self) -> "PodDocument":
        """Return a copy whose section list can be changed independently."""
        return PodDocument(
            preamble=list(self.preamble),
            sections=[PodSection(s.title, list(s.paragraphs)) for s in self.sections],
        )

    def serialize(self) -> str:
        """Render the document back to POD text."""
        paragraphs = list(self.preamble)
        for section in self.sections:
            paragraphs.extend(section.render())
        if not paragraphs:
            return ""
        return "\n\n".join(paragraphs) + "\n\n=cut\n"


def extract_pod_paragraphs(text: str) -> list[str]:
    """Return the POD paragraphs of ``text``, skipping code and ``=pod``/``=cut``."""
    paragraphs: list[str] = []
    block: list[str] = []
    in_pod = False

    def flush() -> None:
        if block:
            para = "\n".join(block).rstrip()
            command = COMMAND_RE.match(para)
            if not (command and command.group(1) == "pod" and para.strip() == "=pod"):
                paragraphs.append(para)
            block.clear()

    for line in text.splitlines():
        if not in_pod:
            if COMMAND_RE.match(line) and not line.startswith("=cut"):
                in_pod = True
            else:
                continue
        if line.startswith("=cut") and not block:
            in_pod = False
            continue
        if BLANK_RE.match(line):
            flush()
            continue
        if COMMAND_RE.match(line) and block:
            flush()
        if line.startswith("=cut"):
            in_pod = False
            continue
        block.append(line.rstrip())
    flush()
    return paragraphs
