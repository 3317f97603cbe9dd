"""Rendering an attributed section model as an ``INHERITED METHODS`` section."""

import re
from collections.abc import Callable

from pod_inherit.errors import MalformedSectionError
from pod_inherit.models import SectionModel
from pod_inherit.pod_document import PodDocument, PodSection

DEFAULT_SECTION_TITLE = "INHERITED METHODS"
PACKAGE_NAME_RE = re.compile(r"^[A-Za-z_]\w*(?:::\w+)*$")


def compose_section(
    model: SectionModel,
    format_fn: Callable[[str, str], str],
    title: str = DEFAULT_SECTION_TITLE,
) -> PodSection:
    """Build the section listing each ancestor and the members it supplies.

    Ancestors appear in ``model.order``; each member label is passed through
    ``format_fn(member, ancestor)``. The markup is re-parsed before being
    returned so a bad name cannot corrupt the surrounding document.
    """
    _check_line(title, "section title")
    lines = [f"=head1 {title}", "=over"]
    for ancestor in model.order:
        members = model.methods.get(ancestor)
        if not members:
            continue
        if not PACKAGE_NAME_RE.match(ancestor):
            msg = f"Refusing to document invalid package name {ancestor!r}"
            raise MalformedSectionError(msg)
        formatted = [format_fn(member, ancestor) for member in members]
        for text in formatted:
            _check_line(text, f"member entry for {ancestor}")
        lines.append(f"=item L<{ancestor}>")
        lines.append(", ".join(formatted))
    lines.append("=back")
    markup = "\n\n".join(lines) + "\n\n=cut\n"

    parsed = PodDocument.parse(markup)
    if parsed.preamble or len(parsed.sections) != 1:
        msg = f"Generated section does not re-parse as a single section:\n{markup}"
        raise MalformedSectionError(msg)
    return parsed.sections[0]


def _check_line(text: str, what: str) -> None:
    if not text.strip() or "\n" in text or text.lstrip().startswith("="):
        msg = f"Invalid {what}: {text!r}"
        raise MalformedSectionError(msg)
