"""Choosing where the generated section goes within an existing document."""

import logging
from collections.abc import Iterable

from pod_inherit.pod_document import PodDocument, PodSection

logger = logging.getLogger(__name__)

# Sections conventionally kept at the end of a module's documentation.
DEFAULT_TRAILING_SECTIONS = [
    "LICENSE",
    "AUTHORS",
    "LIMITATIONS",
    "CONTRIBUTORS",
    "AUTHOR",
    "CAVEATS",
    "COPYRIGHT",
    "BUGS",
    "SEE ALSO",
    "ALSO SEE",
    "WHERE TO GO NEXT",
]


def plan_insertion(
    document: PodDocument,
    section: PodSection,
    trailing_sections: Iterable[str] = DEFAULT_TRAILING_SECTIONS,
) -> PodDocument:
    """Return a copy of ``document`` with ``section`` placed in it.

    Top-level sections are scanned from the end; the first one whose title is
    a trailing section gets the new section inserted before it. Without such
    a match the section is appended, and a document with no sections at all
    is replaced by the section alone.
    """
    trailing = set(trailing_sections)
    sections = document.top_level_sections()
    if not sections:
        logger.debug("No top-level sections; %s becomes the whole body", section.title)
        return PodDocument(sections=[section])

    planned = document.copy()
    for index in range(len(sections) - 1, -1, -1):
        if sections[index].title in trailing:
            logger.debug(
                "Inserting %s before %s", section.title, sections[index].title
            )
            planned.insert_before(index, section)
            return planned

    logger.debug("Inserting %s after %s", section.title, sections[-1].title)
    planned.insert_after(len(sections) - 1, section)
    return planned
