"""The generated-file marker and the check that an output file is ours."""

import logging
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

GENERATED_MARKER = "=for comment POD_DERIVED_INDEX_GENERATED"


def inherit_header(classname: str, source: Path | str) -> str:
    """Return the header prefixed to every generated document."""
    # Unix separators so the output does not depend on the host OS.
    src = PurePath(source).as_posix()
    return f"""{GENERATED_MARKER}
The following documentation is automatically generated.  Please do not edit
this file, but rather the original, inline with {classname}
at {src}
(on the system that originally ran this).
If you do edit this file, and don't want your changes to be removed, make
sure you change the first line.

=cut

"""


def is_ours(path: Path) -> bool:
    """Return True if ``path`` is absent or starts with the generated marker."""
    if not path.exists():
        return True
    with open(path, encoding="utf-8", errors="replace", newline="") as f:
        first_line = f.readline()
    if first_line != GENERATED_MARKER + "\n":
        logger.warning(
            "%s already exists, and it doesn't look like we generated it. "
            "Skipping this file",
            path,
        )
        return False
    return True
