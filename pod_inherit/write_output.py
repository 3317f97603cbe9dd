"""Atomic output writing with one-shot permission recovery."""

import logging
import os
import stat
import tempfile
from pathlib import Path

from pod_inherit.errors import AccessError

logger = logging.getLogger(__name__)


def write_output(path: Path, text: str, *, force_permissions: bool = False) -> None:
    """Write ``text`` to ``path`` so readers never observe a partial file.

    The content goes to a temporary file in the same directory which is then
    renamed over the target. When the directory is not writable and
    ``force_permissions`` is set, owner-write is added to the directory for a
    single retry and the original mode is restored afterwards.
    """
    try:
        _atomic_write(path, text)
        return
    except PermissionError as e:
        if not force_permissions:
            msg = f"Can't open {path} for output: {e}"
            raise AccessError(msg) from e

    directory = path.parent
    old_mode = stat.S_IMODE(directory.stat().st_mode)
    try:
        os.chmod(directory, old_mode | stat.S_IWUSR)
    except OSError as e:
        msg = f"Can't chmod {directory} (or write into it): {e}"
        raise AccessError(msg) from e
    logger.info("Made %s writable to write %s", directory, path.name)

    written = False
    try:
        _atomic_write(path, text)
        written = True
    except OSError as e:
        msg = (
            f"Can't open {path} for output "
            f"(even after chmodding its parent directory): {e}"
        )
        raise AccessError(msg) from e
    finally:
        _restore_mode(directory, old_mode, strict=written)


def _restore_mode(directory: Path, mode: int, *, strict: bool) -> None:
    # Raises only when strict; otherwise the failure is logged.
    try:
        os.chmod(directory, mode)
    except OSError as e:
        if strict:
            msg = f"Can't chmod {directory} back to 0{mode:o}: {e}"
            raise AccessError(msg) from e
        logger.error("Can't chmod %s back to 0%o: %s", directory, mode, e)


def _atomic_write(path: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
