"""Turning input files and directories into source/output pairs."""

from collections.abc import Iterable
from pathlib import Path

from pod_inherit.errors import ConfigError
from pod_inherit.models import SourceUnit

SOURCE_SUFFIX = ".pm"
OUTPUT_SUFFIX = ".pod"


def output_file_for_source(source: Path, root: Path, out_dir: Path | None) -> Path:
    """Determine where the POD generated from ``source`` is written."""
    # lib/Foo/Bar.pm -> out_dir/Foo/Bar.pod, or lib/Foo/Bar.pod without out_dir
    if out_dir:
        target = out_dir / source.relative_to(root)
    else:
        target = source
    target = target.with_suffix(OUTPUT_SUFFIX)
    target.parent.mkdir(parents=True, exist_ok=True)
    return target


def discover_sources(
    input_files: Iterable[Path | str], out_dir: Path | str | None = None
) -> list[SourceUnit]:
    """Expand inputs into the ``.pm`` files to document.

    Directories are searched recursively. A file input is treated as if its
    containing directory had been given, so output mirroring stays flat.
    """
    inputs = [Path(p) for p in input_files]
    if not inputs:
        msg = "No input files or directories given"
        raise ConfigError(msg)
    out_root = Path(out_dir) if out_dir else None

    units: list[SourceUnit] = []
    seen: set[Path] = set()
    for target in inputs:
        if target.is_dir():
            root = target
            sources = sorted(
                p for p in target.rglob("*" + SOURCE_SUFFIX) if p.is_file()
            )
        elif target.is_file():
            root = target.parent
            sources = [target] if target.suffix == SOURCE_SUFFIX else []
        else:
            msg = f"Input path does not exist: {target}"
            raise ConfigError(msg)

        for source in sources:
            key = source.resolve()
            if key in seen:
                continue
            seen.add(key)
            output = output_file_for_source(source, root, out_root)
            units.append(SourceUnit(source=source, output=output, root=root))
    return units
