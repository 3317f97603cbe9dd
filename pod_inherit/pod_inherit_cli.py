"""Command line entry point: generate ``.pod`` files listing inherited methods.

Each ``.pm`` file found under the given inputs is scanned, its ancestry
resolved, and a copy of its POD written next to it (or under ``--out-dir``)
with an ``INHERITED METHODS`` section added.
"""

import argparse
import logging
from pathlib import Path
from typing import Any

from pod_inherit.errors import AccessError, ConfigError
from pod_inherit.inherit_config import build_inherit_config
from pod_inherit.inheritor import PodInheritor
from pod_inherit.linearize import LINEARIZATION_POLICIES
from pod_inherit.load_config import load_config


def parse_pairs(values: list[str] | None, option: str) -> list[tuple[str, str]]:
    """Split ``KEY=VALUE`` arguments."""
    pairs = []
    for value in values or []:
        key, sep, target = value.partition("=")
        if not sep or not key or not target:
            msg = f"{option} expects KEY=VALUE, got {value!r}"
            raise ConfigError(msg)
        pairs.append((key, target))
    return pairs


def apply_cli_overrides(config: dict[str, Any], args: argparse.Namespace) -> None:
    """Layer command line options on top of the loaded configuration."""
    if args.inputs:
        config["input_files"] = [str(p) for p in args.inputs]
    if args.out_dir:
        config["out_dir"] = str(args.out_dir)
    if args.include_path:
        config["include_paths"] = [*config["include_paths"], *args.include_path]
    if args.show_underscored:
        config["skip_underscored"] = False
    for key, target in parse_pairs(args.class_map, "--class-map"):
        config["class_map"][key] = target
    if args.skip_class:
        config["skip_classes"] = [*config["skip_classes"], *args.skip_class]
    if args.skip_inherit:
        config["skip_inherits"] = [*config["skip_inherits"], *args.skip_inherit]
    for key, target in parse_pairs(args.force_inherit, "--force-inherit"):
        config["force_inherits"].setdefault(key, []).append(target)
    if args.method_format:
        config["method_format"] = args.method_format
    if args.force_permissions:
        config["force_permissions"] = True
    if args.linearization:
        config["linearization"] = args.linearization


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    ap = argparse.ArgumentParser(
        description="Add an INHERITED METHODS section to the POD of Perl modules.",
    )
    ap.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help="Directories to search for .pm files, or .pm files (default: config)",
    )
    ap.add_argument(
        "--out-dir",
        type=Path,
        help="Directory to mirror generated .pod files into (default: beside .pm)",
    )
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "--include-path",
        "-I",
        action="append",
        help="Extra directory searched for base classes (repeatable)",
    )
    ap.add_argument(
        "--show-underscored",
        action="store_true",
        help="List methods whose names begin with an underscore",
    )
    ap.add_argument(
        "--class-map",
        action="append",
        metavar="CLASS=DOCCLASS",
        help="Document methods found in CLASS under DOCCLASS (repeatable)",
    )
    ap.add_argument(
        "--skip-class",
        action="append",
        metavar="CLASS_OR_PATH",
        help="Do not generate documentation for this class or file (repeatable)",
    )
    ap.add_argument(
        "--skip-inherit",
        action="append",
        metavar="CLASS",
        help="Leave this ancestor out of every listing (repeatable)",
    )
    ap.add_argument(
        "--force-inherit",
        action="append",
        metavar="CLASS_OR_PATH=BASE",
        help="Treat BASE as an extra ancestor of CLASS (repeatable)",
    )
    ap.add_argument(
        "--method-format",
        help="Template for each method: %%m method, %%c class, %%%% percent",
    )
    ap.add_argument(
        "--force-permissions",
        action="store_true",
        help="Temporarily make read-only output directories writable",
    )
    ap.add_argument(
        "--linearization",
        choices=sorted(LINEARIZATION_POLICIES),
        help="Method resolution order to use (default: auto, per class)",
    )
    ap.add_argument("--report", type=Path, help="Write a JSON run report here")
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which files would be written without writing them",
    )
    ap.add_argument(
        "-v", "--verbose", action="count", default=0, help="More diagnostics"
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    """Run the generator."""
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        config = load_config(args.config)
        apply_cli_overrides(config, args)
        inheritor = PodInheritor(build_inherit_config(config))
        report = inheritor.write_pod(dry_run=args.dry_run)
    except (ConfigError, AccessError) as e:
        raise SystemExit(f"pod-inherit: {e}") from e

    if args.report:
        report.generate_report(args.report)
    print(f"pod-inherit: {report.summary()}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
