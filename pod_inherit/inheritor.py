"""Orchestration: from Perl sources to ``.pod`` files with inherited methods."""

import logging
from pathlib import Path

from pod_inherit.attribute_members import MemberAttributor
from pod_inherit.class_config import ClassConfigCache
from pod_inherit.class_registry import ClassRegistry
from pod_inherit.compose_section import compose_section
from pod_inherit.discover_sources import discover_sources
from pod_inherit.errors import (
    AttributionError,
    MalformedSectionError,
    MalformedSourceError,
    ResolutionError,
)
from pod_inherit.inherit_config import InheritConfig
from pod_inherit.inherit_header import inherit_header, is_ours
from pod_inherit.inherit_report import InheritReport, compute_config_hash
from pod_inherit.merge_overrides import forced_ancestors_for, merge_overrides
from pod_inherit.method_format import method_formatter
from pod_inherit.models import SourceUnit
from pod_inherit.perl_scanner import read_class_name
from pod_inherit.plan_insertion import plan_insertion
from pod_inherit.pod_document import PodDocument
from pod_inherit.write_output import write_output

logger = logging.getLogger(__name__)

# Failures confined to one source unit; the batch moves on to the next.
UNIT_ERRORS = (
    MalformedSourceError,
    ResolutionError,
    AttributionError,
    MalformedSectionError,
)


def source_keys(source: Path) -> list[str]:
    """Spellings under which a source path may appear in the configuration."""
    keys = [str(source), source.as_posix(), str(source.resolve())]
    return list(dict.fromkeys(keys))


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class PodInheritor:
    """Generates inherited-method documentation for a set of Perl sources.

    The class registry and the per-ancestor configuration cache live as long
    as the inheritor, so every source processed shares what was loaded.
    """

    def __init__(
        self, config: InheritConfig, registry: ClassRegistry | None = None
    ) -> None:
        """Initialize the pipeline components from the configuration."""
        self.config = config
        self.registry = registry or ClassRegistry(config.include_paths)
        self.configs = ClassConfigCache(
            self.registry,
            skip_underscored=config.skip_underscored,
            class_map=config.class_map,
        )
        self.attributor = MemberAttributor(
            self.registry, self.configs, policy=config.linearization
        )
        self.format_fn = method_formatter(config.method_format)

    def create_pod(self, source: Path) -> str | None:
        """Return the full generated document for ``source``.

        ``None`` means there is nothing to document: no ancestors survive the
        overrides, or none of them contributes a member.
        """
        source = Path(source)
        classname = self.registry.load_file(source)
        policy = self.config.linearization

        raw = self.registry.linearization(classname, policy)
        forced = forced_ancestors_for(
            self.config.force_inherits, source_keys(source), classname
        )
        sequence = merge_overrides(
            raw, forced, self.config.skip_inherits, classname, self.registry, policy
        )
        if not sequence:
            logger.debug("No parent classes for %s", classname)
            return None

        model = self.attributor.attribute(sequence, classname, forced)
        if model is None:
            logger.debug("%s inherits no documentable methods", classname)
            return None

        section = compose_section(model, self.format_fn, self.config.section_title)
        document = PodDocument.parse_file(source)
        planned = plan_insertion(document, section, self.config.trailing_sections)
        return inherit_header(classname, source) + planned.serialize()

    def write_pod(self, *, dry_run: bool = False) -> InheritReport:
        """Run the generation stage over every configured input."""
        units = discover_sources(self.config.input_files, self.config.out_dir)
        for root in dict.fromkeys(u.root for u in units):
            self.registry.add_include_path(root)

        report = InheritReport(compute_config_hash(self.config))
        for unit in units:
            self._process_unit(unit, report, dry_run=dry_run)
        return report

    def is_skipped(self, source: Path) -> bool:
        """Return True if ``skip_classes`` names the source path or its class."""
        skip = self.config.skip_classes
        if not skip:
            return False
        if any(key in skip for key in source_keys(source)):
            return True
        return read_class_name(source) in skip

    def _process_unit(
        self, unit: SourceUnit, report: InheritReport, *, dry_run: bool
    ) -> None:
        if self.is_skipped(unit.source):
            report.add_result(unit.source, unit.output, "skipped", "skip_classes")
            return
        if not is_ours(unit.output):
            report.add_result(unit.source, unit.output, "skipped", "not generated")
            return

        try:
            text = self.create_pod(unit.source)
        except UNIT_ERRORS as e:
            logger.error(
                "Couldn't autogenerate documentation for %s: %s", unit.source, e
            )
            report.add_result(unit.source, unit.output, "failed", str(e))
            return

        if not text:
            report.add_result(unit.source, unit.output, "empty")
            return
        if unit.output.exists() and _read(unit.output) == text:
            report.add_result(unit.source, unit.output, "unchanged")
            return
        if dry_run:
            print(f"Would write {unit.output}")
        else:
            logger.debug("Writing %s", unit.output)
            write_output(
                unit.output, text, force_permissions=self.config.force_permissions
            )
        report.add_result(unit.source, unit.output, "written")
