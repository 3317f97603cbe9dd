"""Applying forced and skipped ancestors to a linearized class hierarchy."""

import logging
from collections.abc import Iterable

from pod_inherit.class_registry import ClassRegistry
from pod_inherit.linearize import dedupe, linearize

logger = logging.getLogger(__name__)


def merge_overrides(
    raw_sequence: list[str],
    forced: Iterable[str],
    skipped: Iterable[str],
    self_class: str,
    registry: ClassRegistry,
    policy: str = "auto",
) -> list[str]:
    """Build the working ancestor sequence used for attribution.

    Each forced ancestor is loaded, appended, and followed by its own
    linearization. Skipped ancestors and ``self_class`` are then removed
    wherever they occur. An empty result means there is nothing to document.
    """
    sequence = list(raw_sequence)
    for extra in forced:
        registry.load(extra)
        sequence.append(extra)
        sequence.extend(linearize(registry, extra, policy))
        logger.debug("Forced %s into the ancestry of %s", extra, self_class)

    removed = set(skipped)
    removed.add(self_class)
    return dedupe([cls for cls in sequence if cls not in removed])


def forced_ancestors_for(
    force_inherits: dict[str, list[str]], source_keys: Iterable[str], class_id: str
) -> list[str]:
    """Look up forced ancestors for a source, by path first then by class."""
    for key in source_keys:
        if key in force_inherits:
            return list(force_inherits[key])
    return list(force_inherits.get(class_id, []))
