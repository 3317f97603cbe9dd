"""Attribution of inherited members to the ancestors that define them."""

import logging

from pod_inherit.class_config import ClassConfigCache
from pod_inherit.class_registry import UNIVERSAL, ClassRegistry
from pod_inherit.display_label import display_label
from pod_inherit.errors import AttributionError, PodInheritError
from pod_inherit.models import Attribution, SectionModel

logger = logging.getLogger(__name__)

# Hooks Perl calls implicitly; never part of a class's public interface.
LIFECYCLE_NAMES = frozenset(
    {
        "BEGIN",
        "END",
        "INIT",
        "CHECK",
        "UNITCHECK",
        "DESTROY",
        "AUTOLOAD",
        "CLONE",
        "CLONE_SKIP",
        "BUILD",
        "BUILDARGS",
        "DEMOLISH",
    }
)


class MemberAttributor:
    """Walks a working ancestor sequence and groups members by true owner."""

    def __init__(
        self,
        registry: ClassRegistry,
        configs: ClassConfigCache,
        policy: str = "auto",
    ) -> None:
        """Initialize the attributor with the registry and config cache."""
        self.registry = registry
        self.configs = configs
        self.policy = policy

    def attribute(
        self,
        sequence: list[str],
        class_under_doc: str,
        forced: list[str] | None = None,
    ) -> SectionModel | None:
        """Attribute every reachable member of ``class_under_doc``.

        Returns ``None`` when no ancestor contributes anything.
        """
        forced = forced or []
        model = SectionModel(order=list(sequence))
        seen: dict[str, str] = {}

        for ancestor in sequence:
            config = self.configs.get(ancestor)
            for name in self.registry.direct_members_of(ancestor):
                if config.skip_underscored and name.startswith("_"):
                    continue
                if name in seen or name in LIFECYCLE_NAMES:
                    continue
                if not self._is_callable(ancestor, name):
                    continue

                label = display_label(name)
                owner = self._resolve_owner(class_under_doc, name, forced)
                if owner is None or owner == UNIVERSAL:
                    continue
                if owner != ancestor:
                    logger.warning(
                        "Probable unexpected import of %s from %s into %s",
                        label,
                        owner,
                        ancestor,
                    )
                    continue

                seen[name] = ancestor
                target = config.class_map.get(ancestor) or ancestor
                model.methods.setdefault(target, []).append(label)
                model.attributions.append(
                    Attribution(
                        member=name, declaring_ancestor=ancestor, display_target=target
                    )
                )
                if target not in model.order:
                    model.order.insert(model.order.index(ancestor), target)

        if not model.methods:
            return None
        return model

    def _is_callable(self, ancestor: str, name: str) -> bool:
        try:
            probe = self.registry.probe_member(ancestor, name)
        except PodInheritError:
            raise
        except Exception as e:
            msg = f"While checking if {ancestor} {name} is a sub: {e}"
            raise AttributionError(msg) from e
        if probe.problem:
            logger.debug(
                "Treating %s::%s as not callable: %s", ancestor, name, probe.problem
            )
            return False
        return probe.callable

    def _resolve_owner(
        self, class_under_doc: str, name: str, forced: list[str]
    ) -> str | None:
        owner = self.registry.resolve_owner(class_under_doc, name, self.policy)
        if owner is not None:
            return owner
        for extra in forced:
            owner = self.registry.resolve_owner(extra, name, self.policy)
            if owner is not None:
                return owner
        return None
