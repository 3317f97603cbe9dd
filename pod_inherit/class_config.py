"""Per-ancestor attribution settings, resolved once and cached."""

import logging
import threading

from pod_inherit.class_registry import ClassRegistry
from pod_inherit.models import PerClassConfig
from pod_inherit.perl_literal import perl_truth

logger = logging.getLogger(__name__)


class ClassConfigCache:
    """Resolves each ancestor's settings from its inline block or the defaults.

    The first resolution for a class wins; later runs that visit the same
    ancestor reuse it even if their defaults differ.
    """

    def __init__(
        self,
        registry: ClassRegistry,
        skip_underscored: bool = True,
        class_map: dict[str, str] | None = None,
    ) -> None:
        """Initialize the cache with the global defaults."""
        self.registry = registry
        self.default = PerClassConfig(
            skip_underscored=skip_underscored, class_map=dict(class_map or {})
        )
        self._configs: dict[str, PerClassConfig] = {}
        self._lock = threading.Lock()

    def get(self, class_id: str) -> PerClassConfig:
        """Return the effective configuration for ``class_id``."""
        config = self._configs.get(class_id)
        if config is not None:
            return config
        declared = self.registry.declared_config(class_id)
        with self._lock:
            config = self._configs.get(class_id)
            if config is None:
                config = self._resolve(class_id, declared)
                self._configs[class_id] = config
        return config

    def _resolve(self, class_id: str, declared: dict | None) -> PerClassConfig:
        if not declared:
            return self.default

        skip = self.default.skip_underscored
        if "skip_underscored" in declared:
            skip = perl_truth(declared["skip_underscored"])

        class_map = self.default.class_map
        declared_map = declared.get("class_map")
        if "class_map" in declared and isinstance(declared_map, dict):
            class_map = {str(k): str(v) for k, v in declared_map.items()}
        elif declared_map:
            logger.warning("Ignoring non-hash class_map declared by %s", class_id)

        logger.debug(
            "Inline config for %s: skip_underscored=%s class_map=%s",
            class_id,
            skip,
            class_map,
        )
        return PerClassConfig(skip_underscored=skip, class_map=class_map)
