"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from pod_inherit.compose_section import DEFAULT_SECTION_TITLE
from pod_inherit.deep_merge import deep_merge
from pod_inherit.errors import ConfigError
from pod_inherit.plan_insertion import DEFAULT_TRAILING_SECTIONS

DEFAULT_CONFIG: dict[str, Any] = {
    "input_files": [],
    "out_dir": "",
    "include_paths": [],
    "skip_underscored": True,
    "class_map": {},
    "skip_classes": [],
    "skip_inherits": [],
    "force_inherits": {},
    "method_format": "%m",
    "force_permissions": False,
    "linearization": "auto",
    "trailing_sections": list(DEFAULT_TRAILING_SECTIONS),
    "section_title": DEFAULT_SECTION_TITLE,
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if not p.exists():
            msg = f"Configuration file not found: {path}"
            raise ConfigError(msg)
        try:
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in {path}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(user_config, dict):
            msg = f"Configuration in {path} must be a mapping"
            raise ConfigError(msg)
        config = deep_merge(config, user_config)
    return config
