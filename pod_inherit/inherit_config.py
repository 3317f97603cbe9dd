"""Validated view of the configuration dictionary."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pod_inherit.compose_section import DEFAULT_SECTION_TITLE
from pod_inherit.errors import ConfigError
from pod_inherit.linearize import LINEARIZATION_POLICIES
from pod_inherit.method_format import method_formatter
from pod_inherit.plan_insertion import DEFAULT_TRAILING_SECTIONS


@dataclass
class InheritConfig:
    """Settings consumed by the generation pipeline."""

    input_files: list[Path] = field(default_factory=list)
    out_dir: Path | None = None
    include_paths: list[Path] = field(default_factory=list)
    skip_underscored: bool = True
    class_map: dict[str, str] = field(default_factory=dict)
    skip_classes: set[str] = field(default_factory=set)
    skip_inherits: set[str] = field(default_factory=set)
    force_inherits: dict[str, list[str]] = field(default_factory=dict)
    method_format: str = "%m"
    force_permissions: bool = False
    linearization: str = "auto"
    trailing_sections: list[str] = field(
        default_factory=lambda: list(DEFAULT_TRAILING_SECTIONS)
    )
    section_title: str = DEFAULT_SECTION_TITLE


def build_inherit_config(raw: dict[str, Any]) -> InheritConfig:
    """Validate a merged configuration dictionary."""
    linearization = str(raw.get("linearization", "auto"))
    if linearization not in LINEARIZATION_POLICIES:
        allowed = ", ".join(sorted(LINEARIZATION_POLICIES))
        msg = f"linearization must be one of {allowed}, not {linearization!r}"
        raise ConfigError(msg)

    method_format = str(raw.get("method_format") or "%m")
    method_formatter(method_format)

    out_dir = raw.get("out_dir")
    return InheritConfig(
        input_files=[Path(p) for p in _as_list(raw, "input_files")],
        out_dir=Path(out_dir) if out_dir else None,
        include_paths=[Path(p) for p in _as_list(raw, "include_paths")],
        skip_underscored=_as_bool(raw, "skip_underscored", True),
        class_map=_as_str_map(raw, "class_map"),
        skip_classes={str(v) for v in _as_list(raw, "skip_classes")},
        skip_inherits={str(v) for v in _as_list(raw, "skip_inherits")},
        force_inherits=_as_force_map(raw),
        method_format=method_format,
        force_permissions=_as_bool(raw, "force_permissions", False),
        linearization=linearization,
        trailing_sections=(
            [str(v) for v in _as_list(raw, "trailing_sections")]
            if "trailing_sections" in raw
            else list(DEFAULT_TRAILING_SECTIONS)
        ),
        section_title=str(raw.get("section_title") or DEFAULT_SECTION_TITLE),
    )


def _as_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        msg = f"{key} must be true or false, not {value!r}"
        raise ConfigError(msg)
    return value


def _as_list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    # A single filename or class is accepted in place of a list.
    if isinstance(value, (str, Path)):
        return [value]
    if not isinstance(value, (list, tuple, set)):
        msg = f"{key} must be a list"
        raise ConfigError(msg)
    return list(value)


def _as_str_map(raw: dict[str, Any], key: str) -> dict[str, str]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"{key} must be a mapping"
        raise ConfigError(msg)
    return {str(k): str(v) for k, v in value.items()}


def _as_force_map(raw: dict[str, Any]) -> dict[str, list[str]]:
    value = raw.get("force_inherits") or {}
    if not isinstance(value, dict):
        msg = "force_inherits must be a mapping"
        raise ConfigError(msg)
    result: dict[str, list[str]] = {}
    for key, classes in value.items():
        if isinstance(classes, str):
            classes = [classes]
        if not isinstance(classes, list):
            msg = f"force_inherits entry for {key} must be a class or list of classes"
            raise ConfigError(msg)
        result[str(key)] = [str(c) for c in classes]
    return result
