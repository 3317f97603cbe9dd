"""Shared fixtures for the pod-inherit test suite.

Tests build class hierarchies either in memory, by registering
``ClassDecl`` objects directly, or on disk as small ``.pm`` files under a
temporary ``lib`` directory.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from pod_inherit.class_registry import ClassRegistry
from pod_inherit.models import ClassDecl


def build_decl(
    name: str,
    bases: Iterable[str] = (),
    subs: Iterable[str] = (),
    variables: Iterable[str] = (),
    imports: dict[str, str] | None = None,
    mro: str = "dfs",
    inline_config: dict | None = None,
) -> ClassDecl:
    """Create a package declaration without going through the scanner."""
    decl = ClassDecl(name=name, bases=list(bases), mro=mro, inline_config=inline_config)
    for sub in subs:
        decl.declare(sub, "overload" if sub.startswith("(") else "sub")
    for var in variables:
        decl.declare(var, "variable")
    for sub, origin in (imports or {}).items():
        decl.declare(sub, "import", origin=origin)
    return decl


@pytest.fixture
def make_decl() -> Callable[..., ClassDecl]:
    """Factory for in-memory package declarations."""
    return build_decl


@pytest.fixture
def make_registry() -> Callable[..., ClassRegistry]:
    """Factory for a registry preloaded with the given declarations."""

    def _make(*decls: ClassDecl) -> ClassRegistry:
        registry = ClassRegistry()
        for decl in decls:
            registry.register(decl)
        return registry

    return _make


@pytest.fixture
def lib_dir(tmp_path: Path) -> Path:
    """An empty library directory for on-disk modules."""
    lib = tmp_path / "lib"
    lib.mkdir()
    return lib


@pytest.fixture
def write_pm(lib_dir: Path) -> Callable[[str, str], Path]:
    """Write ``package NAME;`` plus a body to the module's path under lib."""

    def _write(class_id: str, body: str) -> Path:
        path = lib_dir / (class_id.replace("::", "/") + ".pm")
        path.parent.mkdir(parents=True, exist_ok=True)
        text = f"package {class_id};\nuse strict;\n\n{body}\n"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
