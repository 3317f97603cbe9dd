"""Data models shared by the scanner, registry and attribution engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# A later declaration only replaces an earlier one of equal or lower rank.
SYMBOL_RANK = {
    "variable": 0,
    "declaration": 0,
    "import": 1,
    "sub": 2,
    "constant": 2,
    "overload": 2,
}
CALLABLE_KINDS = {"sub", "constant", "import", "overload"}


@dataclass
class Symbol:
    """A single entry in a package's own symbol table."""

    name: str
    kind: str  # sub/declaration/constant/import/overload/variable
    origin: str  # package owning the code (exporter for imports)
    target: str | None = None  # name inside origin when aliased


@dataclass
class ClassDecl:
    """A Perl package as seen by the static scanner."""

    name: str
    path: Path | None = None
    bases: list[str] = field(default_factory=list)
    symbols: dict[str, Symbol] = field(default_factory=dict)
    mro: str = "dfs"
    inline_config: dict[str, Any] | None = None
    # Known only from qualified subs defined elsewhere; the module is unread.
    partial: bool = False

    def declare(
        self,
        name: str,
        kind: str,
        origin: str | None = None,
        target: str | None = None,
    ) -> None:
        """Record a symbol, letting a real definition replace a weaker slot."""
        existing = self.symbols.get(name)
        if existing and SYMBOL_RANK[existing.kind] > SYMBOL_RANK[kind]:
            return
        self.symbols[name] = Symbol(
            name=name, kind=kind, origin=origin or self.name, target=target
        )


@dataclass(frozen=True)
class MemberProbe:
    """Outcome of asking whether a symbol-table slot holds a callable."""

    callable: bool
    owner: str | None = None
    problem: str | None = None


@dataclass(frozen=True)
class PerClassConfig:
    """Effective attribution settings for one ancestor."""

    skip_underscored: bool
    class_map: dict[str, str]


@dataclass(frozen=True)
class Attribution:
    """A member assigned to the ancestor that truly defines it."""

    member: str
    declaring_ancestor: str
    display_target: str


@dataclass
class SectionModel:
    """Display targets in composition order with the labels they contribute."""

    order: list[str]
    methods: dict[str, list[str]] = field(default_factory=dict)
    attributions: list[Attribution] = field(default_factory=list)


@dataclass(frozen=True)
class SourceUnit:
    """A source module together with the POD file generated from it."""

    source: Path
    output: Path
    root: Path
