"""Registry of scanned Perl packages, loaded on demand from include paths."""

import logging
import threading
from pathlib import Path
from typing import Any

from pod_inherit.errors import MalformedSourceError, ResolutionError
from pod_inherit.linearize import linearize
from pod_inherit.models import CALLABLE_KINDS, ClassDecl, MemberProbe, Symbol
from pod_inherit.perl_scanner import scan_source

logger = logging.getLogger(__name__)

UNIVERSAL = "UNIVERSAL"
UNIVERSAL_METHODS = ("DOES", "VERSION", "can", "isa")


def module_relpath(class_id: str) -> str:
    """Map ``Foo::Bar`` to ``Foo/Bar.pm``."""
    return class_id.replace("::", "/") + ".pm"


class ClassRegistry:
    """Answers ancestry and symbol-table questions about Perl packages.

    Classes are scanned at most once; lookups for a class that is not yet
    known search the include paths the way ``require`` searches ``@INC``.
    """

    def __init__(self, include_paths: list[Path] | list[str] | None = None) -> None:
        """Initialize the registry with the directories to search."""
        self.include_paths = [Path(p) for p in include_paths or []]
        self.classes: dict[str, ClassDecl] = {}
        self.loaded_files: dict[Path, list[str]] = {}
        self.failed: dict[str, str] = {}
        self._linearizations: dict[tuple[str, str], list[str]] = {}
        self._lock = threading.RLock()

        universal = ClassDecl(name=UNIVERSAL)
        for name in UNIVERSAL_METHODS:
            universal.declare(name, "sub")
        self.register(universal)

    def add_include_path(self, path: Path) -> None:
        """Append a directory to the search path if not already present."""
        with self._lock:
            if path not in self.include_paths:
                self.include_paths.append(path)

    def register(self, decl: ClassDecl) -> None:
        """Add a package, merging into any declaration already known."""
        with self._lock:
            self._linearizations.clear()
            existing = self.classes.get(decl.name)
            if existing is None:
                self.classes[decl.name] = decl
                if not decl.partial:
                    self.failed.pop(decl.name, None)
                return
            if existing.partial and not decl.partial:
                existing.partial = False
                existing.path = decl.path
                self.failed.pop(decl.name, None)
            for base in decl.bases:
                if base not in existing.bases:
                    existing.bases.append(base)
            for symbol in decl.symbols.values():
                existing.declare(symbol.name, symbol.kind, symbol.origin, symbol.target)
            if decl.mro != "dfs":
                existing.mro = decl.mro
            if decl.inline_config is not None and existing.inline_config is None:
                existing.inline_config = decl.inline_config

    def load_file(self, path: Path) -> str:
        """Scan a source file and return the first package it declares."""
        key = Path(path).resolve()
        with self._lock:
            names = self.loaded_files.get(key)
            if names is None:
                text = Path(path).read_text(encoding="utf-8", errors="replace")
                decls = scan_source(text, Path(path))
                for decl in decls:
                    self.register(decl)
                names = [d.name for d in decls if not d.partial]
                self.loaded_files[key] = names
                logger.debug("Scanned %s: %s", path, ", ".join(names) or "(none)")
        if not names:
            msg = f"No package declaration found in {path}"
            raise MalformedSourceError(msg)
        return names[0]

    def find_module(self, class_id: str) -> Path | None:
        """Locate the file that should define ``class_id``."""
        rel = module_relpath(class_id)
        for root in self.include_paths:
            candidate = root / rel
            if candidate.is_file():
                return candidate
        return None

    def load(self, class_id: str) -> ClassDecl:
        """Return the declaration for ``class_id``, loading it if necessary.

        A package seen only through qualified subs in other files still has
        its own module looked up once; when none is found the subs already
        seen stand in for it.
        """
        decl = self.classes.get(class_id)
        if decl is not None and not decl.partial:
            return decl
        with self._lock:
            decl = self.classes.get(class_id)
            if decl is not None and not decl.partial:
                return decl
            if class_id in self.failed:
                if decl is not None:
                    return decl
                raise ResolutionError(self.failed[class_id])

            path = self.find_module(class_id)
            if path is None:
                searched = ", ".join(str(p) for p in self.include_paths) or "(none)"
                msg = f"Can't locate {module_relpath(class_id)} (searched: {searched})"
                return self._load_failed(class_id, msg)
            try:
                self.load_file(path)
            except MalformedSourceError as e:
                return self._load_failed(class_id, str(e), e)

            decl = self.classes.get(class_id)
            if decl is None or decl.partial:
                msg = f"{path} does not declare package {class_id}"
                return self._load_failed(class_id, msg)
            return decl

    def _load_failed(
        self, class_id: str, msg: str, cause: Exception | None = None
    ) -> ClassDecl:
        self.failed[class_id] = msg
        stub = self.classes.get(class_id)
        if stub is not None:
            logger.debug("Using qualified subs only for %s: %s", class_id, msg)
            return stub
        raise ResolutionError(msg) from cause

    def direct_bases_of(self, class_id: str) -> list[str]:
        """Return the immediate base classes in declaration order."""
        return list(self.load(class_id).bases)

    def direct_members_of(self, class_id: str) -> list[str]:
        """Return the names in the class's own symbol table, sorted."""
        return sorted(self.load(class_id).symbols)

    def mro_of(self, class_id: str) -> str:
        """Return the MRO the class declares (``dfs`` or ``c3``)."""
        return self.load(class_id).mro

    def declared_config(self, class_id: str) -> dict[str, Any] | None:
        """Return the class's inline configuration block, if any."""
        return self.load(class_id).inline_config

    def probe_member(self, class_id: str, name: str) -> MemberProbe:
        """Report whether ``class_id``'s own slot ``name`` holds a callable.

        Imports are followed to the package that actually defines the code.
        Failures specific to one symbol come back as ``problem`` instead of
        being raised.
        """
        symbol = self.load(class_id).symbols.get(name)
        if symbol is None or symbol.kind not in CALLABLE_KINDS:
            return MemberProbe(callable=False)
        if symbol.kind != "import":
            return MemberProbe(callable=True, owner=class_id)
        return self._follow_import(symbol, {class_id})

    def _follow_import(self, symbol: Symbol, seen: set[str]) -> MemberProbe:
        origin = symbol.origin
        name = symbol.target or symbol.name
        if origin in seen:
            return MemberProbe(
                callable=False, problem=f"circular import of {name} via {origin}"
            )
        try:
            source = self.load(origin)
        except ResolutionError:
            # Exporter not visible to us; trust the import statement.
            return MemberProbe(callable=True, owner=origin)

        target = source.symbols.get(name)
        if target is None:
            return MemberProbe(callable=True, owner=origin)
        if target.kind not in CALLABLE_KINDS:
            return MemberProbe(
                callable=False, problem=f"{origin}::{name} is not a subroutine"
            )
        if target.kind == "import":
            return self._follow_import(target, seen | {origin})
        return MemberProbe(callable=True, owner=origin)

    def linearization(self, class_id: str, policy: str = "auto") -> list[str]:
        """Return the cached linearization of ``class_id``."""
        key = (class_id, policy)
        chain = self._linearizations.get(key)
        if chain is None:
            chain = linearize(self, class_id, policy)
            self._linearizations[key] = chain
        return list(chain)

    def resolve_owner(
        self, class_id: str, name: str, policy: str = "auto"
    ) -> str | None:
        """Return the package supplying the callable found via ``class_id``.

        Mirrors method lookup: the class's linearization is searched in order,
        then ``UNIVERSAL``.
        """
        chain = self.linearization(class_id, policy)
        if UNIVERSAL not in chain:
            chain = [*chain, UNIVERSAL]
        for cls in chain:
            probe = self.probe_member(cls, name)
            if probe.problem:
                logger.debug("Skipping %s::%s: %s", cls, name, probe.problem)
                continue
            if probe.callable:
                return probe.owner
        return None
