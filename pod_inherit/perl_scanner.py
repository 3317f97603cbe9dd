"""Static extraction of package structure from Perl module sources.

The scanner never executes Perl. It recognizes the declarations that shape a
package's symbol table: the package statement, base classes, ``sub``
definitions, constants, overloads, explicit imports, glob aliases and
package variables, plus the MRO pragma and the inline
``%_pod_inherit_config`` block.
"""

import logging
import re
from pathlib import Path

from pod_inherit.models import ClassDecl
from pod_inherit.perl_literal import parse_perl_hash, parse_perl_list

logger = logging.getLogger(__name__)

INLINE_CONFIG_NAME = "_pod_inherit_config"

PACKAGE_RE = re.compile(
    r"^\s*package\s+([A-Za-z_][\w:]*)(?:\s+v?[\d.]+)?\s*(;|\{)", re.MULTILINE
)
POD_START_RE = re.compile(r"^=[a-zA-Z]")
END_RE = re.compile(r"^__(?:END|DATA)__\b")
COMMENT_RE = re.compile(r"(^|\s)#.*$")

BASE_RE = re.compile(r"^\s*use\s+(?:base|parent)\b(.*?);", re.MULTILINE | re.DOTALL)
ISA_ASSIGN_RE = re.compile(
    r"^\s*(?:our\s+)?@(?:[\w:]+::)?ISA\s*=\s*(.*?);", re.MULTILINE | re.DOTALL
)
ISA_PUSH_RE = re.compile(
    r"^\s*(?:push|unshift)\s*\(?\s*@ISA\s*,\s*(.*?)\)?\s*;", re.MULTILINE | re.DOTALL
)
EXTENDS_RE = re.compile(r"^\s*extends\b\s*\(?(.*?)\)?\s*;", re.MULTILINE | re.DOTALL)
HAS_RE = re.compile(r"""^\s*has\b\s*\(?\s*['"]?([A-Za-z_]\w*)""", re.MULTILINE)
SUB_RE = re.compile(r"^\s*sub\s+([A-Za-z_][\w:]*)\s*(;|\{|\(|:)", re.MULTILINE)
CONSTANT_RE = re.compile(r"^\s*use\s+constant\s+(.*?);", re.MULTILINE | re.DOTALL)
OVERLOAD_RE = re.compile(r"^\s*use\s+overload\b(.*?);", re.MULTILINE | re.DOTALL)
OVERLOAD_KEY_RE = re.compile(r"""(?:'([^']*)'|"([^"]*)"|([A-Za-z_]\w*))\s*=>""")
C3_RE = re.compile(r"^\s*use\s+(?:mro\s+['\"]?c3\b|Class::C3\b)", re.MULTILINE)
IMPORT_RE = re.compile(
    r"^\s*use\s+([A-Z][\w:]*)\s+(?!\d)([^;]+?)\s*;", re.MULTILINE | re.DOTALL
)
GLOB_ALIAS_RE = re.compile(
    r"^\s*\*(?:\{\s*['\"]?)?(\w+)(?:['\"]?\s*\})?\s*=\s*\\&([\w:]+)\s*;",
    re.MULTILINE,
)
GLOB_SUB_RE = re.compile(
    r"^\s*\*(?:\{\s*['\"]?)?(\w+)(?:['\"]?\s*\})?\s*=\s*sub\b", re.MULTILINE
)
OUR_RE = re.compile(r"\bour\s*(?:\(([^)]*)\)|([$@%]\w+))")
USE_VARS_RE = re.compile(r"^\s*use\s+vars\s+(.*?);", re.MULTILINE | re.DOTALL)
INLINE_CONFIG_RE = re.compile(
    r"^\s*our\s+%" + INLINE_CONFIG_NAME + r"\s*=\s*\((.*?)\)\s*;",
    re.MULTILINE | re.DOTALL,
)

# Modules whose arguments are not an import list.
NON_IMPORTING = {"Class::C3"}
IDENT_RE = re.compile(r"^&?([A-Za-z_]\w*)$")
EMPTY_IMPORT_RE = re.compile(r"^\s*\(\s*\)\s*$")


def strip_non_code(text: str) -> str:
    """Blank out POD, comments and everything after ``__END__``.

    Line count is preserved so positions stay meaningful in diagnostics.
    """
    out: list[str] = []
    in_pod = False
    finished = False
    for line in text.splitlines():
        if finished:
            out.append("")
            continue
        if in_pod:
            if line.startswith("=cut"):
                in_pod = False
            out.append("")
            continue
        if POD_START_RE.match(line):
            in_pod = not line.startswith("=cut")
            out.append("")
            continue
        if END_RE.match(line):
            finished = True
            out.append("")
            continue
        out.append(COMMENT_RE.sub(r"\1", line))
    return "\n".join(out)


def read_class_name(path: Path) -> str | None:
    """Return the first package a source file declares, as the scanner sees it."""
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    m = PACKAGE_RE.search(strip_non_code(text))
    return m.group(1) if m else None


def scan_source(text: str, path: Path | None = None) -> list[ClassDecl]:
    """Scan Perl source text and return every package it declares.

    Packages are returned in declaration order. Code appearing before the
    first package statement belongs to ``main`` and is ignored.
    """
    code = strip_non_code(text)
    boundaries = [(m.start(), m.group(1)) for m in PACKAGE_RE.finditer(code)]
    decls: dict[str, ClassDecl] = {}

    for i, (start, name) in enumerate(boundaries):
        end = boundaries[i + 1][0] if i + 1 < len(boundaries) else len(code)
        decl = decls.get(name)
        if decl is None:
            decl = ClassDecl(name=name, path=path)
            decls[name] = decl
        decl.partial = False
        _scan_region(code[start:end], decl, decls, path)

    return list(decls.values())


def _scan_region(
    region: str, decl: ClassDecl, decls: dict[str, ClassDecl], path: Path | None
) -> None:
    """Populate one package declaration from its slice of the source."""
    for m in BASE_RE.finditer(region):
        _add_bases(decl, _words(m.group(1)))
    for m in ISA_ASSIGN_RE.finditer(region):
        decl.bases = []
        _add_bases(decl, _words(m.group(1)))
    for m in ISA_PUSH_RE.finditer(region):
        _add_bases(decl, _words(m.group(1)))
    for m in EXTENDS_RE.finditer(region):
        _add_bases(decl, _words(m.group(1)))
    if decl.bases:
        decl.declare("ISA", "variable")

    if C3_RE.search(region):
        decl.mro = "c3"

    for m in SUB_RE.finditer(region):
        name, terminator = m.group(1), m.group(2)
        kind = "declaration" if terminator == ";" else "sub"
        target = decl
        if "::" in name:
            pkg, _, name = name.rpartition("::")
            target = decls.get(pkg)
            if target is None:
                target = ClassDecl(name=pkg, path=path, partial=True)
                decls[pkg] = target
        target.declare(name, kind)

    for m in HAS_RE.finditer(region):
        decl.declare(m.group(1), "sub")

    for m in CONSTANT_RE.finditer(region):
        for name in _constant_names(m.group(1)):
            decl.declare(name, "constant")

    for m in OVERLOAD_RE.finditer(region):
        decl.declare("()", "overload")
        for key in OVERLOAD_KEY_RE.finditer(m.group(1)):
            op = next(g for g in key.groups() if g is not None)
            if op != "fallback":
                decl.declare("(" + op, "overload")

    for m in IMPORT_RE.finditer(region):
        module, args = m.group(1), m.group(2)
        if module in NON_IMPORTING or EMPTY_IMPORT_RE.match(args):
            continue
        for word in _words(args):
            ident = IDENT_RE.match(word)
            if ident:
                decl.declare(ident.group(1), "import", origin=module)

    for m in GLOB_ALIAS_RE.finditer(region):
        name, qualified = m.group(1), m.group(2)
        origin, _, target = qualified.rpartition("::")
        if not origin or origin == decl.name:
            decl.declare(name, "sub")
        else:
            decl.declare(name, "import", origin=origin, target=target)
    for m in GLOB_SUB_RE.finditer(region):
        decl.declare(m.group(1), "sub")

    for m in OUR_RE.finditer(region):
        names = m.group(1) or m.group(2)
        for var in re.findall(r"[$@%](\w+)", names):
            decl.declare(var, "variable")
    for m in USE_VARS_RE.finditer(region):
        for var in re.findall(r"[$@%](\w+)", m.group(1)):
            decl.declare(var, "variable")

    m = INLINE_CONFIG_RE.search(region)
    if m:
        try:
            decl.inline_config = parse_perl_hash(m.group(1))
        except ValueError as e:
            logger.warning(
                "Ignoring unparseable %%%s in %s: %s", INLINE_CONFIG_NAME, decl.name, e
            )


def _words(args: str) -> list[str]:
    """Extract string items from a ``use``/``@ISA`` argument list."""
    try:
        values = parse_perl_list(args)
    except ValueError:
        return re.findall(r"[A-Za-z_&][\w:]*", args)
    return [str(v) for v in values if isinstance(v, str)]


def _add_bases(decl: ClassDecl, words: list[str]) -> None:
    for word in words:
        if word.startswith("-"):
            continue
        if word not in decl.bases:
            decl.bases.append(word)


def _constant_names(args: str) -> list[str]:
    body = args.strip()
    if body.startswith("{"):
        try:
            values = parse_perl_list(body)
        except ValueError:
            return re.findall(r"(\w+)\s*=>", body)
        if values and isinstance(values[0], dict):
            return list(values[0])
        return []
    m = re.match(r"""(?:'(\w+)'|"(\w+)"|(\w+))""", body)
    if not m:
        return []
    return [next(g for g in m.groups() if g is not None)]
