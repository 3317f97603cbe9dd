"""Parser for the small subset of Perl literals used in inline configuration.

Handles lists and hashes built from quoted strings, numbers, barewords and
``undef``::

    ( skip_underscored => 0, class_map => { 'A::B' => 'A' } )
"""

import re
from typing import Any

TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<fatcomma>=>)
      | (?P<punct>[,(){}\[\]])
      | '(?P<sq>(?:[^'\\]|\\.)*)'
      | "(?P<dq>(?:[^"\\]|\\.)*)"
      | qw\s*(?:
            \((?P<qwparen>[^)]*)\)
          | \[(?P<qwbracket>[^\]]*)\]
          | \{(?P<qwbrace>[^}]*)\}
          | /(?P<qwslash>[^/]*)/
        )
      | (?P<num>-?\d+(?:\.\d+)?)
      | (?P<word>-?[A-Za-z_][\w:]*)
    )
    """,
    re.VERBOSE,
)

CLOSERS = {"(": ")", "[": "]", "{": "}"}


def tokenize_literal(text: str) -> list[tuple[str, Any]]:
    """Split a literal into (kind, value) tokens."""
    tokens: list[tuple[str, Any]] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = TOKEN_RE.match(text, pos)
        if not m or m.end() == pos:
            msg = f"Unsupported Perl literal near: {text[pos:pos + 20]!r}"
            raise ValueError(msg)
        pos = m.end()
        if m.group("fatcomma"):
            tokens.append(("=>", "=>"))
        elif m.group("punct"):
            tokens.append((m.group("punct"), m.group("punct")))
        elif m.group("sq") is not None:
            tokens.append(("str", re.sub(r"\\([\\'])", r"\1", m.group("sq"))))
        elif m.group("dq") is not None:
            tokens.append(("str", re.sub(r"\\(.)", r"\1", m.group("dq"))))
        elif (qw_body := _qw_body(m)) is not None:
            tokens.extend(("str", w) for w in qw_body.split())
        elif m.group("num"):
            raw = m.group("num")
            tokens.append(("num", float(raw) if "." in raw else int(raw)))
        else:
            word = m.group("word")
            tokens.append(("undef", None) if word == "undef" else ("str", word))
    return tokens


def _qw_body(m: re.Match[str]) -> str | None:
    for group in ("qwparen", "qwbracket", "qwbrace", "qwslash"):
        if m.group(group) is not None:
            return m.group(group)
    return None


def parse_perl_list(text: str) -> list[Any]:
    """Parse a comma/fat-comma separated list of Perl literals."""
    tokens = tokenize_literal(text)
    values, pos = _parse_items(tokens, 0, None)
    if pos != len(tokens):
        msg = f"Trailing tokens in Perl literal: {text!r}"
        raise ValueError(msg)
    return values


def parse_perl_hash(text: str) -> dict[str, Any]:
    """Parse a list of key/value pairs (the body of a hash assignment)."""
    return _pairs_to_dict(parse_perl_list(text))


def _parse_items(
    tokens: list[tuple[str, Any]], pos: int, closer: str | None
) -> tuple[list[Any], int]:
    values: list[Any] = []
    while pos < len(tokens):
        kind, value = tokens[pos]
        if closer and kind == closer:
            return values, pos + 1
        if kind in {",", "=>"}:
            pos += 1
            continue
        if kind in CLOSERS:
            inner, pos = _parse_items(tokens, pos + 1, CLOSERS[kind])
            if kind == "{":
                values.append(_pairs_to_dict(inner))
            elif kind == "(":
                values.extend(inner)
            else:
                values.append(inner)
            continue
        if kind in {")", "]", "}"}:
            msg = f"Unbalanced {kind!r} in Perl literal"
            raise ValueError(msg)
        values.append(value)
        pos += 1
    if closer:
        msg = f"Missing {closer!r} in Perl literal"
        raise ValueError(msg)
    return values, pos


def _pairs_to_dict(items: list[Any]) -> dict[str, Any]:
    if len(items) % 2:
        msg = "Odd number of elements in Perl hash literal"
        raise ValueError(msg)
    return {str(items[i]): items[i + 1] for i in range(0, len(items), 2)}


def perl_truth(value: Any) -> bool:
    """Evaluate a scanned literal the way Perl would in boolean context."""
    if value is None:
        return False
    if isinstance(value, str):
        return value not in {"", "0"}
    if isinstance(value, (list, dict)):
        return True
    return bool(value)
