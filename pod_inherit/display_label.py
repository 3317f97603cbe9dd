"""Human-readable labels for symbol-table member names."""

OVERLOAD_TABLE_NAMES = {"()", "(("}
OVERLOAD_TABLE_LABEL = "I<overload table>"


def display_label(name: str) -> str:
    """Return the POD label for a member.

    The overload dispatch table becomes a fixed label; a per-operator overload
    ``(OP`` spells out the operator's characters as ``E<code>`` escapes.
    """
    if name in OVERLOAD_TABLE_NAMES:
        return OVERLOAD_TABLE_LABEL
    if name.startswith("("):
        codes = "".join(f"E<{ord(ch)}>" for ch in name[1:])
        return f"I<{codes} overloading>"
    return name
