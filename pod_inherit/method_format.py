"""The ``method_format`` template used to render each member citation."""

import re
from collections.abc import Callable

from pod_inherit.errors import ConfigError

DIRECTIVE_RE = re.compile(r"%(.?)")


def method_formatter(template: str) -> Callable[[str, str], str]:
    """Compile ``template`` into ``format_fn(member, ancestor)``.

    ``%m`` is the member label, ``%c`` the ancestor and ``%%`` a literal
    percent sign.
    """
    for m in DIRECTIVE_RE.finditer(template):
        if m.group(1) not in {"m", "c", "%"}:
            msg = f"Unknown directive %{m.group(1)} in method_format {template!r}"
            raise ConfigError(msg)

    def format_fn(member: str, ancestor: str) -> str:
        values = {"m": member, "c": ancestor, "%": "%"}
        return DIRECTIVE_RE.sub(lambda m: values[m.group(1)], template)

    return format_fn
