"""Tests for member labels and the method_format template."""

import pytest

from pod_inherit.display_label import display_label
from pod_inherit.errors import ConfigError
from pod_inherit.method_format import method_formatter


def test_plain_names_pass_through() -> None:
    """Verify ordinary method names are unchanged."""
    assert display_label("new") == "new"
    assert display_label("_private") == "_private"


def test_overload_table_label() -> None:
    """Verify both spellings of the overload table share one label."""
    assert display_label("()") == "I<overload table>"
    assert display_label("((") == "I<overload table>"


def test_operator_overload_label() -> None:
    """Verify operator characters are spelled out as POD escapes."""
    assert display_label("(+") == "I<E<43> overloading>"
    assert display_label('(""') == "I<E<34>E<34> overloading>"
    assert display_label("(<=>") == "I<E<60>E<61>E<62> overloading>"


def test_default_template() -> None:
    """Verify %m renders just the member."""
    fmt = method_formatter("%m")
    assert fmt("foo", "Base") == "foo"


def test_template_directives() -> None:
    """Verify %c and %% are substituted alongside %m."""
    fmt = method_formatter("L<%m|%c/%m> (100%%)")
    assert fmt("foo", "My::Base") == "L<foo|My::Base/foo> (100%)"


def test_percent_escape_is_not_reexpanded() -> None:
    """Verify %%m yields a literal %m rather than the member name."""
    assert method_formatter("%%m")("foo", "Base") == "%m"


@pytest.mark.parametrize("template", ["%x", "%m %q", "trailing %"])
def test_unknown_directive_rejected(template: str) -> None:
    """Verify unsupported directives are a configuration error."""
    with pytest.raises(ConfigError, match="Unknown directive"):
        method_formatter(template)
