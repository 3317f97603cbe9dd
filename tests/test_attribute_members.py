"""Tests for attributing inherited members to their defining ancestors."""

import logging

import pytest

from pod_inherit.attribute_members import MemberAttributor
from pod_inherit.class_config import ClassConfigCache
from pod_inherit.class_registry import ClassRegistry
from pod_inherit.errors import AttributionError, ResolutionError
from pod_inherit.merge_overrides import merge_overrides
from pod_inherit.models import Attribution


def attribute(registry, class_id, *, skip=(), forced=(), **config):
    """Run linearize, merge and attribute for ``class_id``."""
    attributor = MemberAttributor(registry, ClassConfigCache(registry, **config))
    raw = registry.linearization(class_id)
    sequence = merge_overrides(raw, list(forced), set(skip), class_id, registry)
    return attributor.attribute(sequence, class_id, list(forced))


@pytest.fixture
def sub_of_base(make_registry, make_decl) -> ClassRegistry:
    """``Sub`` inheriting from ``Base``, which declares ``foo`` and ``_bar``."""
    return make_registry(
        make_decl("Base", subs=["foo", "_bar"]),
        make_decl("Sub", bases=["Base"]),
    )


def test_underscored_members_skipped_by_default(sub_of_base) -> None:
    """Verify the default configuration hides underscore-prefixed names."""
    model = attribute(sub_of_base, "Sub")
    assert model.methods == {"Base": ["foo"]}
    assert model.order == ["Base"]


def test_underscored_members_shown_when_configured(sub_of_base) -> None:
    """Verify underscore names appear, in registry order, when not skipped."""
    model = attribute(sub_of_base, "Sub", skip_underscored=False)
    assert model.methods == {"Base": ["_bar", "foo"]}


def test_skipped_only_ancestor_gives_nothing(sub_of_base) -> None:
    """Verify skipping the only ancestor leaves nothing to attribute."""
    raw = sub_of_base.linearization("Sub")
    assert merge_overrides(raw, [], {"Base"}, "Sub", sub_of_base) == []


def test_class_map_synonym_inserted_before_ancestor(sub_of_base) -> None:
    """Verify a remapped ancestor is listed under its synonym first."""
    sub_of_base.load("Base").declare("baz", "sub")
    model = attribute(sub_of_base, "Sub", class_map={"Base": "Documented"})
    assert model.methods == {"Documented": ["baz", "foo"]}
    assert model.order == ["Documented", "Base"]
    assert model.attributions == [
        Attribution("baz", "Base", "Documented"),
        Attribution("foo", "Base", "Documented"),
    ]


def test_first_seen_wins(make_registry, make_decl) -> None:
    """Verify a name declared by two ancestors goes to the earlier one."""
    registry = make_registry(
        make_decl("Left", subs=["shared"]),
        make_decl("Right", subs=["shared", "only_right"]),
        make_decl("Kid", bases=["Left", "Right"]),
    )
    model = attribute(registry, "Kid")
    assert model.methods == {"Left": ["shared"], "Right": ["only_right"]}


def test_lifecycle_names_are_never_listed(make_registry, make_decl) -> None:
    """Verify construction and destruction hooks are filtered out."""
    registry = make_registry(
        make_decl("Base", subs=["new", "DESTROY", "AUTOLOAD", "BUILD", "BEGIN"]),
        make_decl("Sub", bases=["Base"]),
    )
    assert attribute(registry, "Sub").methods == {"Base": ["new"]}


def test_overload_labels(make_registry, make_decl) -> None:
    """Verify overload pseudo-members get readable labels."""
    registry = make_registry(
        make_decl("Num", subs=["()", "(+", "add"]),
        make_decl("Int", bases=["Num"]),
    )
    model = attribute(registry, "Int")
    assert model.methods == {
        "Num": ["I<overload table>", "I<E<43> overloading>", "add"]
    }


def test_imported_member_warns_and_is_skipped(
    make_registry, make_decl, caplog: pytest.LogCaptureFixture
) -> None:
    """Verify a re-exported function is not credited to the importer."""
    registry = make_registry(
        make_decl("Base", subs=["foo"], imports={"blessed": "Scalar::Util"}),
        make_decl("Sub", bases=["Base"]),
    )
    with caplog.at_level(logging.WARNING):
        model = attribute(registry, "Sub")
    assert model.methods == {"Base": ["foo"]}
    assert (
        "Probable unexpected import of blessed from Scalar::Util into Base"
        in caplog.text
    )


def test_member_overridden_by_documented_class(
    make_registry, make_decl, caplog: pytest.LogCaptureFixture
) -> None:
    """Verify an ancestor method the class overrides is not listed."""
    registry = make_registry(
        make_decl("Base", subs=["foo", "bar"]),
        make_decl("Sub", bases=["Base"], subs=["foo"]),
    )
    with caplog.at_level(logging.WARNING):
        model = attribute(registry, "Sub")
    assert model.methods == {"Base": ["bar"]}
    assert "Probable unexpected import of foo from Sub into Base" in caplog.text


def test_universal_methods_are_noise(make_registry, make_decl) -> None:
    """Verify members owned by UNIVERSAL never appear."""
    registry = make_registry(
        make_decl("Base", subs=["foo"]), make_decl("Sub", bases=["Base"])
    )
    attributor = MemberAttributor(registry, ClassConfigCache(registry))
    model = attributor.attribute(["Base", "UNIVERSAL"], "Sub")
    assert model.methods == {"Base": ["foo"]}


def test_non_callable_slots_give_no_section(make_registry, make_decl) -> None:
    """Verify ancestors holding only variables contribute nothing."""
    registry = make_registry(
        make_decl("Base", variables=["VERSION", "ISA"]),
        make_decl("Sub", bases=["Base"]),
    )
    assert attribute(registry, "Sub") is None


def test_probe_problem_treated_as_not_callable(make_registry, make_decl) -> None:
    """Verify an import of a non-subroutine is silently passed over."""
    registry = make_registry(
        make_decl("Util", variables=["data"]),
        make_decl("Base", subs=["foo"], imports={"data": "Util"}),
        make_decl("Sub", bases=["Base"]),
    )
    assert attribute(registry, "Sub").methods == {"Base": ["foo"]}


def test_forced_ancestor_supplies_members(make_registry, make_decl) -> None:
    """Verify members reachable only through a forced ancestor are listed."""
    registry = make_registry(
        make_decl("Mixin", subs=["mixed_in"]),
        make_decl("Plain", subs=["own"]),
    )
    model = attribute(registry, "Plain", forced=["Mixin"])
    assert model.methods == {"Mixin": ["mixed_in"]}
    assert model.order == ["Mixin"]


def test_inline_config_applies_to_declaring_ancestor(make_registry, make_decl) -> None:
    """Verify an ancestor's own block overrides the global default."""
    registry = make_registry(
        make_decl(
            "Open", subs=["_hidden", "shown"], inline_config={"skip_underscored": 0}
        ),
        make_decl("Closed", subs=["_secret", "public"]),
        make_decl("Kid", bases=["Open", "Closed"]),
    )
    model = attribute(registry, "Kid")
    assert model.methods == {"Open": ["_hidden", "shown"], "Closed": ["public"]}


def test_unexpected_probe_failure_raises(make_decl) -> None:
    """Verify an unexpected error while probing aborts with context."""

    class BrokenRegistry(ClassRegistry):
        def probe_member(self, class_id, name):
            raise RuntimeError("boom")

    registry = BrokenRegistry()
    registry.register(make_decl("Base", subs=["foo"]))
    attributor = MemberAttributor(registry, ClassConfigCache(registry))
    with pytest.raises(AttributionError, match="While checking if Base foo"):
        attributor.attribute(["Base"], "Base")


def test_known_errors_propagate_unchanged(make_decl) -> None:
    """Verify resolution failures are not rewrapped."""

    class MissingRegistry(ClassRegistry):
        def probe_member(self, class_id, name):
            raise ResolutionError("gone")

    registry = MissingRegistry()
    registry.register(make_decl("Base", subs=["foo"]))
    attributor = MemberAttributor(registry, ClassConfigCache(registry))
    with pytest.raises(ResolutionError, match="gone"):
        attributor.attribute(["Base"], "Base")


def test_attribution_is_deterministic(make_registry, make_decl) -> None:
    """Verify repeated runs over the same graph agree exactly."""

    def run():
        registry = make_registry(
            make_decl("A", subs=["zeta", "alpha", "mid"]),
            make_decl("B", bases=["A"], subs=["beta", "alpha"]),
            make_decl("C", bases=["B"]),
        )
        return attribute(registry, "C", class_map={"A": "Alias"})

    first, second = run(), run()
    assert first == second
    assert first.order == ["B", "Alias", "A"]
    assert first.methods == {"B": ["alpha", "beta"], "Alias": ["mid", "zeta"]}
