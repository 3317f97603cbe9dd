"""Method-resolution-order linearization over the class registry."""

from typing import TYPE_CHECKING

from pod_inherit.errors import ResolutionError

if TYPE_CHECKING:
    from pod_inherit.class_registry import ClassRegistry

LINEARIZATION_POLICIES = {"auto", "dfs", "c3"}


def linearize(
    registry: "ClassRegistry", class_id: str, policy: str = "auto"
) -> list[str]:
    """Return ``class_id`` followed by its ancestors in resolution order.

    ``dfs`` is Perl's default depth-first, left-to-right order with repeats
    dropped; ``c3`` is the C3 merge; ``auto`` lets every class use the MRO
    it declares.
    """
    if policy not in LINEARIZATION_POLICIES:
        msg = f"Unknown linearization policy: {policy}"
        raise ValueError(msg)
    return _linearize(registry, class_id, policy, ())


def _linearize(
    registry: "ClassRegistry", class_id: str, policy: str, stack: tuple[str, ...]
) -> list[str]:
    if class_id in stack:
        chain = " -> ".join((*stack, class_id))
        msg = f"Recursive inheritance detected: {chain}"
        raise ResolutionError(msg)

    bases = registry.direct_bases_of(class_id)
    mode = registry.mro_of(class_id) if policy == "auto" else policy
    stack = (*stack, class_id)

    if mode == "c3":
        parents = [_linearize(registry, b, policy, stack) for b in bases]
        return c3_merge(class_id, [*parents, list(bases)])

    result = [class_id]
    for base in bases:
        for ancestor in _linearize(registry, base, policy, stack):
            if ancestor not in result:
                result.append(ancestor)
    return result


def c3_merge(class_id: str, sequences: list[list[str]]) -> list[str]:
    """Merge parent linearizations with the C3 algorithm."""
    result = [class_id]
    pending = [list(s) for s in sequences if s]
    while pending:
        for seq in pending:
            head = seq[0]
            if not any(head in other[1:] for other in pending):
                break
        else:
            heads = ", ".join(s[0] for s in pending)
            msg = f"Inconsistent hierarchy for {class_id}: cannot order {heads}"
            raise ResolutionError(msg)
        result.append(head)
        pending = [s[1:] if s[0] == head else s for s in pending]
        pending = [s for s in pending if s]
    return result


def dedupe(sequence: list[str]) -> list[str]:
    """Drop repeated identifiers, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for item in sequence:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
