"""Logic for deep merging configuration dictionaries."""

from typing import Any

# List-valued keys where a user file extends the defaults instead of replacing them.
ADDITIVE_KEYS = {"skip_classes", "skip_inherits", "include_paths"}


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    - Mappings such as 'class_map' and 'force_inherits' are merged recursively.
    - Lists in 'update' replace 'base' lists, EXCEPT for the additive keys.
    """
    result = base.copy()
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif (
            key in ADDITIVE_KEYS
            and isinstance(value, list)
            and isinstance(result.get(key), list)
        ):
            # Additive merge, deduplicated, keeping first-seen order
            merged = list(result[key])
            for item in value:
                if item not in merged:
                    merged.append(item)
            result[key] = merged
        else:
            # Default: Replacement (scalars and other arrays)
            result[key] = value
    return result
