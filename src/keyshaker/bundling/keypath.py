"""Dot-path helpers over nested translation trees.

Keys address nodes inside a namespace tree by dot-separated segments
("buttons.submit"). These helpers read, write and count such nodes
without ever mutating their inputs.

Python 3.13+. Zero external dependencies.
"""

import copy
from collections.abc import Mapping
from typing import Any

__all__ = [
    "count_leaves",
    "deep_merge",
    "get_nested",
    "set_nested",
]


def get_nested(tree: Mapping[str, Any], key: str) -> Any | None:
    """Node addressed by key, or None when the path does not exist.

    A JSON null stored in the tree is indistinguishable from a missing
    node and is treated as missing.

    Example:
        >>> get_nested({"a": {"b": "Hello"}}, "a.b")
        'Hello'
        >>> get_nested({"a": "Hello"}, "a.b") is None
        True
    """
    current: Any = tree
    for segment in key.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
        if current is None:
            return None
    return current


def set_nested(target: dict[str, Any], key: str, value: Any) -> None:
    """Store value at key inside target, creating intermediate objects.

    Subtree values are deep-copied so the result never aliases the
    source tree.

    Example:
        >>> out = {}
        >>> set_nested(out, "a.b", "Hello")
        >>> out
        {'a': {'b': 'Hello'}}
    """
    *parents, leaf = key.split(".")
    current = target
    for segment in parents:
        node = current.get(segment)
        if not isinstance(node, dict):
            node = {}
            current[segment] = node
        current = node
    current[leaf] = copy.deepcopy(value) if isinstance(value, Mapping) else value


def count_leaves(tree: Mapping[str, Any]) -> int:
    """Number of non-object values in a nested tree.

    Example:
        >>> count_leaves({"ns": {"a": "x", "b": {"c": "y"}}})
        2
    """
    count = 0
    stack: list[Mapping[str, Any]] = [tree]
    while stack:
        node = stack.pop()
        for value in node.values():
            if isinstance(value, Mapping):
                stack.append(value)
            else:
                count += 1
    return count


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """New tree with overlay merged into base; overlay wins on leaf conflicts.

    Example:
        >>> deep_merge({"ns": {"a": "1"}}, {"ns": {"b": "2"}})
        {'ns': {'a': '1', 'b': '2'}}
    """
    result: dict[str, Any] = copy.deepcopy(dict(base))
    for name, value in overlay.items():
        existing = result.get(name)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[name] = deep_merge(existing, value)
        else:
            result[name] = copy.deepcopy(value)
    return result
