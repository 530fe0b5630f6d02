"""Graph algorithms for import analysis.

Provides cycle detection over the resolved import graph collected by the
dependency walker. Cycles are harmless for extraction (the walker's
visited set already handles them) but worth reporting to developers.

Python 3.13+.
"""

from collections.abc import Mapping, Set
from enum import Enum, auto

__all__ = ["detect_cycles"]


class _Visit(Enum):
    """DFS frame kind for iterative traversal."""

    ENTER = auto()
    EXIT = auto()


def detect_cycles(graph: Mapping[str, Set[str]]) -> list[list[str]]:
    """Detect import cycles using iterative DFS.

    Nodes are visited in sorted order so the reported cycles are stable for
    a fixed graph. Each cycle is reported once, rotated so that it starts
    at its smallest node, and closed by repeating that node.

    Args:
        graph: Mapping from file to the set of files it imports.

    Returns:
        List of cycles; empty if the graph is acyclic.

    Example:
        >>> detect_cycles({"a.tsx": {"b.tsx"}, "b.tsx": {"a.tsx"}})
        [['a.tsx', 'b.tsx', 'a.tsx']]
    """
    visited: set[str] = set()
    seen: set[tuple[str, ...]] = set()
    cycles: list[list[str]] = []

    for start in sorted(graph):
        if start in visited:
            continue
        path: list[str] = []
        on_path: set[str] = set()
        stack: list[tuple[str, _Visit]] = [(start, _Visit.ENTER)]

        while stack:
            node, kind = stack.pop()
            if kind is _Visit.EXIT:
                path.pop()
                on_path.discard(node)
                continue
            if node in visited:
                continue

            visited.add(node)
            on_path.add(node)
            path.append(node)
            stack.append((node, _Visit.EXIT))

            for neighbor in sorted(graph.get(node, ()), reverse=True):
                if neighbor in on_path:
                    members = path[path.index(neighbor):]
                    pivot = members.index(min(members))
                    canonical = (*members[pivot:], *members[:pivot])
                    if canonical not in seen:
                        seen.add(canonical)
                        cycles.append([*canonical, canonical[0]])
                elif neighbor not in visited:
                    stack.append((neighbor, _Visit.ENTER))

    return cycles
