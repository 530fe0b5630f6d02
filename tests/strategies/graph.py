"""Hypothesis strategies for import graph generation.

Provides reusable strategies for import graphs over file names, as used
by ``keyshaker.analysis.graph`` and the dependency walker tests.

Event-Emitting Strategies (HypoFuzz-Optimized):
    - import_graphs: Emits ``strategy=graph_{topology}``
    - cycle_paths: Emits ``strategy=cycle_{shape}``

Python 3.13+.
"""

from __future__ import annotations

from hypothesis import event
from hypothesis import strategies as st
from hypothesis.strategies import composite

__all__ = [
    "cycle_paths",
    "import_graphs",
    "module_names",
]

# Small alphabet keeps generation fast; the suffix mimics source files.
module_names: st.SearchStrategy[str] = st.text(
    alphabet=st.sampled_from("abcdefgh"),
    min_size=1,
    max_size=4,
).map(lambda stem: f"{stem}.tsx")


@composite
def import_graphs(
    draw: st.DrawFn,
    *,
    max_nodes: int = 8,
    allow_cycles: bool | None = None,
) -> dict[str, set[str]]:
    """Generate import graphs as adjacency lists.

    Args:
        draw: Hypothesis draw function.
        max_nodes: Maximum number of files.
        allow_cycles: ``True`` forces at least one cycle, ``False``
            guarantees acyclic, ``None`` draws randomly.

    Events emitted:
        - ``strategy=graph_{topology}``: Graph topology category.
    """
    nodes = draw(st.lists(module_names, min_size=1, max_size=max_nodes, unique=True))
    n = len(nodes)
    force_cycle = draw(st.booleans()) if allow_cycles is None else allow_cycles

    acyclic = ["empty", "chain", "barrel", "dag"]
    topology = draw(st.sampled_from([*acyclic, "ring"] if force_cycle else acyclic))
    graph: dict[str, set[str]] = {node: set() for node in nodes}

    match topology:
        case "empty":
            event("strategy=graph_empty")
        case "chain":
            event("strategy=graph_chain")
            for i in range(n - 1):
                graph[nodes[i]].add(nodes[i + 1])
        case "ring":
            event("strategy=graph_ring")
            for i in range(n):
                graph[nodes[i]].add(nodes[(i + 1) % n])
        case "barrel":
            # index file re-exporting every sibling
            event("strategy=graph_barrel")
            for spoke in nodes[1:]:
                graph[nodes[0]].add(spoke)
        case "dag":
            event("strategy=graph_dag")
            if n >= 2:
                for _ in range(draw(st.integers(min_value=0, max_value=n * 2))):
                    src = draw(st.integers(min_value=0, max_value=n - 2))
                    dst = draw(st.integers(min_value=src + 1, max_value=n - 1))
                    graph[nodes[src]].add(nodes[dst])

    if force_cycle and topology != "ring":
        if n == 1:
            graph[nodes[0]].add(nodes[0])
        else:
            i = draw(st.integers(min_value=0, max_value=n - 2))
            j = draw(st.integers(min_value=i + 1, max_value=n - 1))
            graph[nodes[j]].add(nodes[i])
            for k in range(i, j):
                graph[nodes[k]].add(nodes[k + 1])

    return graph


@composite
def cycle_paths(
    draw: st.DrawFn,
    *,
    max_length: int = 6,
) -> list[str]:
    """Generate cycle paths in ``[A, B, C, A]`` closed format.

    Events emitted:
        - ``strategy=cycle_{shape}``: Cycle shape category.
    """
    shape = draw(st.sampled_from(["self_import", "pair", "ring"]))

    match shape:
        case "self_import":
            event("strategy=cycle_self_import")
            node = draw(module_names)
            return [node, node]
        case "pair":
            event("strategy=cycle_pair")
            pair = draw(st.lists(module_names, min_size=2, max_size=2, unique=True))
            return [pair[0], pair[1], pair[0]]
        case _:
            event("strategy=cycle_ring")
            nodes = draw(st.lists(module_names, min_size=3, max_size=max_length, unique=True))
            return [*nodes, nodes[0]]
