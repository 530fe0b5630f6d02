"""Hypothesis strategies for keyshaker property-based testing.

Strategies are organized by domain:

- graph: Import graphs and cycle paths
- sources: Accessor names, namespaces, key paths, locale trees

Usage:
    from tests.strategies import import_graphs, key_paths
"""

from .graph import cycle_paths, import_graphs, module_names
from .sources import (
    accessor_names,
    key_paths,
    key_segments,
    locale_trees,
    namespace_key_maps,
    namespaces,
)

__all__ = [
    "accessor_names",
    "cycle_paths",
    "import_graphs",
    "key_paths",
    "key_segments",
    "locale_trees",
    "module_names",
    "namespace_key_maps",
    "namespaces",
]
