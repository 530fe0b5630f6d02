"""Type aliases for the bundling domain.

Provides semantic type aliases used throughout keyshaker and by user code
when annotating manifests, chunks and key maps.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping, Set
from typing import Any

__all__ = [
    "Key",
    "KeyMap",
    "LocaleCode",
    "LocaleTree",
    "MenuId",
    "Namespace",
    "NamespaceKeys",
    "Route",
]

type Namespace = str
"""Translation domain (e.g., 'common', 'dashboard')."""

type Key = str
"""Dot-delimited path inside a namespace (e.g., 'buttons.submit')."""

type LocaleCode = str
"""Locale code taken from a messages file stem (e.g., 'en', 'pt-BR')."""

type Route = str
"""Route pattern with dynamic segments kept in brackets (e.g., '/blog/[slug]')."""

type MenuId = str
"""Identifier of a menu bundle (e.g., 'menu-admin', 'ext_admin_staking')."""

type LocaleTree = dict[str, Any]
"""Parsed locale JSON: namespace -> nested key tree."""

type KeyMap = Mapping[Namespace, Set[Key]]
"""Read-only namespace -> keys view accepted by bundling functions."""

type NamespaceKeys = dict[Namespace, set[Key]]
"""Mutable namespace -> keys map produced by extraction."""
