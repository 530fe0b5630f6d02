"""Manifest model and builder.

The manifest is the single description of what was extracted: for every
route its namespaces, keys, page type and menu reference, for every menu
its namespace and key count, plus run statistics.

A route is recorded only when it has at least one key or a menu
reference. Page and layout entries of the same route are merged.

Serialized form (manifest.json):
    {
      "routes": {"/admin": {"namespaces": [...], "keys": {...},
                            "pageType": "admin", "extension": null,
                            "menuId": "menu-admin"}},
      "menus": {"menu-admin": {"namespace": "menu", "keyCount": 42}},
      "stats": {"totalRoutes": 1, "totalKeys": 3, "totalMenus": 1,
                "keysPerRoute": {"/admin": 3}, "pageTypes": {...}},
      "generated": "2026-01-01T00:00:00.000Z"
    }

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from keyshaker.bundling.menus import MenuAssignment, MenuEntry, MenuResolver, route_for_entry
from keyshaker.bundling.types import KeyMap
from keyshaker.config import ProjectLayout
from keyshaker.diagnostics.errors import KeyshakerError
from keyshaker.enums import PageType

__all__ = [
    "Manifest",
    "ManifestBuilder",
    "RouteEntry",
    "format_timestamp",
]

logger = logging.getLogger(__name__)


def format_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix.

    Example:
        >>> format_timestamp(datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC))
        '2026-01-02T03:04:05.000Z'
    """
    moment = datetime.now(UTC) if moment is None else moment.astimezone(UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class RouteEntry:
    """Extraction result for one route.

    Attributes:
        route: Route pattern (e.g. '/admin/users/[id]')
        page_type: Menu category of the route
        keys: Namespace -> keys reachable from the route's entry files
        menu_id: Menu bundle the route uses, if any
        extension: Extension directory for extension routes
    """

    route: str
    page_type: PageType
    keys: Mapping[str, frozenset[str]] = field(default_factory=dict)
    menu_id: str | None = None
    extension: str | None = None

    @property
    def namespaces(self) -> tuple[str, ...]:
        """Namespaces used by the route, sorted."""
        return tuple(sorted(self.keys))

    @property
    def key_count(self) -> int:
        """Total number of keys across namespaces."""
        return sum(len(keys) for keys in self.keys.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespaces": list(self.namespaces),
            "keys": {ns: sorted(self.keys[ns]) for ns in self.namespaces},
            "pageType": str(self.page_type),
            "extension": self.extension,
            "menuId": self.menu_id,
        }


@dataclass(frozen=True, slots=True)
class Manifest:
    """Immutable manifest of one generation run.

    Attributes:
        routes: Route -> entry, for recorded routes only
        menus: Menu id -> menu entry, for menus used by recorded routes
        page_types: Number of classified routes per page type
        generated: ISO-8601 generation timestamp
        total_keys: Key total reported in stats (defaults to the sum of
            route key counts)
    """

    routes: Mapping[str, RouteEntry] = field(default_factory=dict)
    menus: Mapping[str, MenuEntry] = field(default_factory=dict)
    page_types: Mapping[PageType, int] = field(default_factory=dict)
    generated: str = ""
    total_keys: int | None = None

    def __post_init__(self) -> None:
        if self.total_keys is None:
            total = sum(entry.key_count for entry in self.routes.values())
            object.__setattr__(self, "total_keys", total)

    def with_generated(self, generated: str) -> Manifest:
        """Copy of the manifest carrying another timestamp."""
        return dataclasses.replace(self, generated=generated)

    def stats(self) -> dict[str, Any]:
        return {
            "totalRoutes": len(self.routes),
            "totalKeys": self.total_keys,
            "totalMenus": len(self.menus),
            "keysPerRoute": {route: self.routes[route].key_count for route in sorted(self.routes)},
            "pageTypes": {str(pt): self.page_types.get(pt, 0) for pt in PageType},
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form with every collection sorted."""
        return {
            "routes": {route: self.routes[route].to_dict() for route in sorted(self.routes)},
            "menus": {
                menu_id: {
                    "namespace": self.menus[menu_id].namespace,
                    "keyCount": self.menus[menu_id].key_count,
                }
                for menu_id in sorted(self.menus)
            },
            "stats": self.stats(),
            "generated": self.generated,
        }


@dataclass(slots=True)
class ManifestBuilder:
    """Accumulates per-entry key maps and builds the Manifest.

    Routes are classified when first seen; later entries of the same
    route only add keys.

    Example:
        >>> layout = ProjectLayout.from_root("/srv/frontend")
        >>> builder = ManifestBuilder(layout)
        >>> builder.add_entry(layout.app_dir / "admin" / "page.tsx", {"common": {"title"}})  # doctest: +SKIP
        '/admin'
    """

    layout: ProjectLayout
    resolver: MenuResolver | None = None
    _keys: dict[str, dict[str, set[str]]] = field(default_factory=dict, init=False, repr=False)
    _assignments: dict[str, MenuAssignment] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = MenuResolver(self.layout)

    def __len__(self) -> int:
        return len(self._keys)

    def add_entry(self, entry: Path, keys: KeyMap) -> str | None:
        """Record the keys reachable from one entry file.

        Returns:
            The entry's route, or None if the file is outside the route tree
        """
        route = route_for_entry(entry, self.layout.app_dir)
        if route is None:
            logger.debug("Entry %s is outside %s", entry, self.layout.app_dir)
            return None
        if route not in self._assignments:
            assert self.resolver is not None
            self._assignments[route] = self.resolver.classify(route, entry)
        self.add_route_keys(route, keys)
        return route

    def add_route_keys(self, route: str, keys: KeyMap) -> None:
        """Union keys into a route already known to the builder.

        Raises:
            KeyshakerError: If the route was never registered through add_entry()
        """
        if route not in self._assignments:
            msg = f"Route {route!r} has no entry file; register it with add_entry() first"
            raise KeyshakerError(msg)
        bucket = self._keys.setdefault(route, {})
        for namespace, names in keys.items():
            bucket.setdefault(namespace, set()).update(names)

    def build(self, generated: str | None = None) -> Manifest:
        """Build the manifest from everything added so far.

        Args:
            generated: Timestamp to record; the current time when None
        """
        assert self.resolver is not None
        routes: dict[str, RouteEntry] = {}
        menus: dict[str, MenuEntry] = {}
        page_types: dict[PageType, int] = dict.fromkeys(PageType, 0)

        for route in sorted(self._keys):
            assignment = self._assignments[route]
            page_types[assignment.page_type] += 1
            keys = {ns: frozenset(names) for ns, names in self._keys[route].items() if names}
            entry = RouteEntry(
                route=route,
                page_type=assignment.page_type,
                keys=keys,
                menu_id=assignment.menu_id,
                extension=assignment.extension,
            )
            if entry.key_count == 0 and entry.menu_id is None:
                logger.debug("Route %s has no translations", route)
                continue
            routes[route] = entry
            if assignment.menu_id is not None and assignment.menu_id not in menus:
                menu = self.resolver.menu_entry(assignment)
                if menu is not None:
                    menus[menu.menu_id] = menu

        manifest = Manifest(
            routes=routes,
            menus=menus,
            page_types=page_types,
            generated=generated if generated is not None else format_timestamp(),
        )
        logger.info(
            "Manifest: %d route(s), %d menu(s), %d key(s)",
            len(manifest.routes),
            len(manifest.menus),
            manifest.total_keys,
        )
        return manifest
