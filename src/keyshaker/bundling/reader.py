"""Reading generated chunks back for a request path.

ChunkReader is the consumer side of the output contract. Given a
request pathname and a locale it finds the most specific route chunk,
falling back to parent routes listed in the manifest and then to "/",
and deep-merges the chunk of the route's menu on top.

None means "no chunk applies": the caller is expected to fall back to
the full locale tree.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from keyshaker.bundling.keypath import deep_merge
from keyshaker.bundling.writer import chunk_name, menu_chunk_name
from keyshaker.constants import MANIFEST_FILENAME
from keyshaker.diagnostics.errors import ManifestError

__all__ = ["ChunkReader"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChunkReader:
    """Reader over one output directory with per-instance caches.

    Attributes:
        directory: Directory holding manifest.json and the chunks
        locales: Locale codes recognized as a leading path segment. When
            empty, they are discovered from the chunk file names.
    """

    directory: Path
    locales: frozenset[str] = frozenset()
    _manifest: dict[str, Any] | None = field(default=None, init=False, repr=False)
    _manifest_loaded: bool = field(default=False, init=False, repr=False)
    _chunks: dict[str, dict[str, Any] | None] = field(default_factory=dict, init=False, repr=False)

    def manifest(self) -> dict[str, Any] | None:
        """Parsed manifest.json, or None if the directory has none.

        Raises:
            ManifestError: If manifest.json is not a valid manifest
        """
        if not self._manifest_loaded:
            path = self.directory / MANIFEST_FILENAME
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                data = None
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                msg = f"Cannot read {path}: {e}"
                raise ManifestError(msg) from e
            if data is not None and not (
                isinstance(data, dict) and isinstance(data.get("routes"), dict)
            ):
                msg = f"{path} has no 'routes' object"
                raise ManifestError(msg)
            self._manifest = data
            self._manifest_loaded = True
        return self._manifest

    def known_locales(self) -> frozenset[str]:
        """Locales recognized in request paths."""
        if self.locales:
            return self.locales
        found: set[str] = set()
        try:
            for path in self.directory.glob("*.json"):
                parts = path.name.split(".")
                if len(parts) >= 3:
                    found.add(parts[-2])
        except OSError as e:
            logger.debug("Cannot list %s: %s", self.directory, e)
        self.locales = frozenset(found)
        return self.locales

    def route_for_pathname(self, pathname: str) -> str:
        """Route pattern for a request path with any locale prefix removed.

        Example:
            >>> ChunkReader(Path("."), frozenset({"en"})).route_for_pathname("/en/admin/users/")
            '/admin/users'
        """
        parts = [part for part in pathname.split("/") if part]
        if parts and parts[0] in self.known_locales():
            parts = parts[1:]
        return "/" + "/".join(parts)

    def load_chunk(self, name: str) -> dict[str, Any] | None:
        """One chunk by file name, or None if absent or unreadable."""
        if name not in self._chunks:
            path = self.directory / name
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                data = None
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable chunk %s: %s", path, e)
                data = None
            self._chunks[name] = data if isinstance(data, dict) else None
        return self._chunks[name]

    def load_route_messages(self, pathname: str, locale: str) -> dict[str, Any] | None:
        """Route chunk merged with its menu chunk, or None.

        Raises:
            ManifestError: If manifest.json exists but is invalid
        """
        route = self.route_for_pathname(pathname)
        routes: dict[str, Any] = (self.manifest() or {}).get("routes", {})
        messages = self.load_chunk(chunk_name(route, locale))
        menu_id: str | None = None

        if messages is not None:
            menu_id = routes.get(route, {}).get("menuId")
        else:
            parts = [part for part in route.split("/") if part]
            while parts:
                parent = "/" + "/".join(parts)
                if parent in routes:
                    messages = self.load_chunk(chunk_name(parent, locale))
                    menu_id = routes[parent].get("menuId")
                    if messages is not None:
                        break
                parts.pop()
            if messages is None:
                messages = self.load_chunk(chunk_name("/", locale))
                menu_id = routes.get("/", {}).get("menuId")

        if messages is None:
            return None
        if menu_id:
            menu = self.load_chunk(menu_chunk_name(menu_id, locale))
            if menu is not None:
                return deep_merge(messages, menu)
        return dict(messages)

    def clear_cache(self) -> None:
        """Forget the cached manifest and chunks."""
        self._manifest = None
        self._manifest_loaded = False
        self._chunks.clear()
