"""Chunk and manifest writing.

One chunk is written per (route, locale) and per (menu, locale). A chunk
holds only the subset of the locale tree addressed by the recorded keys,
nested exactly as in the source tree. A chunk that would be empty is not
written (and a stale copy is removed): absence means "nothing to merge".

Output is deterministic. JSON is serialized with sorted keys, chunks are
compact and the manifest is indented. Artifacts are written only when
their bytes change, and the manifest keeps its previous ``generated``
timestamp when nothing else in it changed, so regenerating an unchanged
project leaves every file byte-identical.

Writes go through an AssetSink: DirectorySink for the file system, or a
build tool's virtual output (see keyshaker.plugin).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from keyshaker.bundling.keypath import count_leaves, get_nested, set_nested
from keyshaker.bundling.manifest import Manifest
from keyshaker.bundling.types import KeyMap, LocaleTree
from keyshaker.constants import INDEX_CHUNK_NAME, MANIFEST_FILENAME

__all__ = [
    "AssetSink",
    "ChunkWriteResult",
    "ChunkWriter",
    "DirectorySink",
    "build_chunk",
    "chunk_name",
    "encode_chunk",
    "encode_manifest",
    "menu_chunk_name",
]

logger = logging.getLogger(__name__)

_BRACKETED = re.compile(r"\[([^\]]+)\]")


def chunk_name(route: str, locale: str) -> str:
    """File name of a route chunk.

    Example:
        >>> chunk_name("/", "en")
        'index.en.json'
        >>> chunk_name("/blog/[slug]/edit", "pt-BR")
        'blog-slug-edit.pt-BR.json'
    """
    name = INDEX_CHUNK_NAME if route == "/" else route.removeprefix("/").replace("/", "-")
    name = _BRACKETED.sub(r"\1", name)
    return f"{name}.{locale}.json"


def menu_chunk_name(menu_id: str, locale: str) -> str:
    """File name of a menu chunk."""
    return f"{menu_id}.{locale}.json"


def build_chunk(
    keys: KeyMap, tree: Mapping[str, Any], full_namespaces: Iterable[str] = ()
) -> LocaleTree:
    """Subset of tree addressed by keys.

    Keys missing from the tree are skipped. Namespaces listed in
    full_namespaces are copied whole instead of key by key. Empty
    namespaces are left out, so an empty result means "no chunk".

    Example:
        >>> build_chunk({"common": {"a.b", "missing.key"}},
        ...             {"common": {"a": {"b": "Hello", "c": "Bye"}}})
        {'common': {'a': {'b': 'Hello'}}}
    """
    whole = frozenset(full_namespaces)
    chunk: LocaleTree = {}
    for namespace in sorted(keys):
        source = tree.get(namespace)
        if not isinstance(source, Mapping):
            continue
        if namespace in whole:
            if source:
                chunk[namespace] = copy.deepcopy(dict(source))
            continue
        subset: dict[str, Any] = {}
        for key in sorted(keys[namespace]):
            value = get_nested(source, key)
            if value is not None:
                set_nested(subset, key, value)
        if subset:
            chunk[namespace] = subset
    return chunk


def encode_chunk(chunk: Mapping[str, Any]) -> bytes:
    """Compact, key-sorted UTF-8 JSON."""
    return json.dumps(chunk, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode()


def encode_manifest(document: Mapping[str, Any]) -> bytes:
    """Indented, key-sorted UTF-8 JSON with a trailing newline."""
    return (json.dumps(document, ensure_ascii=False, sort_keys=True, indent=2) + "\n").encode()


class AssetSink(Protocol):
    """Destination for generated artifacts, addressed by file name."""

    def read(self, name: str) -> bytes | None:
        """Previously written content, or None."""
        ...

    def write(self, name: str, content: bytes) -> bool:
        """Store content; return False if it was already identical."""
        ...

    def remove(self, name: str) -> bool:
        """Delete an artifact; return False if it did not exist."""
        ...


@dataclass(frozen=True, slots=True)
class DirectorySink:
    """AssetSink writing files into one directory.

    The directory is created on the first write.
    """

    directory: Path

    def read(self, name: str) -> bytes | None:
        try:
            return (self.directory / name).read_bytes()
        except FileNotFoundError:
            return None

    def write(self, name: str, content: bytes) -> bool:
        if self.read(name) == content:
            return False
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / name).write_bytes(content)
        return True

    def remove(self, name: str) -> bool:
        try:
            (self.directory / name).unlink()
        except FileNotFoundError:
            return False
        return True


@dataclass(frozen=True, slots=True)
class ChunkWriteResult:
    """What a write pass did.

    Attributes:
        written: Artifacts whose content changed
        unchanged: Artifacts already up to date
        removed: Stale chunks deleted because they became empty
        route_leaves: Route -> locale -> leaf count of its chunk
    """

    written: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    route_leaves: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    @property
    def artifacts(self) -> tuple[str, ...]:
        """Every artifact present after the pass, sorted."""
        return tuple(sorted((*self.written, *self.unchanged)))


@dataclass(slots=True)
class ChunkWriter:
    """Writes chunks and the manifest through an AssetSink.

    Attributes:
        sink: Output destination
        full_namespaces: Namespaces copied whole into route chunks
    """

    sink: AssetSink
    full_namespaces: frozenset[str] = frozenset()
    _written: list[str] = field(default_factory=list, init=False, repr=False)
    _unchanged: list[str] = field(default_factory=list, init=False, repr=False)
    _removed: list[str] = field(default_factory=list, init=False, repr=False)

    def _emit(self, name: str, content: bytes) -> None:
        if self.sink.write(name, content):
            self._written.append(name)
        else:
            self._unchanged.append(name)

    def _emit_chunk(self, name: str, chunk: LocaleTree) -> None:
        if chunk:
            self._emit(name, encode_chunk(chunk))
        elif self.sink.remove(name):
            self._removed.append(name)

    def write_chunks(
        self, manifest: Manifest, trees: Mapping[str, LocaleTree]
    ) -> ChunkWriteResult:
        """Write every route and menu chunk for every locale."""
        self._written, self._unchanged, self._removed = [], [], []
        route_leaves: dict[str, dict[str, int]] = {}

        for route in sorted(manifest.routes):
            entry = manifest.routes[route]
            counts = route_leaves.setdefault(route, {})
            for locale in sorted(trees):
                chunk = build_chunk(entry.keys, trees[locale], self.full_namespaces)
                counts[locale] = count_leaves(chunk)
                self._emit_chunk(chunk_name(route, locale), chunk)

        for menu_id in sorted(manifest.menus):
            menu = manifest.menus[menu_id]
            for locale in sorted(trees):
                chunk = build_chunk(menu.key_map(), trees[locale])
                self._emit_chunk(menu_chunk_name(menu_id, locale), chunk)

        logger.info(
            "Chunks: %d written, %d unchanged, %d removed",
            len(self._written),
            len(self._unchanged),
            len(self._removed),
        )
        return ChunkWriteResult(
            tuple(self._written), tuple(self._unchanged), tuple(self._removed), route_leaves
        )

    def stable_manifest(self, manifest: Manifest) -> Manifest:
        """Manifest carrying the previous timestamp if nothing else changed."""
        previous = self.sink.read(MANIFEST_FILENAME)
        if previous is None:
            return manifest
        try:
            old = json.loads(previous)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("Ignoring unreadable previous manifest: %s", e)
            return manifest
        if not isinstance(old, dict) or not isinstance(old.get("generated"), str):
            return manifest
        current = manifest.to_dict()
        if {**old, "generated": current["generated"]} == current:
            return manifest.with_generated(old["generated"])
        return manifest

    def write_manifest(self, manifest: Manifest) -> tuple[Manifest, bool]:
        """Write manifest.json.

        Returns:
            Tuple of (manifest as written, whether the file changed)
        """
        manifest = self.stable_manifest(manifest)
        changed = self.sink.write(MANIFEST_FILENAME, encode_manifest(manifest.to_dict()))
        return manifest, changed

    def write(
        self, manifest: Manifest, trees: Mapping[str, LocaleTree]
    ) -> tuple[Manifest, ChunkWriteResult]:
        """Write all chunks, then the manifest."""
        result = self.write_chunks(manifest, trees)
        manifest, changed = self.write_manifest(manifest)
        written = (*result.written, MANIFEST_FILENAME) if changed else result.written
        unchanged = result.unchanged if changed else (*result.unchanged, MANIFEST_FILENAME)
        return manifest, ChunkWriteResult(written, unchanged, result.removed, result.route_leaves)
