"""Bundling: locale loading, menus, manifest and chunk I/O.

Python 3.13+.
"""

from .keypath import count_leaves, deep_merge, get_nested, set_nested
from .loading import LocaleLoadResult, LocaleLoadSummary, load_locale_file, load_locales
from .manifest import Manifest, ManifestBuilder, RouteEntry, format_timestamp
from .menus import (
    MenuAssignment,
    MenuEntry,
    MenuResolver,
    derive_menu_keys,
    export_block,
    match_route_pattern,
    route_for_entry,
)
from .reader import ChunkReader
from .writer import (
    AssetSink,
    ChunkWriteResult,
    ChunkWriter,
    DirectorySink,
    build_chunk,
    chunk_name,
    encode_chunk,
    encode_manifest,
    menu_chunk_name,
)

__all__ = [
    "AssetSink",
    "ChunkReader",
    "ChunkWriteResult",
    "ChunkWriter",
    "DirectorySink",
    "LocaleLoadResult",
    "LocaleLoadSummary",
    "Manifest",
    "ManifestBuilder",
    "MenuAssignment",
    "MenuEntry",
    "MenuResolver",
    "RouteEntry",
    "build_chunk",
    "chunk_name",
    "count_leaves",
    "deep_merge",
    "derive_menu_keys",
    "encode_chunk",
    "encode_manifest",
    "export_block",
    "format_timestamp",
    "get_nested",
    "load_locale_file",
    "load_locales",
    "match_route_pattern",
    "menu_chunk_name",
    "route_for_entry",
    "set_nested",
]
