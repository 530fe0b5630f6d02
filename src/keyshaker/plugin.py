"""Incremental build-tool integration.

IncrementalPlugin performs the extraction inside a host build tool. It
listens to two lifecycle phases:

- finish_modules: every compiled module is inspected; route entry files
  are walked (deduplicated by absolute path per compilation) and their
  keys merged into the accumulated route -> keys map
- emit: locale files are loaded, the manifest is built and the chunks
  are emitted into the host build's virtual output

The host is described by small protocols (BuildCompiler, BuildCompilation,
BuildModule) rather than any concrete bundler API. All accumulated data
lives in a PluginState the caller may own; the plugin object itself is
only the adapter between the hooks and the pure collect/emit functions.

Example:
    >>> plugin = IncrementalPlugin(PluginOptions(debug=True))
    >>> plugin.apply(compiler)  # doctest: +SKIP

Python 3.13+.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from keyshaker.analysis.walker import DependencyWalker, WalkArena
from keyshaker.bundling.loading import load_locales
from keyshaker.bundling.manifest import Manifest, ManifestBuilder, format_timestamp
from keyshaker.bundling.menus import route_for_entry
from keyshaker.bundling.types import NamespaceKeys
from keyshaker.bundling.writer import ChunkWriter
from keyshaker.config import ProjectLayout
from keyshaker.diagnostics.errors import ConfigurationError

__all__ = [
    "BuildCompilation",
    "BuildCompiler",
    "BuildModule",
    "CompilationSink",
    "IncrementalPlugin",
    "PluginOptions",
    "PluginState",
    "collect_modules",
    "emit_artifacts",
]

logger = logging.getLogger(__name__)

PLUGIN_NAME = "KeyshakerPlugin"


@dataclass(frozen=True, slots=True)
class PluginOptions:
    """Plugin configuration.

    Attributes:
        messages_dir: Locale JSON directory, relative to the build context
        output_dir: Asset path prefix for emitted chunks and manifest
        debug: Log per-route key counts and emit summaries
        default_locale: Locale whose chunks feed stats.totalKeys
        always_include_namespaces: Namespaces copied whole into route chunks
    """

    messages_dir: str = "messages"
    output_dir: str = "i18n"
    debug: bool = False
    default_locale: str = "en"
    always_include_namespaces: tuple[str, ...] = ("common", "menu")

    def __post_init__(self) -> None:
        """Validate options.

        Raises:
            ConfigurationError: If a directory or the default locale is empty
        """
        if not self.messages_dir:
            msg = "messages_dir must not be empty"
            raise ConfigurationError(msg)
        if not self.output_dir.strip("/"):
            msg = "output_dir must name a directory"
            raise ConfigurationError(msg)
        if not self.default_locale:
            msg = "default_locale must not be empty"
            raise ConfigurationError(msg)
        object.__setattr__(
            self, "always_include_namespaces", tuple(self.always_include_namespaces)
        )


# ==============================================================================
# HOST PROTOCOLS
# ==============================================================================


class BuildModule(Protocol):
    """A compiled module; resource is its source path, if any."""

    resource: str | None


class BuildCompilation(Protocol):
    """One compilation. incremental is False for full rebuilds."""

    incremental: bool

    def emit_asset(self, name: str, content: bytes) -> None:
        """Add or replace an asset in the build output."""
        ...


class BuildHook(Protocol):
    def tap(self, name: str, callback: Callable[..., Awaitable[None]]) -> None:
        """Register an async callback."""
        ...


class BuildHooks(Protocol):
    finish_modules: BuildHook
    emit: BuildHook


class BuildCompiler(Protocol):
    """Host compiler; context is the project root."""

    context: str
    hooks: BuildHooks


# ==============================================================================
# STATE AND PURE STEPS
# ==============================================================================


@dataclass(slots=True)
class PluginState:
    """Accumulated plugin data across compilations.

    Attributes:
        route_keys: Route -> namespace -> keys
        route_entries: Route -> first entry file seen (for classification)
        processed_files: Entry files walked in the current compilation
        touched_routes: Routes refreshed in the current compilation
        arena: Analyzed files of the current compilation
        emitted: Asset name -> last emitted content
        compilation: The compilation currently being tracked
    """

    route_keys: dict[str, NamespaceKeys] = field(default_factory=dict)
    route_entries: dict[str, Path] = field(default_factory=dict)
    processed_files: set[Path] = field(default_factory=set)
    touched_routes: set[str] = field(default_factory=set)
    arena: WalkArena = field(default_factory=WalkArena)
    emitted: dict[str, bytes] = field(default_factory=dict)
    compilation: object | None = None

    def begin(self, compilation: object, *, incremental: bool) -> None:
        """Start tracking a compilation; full rebuilds drop accumulated routes."""
        if self.compilation is compilation:
            return
        self.compilation = compilation
        self.processed_files.clear()
        self.touched_routes.clear()
        self.arena = WalkArena()
        if not incremental:
            self.route_keys.clear()
            self.route_entries.clear()

    def reset(self) -> None:
        """Forget everything, including emitted assets."""
        self.route_keys.clear()
        self.route_entries.clear()
        self.processed_files.clear()
        self.touched_routes.clear()
        self.arena = WalkArena()
        self.emitted.clear()
        self.compilation = None


def collect_modules(
    state: PluginState,
    resources: Iterable[str | None],
    layout: ProjectLayout,
    *,
    debug: bool = False,
) -> int:
    """Walk the entry files among resources and merge their keys.

    Returns:
        Number of entry files walked
    """
    settings = layout.settings
    walker = DependencyWalker(layout.project_root, settings, arena=state.arena)
    walked = 0
    for resource in resources:
        if not resource:
            continue
        path = Path(resource).absolute()
        if not settings.is_entry_file(path) or settings.is_excluded_path(path, layout.project_root):
            continue
        if path in state.processed_files:
            continue
        state.processed_files.add(path)

        route = route_for_entry(path, layout.app_dir)
        if route is None:
            continue
        keys = walker.walk(path)
        walked += 1
        if route not in state.touched_routes:
            state.touched_routes.add(route)
            state.route_keys[route] = {}
            state.route_entries.setdefault(route, path)
        bucket = state.route_keys[route]
        for namespace, names in keys.items():
            bucket.setdefault(namespace, set()).update(names)

        if debug:
            logger.debug(
                "%s: %d keys from %d namespaces",
                route,
                sum(len(k) for k in keys.values()),
                len(keys),
            )
    return walked


@dataclass(slots=True)
class CompilationSink:
    """AssetSink emitting into a compilation under a path prefix.

    Reads answer from the previously emitted content kept in the state,
    so unchanged assets can be recognized across rebuilds.
    """

    compilation: BuildCompilation
    prefix: str
    emitted: dict[str, bytes]

    def _name(self, name: str) -> str:
        return f"{self.prefix.strip('/')}/{name}"

    def read(self, name: str) -> bytes | None:
        return self.emitted.get(self._name(name))

    def write(self, name: str, content: bytes) -> bool:
        asset = self._name(name)
        changed = self.emitted.get(asset) != content
        self.compilation.emit_asset(asset, content)
        self.emitted[asset] = content
        return changed

    def remove(self, name: str) -> bool:
        return self.emitted.pop(self._name(name), None) is not None


def emit_artifacts(
    state: PluginState,
    layout: ProjectLayout,
    options: PluginOptions,
    compilation: BuildCompilation,
    *,
    now: datetime | None = None,
) -> Manifest | None:
    """Build the manifest from state and emit every artifact.

    Returns:
        The emitted manifest, or None when no route has translations
    """
    if not state.route_keys:
        if options.debug:
            logger.debug("No routes with translations found")
        return None

    locales = load_locales(layout.messages_dir)
    builder = ManifestBuilder(layout)
    for route in sorted(state.route_keys):
        builder.add_entry(state.route_entries[route], state.route_keys[route])
    manifest = builder.build(format_timestamp(now))

    sink = CompilationSink(compilation, options.output_dir, state.emitted)
    writer = ChunkWriter(sink, frozenset(options.always_include_namespaces))
    chunks = writer.write_chunks(manifest, locales.trees)
    total = sum(
        counts.get(options.default_locale, 0) for counts in chunks.route_leaves.values()
    )
    manifest, _ = writer.write_manifest(dataclasses.replace(manifest, total_keys=total))

    if options.debug:
        logger.debug("Generated %d route chunks", len(manifest.routes))
        logger.debug("Total keys extracted: %d", manifest.total_keys)
    return manifest


# ==============================================================================
# ADAPTER
# ==============================================================================


class IncrementalPlugin:
    """Adapter attaching the extraction to a host build's lifecycle.

    Args:
        options: Plugin options (defaults when None)
        state: Accumulated state; pass one in to own or inspect it
    """

    __slots__ = ("last_manifest", "options", "state")

    def __init__(self, options: PluginOptions | None = None, state: PluginState | None = None) -> None:
        self.options = options if options is not None else PluginOptions()
        self.state = state if state is not None else PluginState()
        self.last_manifest: Manifest | None = None

    def _layout_for(self, context: str | Path) -> ProjectLayout:
        """Project layout for a build context directory."""
        layout = ProjectLayout.from_root(context)
        return dataclasses.replace(
            layout, messages_dir=layout.project_root / self.options.messages_dir
        )

    def apply(self, compiler: BuildCompiler) -> None:
        """Register the finish_modules and emit callbacks on compiler."""
        layout = self._layout_for(compiler.context)

        async def on_finish_modules(compilation: BuildCompilation, modules: Iterable[Any]) -> None:
            self.state.begin(compilation, incremental=getattr(compilation, "incremental", False))
            collect_modules(
                self.state,
                (getattr(module, "resource", None) for module in modules),
                layout,
                debug=self.options.debug,
            )

        async def on_emit(compilation: BuildCompilation) -> None:
            self.last_manifest = emit_artifacts(self.state, layout, self.options, compilation)

        compiler.hooks.finish_modules.tap(PLUGIN_NAME, on_finish_modules)
        compiler.hooks.emit.tap(PLUGIN_NAME, on_emit)
