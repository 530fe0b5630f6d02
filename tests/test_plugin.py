"""Tests for plugin: incremental build-tool integration."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from keyshaker.diagnostics import ConfigurationError
from keyshaker.plugin import (
    PLUGIN_NAME,
    CompilationSink,
    IncrementalPlugin,
    PluginOptions,
    PluginState,
    collect_modules,
    emit_artifacts,
)
from tests.helpers.project import ProjectTree

# ==============================================================================
# FAKE HOST
# ==============================================================================


@dataclass
class FakeHook:
    callbacks: list[tuple[str, Callable[..., Awaitable[None]]]] = field(default_factory=list)

    def tap(self, name: str, callback: Callable[..., Awaitable[None]]) -> None:
        self.callbacks.append((name, callback))

    def call(self, *args: Any) -> None:
        for _, callback in self.callbacks:
            asyncio.run(callback(*args))


@dataclass
class FakeHooks:
    finish_modules: FakeHook = field(default_factory=FakeHook)
    emit: FakeHook = field(default_factory=FakeHook)


@dataclass
class FakeCompiler:
    context: str
    hooks: FakeHooks = field(default_factory=FakeHooks)


@dataclass
class FakeCompilation:
    incremental: bool = False
    assets: dict[str, bytes] = field(default_factory=dict)

    def emit_asset(self, name: str, content: bytes) -> None:
        self.assets[name] = content

    def json(self, name: str) -> Any:
        return json.loads(self.assets[name])


@dataclass
class FakeModule:
    resource: str | None


def _build(compiler: FakeCompiler, compilation: FakeCompilation, resources: list[str | None]) -> None:
    compiler.hooks.finish_modules.call(compilation, [FakeModule(r) for r in resources])
    compiler.hooks.emit.call(compilation)


@pytest.fixture
def app(project: ProjectTree) -> ProjectTree:
    project.messages(
        "en",
        {
            "home": {"title": "Home", "unused": "Unused"},
            "blog": {"title": "Blog", "extra": "Extra"},
            "common": {"ok": "OK", "cancel": "Cancel"},
        },
    )
    project.messages("fr", {"home": {"title": "Accueil"}})
    project.page("", 'const t = useTranslations("home");\nt("title");')
    project.page("blog", 'const t = useTranslations("blog");\nt("title");')
    return project


# ==============================================================================
# TESTS
# ==============================================================================


class TestPluginOptions:
    """Option validation."""

    def test_defaults(self) -> None:
        options = PluginOptions()
        assert options.output_dir == "i18n"
        assert options.always_include_namespaces == ("common", "menu")

    @pytest.mark.parametrize(
        "kwargs", [{"messages_dir": ""}, {"output_dir": "/"}, {"default_locale": ""}]
    )
    def test_invalid(self, kwargs: dict[str, str]) -> None:
        with pytest.raises(ConfigurationError):
            PluginOptions(**kwargs)


class TestApply:
    """Hook registration and a full build."""

    def test_taps_both_hooks(self, app: ProjectTree) -> None:
        compiler = FakeCompiler(str(app.root))
        IncrementalPlugin().apply(compiler)
        assert [name for name, _ in compiler.hooks.finish_modules.callbacks] == [PLUGIN_NAME]
        assert [name for name, _ in compiler.hooks.emit.callbacks] == [PLUGIN_NAME]

    def test_full_build_emits_assets(self, app: ProjectTree) -> None:
        """Entry modules become route chunks under the output prefix."""
        compiler = FakeCompiler(str(app.root))
        plugin = IncrementalPlugin(PluginOptions(always_include_namespaces=()))
        plugin.apply(compiler)
        compilation = FakeCompilation()
        _build(
            compiler,
            compilation,
            [str(app.app / "page.tsx"), str(app.app / "blog" / "page.tsx"), None],
        )

        assert compilation.json("i18n/index.en.json") == {"home": {"title": "Home"}}
        assert compilation.json("i18n/index.fr.json") == {"home": {"title": "Accueil"}}
        assert compilation.json("i18n/blog.en.json") == {"blog": {"title": "Blog"}}
        assert "i18n/blog.fr.json" not in compilation.assets
        manifest = compilation.json("i18n/manifest.json")
        assert sorted(manifest["routes"]) == ["/", "/blog"]
        assert plugin.last_manifest is not None

    def test_custom_messages_dir(self, app: ProjectTree) -> None:
        """apply() reads locale trees from options.messages_dir."""
        app.write("locales/en.json", '{"home": {"title": "Custom"}}')
        compiler = FakeCompiler(str(app.root))
        IncrementalPlugin(
            PluginOptions(messages_dir="locales", always_include_namespaces=())
        ).apply(compiler)
        compilation = FakeCompilation()
        _build(compiler, compilation, [str(app.app / "page.tsx")])
        assert compilation.json("i18n/index.en.json") == {"home": {"title": "Custom"}}
        assert "i18n/index.fr.json" not in compilation.assets

    def test_apply_is_the_only_public_method(self) -> None:
        """Build tools see a single apply() entry point."""
        public = [
            name for name in dir(IncrementalPlugin)
            if not name.startswith("_") and callable(getattr(IncrementalPlugin, name))
        ]
        assert public == ["apply"]

    def test_non_entry_modules_ignored(self, app: ProjectTree) -> None:
        """Without entry modules nothing is emitted."""
        component = app.write("components/button.tsx", 'const t = useTranslations("x");')
        compiler = FakeCompiler(str(app.root))
        plugin = IncrementalPlugin()
        plugin.apply(compiler)
        compilation = FakeCompilation()
        _build(compiler, compilation, [str(component)])
        assert compilation.assets == {}
        assert plugin.last_manifest is None

    def test_total_keys_from_default_locale(self, app: ProjectTree) -> None:
        """stats.totalKeys counts default-locale chunk leaves."""
        compiler = FakeCompiler(str(app.root))
        IncrementalPlugin(PluginOptions(always_include_namespaces=("common",))).apply(compiler)
        compilation = FakeCompilation()
        app.page(
            "",
            'const t = useTranslations("home");\n'
            'const c = useTranslations("common");\n'
            't("title");\nc("ok");',
        )
        _build(compiler, compilation, [str(app.app / "page.tsx")])
        # home.title plus the whole common namespace
        assert compilation.json("i18n/manifest.json")["stats"]["totalKeys"] == 3


class TestIncrementalRebuilds:
    """State carried across compilations."""

    def test_incremental_keeps_untouched_routes(self, app: ProjectTree) -> None:
        """An incremental rebuild with one changed module keeps other routes."""
        compiler = FakeCompiler(str(app.root))
        plugin = IncrementalPlugin()
        plugin.apply(compiler)
        _build(compiler, FakeCompilation(), [str(app.app / "page.tsx"), str(app.app / "blog" / "page.tsx")])

        app.page("blog", 'const t = useTranslations("blog");\nt("extra");')
        second = FakeCompilation(incremental=True)
        _build(compiler, second, [str(app.app / "blog" / "page.tsx")])

        manifest = second.json("i18n/manifest.json")
        assert sorted(manifest["routes"]) == ["/", "/blog"]
        assert manifest["routes"]["/blog"]["keys"] == {"blog": ["extra"]}

    def test_full_rebuild_drops_routes(self, app: ProjectTree) -> None:
        """A non-incremental compilation starts from scratch."""
        compiler = FakeCompiler(str(app.root))
        plugin = IncrementalPlugin()
        plugin.apply(compiler)
        _build(compiler, FakeCompilation(), [str(app.app / "page.tsx"), str(app.app / "blog" / "page.tsx")])

        second = FakeCompilation(incremental=False)
        _build(compiler, second, [str(app.app / "blog" / "page.tsx")])
        assert sorted(second.json("i18n/manifest.json")["routes"]) == ["/blog"]

    def test_unchanged_rebuild_keeps_timestamp(self, app: ProjectTree) -> None:
        """Identical content across builds keeps the manifest bytes."""
        compiler = FakeCompiler(str(app.root))
        IncrementalPlugin().apply(compiler)
        first = FakeCompilation()
        _build(compiler, first, [str(app.app / "page.tsx")])
        second = FakeCompilation(incremental=True)
        _build(compiler, second, [str(app.app / "page.tsx")])
        assert first.assets["i18n/manifest.json"] == second.assets["i18n/manifest.json"]


class TestPureSteps:
    """collect_modules, emit_artifacts and CompilationSink used directly."""

    def test_entry_deduplicated_per_compilation(self, app: ProjectTree) -> None:
        state = PluginState()
        state.begin(object(), incremental=False)
        entry = str(app.app / "page.tsx")
        assert collect_modules(state, [entry, entry], app.layout) == 1
        assert state.route_keys == {"/": {"home": {"title"}}}

    def test_begin_same_compilation_is_noop(self) -> None:
        state = PluginState()
        compilation = object()
        state.begin(compilation, incremental=False)
        state.processed_files.add(Path("/x"))
        state.begin(compilation, incremental=False)
        assert state.processed_files

    def test_reset(self, app: ProjectTree) -> None:
        state = PluginState()
        state.begin(object(), incremental=False)
        collect_modules(state, [str(app.app / "page.tsx")], app.layout)
        state.emitted["x"] = b"1"
        state.reset()
        assert state.route_keys == {}
        assert state.emitted == {}
        assert state.compilation is None

    def test_emit_without_routes(self, app: ProjectTree) -> None:
        assert emit_artifacts(PluginState(), app.layout, PluginOptions(), FakeCompilation()) is None

    def test_emit_uses_given_timestamp(self, app: ProjectTree) -> None:
        state = PluginState()
        state.begin(object(), incremental=False)
        collect_modules(state, [str(app.app / "page.tsx")], app.layout)
        compilation = FakeCompilation()
        manifest = emit_artifacts(
            state, app.layout, PluginOptions(), compilation, now=datetime(2026, 1, 1, tzinfo=UTC)
        )
        assert manifest is not None
        assert manifest.generated == "2026-01-01T00:00:00.000Z"

    def test_sink_prefixes_names(self) -> None:
        compilation = FakeCompilation()
        emitted: dict[str, bytes] = {}
        sink = CompilationSink(compilation, "/static/i18n/", emitted)
        assert sink.write("a.json", b"1")
        assert not sink.write("a.json", b"1")
        assert compilation.assets == {"static/i18n/a.json": b"1"}
        assert sink.read("a.json") == b"1"
        assert sink.remove("a.json")
        assert sink.read("a.json") is None
