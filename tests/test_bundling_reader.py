"""Tests for bundling.reader: request path to merged route messages."""

import json
from pathlib import Path

import pytest

from keyshaker.bundling.reader import ChunkReader
from keyshaker.diagnostics import ManifestError


def _output(directory: Path, files: dict[str, object]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, data in files.items():
        text = data if isinstance(data, str) else json.dumps(data)
        (directory / name).write_text(text, encoding="utf-8")
    return directory


_MANIFEST = {
    "routes": {
        "/": {"menuId": "menu-user"},
        "/admin": {"menuId": "menu-admin"},
        "/blog": {"menuId": "menu-user"},
    },
    "menus": {},
    "generated": "2026-01-01T00:00:00.000Z",
}


@pytest.fixture
def output(tmp_path: Path) -> Path:
    return _output(
        tmp_path / "i18n",
        {
            "manifest.json": _MANIFEST,
            "index.en.json": {"home": {"hero": "Welcome"}},
            "admin.en.json": {"admin": {"title": "Admin"}},
            "blog.en.json": {"blog": {"title": "Blog"}},
            "menu-admin.en.json": {"menu": {"users": {"title": "Users"}}},
            "menu-user.en.json": {"menu": {"home": {"title": "Home"}}},
        },
    )


class TestRouteForPathname:
    """Locale prefixes and trailing slashes."""

    def test_locale_prefix_stripped(self, output: Path) -> None:
        """Locales are discovered from chunk names."""
        reader = ChunkReader(output)
        assert reader.route_for_pathname("/en/admin/users/") == "/admin/users"
        assert reader.known_locales() == {"en"}

    def test_no_prefix(self, output: Path) -> None:
        assert ChunkReader(output).route_for_pathname("/admin") == "/admin"

    def test_root(self, output: Path) -> None:
        assert ChunkReader(output).route_for_pathname("/en") == "/"


class TestLoadRouteMessages:
    """Chunk lookup with fallbacks and menu merge."""

    def test_exact_route_with_menu(self, output: Path) -> None:
        """The route chunk is merged with its menu chunk."""
        messages = ChunkReader(output).load_route_messages("/en/admin", "en")
        assert messages == {"admin": {"title": "Admin"}, "menu": {"users": {"title": "Users"}}}

    def test_parent_route_fallback(self, output: Path) -> None:
        """A route without its own chunk uses the nearest recorded parent."""
        messages = ChunkReader(output).load_route_messages("/en/blog/some-post", "en")
        assert messages == {"blog": {"title": "Blog"}, "menu": {"home": {"title": "Home"}}}

    def test_root_fallback(self, output: Path) -> None:
        """Unknown routes fall back to the root chunk."""
        messages = ChunkReader(output).load_route_messages("/en/unknown/page", "en")
        assert messages is not None
        assert messages["home"] == {"hero": "Welcome"}

    def test_no_chunk_for_locale(self, output: Path) -> None:
        """None when no chunk applies for the locale."""
        assert ChunkReader(output).load_route_messages("/fr/admin", "fr") is None

    def test_no_manifest(self, tmp_path: Path) -> None:
        """Without a manifest, exact chunks still load without a menu."""
        directory = _output(tmp_path / "i18n", {"admin.en.json": {"a": {"b": "c"}}})
        reader = ChunkReader(directory)
        assert reader.manifest() is None
        assert reader.load_route_messages("/admin", "en") == {"a": {"b": "c"}}

    def test_chunks_cached_until_cleared(self, output: Path) -> None:
        """Chunks are read once per reader until clear_cache()."""
        reader = ChunkReader(output)
        assert reader.load_chunk("admin.en.json") == {"admin": {"title": "Admin"}}
        (output / "admin.en.json").write_text('{"admin": {"title": "New"}}', encoding="utf-8")
        assert reader.load_chunk("admin.en.json") == {"admin": {"title": "Admin"}}
        reader.clear_cache()
        assert reader.load_chunk("admin.en.json") == {"admin": {"title": "New"}}

    def test_unreadable_chunk_is_absent(self, output: Path) -> None:
        (output / "broken.en.json").write_text("{", encoding="utf-8")
        assert ChunkReader(output).load_chunk("broken.en.json") is None


class TestManifestErrors:
    """Invalid manifests are errors, not silent fallbacks."""

    def test_invalid_json(self, tmp_path: Path) -> None:
        directory = _output(tmp_path / "i18n", {"manifest.json": "{nope"})
        with pytest.raises(ManifestError):
            ChunkReader(directory).manifest()

    def test_missing_routes(self, tmp_path: Path) -> None:
        directory = _output(tmp_path / "i18n", {"manifest.json": {"menus": {}}})
        with pytest.raises(ManifestError, match="routes"):
            ChunkReader(directory).load_route_messages("/", "en")
