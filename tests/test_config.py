"""Tests for config: settings validation and project layout."""

from pathlib import Path

import pytest

from keyshaker.config import ExtractionSettings, MenuRules, ProjectLayout
from keyshaker.diagnostics import ConfigurationError


class TestExtractionSettings:
    """Walk and source settings."""

    def test_defaults(self) -> None:
        settings = ExtractionSettings()
        assert settings.max_depth == 10
        assert settings.extensions[0] == ".tsx"
        assert dict(settings.aliases) == {"@/": ""}

    def test_aliases_frozen(self) -> None:
        """The alias map cannot be mutated after construction."""
        settings = ExtractionSettings(aliases={"~/": "src"})
        with pytest.raises(TypeError):
            settings.aliases["x/"] = "y"  # type: ignore[index]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_depth": -1},
            {"extensions": ()},
            {"extensions": ("tsx",)},
            {"aliases": {"": "src"}},
            {"aliases": {"./": "src"}},
        ],
    )
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            ExtractionSettings(**kwargs)

    def test_entry_file(self) -> None:
        settings = ExtractionSettings()
        assert settings.is_entry_file(Path("app/page.tsx"))
        assert settings.is_entry_file(Path("app/layout.js"))
        assert not settings.is_entry_file(Path("app/loading.tsx"))
        assert not settings.is_entry_file(Path("app/page.css"))

    def test_excluded_path(self) -> None:
        """The i18n runtime and pruned directories are excluded."""
        settings = ExtractionSettings()
        assert settings.is_excluded_path(Path("/p/i18n/routing.ts"))
        assert settings.is_excluded_path(Path("/p/node_modules/x/index.js"))
        assert not settings.is_excluded_path(Path("/p/components/x.tsx"))

    def test_excluded_path_relative_to_root(self) -> None:
        """Segments above the root are ignored."""
        settings = ExtractionSettings()
        path = Path("/home/i18n/project/components/x.tsx")
        assert settings.is_excluded_path(path)
        assert not settings.is_excluded_path(path, Path("/home/i18n/project"))


class TestMenuRules:
    """Menu rule table validation."""

    def test_equal_menu_ids_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must differ"):
            MenuRules(admin_menu_id="menu", user_menu_id="menu")

    def test_empty_menu_id_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            MenuRules(admin_menu_id="")

    def test_relative_excluded_path_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            MenuRules(excluded_paths=("admin/x",))


class TestProjectLayout:
    """Paths derived from a project root."""

    def test_from_root(self, tmp_path: Path) -> None:
        layout = ProjectLayout.from_root(tmp_path)
        assert layout.app_dir == tmp_path / "app" / "[locale]"
        assert layout.messages_dir == tmp_path / "messages"
        assert layout.output_dir == tmp_path / "public" / "i18n"
        assert layout.global_menu_file == tmp_path / "config" / "menu.ts"
        assert layout.extension_root == tmp_path / "app" / "[locale]" / "(ext)"

    def test_relative_output_dir(self, tmp_path: Path) -> None:
        layout = ProjectLayout.from_root(tmp_path, output_dir="dist/i18n")
        assert layout.output_dir == tmp_path / "dist" / "i18n"

    def test_absolute_output_dir(self, tmp_path: Path) -> None:
        out = tmp_path / "elsewhere"
        assert ProjectLayout.from_root(tmp_path / "p", output_dir=out).output_dir == out

    @pytest.mark.parametrize("output", [".", "messages", "app/[locale]"])
    def test_output_must_not_overwrite_inputs(self, tmp_path: Path, output: str) -> None:
        with pytest.raises(ConfigurationError):
            ProjectLayout.from_root(tmp_path, output_dir=output)
