"""Tests for bundling.loading: locale JSON files into trees."""

import json
import logging
from pathlib import Path

import pytest

from keyshaker.bundling.loading import load_locale_file, load_locales
from keyshaker.enums import LoadStatus


def _write(directory: Path, name: str, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadLocaleFile:
    """Single file loading."""

    def test_success(self, tmp_path: Path) -> None:
        """A JSON object loads as the locale tree."""
        path = _write(tmp_path, "en.json", json.dumps({"common": {"a": "Hello"}}))
        result, tree = load_locale_file(path)
        assert result.is_success
        assert result.locale == "en"
        assert result.known_locale
        assert tree == {"common": {"a": "Hello"}}

    def test_missing_file(self, tmp_path: Path) -> None:
        """An absent file is NOT_FOUND, not an error."""
        result, tree = load_locale_file(tmp_path / "fr.json")
        assert result.status is LoadStatus.NOT_FOUND
        assert not result.is_error
        assert tree is None

    def test_malformed_json(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Invalid JSON is an ERROR result with a warning."""
        path = _write(tmp_path, "de.json", "{not json")
        with caplog.at_level(logging.WARNING, logger="keyshaker.bundling.loading"):
            result, tree = load_locale_file(path)
        assert result.is_error
        assert isinstance(result.error, json.JSONDecodeError)
        assert tree is None
        assert "de.json" in caplog.text

    def test_non_object_root(self, tmp_path: Path) -> None:
        """A JSON array at the top level is rejected."""
        result, tree = load_locale_file(_write(tmp_path, "en.json", "[1, 2]"))
        assert result.is_error
        assert isinstance(result.error, ValueError)
        assert tree is None

    def test_unknown_locale_still_loads(self, tmp_path: Path) -> None:
        """A stem Babel does not know is loaded but flagged."""
        result, tree = load_locale_file(_write(tmp_path, "schema.json", "{}"))
        assert result.is_success
        assert not result.known_locale
        assert tree == {}

    def test_region_code(self, tmp_path: Path) -> None:
        """BCP-47 stems with a region are recognized."""
        result, _ = load_locale_file(_write(tmp_path, "pt-BR.json", "{}"))
        assert result.known_locale


class TestLoadLocales:
    """Directory loading."""

    def test_loads_every_json_file(self, tmp_path: Path) -> None:
        """Each *.json file becomes one locale; other files are ignored."""
        _write(tmp_path, "en.json", '{"ns": {"a": "A"}}')
        _write(tmp_path, "fr.json", '{"ns": {"a": "B"}}')
        _write(tmp_path, "README.md", "docs")
        summary = load_locales(tmp_path)
        assert summary.locales == ("en", "fr")
        assert summary.successful == 2
        assert summary.errors == 0

    def test_bad_file_is_skipped(self, tmp_path: Path) -> None:
        """One malformed file does not prevent the others from loading."""
        _write(tmp_path, "en.json", '{"ns": {}}')
        _write(tmp_path, "fr.json", "{")
        summary = load_locales(tmp_path)
        assert summary.locales == ("en",)
        assert summary.errors == 1
        assert summary.get_errors()[0].locale == "fr"

    def test_unknown_locales(self, tmp_path: Path) -> None:
        """unknown_locales() lists loaded stems Babel does not recognize."""
        _write(tmp_path, "en.json", "{}")
        _write(tmp_path, "schema.json", "{}")
        assert load_locales(tmp_path).unknown_locales() == ("schema",)

    def test_missing_directory(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A missing directory yields an empty summary and a warning."""
        with caplog.at_level(logging.WARNING, logger="keyshaker.bundling.loading"):
            summary = load_locales(tmp_path / "nope")
        assert summary.locales == ()
        assert summary.results == ()
        assert "messages directory" in caplog.text

    def test_repr(self, tmp_path: Path) -> None:
        """repr summarizes counts."""
        _write(tmp_path, "en.json", "{}")
        assert repr(load_locales(tmp_path)) == "LocaleLoadSummary(total=1, ok=1, errors=0)"
