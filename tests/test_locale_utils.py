"""Tests for locale_utils: locale code normalization and CLDR lookup."""

import pytest
from babel import Locale
from hypothesis import event, given
from hypothesis import strategies as st

from keyshaker.locale_utils import (
    clear_locale_cache,
    get_babel_locale,
    is_known_locale,
    normalize_locale,
)


class TestNormalizeLocale:
    """BCP-47 to POSIX conversion."""

    def test_bcp47_to_posix(self) -> None:
        assert normalize_locale("pt-BR") == "pt_BR"

    def test_simple_locale(self) -> None:
        assert normalize_locale("en") == "en"

    @given(st.from_regex(r"[a-z]{2,3}(-[A-Za-z0-9]{2,4}){0,2}", fullmatch=True))
    def test_no_hyphen_survives(self, code: str) -> None:
        """Normalized codes never contain hyphens and keep their length."""
        event(f"segments={code.count('-') + 1}")
        normalized = normalize_locale(code)
        assert "-" not in normalized
        assert len(normalized) == len(code)


class TestGetBabelLocale:
    """Cached Babel locale lookup."""

    def test_returns_locale(self) -> None:
        locale = get_babel_locale("pt-BR")
        assert isinstance(locale, Locale)
        assert locale.language == "pt"
        assert locale.territory == "BR"

    def test_cached(self) -> None:
        assert get_babel_locale("en") is get_babel_locale("en")

    def test_cache_clear(self) -> None:
        get_babel_locale("en")
        clear_locale_cache()
        assert get_babel_locale.cache_info().currsize == 0


class TestIsKnownLocale:
    """CLDR membership check for messages file stems."""

    @pytest.mark.parametrize("code", ["en", "fr", "pt-BR", "zh_Hans", "de-AT"])
    def test_known(self, code: str) -> None:
        assert is_known_locale(code)

    @pytest.mark.parametrize("code", ["", "schema", "zz", "123"])
    def test_unknown(self, code: str) -> None:
        assert not is_known_locale(code)
