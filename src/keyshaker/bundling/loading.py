"""Locale file loading.

Reads ``<messages_dir>/<locale>.json`` files into namespace-keyed trees.
Problems with one file never stop the run: a malformed or unreadable
file is skipped with a warning and recorded in the load summary.

Locale codes are taken from file stems and checked against CLDR through
Babel. An unknown code (a stray ``schema.json`` for instance) is still
loaded, but flagged so the operator can notice it.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from keyshaker.enums import LoadStatus
from keyshaker.locale_utils import is_known_locale

if TYPE_CHECKING:
    from collections.abc import Mapping

    from keyshaker.bundling.types import LocaleCode, LocaleTree

__all__ = [
    "LocaleLoadResult",
    "LocaleLoadSummary",
    "load_locale_file",
    "load_locales",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocaleLoadResult:
    """Outcome of loading one locale file.

    Attributes:
        locale: Locale code taken from the file stem
        status: Load status (success, not_found, error)
        source_path: Path of the file
        error: Exception if status is ERROR, None otherwise
        known_locale: False if Babel does not recognize the locale code
    """

    locale: LocaleCode
    status: LoadStatus
    source_path: str | None = None
    error: Exception | None = None
    known_locale: bool = True

    @property
    def is_success(self) -> bool:
        """Check if the locale loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the locale failed to load."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LocaleLoadSummary:
    """Immutable aggregate of locale loading.

    Attributes:
        results: One result per file attempted, sorted by locale
        trees: Locale -> tree for every successfully loaded locale
    """

    results: tuple[LocaleLoadResult, ...] = ()
    trees: Mapping[LocaleCode, LocaleTree] = field(default_factory=dict)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LocaleLoadSummary(total={len(self.results)}, "
            f"ok={self.successful}, errors={self.errors})"
        )

    @property
    def locales(self) -> tuple[LocaleCode, ...]:
        """Loaded locale codes, sorted."""
        return tuple(sorted(self.trees))

    @property
    def successful(self) -> int:
        """Number of locales loaded."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def errors(self) -> int:
        """Number of locale files skipped because of errors."""
        return sum(1 for r in self.results if r.is_error)

    def get_errors(self) -> tuple[LocaleLoadResult, ...]:
        """Results of the skipped files."""
        return tuple(r for r in self.results if r.is_error)

    def unknown_locales(self) -> tuple[LocaleCode, ...]:
        """Loaded locale codes Babel does not recognize."""
        return tuple(r.locale for r in self.results if r.is_success and not r.known_locale)


def load_locale_file(path: Path) -> tuple[LocaleLoadResult, LocaleTree | None]:
    """Load one locale file.

    Returns:
        Tuple of (result, tree); tree is None unless the load succeeded
    """
    locale = path.stem
    source = str(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        return LocaleLoadResult(locale, LoadStatus.NOT_FOUND, source, e), None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Failed to load %s: %s", path.name, e)
        return LocaleLoadResult(locale, LoadStatus.ERROR, source, e), None

    if not isinstance(data, dict):
        error = ValueError(f"top-level JSON value must be an object, got {type(data).__name__}")
        logger.warning("Failed to load %s: %s", path.name, error)
        return LocaleLoadResult(locale, LoadStatus.ERROR, source, error), None

    known = is_known_locale(locale)
    if not known:
        logger.warning("Locale file %s does not name a known locale; loading it anyway", path.name)
    return LocaleLoadResult(locale, LoadStatus.SUCCESS, source, known_locale=known), data


def load_locales(messages_dir: Path) -> LocaleLoadSummary:
    """Load every ``*.json`` file in messages_dir.

    A missing or unreadable directory yields an empty summary and a
    warning; chunks are then simply not written.
    """
    try:
        files = sorted(p for p in messages_dir.iterdir() if p.suffix == ".json" and p.is_file())
    except OSError as e:
        logger.warning("Failed to read messages directory %s: %s", messages_dir, e)
        return LocaleLoadSummary()

    results: list[LocaleLoadResult] = []
    trees: dict[LocaleCode, LocaleTree] = {}
    for path in files:
        result, tree = load_locale_file(path)
        results.append(result)
        if tree is not None:
            trees[result.locale] = tree

    logger.info("Loaded %d locale(s) from %s", len(trees), messages_dir)
    return LocaleLoadSummary(tuple(results), trees)
