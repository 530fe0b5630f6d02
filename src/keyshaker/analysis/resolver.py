"""Import specifier resolution.

Maps a relative or aliased module specifier to a concrete file. Alias
prefixes are rewritten against the project root first; remaining
relative specifiers resolve against the importing file's directory.

Resolution order for a base path P:
    1. P + ext for each configured extension
    2. P/index + ext for each configured extension
    3. P itself, when it is already a source file with a known extension

A miss returns None, which the walker treats as "do not follow this
edge". Most misses are external packages or non-source assets.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from keyshaker.config import ExtractionSettings

__all__ = ["ImportResolver"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportResolver:
    """Resolver with a per-instance lookup cache.

    One resolver is meant to live for one run; the cache assumes the file
    system does not change while it is in use.

    Attributes:
        project_root: Directory that alias prefixes resolve against
        settings: Extensions and alias map
    """

    project_root: Path
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    _cache: dict[tuple[str, str], Path | None] = field(default_factory=dict, init=False, repr=False)

    def base_path(self, specifier: str, from_file: Path) -> Path:
        """Path a specifier points at, before extension probing."""
        for prefix, target in self.settings.aliases.items():
            if specifier.startswith(prefix):
                rest = specifier[len(prefix):]
                return Path(os.path.normpath(self.project_root / target / rest))
        if specifier in (".", "..") or specifier.startswith(("./", "../")):
            return Path(os.path.normpath(from_file.parent / specifier))
        return Path(os.path.normpath(self.project_root / specifier))

    def resolve(self, specifier: str, from_file: Path) -> Path | None:
        """Resolve a specifier imported by from_file.

        Args:
            specifier: Module specifier as written in the import
            from_file: Absolute path of the importing file

        Returns:
            Absolute path of the first matching file, or None
        """
        cache_key = (specifier, str(from_file.parent))
        if cache_key in self._cache:
            return self._cache[cache_key]

        base = self.base_path(specifier, from_file)
        resolved = self._probe(base)
        if resolved is None:
            logger.debug("Unresolved import %r from %s", specifier, from_file)
        self._cache[cache_key] = resolved
        return resolved

    def _probe(self, base: Path) -> Path | None:
        extensions = self.settings.extensions
        for ext in extensions:
            candidate = base.with_name(base.name + ext)
            if candidate.is_file():
                return candidate
        for ext in extensions:
            candidate = base / f"index{ext}"
            if candidate.is_file():
                return candidate
        if base.suffix in extensions and base.is_file():
            return base
        return None

    def clear_cache(self) -> None:
        """Forget cached lookups (after the file system changed)."""
        self._cache.clear()
