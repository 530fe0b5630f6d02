"""Source tree scanning.

Enumerates route entry files (page/layout) and every source file under a
route tree. Directories are walked depth-first in sorted order, so the
output is deterministic for a fixed file-system snapshot.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from keyshaker.config import ExtractionSettings

__all__ = ["ScanResult", "SourceScanner"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Files found under one root.

    Attributes:
        entries: Route entry files, in walk order
        sources: Every source file (entries included), in walk order
    """

    entries: tuple[Path, ...] = ()
    sources: tuple[Path, ...] = ()


@dataclass(frozen=True, slots=True)
class SourceScanner:
    """Depth-first scanner for route trees.

    Example:
        >>> scanner = SourceScanner()
        >>> result = scanner.scan(Path("app/[locale]"))
        >>> [p.name for p in result.entries]  # doctest: +SKIP
        ['page.tsx', 'layout.tsx', ...]
    """

    settings: ExtractionSettings = field(default_factory=ExtractionSettings)

    def scan(self, root: Path) -> ScanResult:
        """Walk root once, collecting entry files and source files.

        A missing or unreadable root yields an empty result; unreadable
        subdirectories are skipped.
        """
        entries: list[Path] = []
        sources: list[Path] = []
        if not root.is_dir():
            logger.warning("Route directory does not exist: %s", root)
            return ScanResult()

        stack: list[Path] = [root]
        while stack:
            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    children = sorted(it, key=lambda e: e.name)
            except OSError as e:
                logger.warning("Skipping unreadable directory %s: %s", directory, e)
                continue

            subdirs: list[Path] = []
            for child in children:
                path = Path(child.path)
                if child.is_dir(follow_symlinks=False):
                    if child.name not in self.settings.pruned_dirs:
                        subdirs.append(path)
                elif child.is_file() and self.settings.is_source_file(path):
                    sources.append(path)
                    if self.settings.is_entry_file(path):
                        entries.append(path)
            # Reverse so the first sorted subdirectory is popped first
            stack.extend(reversed(subdirs))

        logger.debug("Scanned %s: %d entries, %d sources", root, len(entries), len(sources))
        return ScanResult(entries=tuple(entries), sources=tuple(sources))

    def find_entry_files(self, root: Path) -> list[Path]:
        """Route entry files under root."""
        return list(self.scan(root).entries)

    def find_source_files(self, root: Path) -> list[Path]:
        """Every source file under root, for validation."""
        return list(self.scan(root).sources)
