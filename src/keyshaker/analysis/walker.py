"""Dependency walking over the implicit import graph.

Starting from an entry file, the walker unions the keys extracted from
every file reachable through local imports.

Termination is guaranteed twice over:
- A per-walk visited set keyed by absolute path (handles cycles)
- A maximum depth (entry = 0) bounding pathological chains

The walk is breadth-first, so each file is reached at its minimal depth
and the result for a fixed snapshot does not depend on import order.
Per-file extraction results live in a WalkArena shared by every walk of
a run; each file is read and analyzed at most once per arena.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from keyshaker.analysis.extractor import ExtractionResult, KeyExtractor
from keyshaker.analysis.graph import detect_cycles
from keyshaker.analysis.resolver import ImportResolver
from keyshaker.config import ExtractionSettings

__all__ = [
    "DependencyWalker",
    "FileRecord",
    "WalkArena",
    "merge_key_maps",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Analysis result for one file.

    Attributes:
        path: Absolute path of the file
        extraction: Keys, bindings and imports of the file itself
        dependencies: Resolved local imports, in import order
        readable: False if the file could not be read or decoded
    """

    path: Path
    extraction: ExtractionResult
    dependencies: tuple[Path, ...] = ()
    readable: bool = True


@dataclass(slots=True)
class WalkArena:
    """Per-run store of analyzed files keyed by absolute path.

    The arena is the only mutable state of the walker. Create one per run
    (or per full rebuild) and drop it afterwards.
    """

    records: dict[Path, FileRecord] = field(default_factory=dict)

    def __contains__(self, path: object) -> bool:
        return path in self.records

    def __len__(self) -> int:
        return len(self.records)

    def import_graph(self) -> dict[str, set[str]]:
        """Resolved import edges between analyzed files."""
        return {
            str(path): {str(dep) for dep in record.dependencies}
            for path, record in self.records.items()
        }

    def import_cycles(self) -> list[list[str]]:
        """Import cycles among analyzed files."""
        return detect_cycles(self.import_graph())


def merge_key_maps(
    target: dict[str, set[str]], source: dict[str, set[str]] | dict[str, frozenset[str]]
) -> dict[str, set[str]]:
    """Union source into target per namespace and return target.

    Example:
        >>> merge_key_maps({"a": {"x"}}, {"a": {"y"}, "b": set()})
        {'a': {'x', 'y'}, 'b': set()}
    """
    for namespace, keys in source.items():
        target.setdefault(namespace, set()).update(keys)
    return target


@dataclass(slots=True)
class DependencyWalker:
    """Recursive key collection across an entry file's import graph.

    Example:
        >>> walker = DependencyWalker(project_root=Path("/srv/frontend"))
        >>> walker.walk(Path("/srv/frontend/app/[locale]/page.tsx"))  # doctest: +SKIP
        {'common': {'title'}}
    """

    project_root: Path
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    extractor: KeyExtractor | None = None
    resolver: ImportResolver | None = None
    arena: WalkArena = field(default_factory=WalkArena)

    def __post_init__(self) -> None:
        if self.extractor is None:
            self.extractor = KeyExtractor(settings=self.settings)
        if self.resolver is None:
            self.resolver = ImportResolver(self.project_root, self.settings)

    def analyze(self, path: Path) -> FileRecord:
        """Extract one file and resolve its imports, using the arena."""
        path = path.absolute()
        record = self.arena.records.get(path)
        if record is not None:
            return record

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            record = FileRecord(path, ExtractionResult(), readable=False)
            self.arena.records[path] = record
            return record

        assert self.extractor is not None
        assert self.resolver is not None
        extraction = self.extractor.extract(text)
        deps: list[Path] = []
        for specifier in extraction.import_specifiers:
            resolved = self.resolver.resolve(specifier, path)
            if resolved is not None and resolved not in deps:
                deps.append(resolved)
        record = FileRecord(path, extraction, tuple(deps))
        self.arena.records[path] = record
        return record

    def reachable_files(self, entry: Path) -> list[Path]:
        """Files whose keys count for entry, in breadth-first order."""
        entry = entry.absolute()
        if self.settings.is_excluded_path(entry, self.project_root):
            return []
        visited: set[Path] = {entry}
        order: list[Path] = []
        queue: deque[tuple[Path, int]] = deque([(entry, 0)])

        while queue:
            path, depth = queue.popleft()
            order.append(path)
            if depth >= self.settings.max_depth:
                continue
            for dep in self.analyze(path).dependencies:
                if dep in visited or self.settings.is_excluded_path(dep, self.project_root):
                    continue
                visited.add(dep)
                queue.append((dep, depth + 1))
        return order

    def walk(self, entry: Path) -> dict[str, set[str]]:
        """Namespace -> keys used by entry and everything it imports."""
        result: dict[str, set[str]] = {}
        for path in self.reachable_files(entry):
            merge_key_maps(result, self.analyze(path).extraction.keys)
        return result

    def extract_page_keys(self, entry: Path) -> dict[str, list[str]]:
        """walk() with each key set sorted, ready for JSON."""
        return {ns: sorted(keys) for ns, keys in sorted(self.walk(entry).items())}
