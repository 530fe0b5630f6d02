"""Generation pipeline.

Drives one run over a project: scan -> validate -> load locales -> walk
-> build manifest -> write artifacts. The driver is async only so that
hosts with an event loop can await it; steps run strictly in sequence
and share no state outside the caller-owned RunContext.

Example:
    >>> import asyncio
    >>> layout = ProjectLayout.from_root("/srv/frontend")
    >>> result = asyncio.run(generate(layout))  # doctest: +SKIP
    >>> result.exit_code  # doctest: +SKIP
    0

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from keyshaker.analysis.scanner import ScanResult, SourceScanner
from keyshaker.analysis.walker import DependencyWalker, WalkArena
from keyshaker.bundling.loading import LocaleLoadSummary, load_locales
from keyshaker.bundling.manifest import Manifest, ManifestBuilder, format_timestamp
from keyshaker.bundling.writer import AssetSink, ChunkWriter, ChunkWriteResult, DirectorySink
from keyshaker.config import ProjectLayout
from keyshaker.diagnostics.codes import Issue
from keyshaker.diagnostics.validation import ValidationReport
from keyshaker.validation.usage import UsageValidator

__all__ = [
    "GenerationResult",
    "RunContext",
    "collect_routes",
    "generate",
    "validate_sources",
]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunContext:
    """Mutable state of one run, owned by the caller.

    Attributes:
        layout: Project layout being processed
        arena: Analyzed files, shared by every walk of the run
        issues: Usage issues collected so far
    """

    layout: ProjectLayout
    arena: WalkArena = field(default_factory=WalkArena)
    issues: list[Issue] = field(default_factory=list)

    def report(self) -> ValidationReport:
        """Issues collected so far as an immutable report."""
        return ValidationReport.from_issues(self.issues)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one run.

    Attributes:
        report: Usage issues of every scanned source file
        manifest: Manifest as written (with its effective timestamp)
        locales: Locale loading outcome
        writes: Artifacts written, unchanged and removed
        cycles: Import cycles among analyzed files
        scan: Files found under the route tree
    """

    report: ValidationReport
    manifest: Manifest
    locales: LocaleLoadSummary
    writes: ChunkWriteResult
    cycles: tuple[tuple[str, ...], ...] = ()
    scan: ScanResult = field(default_factory=ScanResult)

    @property
    def exit_code(self) -> int:
        """1 if any error-severity issue was recorded, else 0."""
        return 1 if self.report.has_errors else 0


def validate_sources(sources: list[Path] | tuple[Path, ...], validator: UsageValidator) -> list[Issue]:
    """Run the validator over every file and return all issues."""
    issues: list[Issue] = []
    for path in sources:
        issues.extend(validator.validate_file(path))
    return issues


def collect_routes(
    entries: list[Path] | tuple[Path, ...], walker: DependencyWalker, builder: ManifestBuilder
) -> None:
    """Walk every entry file and add its keys to the builder."""
    for entry in entries:
        keys = walker.walk(entry)
        route = builder.add_entry(entry, keys)
        logger.debug(
            "Processed %s -> %s: %d key(s)", entry, route, sum(len(k) for k in keys.values())
        )


async def generate(
    layout: ProjectLayout,
    *,
    now: datetime | None = None,
    sink: AssetSink | None = None,
    context: RunContext | None = None,
) -> GenerationResult:
    """Run the whole pipeline over one project.

    Args:
        layout: Project layout
        now: Timestamp recorded in the manifest (defaults to the current time)
        sink: Output destination (defaults to layout.output_dir on disk)
        context: Run state to use; a fresh one when None

    Returns:
        GenerationResult; unexpected exceptions propagate
    """
    ctx = context if context is not None else RunContext(layout)
    settings = layout.settings

    scan = SourceScanner(settings).scan(layout.app_dir)
    logger.info("Found %d entry file(s), %d source file(s)", len(scan.entries), len(scan.sources))

    ctx.issues.extend(validate_sources(scan.sources, UsageValidator(settings=settings)))
    report = ctx.report()
    if report.issues:
        logger.info(
            "Validation: %d error(s), %d warning(s)", report.error_count, report.warning_count
        )

    locales = load_locales(layout.messages_dir)

    walker = DependencyWalker(layout.project_root, settings, arena=ctx.arena)
    builder = ManifestBuilder(layout)
    collect_routes(scan.entries, walker, builder)

    cycles = tuple(tuple(cycle) for cycle in ctx.arena.import_cycles())
    for cycle in cycles:
        logger.debug("Import cycle: %s", " -> ".join(cycle))

    manifest = builder.build(format_timestamp(now))
    writer = ChunkWriter(sink if sink is not None else DirectorySink(layout.output_dir))
    manifest, writes = writer.write(manifest, locales.trees)
    logger.info(
        "Generated %d route(s) and %d menu(s) into %s",
        len(manifest.routes),
        len(manifest.menus),
        layout.output_dir,
    )

    return GenerationResult(
        report=report,
        manifest=manifest,
        locales=locales,
        writes=writes,
        cycles=cycles,
        scan=scan,
    )
