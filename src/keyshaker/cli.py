"""Command-line entry point.

Runs the generation pipeline over a project and prints the usage report.
No argument is required: the project root defaults to the current
directory and every other path follows the fixed project layout.

Exit codes:
    0  Success with no error-severity issue
    1  At least one error-severity issue was recorded

Unexpected exceptions are not caught; they indicate a bug in the tool
and propagate with their traceback.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from keyshaker.config import ProjectLayout
from keyshaker.diagnostics.formatter import IssueFormatter, OutputFormat
from keyshaker.pipeline import generate

__all__ = ["main"]

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="keyshaker",
        description="Extract per-route translation keys and write minimal locale chunks.",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Project root holding app/, messages/ and config/ (default: current directory)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory, relative to the project root (default: public/i18n)",
    )
    parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Issue report format (default: text)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log per-file details",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Generate manifest and chunks; return the process exit code."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    layout = ProjectLayout.from_root(args.project_root, output_dir=args.output_dir)
    result = asyncio.run(generate(layout))

    formatter = IssueFormatter(OutputFormat(args.format), relative_to=str(layout.project_root))
    print(formatter.format(result.report))

    stats = result.manifest.stats()
    logger.info(
        "Routes: %d, menus: %d, page keys: %d, output: %s",
        stats["totalRoutes"],
        stats["totalMenus"],
        stats["totalKeys"],
        layout.output_dir,
    )
    if result.report.has_errors:
        logger.error("i18n validation: %s", formatter.summary(result.report))
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
