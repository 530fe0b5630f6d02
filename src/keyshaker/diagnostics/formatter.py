"""Issue report formatting service.

Centralizes validator output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath

from .validation import ValidationReport

__all__ = [
    "IssueFormatter",
    "OutputFormat",
]

_RULE_WIDTH = 60


class OutputFormat(StrEnum):
    """Output format options for issue reports."""

    TEXT = "text"  # Grouped per-file blocks (default)
    SIMPLE = "simple"  # One issue per line
    JSON = "json"  # JSON document for tooling integration


@dataclass(frozen=True, slots=True)
class IssueFormatter:
    """Issue report formatting service.

    Attributes:
        output_format: Output style (text, simple, json)
        relative_to: Strip this directory from file paths in text output

    Example:
        >>> formatter = IssueFormatter()
        >>> print(formatter.format(ValidationReport.empty()))
        No i18n issues found.
    """

    output_format: OutputFormat = OutputFormat.TEXT
    relative_to: str | None = None

    def format(self, report: ValidationReport) -> str:
        """Format a whole report.

        Args:
            report: Issues of one run

        Returns:
            Formatted report string
        """
        match self.output_format:
            case OutputFormat.TEXT:
                return self._format_text(report)
            case OutputFormat.SIMPLE:
                return "\n".join(issue.format() for issue in report.issues)
            case OutputFormat.JSON:
                return self._format_json(report)

    def summary(self, report: ValidationReport) -> str:
        """One-line error/warning count."""
        return f"{report.error_count} error(s), {report.warning_count} warning(s)"

    def _display_path(self, file: str) -> str:
        if self.relative_to is None:
            return file
        try:
            return PurePath(file).relative_to(self.relative_to).as_posix()
        except ValueError:
            return file

    def _format_text(self, report: ValidationReport) -> str:
        if not report.issues:
            return "No i18n issues found."

        lines = [
            "=" * _RULE_WIDTH,
            f"  i18n VALIDATION ISSUES ({len(report)} total)",
            "=" * _RULE_WIDTH,
        ]
        for file, issues in report.by_file().items():
            lines.append("")
            lines.append(f"  {self._display_path(file)}")
            for issue in issues:
                icon = "X" if issue.is_error else "!"
                lines.append(f"    [{icon}] Line {issue.line}: {issue.message}")
        lines.append("")
        lines.append(f"  Summary: {self.summary(report)}")
        return "\n".join(lines)

    def _format_json(self, report: ValidationReport) -> str:
        payload = {
            "errors": report.error_count,
            "warnings": report.warning_count,
            "issues": [
                {**issue.to_dict(), "file": self._display_path(issue.file)}
                for issue in report.issues
            ],
        }
        return json.dumps(payload, indent=2)
