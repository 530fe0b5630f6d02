"""Aggregated validation report.

Collects the Issues of one run into an immutable value. The report is
built by the caller from the tuples returned per file, so no issue list
lives at module level.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from keyshaker.diagnostics.codes import Issue
from keyshaker.enums import IssueType, Severity

__all__ = ["ValidationReport"]


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Immutable collection of issues from one validation pass.

    Example:
        >>> report = ValidationReport.empty()
        >>> report.has_errors
        False
        >>> report = ValidationReport.from_issues([
        ...     Issue(IssueType.MISSING_NAMESPACE, "a.tsx", 1, "no namespace"),
        ... ])
        >>> report.error_count
        1
    """

    issues: tuple[Issue, ...] = ()

    @classmethod
    def empty(cls) -> ValidationReport:
        """Report without issues."""
        return cls()

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> ValidationReport:
        """Build a report, ordering issues by file then line."""
        return cls(tuple(sorted(issues, key=lambda i: (i.file, i.line, i.type))))

    def merge(self, other: ValidationReport) -> ValidationReport:
        """Return a report holding the issues of both reports."""
        return ValidationReport.from_issues((*self.issues, *other.issues))

    @property
    def errors(self) -> tuple[Issue, ...]:
        """Error-severity issues."""
        return tuple(i for i in self.issues if i.severity is Severity.ERROR)

    @property
    def warnings(self) -> tuple[Issue, ...]:
        """Warning-severity issues."""
        return tuple(i for i in self.issues if i.severity is Severity.WARNING)

    @property
    def error_count(self) -> int:
        """Number of error-severity issues."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of warning-severity issues."""
        return len(self.warnings)

    @property
    def has_errors(self) -> bool:
        """True if any issue should fail the process."""
        return any(i.severity is Severity.ERROR for i in self.issues)

    def of_type(self, issue_type: IssueType) -> tuple[Issue, ...]:
        """Issues of one type."""
        return tuple(i for i in self.issues if i.type is issue_type)

    def by_file(self) -> dict[str, tuple[Issue, ...]]:
        """Issues grouped by file, files in sorted order."""
        grouped: dict[str, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.file, []).append(issue)
        return {file: tuple(items) for file, items in sorted(grouped.items())}

    def __len__(self) -> int:
        return len(self.issues)
