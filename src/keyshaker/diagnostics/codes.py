"""Issue data structure.

Defines the immutable record produced by the usage validator.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from keyshaker.enums import IssueType, Severity

__all__ = ["Issue"]


@dataclass(frozen=True, slots=True)
class Issue:
    """Usage problem found in one source file.

    Issues are informational: extraction never stops because of them. The
    CLI turns "at least one ERROR issue" into a non-zero exit code.

    Attributes:
        type: What kind of problem this is
        file: Path of the offending file, as given to the validator
        line: 1-indexed line of the offending call (0 when not applicable)
        message: Human-readable explanation with a suggested fix
        severity: ERROR or WARNING
    """

    type: IssueType
    file: str
    line: int
    message: str
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        """True for error-severity issues."""
        return self.severity is Severity.ERROR

    def format(self) -> str:
        """Format as a single line.

        Example:
            >>> Issue(IssueType.MISSING_NAMESPACE, "app/page.tsx", 3, "no namespace").format()
            'app/page.tsx:3: error[MISSING_NAMESPACE]: no namespace'
        """
        return f"{self.file}:{self.line}: {self.severity}[{self.type}]: {self.message}"

    def to_dict(self) -> dict[str, str | int]:
        """Plain-JSON representation used by the JSON formatter."""
        return {
            "type": str(self.type),
            "file": self.file,
            "line": self.line,
            "message": self.message,
            "severity": str(self.severity),
        }
