"""Diagnostic system for translation usage problems.

Provides the Issue record, the immutable ValidationReport aggregate, the
report formatter and the exception hierarchy.

Python 3.13+. Zero external dependencies.
"""

from .codes import Issue
from .errors import ConfigurationError, KeyshakerError, ManifestError
from .formatter import IssueFormatter, OutputFormat
from .validation import ValidationReport

__all__ = [
    "ConfigurationError",
    "Issue",
    "IssueFormatter",
    "KeyshakerError",
    "ManifestError",
    "OutputFormat",
    "ValidationReport",
]
