"""Usage validation for translation accessors.

Two independent rules run over each source file:

- CLIENT_HOOK_IN_SERVER_COMPONENT: a file whose name marks it as always
  server-rendered (page, layout, loading, error, not-found, template)
  constructs the synchronous render-time accessor without a leading
  "use client" directive.
- MISSING_NAMESPACE: an accessor constructor is called with empty
  arguments. Reported regardless of the directive.

Validation never raises for usage problems and never touches shared
state: each call returns the issues of one file and the caller owns the
aggregate (see keyshaker.diagnostics.ValidationReport).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from keyshaker.analysis.extractor import (
    BindingStrategy,
    RegexBindingStrategy,
    line_of,
    mask_comments,
)
from keyshaker.config import ExtractionSettings
from keyshaker.constants import CLIENT_DIRECTIVE, LOADING_STEM, SERVER_ONLY_STEMS
from keyshaker.diagnostics.codes import Issue
from keyshaker.enums import IssueType, Severity

__all__ = ["UsageValidator", "has_client_directive"]

logger = logging.getLogger(__name__)

_DIRECTIVE = re.compile(r"""\s*(?P<q>["'])(?P<body>[^"'\n]*)(?P=q)\s*;?""")
_SYNC_HOOK_CALL = re.compile(r"(?<![\w$.])useTranslations\s*\(")
_FUNCTION_DEF_TAIL = re.compile(r"\bfunction\s*\*?\s*$")

_LOADING_MESSAGE = (
    "useTranslations() in loading.tsx (server component). Use Skeleton components instead."
)
_SERVER_MESSAGE = (
    'useTranslations() (client hook) in server component. Add "use client" or use getTranslations().'
)


def has_client_directive(text: str) -> bool:
    """True if the directive prologue of the file contains "use client".

    The prologue is the run of string-literal statements at the top of
    the file; comments and a byte-order mark before it are ignored.

    Example:
        >>> has_client_directive('// note\\n"use client";\\nexport default 1')
        True
        >>> has_client_directive('const x = "use client";')
        False
    """
    source = mask_comments(text.removeprefix("\ufeff"))
    pos = 0
    while match := _DIRECTIVE.match(source, pos):
        if match["body"] == CLIENT_DIRECTIVE:
            return True
        pos = match.end()
    return False


@dataclass(frozen=True, slots=True)
class UsageValidator:
    """Stateless validator for one file at a time.

    Example:
        >>> validator = UsageValidator()
        >>> issues = validator.validate_source('const t = useTranslations();', "a/widget.tsx")
        >>> [str(i.type) for i in issues]
        ['MISSING_NAMESPACE']
    """

    strategy: BindingStrategy = field(default_factory=RegexBindingStrategy)
    settings: ExtractionSettings = field(default_factory=ExtractionSettings)

    def is_server_only_file(self, path: str | Path) -> bool:
        """True for file names the framework always renders on the server."""
        p = Path(path)
        return self.settings.is_source_file(p) and p.stem in SERVER_ONLY_STEMS

    def validate_source(self, text: str, path: str | Path) -> tuple[Issue, ...]:
        """Validate the text of one file.

        Args:
            text: Full source text
            path: File path, used for the file-name rules and in issues

        Returns:
            Issues in source order (empty tuple when the file is clean)
        """
        file = str(path)
        issues = [*self._client_hook_issues(text, Path(path), file)]
        for construction in self.strategy.find_unbound_constructions(text):
            issues.append(
                Issue(
                    type=IssueType.MISSING_NAMESPACE,
                    file=file,
                    line=construction.line,
                    message=f"{construction.constructor}() called without namespace.",
                )
            )
        issues.sort(key=lambda i: i.line)
        return tuple(issues)

    def validate_file(self, path: Path) -> tuple[Issue, ...]:
        """Read and validate one file.

        An unreadable file yields a single READ_ERROR warning instead of
        raising, so one bad file never stops a run.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return (
                Issue(
                    type=IssueType.READ_ERROR,
                    file=str(path),
                    line=0,
                    message=str(e),
                    severity=Severity.WARNING,
                ),
            )
        return self.validate_source(text, path)

    def _client_hook_issues(self, text: str, path: Path, file: str) -> list[Issue]:
        if not self.is_server_only_file(path) or has_client_directive(text):
            return []
        message = _LOADING_MESSAGE if path.stem == LOADING_STEM else _SERVER_MESSAGE
        source = mask_comments(text)
        issues: list[Issue] = []
        for match in _SYNC_HOOK_CALL.finditer(source):
            if _FUNCTION_DEF_TAIL.search(source, 0, match.start()):
                continue
            issues.append(
                Issue(
                    type=IssueType.CLIENT_HOOK_IN_SERVER_COMPONENT,
                    file=file,
                    line=line_of(source, match.start()),
                    message=message,
                )
            )
        return issues
