"""Enumerations for keyshaker type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they serialize into the
manifest and JSON reports without conversion.

Python 3.13+.
"""

from enum import StrEnum


class PageType(StrEnum):
    """Menu category of a route.

    StrEnum provides automatic string conversion: str(PageType.ADMIN) == "admin"
    """

    ADMIN = "admin"
    """Admin dashboard route using the global admin menu."""

    USER = "user"
    """User-facing route using the global user menu."""

    EXTENSION_ADMIN = "extension-admin"
    """Admin route of an extension with its own menu.ts."""

    EXTENSION_USER = "extension-user"
    """User route of an extension with its own menu.ts."""

    EXCLUDED = "excluded"
    """Route rendered without menu chrome."""


class BindingOrigin(StrEnum):
    """How a translation accessor was constructed."""

    SYNC = "sync"
    """Render-time hook: const t = useTranslations("ns")"""

    ASYNC = "async"
    """Awaited server call: const t = await getTranslations(...)"""


class Severity(StrEnum):
    """Issue severity. Only ERROR affects the process exit code."""

    ERROR = "error"
    WARNING = "warning"


class IssueType(StrEnum):
    """Kind of usage problem reported by the validator."""

    CLIENT_HOOK_IN_SERVER_COMPONENT = "CLIENT_HOOK_IN_SERVER_COMPONENT"
    """Synchronous accessor in a file rendered without a client runtime."""

    MISSING_NAMESPACE = "MISSING_NAMESPACE"
    """Accessor constructed with empty arguments."""

    READ_ERROR = "READ_ERROR"
    """Source file could not be read."""


class LoadStatus(StrEnum):
    """Outcome of loading one locale file."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


__all__ = [
    "BindingOrigin",
    "IssueType",
    "LoadStatus",
    "PageType",
    "Severity",
]
