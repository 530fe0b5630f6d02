"""keyshaker exception hierarchy.

Only conditions the caller must act on are exceptions. Unreadable files,
malformed locale JSON and unresolved imports are recovered locally and
never raise; usage problems are reported as Issue values.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "ConfigurationError",
    "KeyshakerError",
    "ManifestError",
]


class KeyshakerError(Exception):
    """Base exception for all keyshaker errors."""


class ConfigurationError(KeyshakerError, ValueError):
    """Invalid layout, rule table or plugin option.

    Raised eagerly when configuration objects are constructed, so a bad
    setting fails before any file is read.
    """


class ManifestError(KeyshakerError):
    """A manifest on disk cannot be used.

    Raised by ChunkReader when manifest.json exists but is not valid JSON
    or does not have the expected top-level shape.
    """
