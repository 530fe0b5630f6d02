"""Translation usage validation.

Python 3.13+. Zero external dependencies.
"""

from .usage import UsageValidator, has_client_directive

__all__ = ["UsageValidator", "has_client_directive"]
