"""Exception types for the admin console.

Expected request outcomes (bad origin, not a MASTER, blocked tenant, ...) are
not exceptions; see ``admin_console.impersonation.outcomes``. These classes are
reserved for faults: deployment misconfiguration, codec misuse, and database
errors.
"""

from __future__ import annotations


class ConsoleError(Exception):
    """Base exception for admin console operations."""

    pass


class ConfigurationError(ConsoleError):
    """Raised when required configuration is missing or too weak."""

    pass


class TokenValidationError(ConsoleError):
    """Raised when the token codec receives an empty identifier."""

    pass


class StoreError(ConsoleError):
    """Raised when the platform store cannot complete a read or write."""

    def __init__(self, message: str, sqlstate: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate
