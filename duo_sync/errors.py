"""Exception hierarchy for the Duo sync."""

from __future__ import annotations

from typing import Optional


class DuoSyncError(Exception):
    """Base exception for everything raised by this package."""


class ConfigError(DuoSyncError, ValueError):
    """A required setting is missing or malformed. Raised before any network call."""


class TransportError(DuoSyncError):
    """The HTTP round trip failed, was cancelled, or returned an undecodable body."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class DuoApiError(DuoSyncError):
    """Duo answered with stat=FAIL."""

    def __init__(
        self,
        operation: str,
        code: Optional[int],
        message: str,
        message_detail: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.code = code
        self.message = message
        self.message_detail = message_detail
        text = f"{operation} failed: {message}"
        if message_detail:
            text += f" ({message_detail})"
        super().__init__(text)


class PaginationError(DuoSyncError, ValueError):
    """A cursor token is malformed or belongs to another resource type."""
