"""Domain exceptions.

Services raise these; the global error handler maps each one to its HTTP
status and a ``{"message": ...}`` body.
"""

from __future__ import annotations

from typing import Any


class SkillSwapError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_content(self) -> dict[str, Any]:
        """Build the JSON body for this error."""
        return {"message": self.message, **self.extra}


class ValidationError(SkillSwapError):
    """Malformed or missing request data."""

    status_code = 400


class UnauthorizedError(SkillSwapError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class ForbiddenError(SkillSwapError):
    """Authenticated but not permitted (banned, wrong role, wrong party)."""

    status_code = 403


class NotFoundError(SkillSwapError):
    """Referenced record does not exist."""

    status_code = 404


class ConflictError(SkillSwapError):
    """Duplicate registration, pending swap or feedback."""

    status_code = 409


class InvalidStateError(SkillSwapError):
    """Operation not legal from the record's current status."""

    status_code = 400
