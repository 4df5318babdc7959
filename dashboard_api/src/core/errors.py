"""
Application error taxonomy.

Every error raised by services and dependencies derives from DashboardError and
carries the HTTP status it maps to. The exception handlers registered in
src.api.main turn them into the `{success: false, error}` envelope.
"""
from __future__ import annotations

from fastapi import status


class DashboardError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(DashboardError):
    """Missing or malformed request input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(DashboardError):
    """Bad credentials (401) or a rejected bearer token (401 missing / 403 invalid)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    # PUBLIC_INTERFACE
    @classmethod
    def missing_token(cls) -> "AuthError":
        return cls("Access token required", status.HTTP_401_UNAUTHORIZED)

    # PUBLIC_INTERFACE
    @classmethod
    def invalid_token(cls) -> "AuthError":
        return cls("Invalid token", status.HTTP_403_FORBIDDEN)


class NotFoundError(DashboardError):
    """Unknown resource id or route."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class RepositoryError(DashboardError):
    """A store is unreachable or a query failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database unavailable"
