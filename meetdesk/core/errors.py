"""
Route-level errors - each one knows its HTTP status.

Routes raise these; the exception handlers registered in meetdesk.main turn
them into a JSON body of the form {"message": ..., "error": ...} so no
exception ever reaches the ASGI server uncaught.

Provider-level failures (AuthenticationError, APIError, ...) live in
meetdesk.environments.base and are translated into these by the routes.
"""

from contextlib import contextmanager
from typing import Optional

from fastapi import status

from meetdesk.environments.base import (
    APIError,
    AuthenticationError,
    TokenExpiredError,
    UpstreamTimeoutError,
)


class AppError(Exception):
    """Base class for errors rendered as JSON responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class MissingAuthorizationCode(AppError):
    """OAuth callback invoked without a code."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Code not found"


class IncompleteProviderProfile(AppError):
    """Google's profile response lacks id, email, name or picture."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Authentication failed"


class Unauthenticated(AppError):
    """No (valid) session cookie on a protected route."""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User not authenticated"


class IntegrationNotConnected(AppError):
    """Valid session, but no usable Google credentials."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Google account not connected for this user"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class BadRequest(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


class UpstreamFailure(AppError):
    """A downstream API (Google, Notion, Gemini) call failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Upstream request failed"


class UpstreamTimeout(AppError):
    """A downstream API call timed out. Safe for the client to retry."""
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    message = "Upstream request timed out"


class ServiceNotConfigured(AppError):
    """A required API key or OAuth client is missing from the environment."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service is not configured"


@contextmanager
def translate_provider_errors(action: str):
    """
    Map provider-layer exceptions raised inside the block to route errors.

    Usage:
        with translate_provider_errors("calendar events"):
            events = await calendar.list_upcoming_events()
    """
    try:
        yield
    except TokenExpiredError as e:
        raise IntegrationNotConnected(
            "Google session expired, please reconnect your account", error=str(e)
        ) from e
    except UpstreamTimeoutError as e:
        raise UpstreamTimeout(f"Timed out fetching {action}", error=str(e)) from e
    except (APIError, AuthenticationError) as e:
        raise UpstreamFailure(f"Error fetching {action}", error=str(e)) from e
