"""
Base classes and interfaces for Environment integrations.

This module defines the abstract contract that environment providers
(Google today, Zoom/Outlook later) implement. Token and profile data
travel between providers and routes as the dataclasses below.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------
# Specific exceptions for environment operations.
# Routes translate these into meetdesk.core.errors responses.


class EnvironmentError(Exception):
    """Base exception for all environment-related errors."""
    pass


class AuthenticationError(EnvironmentError):
    """Raised when authentication with a provider fails."""
    pass


class TokenExpiredError(EnvironmentError):
    """Raised when an OAuth token has expired and refresh failed."""
    pass


class UpstreamTimeoutError(EnvironmentError):
    """Raised when a provider call exceeds its timeout."""
    pass


class APIError(EnvironmentError):
    """Raised when an API call to the provider fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


# ---------------------------------------------------------------------------
# DATA STRUCTURES
# ---------------------------------------------------------------------------


@dataclass
class OAuthTokens:
    """
    Standardized token data from any OAuth provider.

    Used to transfer token data between the OAuth flow, the authorized
    session and the Credential Store. refresh_token is None when the
    provider did not issue one for this grant.
    """
    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    scopes: Optional[List[str]] = None

    def is_expired(self, buffer: timedelta = timedelta(minutes=5)) -> bool:
        """True if the access token expires within `buffer`. Unknown expiry counts as valid."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires_at - buffer


@dataclass
class UserInfo:
    """
    Basic user information from an OAuth provider's profile endpoint.
    """
    provider_user_id: Optional[str]  # Google's 'id'
    email: Optional[str] = None
    name: Optional[str] = None
    picture_url: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Names of the required profile fields the provider left empty."""
        required = {
            "id": self.provider_user_id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture_url,
        }
        return [field_name for field_name, value in required.items() if not value]


# ---------------------------------------------------------------------------
# ABSTRACT BASE CLASSES
# ---------------------------------------------------------------------------


class EnvironmentProvider(ABC):
    """
    Abstract base class for OAuth providers.

    The provider is responsible for:
    - Generating authorization URLs
    - Exchanging authorization codes for tokens
    - Refreshing expired tokens
    - Fetching the user's profile
    """

    # Unique identifier for this provider (e.g., "google")
    provider_name: str = ""

    @abstractmethod
    def get_authorization_url(self, scopes: List[str], redirect_uri: str, state: Optional[str] = None) -> str:
        """Generate the OAuth authorization URL."""
        pass

    @abstractmethod
    async def exchange_code_for_tokens(self, code: str, redirect_uri: str) -> OAuthTokens:
        """
        Exchange authorization code for access/refresh tokens.

        Raises:
            AuthenticationError: If code exchange fails
        """
        pass

    @abstractmethod
    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use refresh token to get a new access token.

        Raises:
            TokenExpiredError: If refresh token is invalid/revoked
        """
        pass

    @abstractmethod
    async def get_user_info(self, access_token: str) -> UserInfo:
        """Get user information from the provider."""
        pass
