"""
Google OAuth Schemas - Data structures for Google authentication.

Using Pydantic models ensures type safety and validation of what Google
sends back from the token and userinfo endpoints.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# OAUTH SCOPE CONSTANTS
# ---------------------------------------------------------------------------
# Reference: https://developers.google.com/identity/protocols/oauth2/scopes

PROFILE_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
]

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
]

GMAIL_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
]

DOCS_SCOPES = [
    "https://www.googleapis.com/auth/documents.readonly",
]

DRIVE_SCOPES = [
    "https://www.googleapis.com/auth/drive.readonly",
]

# Everything requested on "Connect Google", in the order Google shows them
DEFAULT_SCOPES = CALENDAR_SCOPES + GMAIL_SCOPES + DOCS_SCOPES + DRIVE_SCOPES + PROFILE_SCOPES

# Path of the OAuth callback route, appended to the app's base URL
CALLBACK_PATH = "/api/auth/google/callback"


def normalize_base_url(base_url: str) -> str:
    """Strip the trailing slash so "https://x/" and "https://x" behave the same."""
    return base_url.rstrip("/")


def build_redirect_uri(base_url: str) -> str:
    """
    Build the OAuth redirect URI for a base URL.

    Must match the URI registered in Google Cloud Console exactly, so both
    the authorization request and the code exchange use this function.

    Example:
        build_redirect_uri("https://app.example.com/")
        # "https://app.example.com/api/auth/google/callback"
    """
    return f"{normalize_base_url(base_url)}{CALLBACK_PATH}"


# ---------------------------------------------------------------------------
# TOKEN RESPONSES
# ---------------------------------------------------------------------------

class GoogleTokenResponse(BaseModel):
    """
    Response from Google's token endpoint.

    Returned both for the authorization-code exchange and for refreshes.
    refresh_token is usually absent on refreshes and on re-consent.

    Example response from Google:
    {
        "access_token": "ya29.a0AfB_byC...",
        "expires_in": 3599,
        "refresh_token": "1//0eXyz...",
        "scope": "https://www.googleapis.com/auth/calendar.readonly ...",
        "token_type": "Bearer",
        "id_token": "eyJhbGciOiJSUzI1NiIs..."
    }
    """
    access_token: str = Field(..., description="OAuth access token")
    token_type: str = Field(default="Bearer", description="Token type (usually Bearer)")
    expires_in: Optional[int] = Field(None, description="Seconds until expiration")
    refresh_token: Optional[str] = Field(None, description="Refresh token for renewal")
    scope: Optional[str] = Field(None, description="Space-separated scopes granted")

    def get_scopes_list(self) -> List[str]:
        """Convert space-separated scope string to list."""
        if self.scope:
            return self.scope.split()
        return []

    def get_expires_at(self) -> Optional[datetime]:
        """Calculate expiration datetime from expires_in seconds."""
        if self.expires_in:
            return datetime.now(timezone.utc) + timedelta(seconds=self.expires_in)
        return None

    def get_refresh_token(self) -> Optional[str]:
        """The refresh token, with "" treated as not issued."""
        return self.refresh_token or None


class GoogleTokenError(BaseModel):
    """Error body from the token endpoint, e.g. {"error": "invalid_grant"}."""
    error: str = Field(default="unknown_error")
    error_description: Optional[str] = None


# ---------------------------------------------------------------------------
# USER INFO
# ---------------------------------------------------------------------------

class GoogleUserInfo(BaseModel):
    """
    User information from Google's v2 userinfo endpoint.

    Every field is optional here; the OAuth callback decides which ones
    are required.

    Example:
    {
        "id": "110169484474386276334",
        "email": "user@gmail.com",
        "name": "Jane Doe",
        "picture": "https://lh3.googleusercontent.com/a/..."
    }
    """
    id: Optional[str] = Field(None, description="Unique Google user ID")
    email: Optional[str] = Field(None, description="User's email address")
    name: Optional[str] = Field(None, description="User's display name")
    picture: Optional[str] = Field(None, description="Profile picture URL")
