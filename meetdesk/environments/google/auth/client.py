"""
Google OAuth Client - Handles OAuth 2.0 flow with Google APIs.

Key Features:
=============
1. Authorization URL generation (offline access, forced consent)
2. Code-to-token exchange
3. Token refresh for seamless access
4. User profile lookup (v2 userinfo endpoint)

OAuth 2.0 Flow Implementation:
==============================
1. get_authorization_url() → User redirected to Google
2. exchange_code_for_tokens() → Called in callback, gets tokens
3. get_user_info() → Fetch Google account details
4. refresh_access_token() → Renew expired access tokens (used by AuthorizedSession)

Retries:
========
A transient network error on the token endpoint is retried once. Error
responses from Google (invalid_grant, invalid_client, ...) are never retried:
the same request would fail the same way.

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2/web-server
- Token endpoint: https://oauth2.googleapis.com/token
- Userinfo: https://www.googleapis.com/oauth2/v2/userinfo
"""

import logging
from typing import List, Optional
from urllib.parse import urlencode

import httpx

from meetdesk.core.config import settings
from meetdesk.environments.base import (
    APIError,
    AuthenticationError,
    EnvironmentProvider,
    OAuthTokens,
    TokenExpiredError,
    UpstreamTimeoutError,
    UserInfo,
)
from meetdesk.environments.google.auth.schemas import (
    DEFAULT_SCOPES,
    GoogleTokenError,
    GoogleTokenResponse,
    GoogleUserInfo,
)


logger = logging.getLogger("meetdesk.environments.google.auth")


class GoogleAuthClient(EnvironmentProvider):
    """
    Google OAuth 2.0 Client implementation.

    Tokens obtained here work with every Google service included in the
    scopes (Calendar, Gmail, Docs, Drive).

    Example Usage:
        client = GoogleAuthClient()

        # Step 1: Generate auth URL
        auth_url = client.get_authorization_url(
            scopes=DEFAULT_SCOPES,
            redirect_uri=build_redirect_uri("https://app.example.com"),
        )

        # Step 2: Handle callback
        tokens = await client.exchange_code_for_tokens(code, redirect_uri)

        # Step 3: Get user info
        user_info = await client.get_user_info(tokens.access_token)
    """

    provider_name = "google"

    # Google OAuth endpoints
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

    # Extra attempts for transient network errors on the token endpoint
    TOKEN_RETRIES = 1

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Google OAuth client.

        Args:
            client_id: Google OAuth Client ID (defaults to settings)
            client_secret: Google OAuth Client Secret (defaults to settings)
            timeout: Seconds before a Google call is abandoned (defaults to settings)
            transport: Custom httpx transport (tests pass httpx.MockTransport)
        """
        self.client_id = client_id or settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self._transport = transport

        if not self.client_id or not self.client_secret:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET in environment variables."
            )

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        scopes: List[str],
        redirect_uri: str,
        state: Optional[str] = None,
        access_type: str = "offline",
        prompt: str = "consent",
    ) -> str:
        """
        Generate the Google OAuth authorization URL.

        Args:
            scopes: List of OAuth scopes to request (e.g., DEFAULT_SCOPES)
            redirect_uri: Callback URL, see build_redirect_uri()
            state: Optional opaque value echoed back on the callback
            access_type: "offline" asks for a refresh token
            prompt: "consent" re-issues a refresh token for returning users

        Returns:
            Full authorization URL to redirect the user to
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": " ".join(scopes),
            "access_type": access_type,
            "prompt": prompt,
        }
        if state:
            params["state"] = state

        auth_url = f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

        logger.info(
            f"Generated Google auth URL with {len(scopes)} scopes",
            extra={"scopes": scopes},
        )

        return auth_url

    # -------------------------------------------------------------------------
    # TOKEN ENDPOINT
    # -------------------------------------------------------------------------

    async def _post_token_request(self, data: dict, purpose: str) -> httpx.Response:
        """
        POST to the token endpoint, retrying once on transient network errors.

        Raises:
            UpstreamTimeoutError: If the last attempt timed out
            httpx.TransportError: If the last attempt failed at network level
        """
        attempts = self.TOKEN_RETRIES + 1
        for attempt in range(1, attempts + 1):
            try:
                async with self._http_client() as client:
                    return await client.post(self.TOKEN_URL, data=data)
            except httpx.TransportError as e:
                if attempt < attempts:
                    logger.warning(f"Network error during {purpose} (attempt {attempt}), retrying: {e}")
                    continue
                if isinstance(e, httpx.TimeoutException):
                    raise UpstreamTimeoutError(f"Google token endpoint timed out during {purpose}") from e
                raise

    @staticmethod
    def _parse_token_error(response: httpx.Response) -> GoogleTokenError:
        try:
            return GoogleTokenError(**response.json())
        except ValueError:
            return GoogleTokenError(error="http_error", error_description=response.text)

    async def exchange_code_for_tokens(self, code: str, redirect_uri: str) -> OAuthTokens:
        """
        Exchange authorization code for access and refresh tokens.

        Args:
            code: Authorization code from Google callback
            redirect_uri: Must match the redirect_uri used in authorization

        Returns:
            OAuthTokens with access_token, refresh_token (may be None), expiration

        Raises:
            AuthenticationError: If Google rejects the code or the network fails
            UpstreamTimeoutError: If Google does not answer in time
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }

        logger.info("Exchanging authorization code for tokens")

        try:
            response = await self._post_token_request(token_data, "token exchange")
        except httpx.TransportError as e:
            logger.error(f"Network error during token exchange: {e}")
            raise AuthenticationError(f"Network error: {e}") from e

        if response.status_code != 200:
            error = self._parse_token_error(response)
            error_msg = error.error_description or error.error
            logger.error(f"Token exchange failed: {error.error} - {error_msg}")
            raise AuthenticationError(f"Token exchange failed: {error_msg}")

        token_response = GoogleTokenResponse(**response.json())

        logger.info(
            "Successfully obtained Google tokens",
            extra={
                "has_refresh_token": token_response.get_refresh_token() is not None,
                "expires_in": token_response.expires_in,
            },
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.get_refresh_token(),
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use refresh token to get a new access token.

        Args:
            refresh_token: The stored refresh token

        Returns:
            OAuthTokens with the new access_token. refresh_token is only set
            when Google rotated it; callers keep their stored one otherwise.

        Raises:
            TokenExpiredError: If the refresh token is invalid or revoked
            APIError: If the token endpoint cannot be reached
            UpstreamTimeoutError: If Google does not answer in time
        """
        refresh_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        logger.info("Refreshing access token")

        try:
            response = await self._post_token_request(refresh_data, "token refresh")
        except httpx.TransportError as e:
            logger.error(f"Network error during token refresh: {e}")
            raise APIError(f"Network error: {e}") from e

        if response.status_code != 200:
            error = self._parse_token_error(response)
            logger.error(f"Token refresh failed: {error.error} - {error.error_description}")
            raise TokenExpiredError(f"Token refresh failed: {error.error_description or error.error}")

        token_response = GoogleTokenResponse(**response.json())

        logger.info(
            "Successfully refreshed access token",
            extra={"expires_in": token_response.expires_in},
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.get_refresh_token(),
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list() or None,
        )

    # -------------------------------------------------------------------------
    # USER INFO
    # -------------------------------------------------------------------------

    async def get_user_info(self, access_token: str) -> UserInfo:
        """
        Get user information from Google.

        Args:
            access_token: Valid access token with the profile/email scopes

        Returns:
            UserInfo with whatever fields Google returned (possibly incomplete)

        Raises:
            AuthenticationError: If the profile request fails
            UpstreamTimeoutError: If Google does not answer in time
        """
        logger.info("Fetching user info from Google")

        async with self._http_client() as client:
            try:
                response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
            except httpx.TimeoutException as e:
                raise UpstreamTimeoutError("Google userinfo endpoint timed out") from e
            except httpx.RequestError as e:
                logger.error(f"Network error fetching user info: {e}")
                raise AuthenticationError(f"Network error: {e}") from e

        if response.status_code != 200:
            logger.error(f"Failed to fetch user info: {response.text}")
            raise AuthenticationError("Failed to fetch user info")

        google_user = GoogleUserInfo(**response.json())

        logger.info("Fetched Google user info", extra={"email": google_user.email})

        return UserInfo(
            provider_user_id=google_user.id,
            email=google_user.email,
            name=google_user.name,
            picture_url=google_user.picture,
        )


__all__ = ["GoogleAuthClient", "DEFAULT_SCOPES"]
