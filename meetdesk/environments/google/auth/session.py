"""
Authorized Session - Google API calls with automatic token rotation.

Every call to a Google API goes through an AuthorizedSession holding the
user's current access/refresh token pair. When the access token has expired,
or Google answers 401, the session rotates it with the refresh token and
notifies every registered "tokens" handler before returning the result.

Token Events:
=============
A handler receives the OAuthTokens exactly as Google returned them: the
refresh_token field is only set when Google rotated it. Handlers are called
synchronously, in registration order, before request() returns, so a
persistence handler has finished its write before the route builds its
response. A failing handler is logged and never fails the API call.

Usage Example:
==============
    session = AuthorizedSession(tokens=OAuthTokens(access_token="ya29.xxx", refresh_token="1//xxx"))

    @session.on_tokens
    def save(tokens: OAuthTokens) -> None:
        store.apply_token_refresh(google_id, tokens)

    response = await session.request("GET", "https://www.googleapis.com/calendar/v3/...")
"""

import logging
from typing import Any, Callable, List, Optional

import httpx

from meetdesk.core.config import settings
from meetdesk.environments.base import (
    APIError,
    OAuthTokens,
    TokenExpiredError,
    UpstreamTimeoutError,
)
from meetdesk.environments.google.auth.client import GoogleAuthClient


logger = logging.getLogger("meetdesk.environments.google.session")


TokenHandler = Callable[[OAuthTokens], None]


class AuthorizedSession:
    """
    httpx wrapper that authorizes requests and rotates expired tokens.

    Attributes:
        tokens: The current token pair (updated in place on rotation)
        auth_client: Used to call Google's token endpoint on refresh
    """

    def __init__(
        self,
        tokens: OAuthTokens,
        auth_client: Optional[GoogleAuthClient] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tokens = tokens
        self.auth_client = auth_client or GoogleAuthClient()
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self._transport = transport
        self._handlers: List[TokenHandler] = []

    # -------------------------------------------------------------------------
    # TOKEN EVENTS
    # -------------------------------------------------------------------------

    def on_tokens(self, handler: TokenHandler) -> TokenHandler:
        """Register a handler for rotated tokens. Usable as a decorator."""
        self._handlers.append(handler)
        return handler

    def _emit_tokens(self, tokens: OAuthTokens) -> None:
        for handler in list(self._handlers):
            try:
                handler(tokens)
            except Exception:
                logger.exception("Token handler %r failed; rotated tokens may not be saved", handler)

    async def refresh(self) -> OAuthTokens:
        """
        Rotate the access token now.

        Returns:
            The session's updated token pair

        Raises:
            TokenExpiredError: No refresh token, or Google rejected it
            UpstreamTimeoutError: Google's token endpoint timed out
            APIError: Google's token endpoint could not be reached
        """
        if not self.tokens.refresh_token:
            raise TokenExpiredError("Access token expired and no refresh token is stored")

        rotated = await self.auth_client.refresh_access_token(self.tokens.refresh_token)

        self.tokens = OAuthTokens(
            access_token=rotated.access_token,
            token_type=rotated.token_type,
            refresh_token=rotated.refresh_token or self.tokens.refresh_token,
            expires_at=rotated.expires_at,
            scopes=rotated.scopes or self.tokens.scopes,
        )

        logger.info(
            "Google access token rotated",
            extra={"refresh_token_rotated": rotated.refresh_token is not None},
        )
        self._emit_tokens(rotated)
        return self.tokens

    # -------------------------------------------------------------------------
    # REQUESTS
    # -------------------------------------------------------------------------

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"{self.tokens.token_type or 'Bearer'} {self.tokens.access_token}",
            "Accept": "application/json",
        }

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                return await client.request(method, url, headers=self._get_headers(), **kwargs)
            except httpx.TimeoutException as e:
                logger.error(f"Timeout calling {url}")
                raise UpstreamTimeoutError(f"Request to {url} timed out") from e
            except httpx.RequestError as e:
                logger.error(f"Network error calling {url}: {e}")
                raise APIError(f"Network error: {e}") from e

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Make an authorized request, rotating the token at most once.

        Args:
            method: HTTP method
            url: Absolute Google API URL
            **kwargs: Passed through to httpx (params, json, ...)

        Returns:
            The final httpx.Response (status not checked)
        """
        rotated = False
        if self.tokens.is_expired() and self.tokens.refresh_token:
            await self.refresh()
            rotated = True

        response = await self._send(method, url, **kwargs)

        if response.status_code == 401 and not rotated and self.tokens.refresh_token:
            logger.info("Google API answered 401, rotating token and retrying")
            await self.refresh()
            response = await self._send(method, url, **kwargs)

        return response

    async def get_json(self, url: str, params: Any = None) -> dict:
        """
        GET a Google API resource and return its JSON body.

        Raises:
            APIError: On any non-200 answer (status_code set)
        """
        response = await self.request("GET", url, params=params)

        if response.status_code != 200:
            error_detail = response.text
            logger.error(f"Google API error: {response.status_code} - {error_detail}")
            raise APIError(
                f"API request failed: {error_detail}",
                status_code=response.status_code,
                response=error_detail,
            )

        return response.json()
