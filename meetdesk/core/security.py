"""
Security utilities - signed session cookies.

The session is stateless: the user_id cookie carries a JWT whose "sub" claim
is the user's Google id, signed with SECRET_KEY. Each request decodes it and
looks the id up in the Credential Store. The user_email cookie is
informational only and never trusted for identity; it is URL-encoded so the
"@" does not force a quoted cookie value.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import Response
from jose import JWTError, jwt

from meetdesk.core.config import settings

USER_ID_COOKIE = "user_id"
USER_EMAIL_COOKIE = "user_email"


def create_session_token(google_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Create the signed value stored in the user_id cookie.

    Args:
        google_id: The user's Google id (JWT "sub" claim)
        expires_delta: Custom lifetime, defaults to SESSION_MAX_AGE_SECONDS

    Returns:
        A signed JWT string
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)

    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": google_id, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """
    Verify a user_id cookie value.

    Returns:
        The Google id, or None if the token is forged, expired or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    google_id = payload.get("sub")
    if not isinstance(google_id, str) or not google_id:
        return None
    return google_id


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }


def set_session_cookies(response: Response, google_id: str, email: Optional[str]) -> None:
    """Attach both session cookies (7-day lifetime) to a response."""
    max_age = settings.SESSION_MAX_AGE_SECONDS
    response.set_cookie(
        USER_ID_COOKIE,
        create_session_token(google_id),
        max_age=max_age,
        **_cookie_options(),
    )
    response.set_cookie(
        USER_EMAIL_COOKIE,
        quote(email or "", safe=""),
        max_age=max_age,
        **_cookie_options(),
    )


def clear_session_cookies(response: Response) -> None:
    """Log the browser out by expiring both session cookies."""
    for name in (USER_ID_COOKIE, USER_EMAIL_COOKIE):
        response.delete_cookie(name, **_cookie_options())
