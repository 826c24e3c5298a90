"""
Token persistence - saves tokens rotated by an AuthorizedSession.

The persister is registered as a "tokens" handler on every AuthorizedSession
built for a request. It opens its own database session, so a failed save
never touches the request's session, and it never raises: the API call that
triggered the rotation still succeeds. A failure is logged at ERROR with the
traceback because the rotated token may be lost.
"""

import functools
import logging
from typing import Callable

from sqlalchemy.orm import Session

from meetdesk.environments.base import OAuthTokens
from meetdesk.environments.google.auth.session import TokenHandler
from meetdesk.services.credential_store import CredentialStore


logger = logging.getLogger("meetdesk.services.token_persistence")


class TokenRefreshPersister:
    """
    Writes rotated tokens to the Credential Store.

    Args:
        session_factory: Callable returning a new SQLAlchemy session
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def persist(self, google_id: str, tokens: OAuthTokens) -> bool:
        """
        Save one rotation event.

        Returns:
            True if the tokens were committed
        """
        db = self.session_factory()
        try:
            return CredentialStore(db).apply_token_refresh(google_id, tokens) is not None
        except Exception:
            db.rollback()
            logger.exception(
                f"Failed to save rotated Google tokens for user {google_id}; "
                "the new access/refresh token may be lost"
            )
            return False
        finally:
            db.close()

    def for_user(self, google_id: str) -> TokenHandler:
        """A handler bound to one user, for AuthorizedSession.on_tokens()."""
        return functools.partial(self.persist, google_id)
