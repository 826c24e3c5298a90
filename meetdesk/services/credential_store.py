"""
Credential Store - persistence of Google identities and their tokens.

One row per Google account in the 'users' table. Every write is a single
SQL statement, so concurrent requests for different users never interleave
fields, and concurrent requests for the same user converge: last writer wins
on the access token, and the refresh token is merged inside the statement
(COALESCE(new, stored)) so it can never be lost to a grant that omitted it.

Usage:
    store = CredentialStore(db)
    user = store.upsert_login(profile, tokens)     # OAuth callback
    store.apply_token_refresh(google_id, rotated)  # AuthorizedSession event
    store.get(google_id)                           # session resolution
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from meetdesk.environments.base import OAuthTokens, UserInfo
from meetdesk.models.user import User


logger = logging.getLogger("meetdesk.services.credential_store")


# Dialects with an "INSERT .. ON CONFLICT DO UPDATE" construct
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _clean_refresh_token(token: Optional[str]) -> Optional[str]:
    """Treat "" like an absent refresh token."""
    return token or None


class CredentialStore:
    """
    Read and write user credential records.

    Args:
        db: SQLAlchemy session; each write commits on its own
    """

    def __init__(self, db: Session):
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(f"Credential upsert is not supported on {dialect}") from None

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    def get(self, google_id: str) -> Optional[User]:
        """
        Look up a credential record, bypassing the session's identity map
        so the latest committed tokens are returned.
        """
        stmt = (
            select(User)
            .where(User.google_id == google_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, google_id: str) -> bool:
        stmt = select(func.count()).select_from(User).where(User.google_id == google_id)
        return self.db.execute(stmt).scalar_one() > 0

    # -------------------------------------------------------------------------
    # WRITES
    # -------------------------------------------------------------------------

    def upsert_login(self, profile: UserInfo, tokens: OAuthTokens) -> User:
        """
        Create or update the record after a successful OAuth callback.

        Profile fields and the access token are overwritten. The refresh
        token is only overwritten when this grant carried one.

        Args:
            profile: Complete Google profile (id, email, name, picture)
            tokens: Tokens from the code exchange

        Returns:
            The stored record
        """
        now = datetime.now(timezone.utc)
        table = User.__table__

        stmt = self._insert()(table).values(
            google_id=profile.provider_user_id,
            email=profile.email,
            name=profile.name,
            picture=profile.picture_url,
            access_token=tokens.access_token,
            refresh_token=_clean_refresh_token(tokens.refresh_token),
            expires_at=tokens.expires_at,
            scopes=tokens.scopes,
            created_at=now,
            last_login=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.google_id],
            set_={
                "email": stmt.excluded.email,
                "name": stmt.excluded.name,
                "picture": stmt.excluded.picture,
                "access_token": stmt.excluded.access_token,
                "refresh_token": func.coalesce(stmt.excluded.refresh_token, table.c.refresh_token),
                "expires_at": stmt.excluded.expires_at,
                "scopes": stmt.excluded.scopes,
                "last_login": stmt.excluded.last_login,
            },
        )

        self.db.execute(stmt)
        self.db.commit()

        logger.info(
            f"Stored Google credentials for user {profile.provider_user_id}",
            extra={"has_refresh_token": tokens.refresh_token is not None},
        )
        return self.get(profile.provider_user_id)

    def apply_token_refresh(self, google_id: str, tokens: OAuthTokens) -> Optional[User]:
        """
        Persist tokens rotated by an AuthorizedSession.

        1. A new refresh token overwrites the stored one
        2. Otherwise the stored refresh token is kept
        3. Access token, expiry and last_login are always overwritten

        Returns:
            The updated record, or None if the user no longer exists
        """
        values = {
            "access_token": tokens.access_token,
            "expires_at": tokens.expires_at,
            "last_login": datetime.now(timezone.utc),
        }
        refresh_token = _clean_refresh_token(tokens.refresh_token)
        if refresh_token:
            values["refresh_token"] = refresh_token
        if tokens.scopes:
            values["scopes"] = tokens.scopes

        result = self.db.execute(
            update(User)
            .where(User.google_id == google_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

        if result.rowcount == 0:
            logger.warning(f"Token refresh for unknown user {google_id} was not stored")
            return None

        logger.info(
            f"Saved rotated Google tokens for user {google_id}",
            extra={"refresh_token_rotated": refresh_token is not None},
        )
        return self.get(google_id)
