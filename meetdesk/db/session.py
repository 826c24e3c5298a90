"""
Database session management - SQLAlchemy engine and session factory.
This module provides the database connection and session dependency for FastAPI.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from meetdesk.core.config import settings

# pool_pre_ping: check pooled connections with "SELECT 1" before use
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

# SessionLocal is a factory, not a session. Call SessionLocal() to get one.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    FastAPI dependency that provides a database session.

    One session per request; close() always runs, even if the route raises.

    Usage in a route:
        @router.get("/notes")
        def list_notes(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """
    FastAPI dependency that provides the session factory itself.

    The token refresh persister opens its own short-lived session so a
    failed token save never rolls back or poisons the request's session.
    Tests override this to point at their database.
    """
    return SessionLocal
