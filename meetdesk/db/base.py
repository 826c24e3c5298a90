"""
Declarative base for all ORM models.

Alembic and the test suite use Base.metadata to discover tables, so every
model module is imported here at the bottom.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class that all MeetDesk models inherit from."""
    pass


# Register models on Base.metadata
from meetdesk.models import meeting, note, user  # noqa: E402,F401
