"""
User schemas - what of a credential record the API may expose.
Tokens are never part of a response.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    """
    Profile of the logged-in user.

    Example response:
    {
        "google_id": "110169484474386276334",
        "email": "jane@example.com",
        "name": "Jane Doe",
        "picture": "https://lh3.googleusercontent.com/a/...",
        "last_login": "2026-10-19T10:30:00Z"
    }
    """
    model_config = ConfigDict(from_attributes=True)

    google_id: str
    email: str | None
    name: str | None
    picture: str | None
    last_login: datetime
