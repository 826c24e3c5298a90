"""
Integration schemas - connection status of external services.
"""

from pydantic import BaseModel


class IntegrationStatus(BaseModel):
    """
    One entry of GET /api/integrations.

    Example response:
    [
        {"id": 1, "name": "Google", "connected": true},
        {"id": 2, "name": "Zoom", "connected": false},
        {"id": 3, "name": "Outlook", "connected": false}
    ]
    """
    id: int
    name: str
    connected: bool


class IntegrationUpdate(BaseModel):
    """Body of PUT /api/integrations/{id}."""
    connected: bool


class IntegrationUpdateOut(BaseModel):
    id: int
    connected: bool
