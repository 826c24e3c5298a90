"""
Gmail Module - recent emails surfaced as reports.
"""

from meetdesk.environments.google.gmail.client import GmailClient, sender_display_name
from meetdesk.environments.google.gmail.schemas import GmailReport

__all__ = [
    "GmailClient",
    "GmailReport",
    "sender_display_name",
]
