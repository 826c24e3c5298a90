"""
Google Docs Module - read-only document access.
"""

from meetdesk.environments.google.docs.client import GoogleDocsClient, extract_document_id

__all__ = [
    "GoogleDocsClient",
    "extract_document_id",
]
