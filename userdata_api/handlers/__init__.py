"""
Authentication and request handlers for the user data API.
"""

from .auth import get_document_store, require_identity
from .documents import read_json_document

__all__ = ["get_document_store", "read_json_document", "require_identity"]
