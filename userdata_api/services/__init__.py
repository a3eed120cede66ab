"""
User Data API Services

Clients for the identity service and the per-user document store.
"""

from .document_store import DocumentStore, FileDocumentStore, FirestoreDocumentStore
from .firebase import initialize_firebase_app
from .identity import IdentityVerifier

__all__ = [
    "DocumentStore",
    "FileDocumentStore",
    "FirestoreDocumentStore",
    "IdentityVerifier",
    "initialize_firebase_app",
]
