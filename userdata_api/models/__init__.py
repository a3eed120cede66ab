"""
User Data API Models Package

Pydantic models for credentials, caller identities and service responses.
"""

from .identity import (
    ServiceCredential,
    VerifiedIdentity,
    HealthResponse,
)

__all__ = [
    "ServiceCredential",
    "VerifiedIdentity",
    "HealthResponse",
]
