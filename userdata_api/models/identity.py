"""
Identity and credential models

Pydantic models for the server's own Firebase credential and for the
caller identity obtained from a verified ID token.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class ServiceCredential(BaseModel):
    """
    Firebase service account key

    Parsed once at startup and never modified afterwards. The mapping is
    passed as-is to firebase_admin.credentials.Certificate.
    """
    model_config = ConfigDict(frozen=True)

    info: Dict[str, Any]

    @property
    def project_id(self) -> Optional[str]:
        return self.info.get("project_id")

    @property
    def client_email(self) -> Optional[str]:
        return self.info.get("client_email")


class VerifiedIdentity(BaseModel):
    """Caller identity decoded from a Firebase ID token."""
    uid: str  # Firebase user id, also the document id
    email: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)  # Full decoded token

    @classmethod
    def from_decoded_token(cls, decoded: Dict[str, Any]) -> "VerifiedIdentity":
        return cls(uid=decoded["uid"], email=decoded.get("email"), claims=decoded)


class HealthResponse(BaseModel):
    """Health check payload"""
    status: str
    timestamp: str
    services: Dict[str, bool]
    version: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-01T00:00:00Z",
                "services": {
                    "credential": True,
                    "identity_verifier": True,
                    "document_store": True,
                },
                "version": "1.0.0",
            }
        }
    )
