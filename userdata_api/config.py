"""
Configuration module for the user data API.

This module provides environment variable configuration and settings management
using Pydantic Settings for type-safe configuration, plus the one-time parsing
of the Firebase service account key.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ServiceCredential

logger = logging.getLogger(__name__)

DOCUMENT_BACKENDS = ("firestore", "file")


class UserDataSettings(BaseSettings):
    """
    Configuration settings for the user data API.

    All settings are loaded from environment variables with validation.
    The service account key is deliberately optional: a missing or broken key
    must not stop the process from starting.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    firebase_service_account_key: Optional[str] = Field(
        None,
        description="Firebase service account key as a JSON string"
    )

    users_collection: str = Field(
        "users",
        description="Firestore collection holding one document per user"
    )

    document_backend: str = Field(
        "firestore",
        description="Document storage backend (firestore or file)"
    )

    document_file: Path = Field(
        Path("/data/user_documents.json"),
        description="JSON file path used by the file backend"
    )

    check_revoked: bool = Field(
        False,
        description="Reject revoked ID tokens and disabled users"
    )

    log_level: str = Field(
        "INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    host: str = Field("0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(8000, description="Bind port for the HTTP server")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard Python logging levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator("document_backend")
    @classmethod
    def validate_document_backend(cls, v):
        """Validate the storage backend name."""
        backend = v.strip().lower()
        if backend not in DOCUMENT_BACKENDS:
            raise ValueError(f"DOCUMENT_BACKEND must be one of: {', '.join(DOCUMENT_BACKENDS)}")
        return backend

    @field_validator("users_collection")
    @classmethod
    def validate_collection(cls, v):
        """Firestore collection ids cannot be empty or contain slashes."""
        if not v or not v.strip() or "/" in v:
            raise ValueError("USERS_COLLECTION must be a non-empty name without '/'")
        return v.strip()


def load_service_credential(raw_key: Optional[str]) -> Optional[ServiceCredential]:
    """
    Parse the service account key into a credential.

    Failure is reported through the log and a None return value rather than an
    exception, so the application still starts and can answer every request
    with a configuration error.

    Args:
        raw_key: Service account JSON as read from the environment

    Returns:
        ServiceCredential, or None if the key is missing or unparsable
    """
    if not raw_key or not raw_key.strip():
        logger.error("FIREBASE_SERVICE_ACCOUNT_KEY is not set; every request will fail")
        return None

    try:
        info = json.loads(raw_key)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse FIREBASE_SERVICE_ACCOUNT_KEY: {e}")
        return None

    if not isinstance(info, dict):
        logger.error(
            f"FIREBASE_SERVICE_ACCOUNT_KEY must be a JSON object, got {type(info).__name__}"
        )
        return None

    return ServiceCredential(info=info)


# Global settings instance
settings: Optional[UserDataSettings] = None


def get_settings() -> UserDataSettings:
    """
    Get the global settings instance, creating it if necessary.

    Returns:
        UserDataSettings: The global settings instance

    Raises:
        ValueError: If an environment variable is present but invalid
    """
    global settings
    if settings is None:
        settings = UserDataSettings()
    return settings


def reload_settings() -> UserDataSettings:
    """
    Force reload settings from environment variables.

    This is useful for testing or when environment variables change.
    """
    global settings
    settings = UserDataSettings()
    return settings
