"""
Bearer token authentication handler for the user data API.

This module provides the FastAPI dependencies that turn an incoming request
into a verified caller identity, and that hand out the shared document store.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import AuthorizationHeaderError, ConfigurationError
from ..models import VerifiedIdentity
from ..services import DocumentStore

# Missing or non-Bearer headers are reported by require_identity, after the
# configuration check, so auto_error stays off.
security = HTTPBearer(auto_error=False)


def require_identity(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> VerifiedIdentity:
    """
    Verify the caller's Firebase ID token.

    Checks run in a fixed order and stop at the first failure:
    1. The credential and both services exist (500 otherwise)
    2. An "Authorization: Bearer <token>" header is present (401 otherwise)
    3. The token verifies with Firebase (403 otherwise)

    Args:
        request: Incoming request, used to reach the services on app.state
        credentials: Authorization header parsed by HTTPBearer, or None

    Returns:
        VerifiedIdentity: The caller's identity

    Raises:
        ConfigurationError: If the service account key failed to load or a
            service could not be created from it
        AuthorizationHeaderError: If the header is missing or malformed
        TokenInvalidError: If the token does not verify
    """
    state = request.app.state
    if (
        state.credential is None
        or state.identity_verifier is None
        or state.document_store is None
    ):
        raise ConfigurationError()

    # HTTPBearer accepts any casing of the scheme; only "Bearer" is allowed here
    if credentials is None or credentials.scheme != "Bearer" or not credentials.credentials.strip():
        raise AuthorizationHeaderError()

    return state.identity_verifier.verify(credentials.credentials.strip())


def get_document_store(request: Request) -> DocumentStore:
    """Return the shared document store."""
    store = request.app.state.document_store
    if store is None:
        raise ConfigurationError()
    return store
