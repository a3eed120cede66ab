"""
User Data API - Main FastAPI Application

This FastAPI application stores one JSON document per Firebase user.
Callers authenticate with a Firebase ID token; the verified uid selects the
document in Firestore, so a caller can only ever reach their own data.

Endpoints:
- GET /health - Health check
- GET /api/data - Read the caller's document ({} if none stored yet)
- POST /api/data - Replace the caller's document with the request body
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional, Tuple

from fastapi import Depends, FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse
from firebase_admin import firestore
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import UserDataSettings, get_settings, load_service_credential
from .errors import StoreReadError, UserDataError
from .handlers import get_document_store, read_json_document, require_identity
from .models import HealthResponse, ServiceCredential, VerifiedIdentity
from .services import (
    DocumentStore,
    FileDocumentStore,
    FirestoreDocumentStore,
    IdentityVerifier,
    initialize_firebase_app,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def build_services(
    settings: UserDataSettings,
    credential: ServiceCredential,
    identity_verifier: Optional[IdentityVerifier] = None,
    document_store: Optional[DocumentStore] = None,
) -> Tuple[Optional[IdentityVerifier], Optional[DocumentStore]]:
    """
    Create whichever of the identity verifier and document store were not supplied.

    A credential that parses as JSON but is not a usable service account key
    leaves the missing services as None instead of raising.

    Returns:
        (identity_verifier, document_store)
    """
    needs_firebase = identity_verifier is None or (
        document_store is None and settings.document_backend == "firestore"
    )

    firebase_app = None
    if needs_firebase:
        try:
            firebase_app = initialize_firebase_app(credential)
        except ValueError as e:
            logger.error(f"Failed to initialize Firebase from service account key: {e}")
            return identity_verifier, document_store

    if identity_verifier is None:
        identity_verifier = IdentityVerifier(app=firebase_app, check_revoked=settings.check_revoked)

    if document_store is None:
        if settings.document_backend == "file":
            document_store = FileDocumentStore(data_file=str(settings.document_file))
            logger.info(f"Using file document store at {settings.document_file}")
        else:
            try:
                client = firestore.client(firebase_app)
            except ValueError as e:
                logger.error(f"Failed to create Firestore client: {e}")
                return identity_verifier, None
            document_store = FirestoreDocumentStore(client, collection=settings.users_collection)
            logger.info(f"Using Firestore collection '{settings.users_collection}'")

    return identity_verifier, document_store


def create_app(
    settings: Optional[UserDataSettings] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    document_store: Optional[DocumentStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The credential and services are created here, once, and stored on
    app.state; request handlers only read them.

    Args:
        settings: Settings to use (global settings if None)
        identity_verifier: Verifier to use instead of the Firebase one
        document_store: Store to use instead of the configured backend
    """
    settings = settings or get_settings()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(
        title="User Data API",
        description="Per-user JSON document storage authenticated with Firebase ID tokens",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    credential = load_service_credential(settings.firebase_service_account_key)
    if credential is not None:
        identity_verifier, document_store = build_services(
            settings, credential, identity_verifier, document_store
        )

    app.state.settings = settings
    app.state.credential = credential
    app.state.identity_verifier = identity_verifier
    app.state.document_store = document_store

    if credential is None:
        logger.error("Service account key unavailable; /api/data will answer 500 to every request")

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """
        Health check endpoint.

        Returns:
            HealthResponse: Health status and service availability
        """
        services_status = {
            "credential": app.state.credential is not None,
            "identity_verifier": app.state.identity_verifier is not None,
            "document_store": app.state.document_store is not None,
        }

        all_services_ready = all(services_status.values())

        health_response = HealthResponse(
            status="healthy" if all_services_ready else "degraded",
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            services=services_status,
            version=VERSION,
        )

        status_code = status.HTTP_200_OK if all_services_ready else status.HTTP_503_SERVICE_UNAVAILABLE

        if not all_services_ready:
            logger.warning(f"Health check failed - services status: {services_status}")

        return JSONResponse(content=health_response.model_dump(), status_code=status_code)

    @app.get("/api/data")
    def read_data(
        identity: Annotated[VerifiedIdentity, Depends(require_identity)],
        store: Annotated[DocumentStore, Depends(get_document_store)],
    ):
        """
        Return the caller's document.

        A user with no stored document gets an empty object, not a 404.
        """
        document = store.get_document(identity.uid)
        if document is None:
            logger.info(f"No document stored for user {identity.uid}")
            document = {}
        else:
            logger.info(f"Loaded document for user {identity.uid}")

        try:
            content = jsonable_encoder(document)
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding document for user {identity.uid}: {e}")
            raise StoreReadError() from e

        return JSONResponse(content=content, status_code=status.HTTP_200_OK)

    @app.post("/api/data")
    def write_data(
        identity: Annotated[VerifiedIdentity, Depends(require_identity)],
        document: Annotated[Dict[str, Any], Depends(read_json_document)],
        store: Annotated[DocumentStore, Depends(get_document_store)],
    ):
        """Replace the caller's document with the request body."""
        store.set_document(identity.uid, document)
        logger.info(f"Saved document for user {identity.uid}")

        return PlainTextResponse("Data saved successfully.", status_code=status.HTTP_200_OK)

    @app.exception_handler(UserDataError)
    async def user_data_error_handler(request, exc):
        """Render request errors as their fixed plain-text message."""
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        """Render routing errors (404, 405) as plain text, keeping headers such as Allow."""
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Log unhandled exceptions and hide their details from the caller."""
        logger.error(f"Unhandled exception: {exc}")
        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return app


if __name__ == "__main__":
    import uvicorn

    current = get_settings()
    uvicorn.run(create_app(current), host=current.host, port=current.port, log_level=current.log_level.lower())
