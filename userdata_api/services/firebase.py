"""
Firebase Admin bootstrap

Initializes the Firebase Admin app from the service account credential.
The SDK keeps apps in a process-wide registry, so an app that already exists
under the requested name is reused instead of initialized twice.
"""

import logging

import firebase_admin
from firebase_admin import credentials

from ..models import ServiceCredential

logger = logging.getLogger(__name__)


def initialize_firebase_app(
    credential: ServiceCredential, name: str = "[DEFAULT]"
) -> firebase_admin.App:
    """
    Return the Firebase app for the given credential, initializing it once.

    Args:
        credential: Parsed service account key
        name: Firebase app name

    Returns:
        firebase_admin.App

    Raises:
        ValueError: If the key is not a usable service account certificate
    """
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        pass

    certificate = credentials.Certificate(dict(credential.info))
    app = firebase_admin.initialize_app(certificate, name=name)
    logger.info(f"Initialized Firebase app for project {credential.project_id}")
    return app
