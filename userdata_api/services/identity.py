"""
Identity Verification Service

Exchanges a Firebase ID token for the caller's verified identity.
"""

import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth

from ..errors import TokenInvalidError
from ..models import VerifiedIdentity

logger = logging.getLogger(__name__)


class IdentityVerifier:
    """
    Verifies Firebase ID tokens.

    Safe to share between concurrent requests: it holds only the Firebase app
    handle and never mutates it.

    Example usage:
        verifier = IdentityVerifier(app=firebase_app)
        identity = verifier.verify(id_token)
        # identity.uid -> "Xk2...9a"
    """

    def __init__(self, app: Optional[firebase_admin.App] = None, check_revoked: bool = False):
        """
        Args:
            app: Firebase app to verify against (default app if None)
            check_revoked: Also reject revoked tokens and disabled accounts
        """
        self.app = app
        self.check_revoked = check_revoked

    def verify(self, token: str) -> VerifiedIdentity:
        """
        Verify an ID token.

        Args:
            token: Raw ID token from the Authorization header

        Returns:
            VerifiedIdentity for the token's subject

        Raises:
            TokenInvalidError: For any verification failure. The cause is
                logged here and is not exposed to the caller.
        """
        try:
            decoded = auth.verify_id_token(
                token, app=self.app, check_revoked=self.check_revoked
            )
        except Exception as e:
            logger.warning(f"Error verifying auth token ({type(e).__name__}): {e}")
            raise TokenInvalidError() from e

        uid = decoded.get("uid") if isinstance(decoded, dict) else None
        if not uid:
            logger.warning("Verified auth token carries no uid")
            raise TokenInvalidError()

        return VerifiedIdentity.from_decoded_token(decoded)
