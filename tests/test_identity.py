"""
Test file for Firebase identity verification and app bootstrap
"""

import logging
from unittest.mock import Mock, patch

import pytest
from firebase_admin import exceptions

from userdata_api.errors import TokenInvalidError
from userdata_api.models import ServiceCredential
from userdata_api.services import IdentityVerifier, initialize_firebase_app


class TestIdentityVerifier:
    """Test class for IdentityVerifier"""

    @pytest.fixture
    def firebase_app(self):
        return Mock(name="firebase_app")

    @patch("userdata_api.services.identity.auth.verify_id_token")
    def test_verify_returns_identity(self, mock_verify, firebase_app):
        mock_verify.return_value = {
            "uid": "uid-alice",
            "email": "alice@example.com",
            "iss": "https://securetoken.google.com/demo-project",
        }
        verifier = IdentityVerifier(app=firebase_app)

        identity = verifier.verify("token-alice")

        assert identity.uid == "uid-alice"
        assert identity.email == "alice@example.com"
        assert identity.claims["iss"] == "https://securetoken.google.com/demo-project"
        mock_verify.assert_called_once_with("token-alice", app=firebase_app, check_revoked=False)

    @patch("userdata_api.services.identity.auth.verify_id_token")
    def test_check_revoked_is_passed_through(self, mock_verify, firebase_app):
        mock_verify.return_value = {"uid": "uid-alice"}
        verifier = IdentityVerifier(app=firebase_app, check_revoked=True)

        verifier.verify("token-alice")

        mock_verify.assert_called_once_with("token-alice", app=firebase_app, check_revoked=True)

    @pytest.mark.parametrize("error", [
        ValueError("Illegal ID token provided"),
        exceptions.InvalidArgumentError("Token expired"),
        exceptions.UnavailableError("Failed to fetch public key certificates"),
    ])
    @patch("userdata_api.services.identity.auth.verify_id_token")
    def test_any_failure_is_token_invalid(self, mock_verify, error, caplog):
        """The caller sees one generic error; the cause goes to the log"""
        mock_verify.side_effect = error
        verifier = IdentityVerifier()

        with caplog.at_level(logging.WARNING):
            with pytest.raises(TokenInvalidError) as excinfo:
                verifier.verify("bad-token")

        assert excinfo.value.message == "Invalid authentication token."
        assert str(error) in caplog.text

    @patch("userdata_api.services.identity.auth.verify_id_token")
    def test_token_without_uid(self, mock_verify):
        mock_verify.return_value = {"email": "alice@example.com"}

        with pytest.raises(TokenInvalidError):
            IdentityVerifier().verify("token-alice")


class TestInitializeFirebaseApp:
    """Test class for initialize_firebase_app"""

    @pytest.fixture
    def credential(self):
        return ServiceCredential(info={"type": "service_account", "project_id": "demo-project"})

    @patch("firebase_admin.initialize_app")
    @patch("firebase_admin.get_app")
    def test_reuses_existing_app(self, mock_get_app, mock_initialize, credential):
        existing = Mock(name="existing_app")
        mock_get_app.return_value = existing

        assert initialize_firebase_app(credential) is existing
        mock_get_app.assert_called_once_with("[DEFAULT]")
        mock_initialize.assert_not_called()

    @patch("userdata_api.services.firebase.credentials.Certificate")
    @patch("firebase_admin.initialize_app")
    @patch("firebase_admin.get_app")
    def test_initializes_new_app(self, mock_get_app, mock_initialize, mock_certificate, credential):
        mock_get_app.side_effect = ValueError("The default Firebase app does not exist.")
        created = Mock(name="created_app")
        mock_initialize.return_value = created

        app = initialize_firebase_app(credential, name="userdata-test")

        assert app is created
        mock_get_app.assert_called_once_with("userdata-test")
        mock_certificate.assert_called_once_with(credential.info)
        mock_initialize.assert_called_once_with(mock_certificate.return_value, name="userdata-test")

    @patch("firebase_admin.get_app")
    def test_rejects_non_service_account_key(self, mock_get_app):
        mock_get_app.side_effect = ValueError("The default Firebase app does not exist.")
        credential = ServiceCredential(info={"type": "authorized_user"})

        with pytest.raises(ValueError):
            initialize_firebase_app(credential)
