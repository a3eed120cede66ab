"""
Request errors for the user data API.

Each error carries the HTTP status and the message shown to the caller.
Anything more specific belongs in the server log, never in the response.
"""

from fastapi import status


class UserDataError(Exception):
    """Base class for errors that end a request with a fixed response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ConfigurationError(UserDataError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server configuration error: Firebase service account key not found."


class AuthorizationHeaderError(UserDataError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authorization token missing or invalid."


class TokenInvalidError(UserDataError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid authentication token."


class InvalidDocumentError(UserDataError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request body must be a JSON object."


class StoreReadError(UserDataError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to retrieve data."


class StoreWriteError(UserDataError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to save data."
