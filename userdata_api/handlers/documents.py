"""
Request body handling for document writes.
"""

from typing import Any, Dict

from fastapi import Request

from ..errors import InvalidDocumentError


async def read_json_document(request: Request) -> Dict[str, Any]:
    """
    Parse the request body as the caller's new document.

    Used as a dependency declared after require_identity, so the body is only
    read once the caller is authenticated.

    Raises:
        InvalidDocumentError: If the body is not a JSON object
    """
    try:
        document = await request.json()
    except ValueError as e:
        raise InvalidDocumentError() from e

    if not isinstance(document, dict):
        raise InvalidDocumentError()
    return document
