"""
Document Store Service

Reads and overwrites the single JSON document owned by each user.
Two backends share the same interface:

- FirestoreDocumentStore: one Firestore document per uid in a collection
- FileDocumentStore: a local JSON file mapping uid to document, for development
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Per-user document storage. Writes replace the whole document."""

    @abstractmethod
    def get_document(self, uid: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the document for a user.

        Returns:
            The stored document, or None if the user has none

        Raises:
            StoreReadError: If the backend cannot be read
        """

    @abstractmethod
    def set_document(self, uid: str, document: Dict[str, Any]) -> None:
        """
        Replace the document for a user.

        Raises:
            StoreWriteError: If the backend cannot be written
        """


class FirestoreDocumentStore(DocumentStore):
    """
    Firestore-backed storage.

    Example usage:
        store = FirestoreDocumentStore(firestore.client(app), collection="users")
        store.set_document("uid-123", {"theme": "dark"})
        store.get_document("uid-123")
        # Returns: {"theme": "dark"}
    """

    def __init__(self, client, collection: str = "users"):
        """
        Args:
            client: google.cloud.firestore.Client
            collection: Collection holding one document per uid
        """
        self.client = client
        self.collection = collection

    def _document_ref(self, uid: str):
        return self.client.collection(self.collection).document(uid)

    def get_document(self, uid: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = self._document_ref(uid).get()
        except Exception as e:
            logger.error(f"Error getting document {self.collection}/{uid}: {e}")
            raise StoreReadError() from e

        if not snapshot.exists:
            return None
        return snapshot.to_dict()

    def set_document(self, uid: str, document: Dict[str, Any]) -> None:
        try:
            # No merge: fields missing from the new document are dropped
            self._document_ref(uid).set(document)
        except Exception as e:
            logger.error(f"Error setting document {self.collection}/{uid}: {e}")
            raise StoreWriteError() from e


class FileDocumentStore(DocumentStore):
    """
    JSON file storage keyed by uid.

    Thread-safe within one process. Writes go to a temp file that is then
    renamed over the data file.

    Example usage:
        store = FileDocumentStore("/data/user_documents.json")
        store.set_document("uid-123", {"theme": "dark"})
        store.get_document("uid-123")
        # Returns: {"theme": "dark"}
    """

    def __init__(self, data_file: str):
        """
        Args:
            data_file: Path to JSON file for storing documents
        """
        self.data_file = Path(data_file)
        self._lock = threading.Lock()

        # Ensure parent directory exists
        self.data_file.parent.mkdir(parents=True, exist_ok=True)

        if not self.data_file.exists():
            self._write_data({})

    def _read_data(self) -> Dict[str, Dict[str, Any]]:
        with open(self.data_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.data_file} does not contain a JSON object")
        return data

    def _write_data(self, data: Dict[str, Dict[str, Any]]) -> None:
        temp_file = self.data_file.with_suffix(".tmp")

        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        # Atomic on POSIX
        temp_file.replace(self.data_file)

    def get_document(self, uid: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            try:
                data = self._read_data()
            except (OSError, ValueError) as e:
                logger.error(f"Error reading {self.data_file}: {e}")
                raise StoreReadError() from e
            return data.get(uid)

    def set_document(self, uid: str, document: Dict[str, Any]) -> None:
        with self._lock:
            try:
                data = self._read_data()
                data[uid] = document
                self._write_data(data)
            except (OSError, TypeError, ValueError) as e:
                logger.error(f"Error writing {self.data_file}: {e}")
                raise StoreWriteError() from e
