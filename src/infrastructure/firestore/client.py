"""
Firestore document store for media records.

Records live under artifacts/<app_id>/public/data/media. The app_id is a
fixed string shared by convention with the frontend that reads these
documents, not something negotiated at runtime.

Mock mode keeps documents in memory, enabling API testing without a
Firebase project or service account.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional
from uuid import uuid4

from src.core.media.models import MediaRecord

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "media-intake"


class StorageError(Exception):
    """Raised when document store operations fail."""
    pass


def build_media_collection_path(app_id: str) -> str:
    """Slash-separated path of the media collection."""
    return f"artifacts/{app_id}/public/data/media"


@dataclass
class FirestoreConfig:
    """
    Configuration for the Firestore repository.

    service_account_info has the same keys as a downloaded
    service account JSON file.
    """
    service_account_info: dict[str, Any]
    app_id: str = "default-app-id"

    def __post_init__(self) -> None:
        for key in ("project_id", "private_key", "client_email"):
            if not self.service_account_info.get(key):
                raise ValueError(f"service account {key} is required")


class FirestoreMediaRepository:
    """
    Media repository backed by Cloud Firestore.

    The firebase-admin client is synchronous, so every call runs in a
    worker thread to keep the event loop free for other requests.
    """

    def __init__(self, config: FirestoreConfig) -> None:
        """
        Initialize firebase-admin with the service account.

        We import firebase_admin here (not at module level) because
        mock mode doesn't need it.
        """
        import firebase_admin
        from firebase_admin import credentials, firestore

        self._config = config

        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            app = firebase_admin.initialize_app(
                credentials.Certificate(config.service_account_info),
                name=FIREBASE_APP_NAME,
            )

        self._client = firestore.client(app=app)
        self._collection = (
            self._client.collection("artifacts")
            .document(config.app_id)
            .collection("public")
            .document("data")
            .collection("media")
        )

        logger.info(
            "Initialized Firestore media repository",
            extra={
                "project_id": config.service_account_info["project_id"],
                "collection": build_media_collection_path(config.app_id),
            }
        )

    async def add(self, record: MediaRecord) -> str:
        """Add a document and return the id Firestore generated for it."""
        try:
            _, doc_ref = await asyncio.to_thread(
                self._collection.add, record.to_document()
            )
        except Exception as e:
            logger.error(
                "Failed to add media document",
                extra={"user_id": record.user_id, "error": str(e)}
            )
            raise StorageError(f"Media write failed: {e}")

        return doc_ref.id

    async def update(self, media_id: str, fields: dict[str, Any]) -> None:
        """Update fields of an existing document. Fails if it no longer exists."""
        doc_ref = self._collection.document(media_id)

        try:
            await asyncio.to_thread(doc_ref.update, fields)
        except Exception as e:
            logger.error(
                "Failed to update media document",
                extra={"media_id": media_id, "error": str(e)}
            )
            raise StorageError(f"Media update failed: {e}")


# ---------------------------------------------------------------------------
# Mock Repository for Local Development
# ---------------------------------------------------------------------------

class MockMediaRepository:
    """
    In-memory document store for local development.

    Documents are kept in a dictionary keyed by their full path, so the
    layout matches what Firestore would hold. Not suitable for
    production, but perfect for development and testing.
    """

    def __init__(self, app_id: str = "default-app-id") -> None:
        self._collection_path = build_media_collection_path(app_id)
        self._documents: dict[str, dict[str, Any]] = {}
        logger.info("Initialized mock media repository (in-memory)")

    async def add(self, record: MediaRecord) -> str:
        media_id = uuid4().hex[:20]
        self._documents[self._path(media_id)] = record.to_document()

        logger.debug(
            "Stored media document in mock repository",
            extra={"media_id": media_id, "user_id": record.user_id}
        )

        return media_id

    async def update(self, media_id: str, fields: dict[str, Any]) -> None:
        path = self._path(media_id)
        if path not in self._documents:
            raise StorageError(f"Media document not found: {path}")

        self._documents[path].update(fields)

    def _path(self, media_id: str) -> str:
        return f"{self._collection_path}/{media_id}"

    # Helper methods for testing
    def _all_documents(self) -> dict[str, dict[str, Any]]:
        """Copy of every stored document keyed by path (for test assertions)."""
        return {path: dict(doc) for path, doc in self._documents.items()}

    def _clear(self) -> None:
        """Clear all mock storage (for test cleanup)."""
        self._documents.clear()


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_media_repository(
    config: Optional[FirestoreConfig] = None,
    mock_mode: bool = False,
    app_id: str = "default-app-id",
):
    """
    Create the media repository based on configuration.

    Args:
        config: Firestore configuration (required if not mock_mode)
        mock_mode: If True, return the in-memory repository
        app_id: Collection segment used by the mock repository

    Returns:
        MediaRepository implementation (Firestore or Mock)
    """
    if mock_mode:
        return MockMediaRepository(app_id=app_id)

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return FirestoreMediaRepository(config)
