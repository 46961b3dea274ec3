"""
Firestore integration for media records.

Implements the MediaRepository protocol from core.media.intake, with an
in-memory mock for local development without credentials.
"""

from .client import (
    FirestoreConfig,
    FirestoreMediaRepository,
    MockMediaRepository,
    StorageError,
    build_media_collection_path,
    create_media_repository,
)

__all__ = [
    "FirestoreConfig",
    "FirestoreMediaRepository",
    "MockMediaRepository",
    "StorageError",
    "build_media_collection_path",
    "create_media_repository",
]
