"""Blob storage for uploaded media and exported PDFs."""

from src.infrastructure.storage.blob import (
    BlobStorage,
    LocalBlobStorage,
    StoredObject,
    get_blob_storage,
    guess_content_type,
)

__all__ = [
    "BlobStorage",
    "LocalBlobStorage",
    "StoredObject",
    "get_blob_storage",
    "guess_content_type",
]
