"""External collaborators."""

from .blob_store import BlobStore, BlobStoreError, StoredBlob, build_blob_store

__all__ = ["BlobStore", "BlobStoreError", "StoredBlob", "build_blob_store"]
