"""SQLite-backed chunked blob store."""

from blobstore.bucket import ChunkedBlobStore, get_default_store, reset_default_store
from blobstore.exceptions import (
    BlobNotFoundError,
    BlobStoreError,
    ChecksumMismatchError,
    ChunkMissingError,
    ChunkSizeError,
    StorageBackendError,
    StreamClosedError,
)
from blobstore.models import FileRecord
from blobstore.streams import DownloadStream, UploadStream

__all__ = [
    "ChunkedBlobStore",
    "get_default_store",
    "reset_default_store",
    "BlobNotFoundError",
    "BlobStoreError",
    "ChecksumMismatchError",
    "ChunkMissingError",
    "ChunkSizeError",
    "StorageBackendError",
    "StreamClosedError",
    "FileRecord",
    "DownloadStream",
    "UploadStream",
]
