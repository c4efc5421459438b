"""Chunk writer: classifies, normalizes and streams a payload into the blob store."""

from typing import Any, Optional

from common.logging_config import get_logger
from blobstore import BlobStoreError, ChunkedBlobStore, get_default_store
from content_chunk.classifier import classify_payload
from content_chunk.exceptions import StorageWriteFailed
from content_chunk.normalizer import normalize_payload

logger = get_logger(__name__)


class ChunkWriter:
    def __init__(self, bucket: Optional[ChunkedBlobStore] = None):
        self._bucket = bucket

    @property
    def bucket(self) -> ChunkedBlobStore:
        # Resolved lazily so rejected payloads never touch the store.
        if self._bucket is None:
            self._bucket = get_default_store()
        return self._bucket

    async def store(self, payload: Any) -> str:
        """
        Persist a payload as a chunked file.

        Args:
            payload: str, bytes/bytearray, buffer-protocol object, sequence or array-like object

        Returns:
            Identifier of the created file record

        Raises:
            InvalidPayload: If payload is None or empty text
            UnsupportedPayloadType: If payload has no storable shape
            StorageWriteFailed: If the blob store fails; no file record is created
        """
        canonical = normalize_payload(classify_payload(payload))

        try:
            stream = self.bucket.open_upload_stream(metadata=canonical.metadata)
            async with stream:
                await stream.write(canonical.data)
        except BlobStoreError as e:
            logger.error(f"Failed to store {canonical.shape.value} payload: {e}")
            raise StorageWriteFailed(e) from e

        record = stream.file_record
        logger.info(
            f"Stored {canonical.shape.value} payload as file {record.file_id} ({record.length} bytes)"
        )
        return record.file_id


async def store_payload(payload: Any, bucket: Optional[ChunkedBlobStore] = None) -> str:
    """Store a payload with a one-off ChunkWriter."""
    return await ChunkWriter(bucket).store(payload)
