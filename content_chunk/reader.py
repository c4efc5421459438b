"""Chunk reader: reassembles a stored payload from its download stream."""

from typing import Any, Callable, Optional

from common.constants import TEXT_ENCODING
from common.logging_config import get_logger
from blobstore import BlobStoreError, ChunkedBlobStore, get_default_store
from content_chunk.exceptions import PayloadRetrievalFailed

logger = get_logger(__name__)

RetrievalCallback = Callable[[Optional[PayloadRetrievalFailed], Optional[str]], Any]


def is_valid_file_id(file_id: Any) -> bool:
    return isinstance(file_id, str) and file_id.strip() != ""


def _display_id(file_id: Any) -> str:
    return "null" if file_id is None else str(file_id)


class SingleShotCallback:
    """
    Wraps a retrieval callback so it can be invoked at most once.
    """

    def __init__(self, callback: RetrievalCallback):
        self._callback = callback
        self.called = False

    def __call__(self, error: Optional[PayloadRetrievalFailed], body: Optional[str]) -> Any:
        if self.called:
            raise RuntimeError("retrieval callback invoked more than once")
        self.called = True
        return self._callback(error, body)


class ChunkReader:
    def __init__(self, bucket: Optional[ChunkedBlobStore] = None):
        self._bucket = bucket

    @property
    def bucket(self) -> ChunkedBlobStore:
        if self._bucket is None:
            self._bucket = get_default_store()
        return self._bucket

    async def fetch_bytes(self, file_id: str) -> bytes:
        """
        Read every chunk of a file, in the order the store emits them.

        Raises:
            PayloadRetrievalFailed: If the id is invalid or the download stream fails
        """
        if not is_valid_file_id(file_id):
            raise PayloadRetrievalFailed(f"Payload id: {_display_id(file_id)} is invalid")

        body = bytearray()
        try:
            async with self.bucket.open_download_stream(file_id) as stream:
                async for fragment in stream:
                    body.extend(fragment)
        except BlobStoreError as e:
            logger.warning(f"Error reading payload {file_id}: {e}")
            raise PayloadRetrievalFailed(f"Error in reading stream: {e}") from e

        logger.debug(f"Read payload {file_id} ({len(body)} bytes)")
        return bytes(body)

    async def fetch(self, file_id: str) -> str:
        """
        Read a stored payload back as text.

        Binary payloads are decoded too; invalid UTF-8 becomes U+FFFD.
        """
        body = await self.fetch_bytes(file_id)
        return body.decode(TEXT_ENCODING, errors="replace")

    async def retrieve(self, file_id: str, callback: RetrievalCallback) -> None:
        """
        Read a stored payload and hand the outcome to `callback(error, body)`.

        The callback runs exactly once: with (None, body) on success, or
        with (PayloadRetrievalFailed, None) on failure.
        """
        deliver = SingleShotCallback(callback)
        try:
            body = await self.fetch(file_id)
        except PayloadRetrievalFailed as e:
            deliver(e, None)
            return
        deliver(None, body)


async def fetch_payload(file_id: str, bucket: Optional[ChunkedBlobStore] = None) -> str:
    return await ChunkReader(bucket).fetch(file_id)


async def retrieve_payload(
    file_id: str,
    callback: RetrievalCallback,
    bucket: Optional[ChunkedBlobStore] = None,
) -> None:
    await ChunkReader(bucket).retrieve(file_id, callback)
