"""Upload and download streams over the chunk table."""

import asyncio
import functools
import hashlib
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from common.logging_config import get_logger
from common.types import ChunkRecord
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
from blobstore.repositories import ChunkRepository, FileRepository

logger = get_logger(__name__)


async def run_blocking(func, *args, **kwargs):
    """
    Run a blocking database call in the loop's default executor.

    Raises:
        StorageBackendError: If SQLite fails
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))
    except sqlite3.Error as e:
        raise StorageBackendError(f"{type(e).__name__}: {e}") from e


class UploadStream:
    """
    Write side of a stored file.

    Bytes are buffered and flushed as fixed-size chunk rows. The file record
    is inserted only by close(), after every chunk is stored, so a reader
    never observes a partially written file.
    """

    def __init__(self, file_id: str, chunk_size: int, metadata: Optional[Dict[str, Any]] = None):
        self.file_id = file_id
        self.chunk_size = chunk_size
        self.metadata = dict(metadata or {})
        self.file_record: Optional[FileRecord] = None
        self._buffer = bytearray()
        self._next_n = 0
        self._length = 0
        self._hasher = hashlib.sha256()
        self._state = "open"

    @property
    def closed(self) -> bool:
        return self._state != "open"

    @property
    def length(self) -> int:
        return self._length

    async def __aenter__(self) -> "UploadStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if self.closed:
            return False
        if exc_type is not None:
            await self.abort()
            return False
        try:
            await self.close()
        except BaseException:
            await self.abort()
            raise
        return False

    def _check_open(self) -> None:
        if self.closed:
            raise StreamClosedError(f"Upload stream for file {self.file_id} is {self._state}")

    async def write(self, data) -> int:
        """
        Append bytes to the stream, storing every full chunk.

        Args:
            data: bytes-like object

        Returns:
            Number of bytes accepted

        Raises:
            StreamClosedError: If the stream was closed or aborted
            StorageBackendError: If a chunk cannot be stored
        """
        self._check_open()
        data = bytes(data)
        self._buffer.extend(data)
        self._length += len(data)
        self._hasher.update(data)

        while len(self._buffer) >= self.chunk_size:
            await self._flush_chunk(bytes(self._buffer[:self.chunk_size]))
            del self._buffer[:self.chunk_size]

        return len(data)

    async def _flush_chunk(self, piece: bytes) -> None:
        chunk = ChunkRecord(file_id=self.file_id, n=self._next_n, data=piece)
        await run_blocking(ChunkRepository.insert_chunk, chunk)
        self._next_n += 1

    async def close(self) -> FileRecord:
        """
        Store the trailing partial chunk and create the file record.

        Returns:
            The created FileRecord

        Raises:
            StreamClosedError: If the stream was already closed or aborted
            StorageBackendError: If the chunk or file record cannot be stored
        """
        self._check_open()

        if self._buffer:
            await self._flush_chunk(bytes(self._buffer))
            self._buffer.clear()

        record = FileRecord(
            file_id=self.file_id,
            length=self._length,
            chunk_size=self.chunk_size,
            upload_date=datetime.now(timezone.utc),
            checksum=self._hasher.hexdigest(),
            metadata=self.metadata,
        )
        await run_blocking(FileRepository.create_file, record)

        self._state = "closed"
        self.file_record = record
        logger.info(f"Stored file {self.file_id} ({self._length} bytes in {self._next_n} chunks)")
        return record

    async def abort(self) -> bool:
        """
        Discard the stream and remove any chunks already stored.

        Returns:
            True if the stored chunks were removed, False if cleanup failed
        """
        if self._state == "closed":
            raise StreamClosedError(f"Upload stream for file {self.file_id} is already closed")
        self._state = "aborted"
        self._buffer.clear()

        if self._next_n == 0:
            return True

        try:
            await run_blocking(ChunkRepository.delete_chunks, self.file_id)
            logger.info(f"Aborted upload of file {self.file_id}, removed {self._next_n} chunks")
            return True
        except BlobStoreError as e:
            logger.error(f"Failed to remove chunks of aborted file {self.file_id}: {e}", exc_info=True)
            return False


class DownloadStream:
    """
    Read side of a stored file: an async iterator of chunk payloads in order.
    """

    def __init__(self, file_id: str):
        self.file_id = file_id
        self.file_record: Optional[FileRecord] = None
        self._n = 0
        self._received = 0
        self._hasher = hashlib.sha256()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> FileRecord:
        """
        Look up the file record.

        Raises:
            BlobNotFoundError: If no file record exists for the identifier
        """
        if self.file_record is None:
            record = await run_blocking(FileRepository.get_by_id, self.file_id)
            if record is None:
                raise BlobNotFoundError(self.file_id)
            self.file_record = record
        return self.file_record

    def close(self) -> None:
        self._closed = True

    async def __aenter__(self) -> "DownloadStream":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def __aiter__(self) -> "DownloadStream":
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration

        record = await self.open()

        if self._n >= record.chunk_count:
            self._verify(record)
            self.close()
            raise StopAsyncIteration

        chunk = await run_blocking(ChunkRepository.get_chunk, self.file_id, self._n)
        if chunk is None:
            raise ChunkMissingError(self.file_id, self._n)

        expected = min(record.chunk_size, record.length - self._n * record.chunk_size)
        if chunk.size != expected:
            raise ChunkSizeError(
                f"ChunkIsWrongSize: Got unexpected length: {chunk.size}, expected: {expected}"
            )

        self._n += 1
        self._received += chunk.size
        self._hasher.update(chunk.data)
        return chunk.data

    async def read(self) -> bytes:
        """Read every remaining chunk into one bytes object."""
        buffer = bytearray()
        async for piece in self:
            buffer.extend(piece)
        return bytes(buffer)

    def _verify(self, record: FileRecord) -> None:
        actual = self._hasher.hexdigest()
        if self._received != record.length or actual != record.checksum:
            raise ChecksumMismatchError(
                f"ChecksumMismatch: file {self.file_id} expected {record.checksum}, got {actual}"
            )
