"""Chunked blob store: file records plus ordered chunk rows."""

import sqlite3
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from common.logging_config import get_logger
from common.types import StoreStats
from blobstore import config
from blobstore.database import get_db_connection, init_database
from blobstore.exceptions import StorageBackendError
from blobstore.models import FileRecord
from blobstore.repositories import ChunkRepository, FileRepository
from blobstore.streams import DownloadStream, UploadStream, run_blocking

logger = get_logger(__name__)


def generate_file_id() -> str:
    """
    Generate a new file identifier.

    Returns:
        UUID4 hex string
    """
    return uuid.uuid4().hex


def _delete_file(file_id: str) -> bool:
    with get_db_connection() as conn:
        try:
            ChunkRepository.delete_chunks(file_id, conn=conn)
            existed = FileRepository.delete_file(file_id, conn=conn)
            conn.commit()
            return existed
        except Exception:
            conn.rollback()
            raise


class ChunkedBlobStore:
    """
    Stores each file as one record in `files` and a run of rows in `chunks`.
    """

    def __init__(self, chunk_size: Optional[int] = None):
        self.chunk_size = chunk_size if chunk_size is not None else config.CHUNK_SIZE_BYTES
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    def open_upload_stream(self, metadata: Optional[Dict[str, Any]] = None) -> UploadStream:
        file_id = generate_file_id()
        logger.debug(f"Opening upload stream [file_id={file_id}]")
        return UploadStream(file_id, self.chunk_size, metadata)

    def open_download_stream(self, file_id: str) -> DownloadStream:
        logger.debug(f"Opening download stream [file_id={file_id}]")
        return DownloadStream(file_id)

    async def find(self, file_id: str) -> Optional[FileRecord]:
        return await run_blocking(FileRepository.get_by_id, file_id)

    async def delete(self, file_id: str) -> bool:
        """
        Remove a file record and its chunks in one transaction.

        Returns:
            True if a file record was removed
        """
        existed = await run_blocking(_delete_file, file_id)
        if existed:
            logger.info(f"Deleted file {file_id}")
        return existed

    async def delete_all(self, uploaded_before: Optional[datetime] = None) -> int:
        """
        Bulk removal for test and ops tooling.

        Args:
            uploaded_before: Only remove files uploaded before this instant; all files if None

        Returns:
            Number of file records removed
        """
        file_ids = await run_blocking(FileRepository.list_ids, uploaded_before)
        deleted = 0
        for file_id in file_ids:
            if await run_blocking(_delete_file, file_id):
                deleted += 1
        logger.info(f"Deleted {deleted} files")
        return deleted

    async def stats(self) -> StoreStats:
        file_count, total_bytes = await run_blocking(FileRepository.totals)
        chunk_count = await run_blocking(ChunkRepository.count_chunks)
        return StoreStats(file_count=file_count, chunk_count=chunk_count, total_bytes=total_bytes)


_default_store: Optional[ChunkedBlobStore] = None


def get_default_store() -> ChunkedBlobStore:
    """
    Return the process-wide store, creating the schema on first use.
    """
    global _default_store
    if _default_store is None:
        try:
            init_database()
        except (sqlite3.Error, OSError) as e:
            raise StorageBackendError(f"Cannot initialize blob store: {e}") from e
        _default_store = ChunkedBlobStore()
    return _default_store


def reset_default_store() -> None:
    global _default_store
    _default_store = None
