"""Chunk repository for database operations."""

from typing import Optional

from common.logging_config import get_logger
from common.types import ChunkRecord
from blobstore.database import get_db_connection

logger = get_logger(__name__)


class ChunkRepository:
    @staticmethod
    def insert_chunk(chunk: ChunkRecord, conn=None) -> None:
        should_close = conn is None
        # Keep the manager referenced; a dropped generator closes the connection.
        connection_scope = get_db_connection() if should_close else None
        if should_close:
            conn = connection_scope.__enter__()

        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO chunks (file_id, n, data) VALUES (?, ?, ?)",
                (chunk.file_id, chunk.n, chunk.data)
            )
            if should_close:
                conn.commit()
            logger.debug(f"Stored chunk n={chunk.n} ({chunk.size} bytes) [file_id={chunk.file_id}]")
        except Exception as e:
            logger.error(f"Failed to store chunk n={chunk.n} [file_id={chunk.file_id}]: {e}", exc_info=True)
            raise
        finally:
            if should_close:
                connection_scope.__exit__(None, None, None)

    @staticmethod
    def get_chunk(file_id: str, n: int) -> Optional[ChunkRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT file_id, n, data FROM chunks WHERE file_id = ? AND n = ?",
                (file_id, n)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return ChunkRecord(file_id=row["file_id"], n=row["n"], data=bytes(row["data"]))

    @staticmethod
    def delete_chunks(file_id: str, conn=None) -> int:
        logger.debug(f"Deleting chunks [file_id={file_id}]")
        should_close = conn is None
        # Keep the manager referenced; a dropped generator closes the connection.
        connection_scope = get_db_connection() if should_close else None
        if should_close:
            conn = connection_scope.__enter__()

        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM chunks WHERE file_id = ?", (file_id,))
            if should_close:
                conn.commit()

            deleted = cursor.rowcount
            logger.info(f"Deleted {deleted} chunks [file_id={file_id}]")
            return deleted
        except Exception as e:
            logger.error(f"Failed to delete chunks [file_id={file_id}]: {e}", exc_info=True)
            raise
        finally:
            if should_close:
                connection_scope.__exit__(None, None, None)

    @staticmethod
    def count_chunks(file_id: Optional[str] = None) -> int:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            if file_id is None:
                cursor.execute("SELECT COUNT(*) AS total FROM chunks")
            else:
                cursor.execute("SELECT COUNT(*) AS total FROM chunks WHERE file_id = ?", (file_id,))
            return cursor.fetchone()["total"]
