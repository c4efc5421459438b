"""File repository for database operations."""

import json
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from blobstore.database import get_db_connection
from blobstore.models import FileRecord

logger = get_logger(__name__)


class FileRepository:
    @staticmethod
    def create_file(record: FileRecord, conn=None) -> FileRecord:
        should_close = conn is None
        # Keep the manager referenced; a dropped generator closes the connection.
        connection_scope = get_db_connection() if should_close else None
        if should_close:
            conn = connection_scope.__enter__()

        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO files (file_id, length, chunk_size, upload_date, checksum, metadata)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.file_id,
                    record.length,
                    record.chunk_size,
                    record.upload_date.isoformat(),
                    record.checksum,
                    json.dumps(record.metadata),
                )
            )
            if should_close:
                conn.commit()
            return record
        finally:
            if should_close:
                connection_scope.__exit__(None, None, None)

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT file_id, length, chunk_size, upload_date, checksum, metadata
                FROM files
                WHERE file_id = ?
                """,
                (file_id,)
            )
            row = cursor.fetchone()

            if row is None:
                return None

            return FileRecord.from_row(row)

    @staticmethod
    def list_ids(uploaded_before: Optional[datetime] = None) -> List[str]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            if uploaded_before is None:
                cursor.execute("SELECT file_id FROM files")
            else:
                cursor.execute(
                    "SELECT file_id FROM files WHERE upload_date < ?",
                    (uploaded_before.isoformat(),)
                )
            return [row["file_id"] for row in cursor.fetchall()]

    @staticmethod
    def delete_file(file_id: str, conn=None) -> bool:
        logger.debug(f"Deleting file record [file_id={file_id}]")
        should_close = conn is None
        # Keep the manager referenced; a dropped generator closes the connection.
        connection_scope = get_db_connection() if should_close else None
        if should_close:
            conn = connection_scope.__enter__()

        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM files WHERE file_id = ?", (file_id,))
            if should_close:
                conn.commit()
            return cursor.rowcount > 0
        finally:
            if should_close:
                connection_scope.__exit__(None, None, None)

    @staticmethod
    def totals() -> tuple[int, int]:
        """
        Count stored files and their summed declared length.
        """
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS file_count, COALESCE(SUM(length), 0) AS total FROM files")
            row = cursor.fetchone()
            return row["file_count"], row["total"]
