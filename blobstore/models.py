"""Pydantic models for stored file records."""

import json
from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field


class FileRecord(BaseModel):
    """File-metadata record created when an upload stream completes."""
    model_config = {"frozen": True}

    file_id: str
    length: int = Field(ge=0)
    chunk_size: int = Field(gt=0)
    upload_date: datetime
    checksum: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def chunk_count(self) -> int:
        return -(-self.length // self.chunk_size)

    @classmethod
    def from_row(cls, row) -> "FileRecord":
        return cls(
            file_id=row["file_id"],
            length=row["length"],
            chunk_size=row["chunk_size"],
            upload_date=datetime.fromisoformat(row["upload_date"]),
            checksum=row["checksum"],
            metadata=json.loads(row["metadata"] or "{}"),
        )
