"""Shared data type definitions (ChunkRecord, StoreStats)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChunkRecord:
    """
    One fixed-size fragment of a stored file.
    """
    file_id: str
    n: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoreStats:
    """
    Aggregate counters for a blob store.
    """
    file_count: int
    chunk_count: int
    total_bytes: int
