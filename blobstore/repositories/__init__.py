"""Repository layer for data access."""

from blobstore.repositories.file_repository import FileRepository
from blobstore.repositories.chunk_repository import ChunkRepository

__all__ = [
    "FileRepository",
    "ChunkRepository",
]
