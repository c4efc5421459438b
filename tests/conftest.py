"""Shared pytest fixtures for all tests."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from blobstore.bucket import ChunkedBlobStore, reset_default_store
from blobstore.database import init_database


@pytest.fixture
def test_db(monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary test database for each test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        monkeypatch.setattr("blobstore.database.DATABASE_PATH", str(db_path))
        monkeypatch.setattr("blobstore.config.DATABASE_PATH", str(db_path))
        reset_default_store()
        init_database()
        yield db_path
        reset_default_store()


@pytest.fixture
def bucket(test_db) -> ChunkedBlobStore:
    """
    Store with a small chunk size so short payloads span several chunks.
    """
    return ChunkedBlobStore(chunk_size=64)


@pytest.fixture
def multi_chunk_text() -> str:
    """
    Four 240-character lines, well past one 64-byte chunk.
    """
    line = "JohnWick,Beowulf" * 15
    return "\n".join([line] * 4) + "\n"
