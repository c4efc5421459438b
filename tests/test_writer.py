"""Tests for storing payloads as chunked files."""

import sqlite3
from array import array
from unittest.mock import MagicMock

import pytest

from blobstore.repositories import ChunkRepository
from content_chunk import ChunkWriter, store_payload
from content_chunk.exceptions import InvalidPayload, StorageWriteFailed, UnsupportedPayloadType


class TestRejectedPayloads:
    """Rejected payloads never reach the store."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload,error", [
        (None, InvalidPayload),
        ("", InvalidPayload),
        ({"string": "string", "boolean": True, "object": {"property": "property"}}, UnsupportedPayloadType),
    ])
    async def test_no_io_for_rejected_payload(self, payload, error):
        bucket = MagicMock()

        with pytest.raises(error):
            await ChunkWriter(bucket).store(payload)

        bucket.open_upload_stream.assert_not_called()

    @pytest.mark.asyncio
    async def test_array_like_with_failing_indexer(self):
        class NamedKeysOnly:
            length = 2

            def __getitem__(self, key):
                return key.lower()

        bucket = MagicMock()

        with pytest.raises(UnsupportedPayloadType):
            await store_payload(NamedKeysOnly(), bucket)

        bucket.open_upload_stream.assert_not_called()

    @pytest.mark.asyncio
    async def test_default_store_not_resolved(self, monkeypatch):
        def fail():
            raise AssertionError("store should not be touched")

        monkeypatch.setattr("content_chunk.writer.get_default_store", fail)

        with pytest.raises(InvalidPayload):
            await store_payload(None)


class TestStorePayload:
    @pytest.mark.asyncio
    async def test_text_payload(self, bucket):
        payload = "This is a basic small string payload"

        file_id = await store_payload(payload, bucket)

        record = await bucket.find(file_id)
        assert record is not None
        assert record.file_id == file_id
        assert record.length == len(payload.encode("utf-8"))
        assert record.metadata == {"shape": "text"}

    @pytest.mark.asyncio
    async def test_multibyte_text_records_byte_length(self, bucket):
        file_id = await store_payload("ÅØÆ", bucket)

        record = await bucket.find(file_id)
        assert record.length == 6

    @pytest.mark.asyncio
    async def test_binary_payload(self, bucket):
        payload = b"This is a basic small string payload"

        file_id = await store_payload(payload, bucket)

        record = await bucket.find(file_id)
        assert record.length == len(payload)

    @pytest.mark.asyncio
    async def test_memory_region_payload(self, bucket):
        file_id = await store_payload(memoryview(bytearray(100)), bucket)

        record = await bucket.find(file_id)
        assert record.length == 100
        assert record.metadata == {"shape": "memory_region"}

    @pytest.mark.asyncio
    async def test_typed_array_payload(self, bucket):
        payload = array("H", range(50))

        file_id = await store_payload(payload, bucket)

        record = await bucket.find(file_id)
        assert record.length == payload.itemsize * 50

    @pytest.mark.asyncio
    async def test_sequence_payload(self, bucket):
        payload = ["one", "two", "three"]

        file_id = await store_payload(payload, bucket)

        record = await bucket.find(file_id)
        assert record.length == len(str(payload))

    @pytest.mark.asyncio
    async def test_array_like_payload(self, bucket):
        payload = {
            "length": 5,
            0: "First index in array object",
            2: [0, 1, 2, 3, 4],
            4: {"property": "test"},
        }

        file_id = await store_payload(payload, bucket)

        record = await bucket.find(file_id)
        assert record.metadata == {"shape": "array_like", "declared_length": 5}

    @pytest.mark.asyncio
    async def test_each_store_gets_new_id(self, bucket):
        first = await store_payload("same", bucket)
        second = await store_payload("same", bucket)

        assert first != second

    @pytest.mark.asyncio
    async def test_default_store(self, test_db):
        file_id = await ChunkWriter().store("uses the configured database")

        assert ChunkRepository.count_chunks(file_id) == 1


class TestStorageFailures:
    @pytest.mark.asyncio
    async def test_write_failure_wrapped_and_cleaned_up(self, bucket, monkeypatch, multi_chunk_text):
        original_insert = ChunkRepository.insert_chunk
        calls = []

        def flaky_insert(chunk, conn=None):
            calls.append(chunk.n)
            if chunk.n == 3:
                raise sqlite3.OperationalError("database is locked")
            return original_insert(chunk, conn=conn)

        monkeypatch.setattr(ChunkRepository, "insert_chunk", staticmethod(flaky_insert))

        with pytest.raises(StorageWriteFailed) as exc_info:
            await store_payload(multi_chunk_text, bucket)

        assert str(exc_info.value) == "Payload storage failed: OperationalError: database is locked"
        assert calls == [0, 1, 2, 3]
        assert ChunkRepository.count_chunks() == 0
        stats = await bucket.stats()
        assert stats.file_count == 0

    @pytest.mark.asyncio
    async def test_record_failure_leaves_nothing(self, bucket, monkeypatch):
        from blobstore.repositories import FileRepository

        def failing_create(record, conn=None):
            raise sqlite3.IntegrityError("UNIQUE constraint failed: files.file_id")

        monkeypatch.setattr(FileRepository, "create_file", staticmethod(failing_create))

        with pytest.raises(StorageWriteFailed) as exc_info:
            await store_payload("short", bucket)

        assert "UNIQUE constraint failed" in str(exc_info.value)
        assert ChunkRepository.count_chunks() == 0
