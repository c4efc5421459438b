"""Store payloads as chunked files and read them back."""

from content_chunk.classifier import ClassifiedPayload, PayloadShape, classify_payload
from content_chunk.exceptions import (
    ContentChunkError,
    InvalidPayload,
    PayloadRetrievalFailed,
    StorageWriteFailed,
    UnsupportedPayloadType,
)
from content_chunk.normalizer import CanonicalBytes, normalize_payload
from content_chunk.reader import ChunkReader, fetch_payload, retrieve_payload
from content_chunk.writer import ChunkWriter, store_payload

__all__ = [
    "ClassifiedPayload",
    "PayloadShape",
    "classify_payload",
    "ContentChunkError",
    "InvalidPayload",
    "PayloadRetrievalFailed",
    "StorageWriteFailed",
    "UnsupportedPayloadType",
    "CanonicalBytes",
    "normalize_payload",
    "ChunkReader",
    "fetch_payload",
    "retrieve_payload",
    "ChunkWriter",
    "store_payload",
]
