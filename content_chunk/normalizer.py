"""Converts classified payloads into canonical bytes."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from common.constants import TEXT_ENCODING
from content_chunk.classifier import ClassifiedPayload, PayloadShape


@dataclass(frozen=True)
class CanonicalBytes:
    data: bytes
    length: int
    shape: PayloadShape
    declared_length: Optional[int] = None

    @property
    def metadata(self) -> Dict[str, Any]:
        """File-record metadata describing where the bytes came from."""
        metadata: Dict[str, Any] = {"shape": self.shape.value}
        if self.declared_length is not None:
            metadata["declared_length"] = self.declared_length
        return metadata


def _encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING)


def normalize_payload(classified: ClassifiedPayload) -> CanonicalBytes:
    """
    Convert a classified payload into a byte sequence and its length.

    Sequences and array-like objects are stored as their str() rendering.
    """
    shape = classified.shape
    value = classified.value

    if shape is PayloadShape.TEXT:
        data = _encode_text(value)
    elif shape is PayloadShape.BINARY:
        data = bytes(value)
    elif shape is PayloadShape.MEMORY_REGION:
        with memoryview(value) as view:
            data = view.tobytes()
    elif shape is PayloadShape.SEQUENCE:
        data = _encode_text(str(list(value)))
    elif shape is PayloadShape.ARRAY_LIKE:
        data = _encode_text(str(list(classified.members)))
    else:
        raise AssertionError(f"unhandled payload shape: {shape}")

    return CanonicalBytes(
        data=data,
        length=len(data),
        shape=shape,
        declared_length=classified.declared_length,
    )
