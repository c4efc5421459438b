"""Classifies caller payloads into the closed set of storable shapes."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from content_chunk.exceptions import InvalidPayload, UnsupportedPayloadType


class PayloadShape(str, Enum):
    TEXT = "text"
    BINARY = "binary"
    MEMORY_REGION = "memory_region"
    SEQUENCE = "sequence"
    ARRAY_LIKE = "array_like"


@dataclass(frozen=True)
class ClassifiedPayload:
    """
    A payload tagged with its shape.

    `declared_length` and `members` are only set for ARRAY_LIKE payloads;
    `members` holds indices 0..length-1, with None for missing indices.
    """
    shape: PayloadShape
    value: Any
    declared_length: Optional[int] = None
    members: Optional[Tuple[Any, ...]] = None


def _is_length(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _supports_buffer(value: Any) -> bool:
    try:
        memoryview(value)
    except TypeError:
        return False
    return True


def _array_like_length(payload: Any) -> Optional[int]:
    """Return the declared length of an array-like payload, or None."""
    if isinstance(payload, Mapping):
        length = payload.get("length")
    elif hasattr(payload, "__getitem__"):
        length = getattr(payload, "length", None)
    else:
        return None
    return length if _is_length(length) else None


def _array_like_members(payload: Any, length: int) -> Tuple[Any, ...]:
    """
    Read indices 0..length-1 of an array-like payload.

    Raises:
        UnsupportedPayloadType: If indexing fails other than by a missing index
    """
    members = []
    for index in range(length):
        if isinstance(payload, Mapping):
            members.append(payload.get(index, payload.get(str(index))))
            continue
        try:
            members.append(payload[index])
        except LookupError:
            members.append(None)
        except Exception as e:
            raise UnsupportedPayloadType(type(payload)) from e
    return tuple(members)


def classify_payload(payload: Any) -> ClassifiedPayload:
    """
    Decide which normalization rule applies to a payload.

    Shapes are checked in priority order: text, binary buffer, raw memory
    region, ordered sequence, array-like object.

    Raises:
        InvalidPayload: If payload is None or an empty string
        UnsupportedPayloadType: If payload matches no shape
    """
    if payload is None or (isinstance(payload, str) and payload == ""):
        raise InvalidPayload()

    if isinstance(payload, str):
        return ClassifiedPayload(PayloadShape.TEXT, payload)

    if isinstance(payload, (bytes, bytearray)):
        return ClassifiedPayload(PayloadShape.BINARY, payload)

    if _supports_buffer(payload):
        return ClassifiedPayload(PayloadShape.MEMORY_REGION, payload)

    if isinstance(payload, Sequence):
        return ClassifiedPayload(PayloadShape.SEQUENCE, payload)

    declared_length = _array_like_length(payload)
    if declared_length is not None:
        return ClassifiedPayload(
            PayloadShape.ARRAY_LIKE,
            payload,
            declared_length,
            _array_like_members(payload, declared_length),
        )

    raise UnsupportedPayloadType(type(payload))
