"""Unit tests for canonical byte conversion."""

from array import array

from content_chunk.classifier import PayloadShape, classify_payload
from content_chunk.normalizer import normalize_payload


def normalize(payload):
    return normalize_payload(classify_payload(payload))


class TestNormalizePayload:
    def test_text_length_counts_bytes(self):
        canonical = normalize("naïve café")

        assert canonical.data == "naïve café".encode("utf-8")
        assert canonical.length == 12
        assert canonical.length != len("naïve café")

    def test_bytes_pass_through(self):
        payload = b"\x00\xff\x10binary"

        canonical = normalize(payload)

        assert canonical.data == payload
        assert canonical.length == len(payload)

    def test_bytearray_is_frozen(self):
        payload = bytearray(b"abc")

        canonical = normalize(payload)
        payload[0] = ord("z")

        assert canonical.data == b"abc"
        assert isinstance(canonical.data, bytes)

    def test_memory_region_copied(self):
        canonical = normalize(memoryview(bytes(100)))

        assert canonical.data == bytes(100)
        assert canonical.length == 100

    def test_typed_array_uses_byte_length(self):
        payload = array("H", [1, 2, 3])

        canonical = normalize(payload)

        assert canonical.length == payload.itemsize * 3
        assert canonical.data == payload.tobytes()

    def test_sequence_is_stringified(self):
        canonical = normalize(["one", "two", "three"])

        assert canonical.data == b"['one', 'two', 'three']"
        assert canonical.length == 23

    def test_tuple_renders_like_list(self):
        assert normalize(("one", 2)).data == b"['one', 2]"

    def test_array_like_fills_missing_indices(self):
        payload = {
            "length": 5,
            0: "First index in array object",
            2: [0, 1, 2, 3, 4],
            4: {"property": "test"},
        }

        canonical = normalize(payload)

        expected = str(["First index in array object", None, [0, 1, 2, 3, 4], None, {"property": "test"}])
        assert canonical.data == expected.encode("utf-8")
        assert canonical.length == len(expected)
        assert canonical.declared_length == 5

    def test_array_like_accepts_string_keys(self):
        canonical = normalize({"length": 2, "0": "a", "1": "b"})

        assert canonical.data == b"['a', 'b']"

    def test_metadata_records_shape(self):
        assert normalize("text").metadata == {"shape": "text"}
        assert normalize({"length": 1, 0: "x"}).metadata == {
            "shape": PayloadShape.ARRAY_LIKE.value,
            "declared_length": 1,
        }
