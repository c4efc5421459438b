"""Error taxonomy for storing and retrieving chunked payloads."""


class ContentChunkError(Exception):
    """
    Base exception class for payload storage errors.
    """
    pass


class InvalidPayload(ContentChunkError):
    """
    Raised when the payload is absent or an empty string.
    """

    def __init__(self, message: str = "payload not supplied"):
        super().__init__(message)


class UnsupportedPayloadType(ContentChunkError):
    """
    Raised when the payload is none of the accepted shapes.
    """

    def __init__(self, payload_type: type):
        self.payload_type = payload_type
        super().__init__(
            "payload not in the correct format, expecting a string, binary buffer, "
            "raw memory region, ordered sequence, or array-like object"
        )


class StorageWriteFailed(ContentChunkError):
    """
    Raised when the blob store fails while a payload is being written.
    """

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Payload storage failed: {cause}")


class PayloadRetrievalFailed(ContentChunkError):
    """
    Raised (or passed to a retrieval callback) when a payload cannot be read back.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Payload retrieval failed: {detail}")
