"""Custom exception classes for the blob store."""


class BlobStoreError(Exception):
    """
    Base exception class for all blob store errors.
    """
    pass


class BlobNotFoundError(BlobStoreError):
    """
    Raised when a file identifier has no file record.
    """

    def __init__(self, file_id):
        self.file_id = file_id
        super().__init__(f"FileNotFound: file {file_id} was not found")


class ChunkMissingError(BlobStoreError):
    """
    Raised when the chunk run of a file has a gap.
    """

    def __init__(self, file_id: str, expected_n: int):
        self.file_id = file_id
        self.expected_n = expected_n
        super().__init__(f"ChunkIsMissing: file {file_id} has no chunk n: {expected_n}")


class ChunkSizeError(BlobStoreError):
    """
    Raised when a chunk's length disagrees with the file record.
    """
    pass


class ChecksumMismatchError(BlobStoreError):
    """
    Raised when reassembled file bytes do not match the recorded checksum.
    """
    pass


class StreamClosedError(BlobStoreError):
    """
    Raised when writing to an upload stream that was already closed or aborted.
    """
    pass


class StorageBackendError(BlobStoreError):
    """
    Raised when the underlying database fails.
    """
    pass
