"""Project-wide constants (chunk sizing, storage defaults)."""

DEFAULT_CHUNK_SIZE_BYTES: int = 255 * 1024  # 255 KiB, keeps a chunk row well under a page run

DEFAULT_DATABASE_PATH: str = "/app/data/payloads.db"

TEXT_ENCODING: str = "utf-8"

LOG_VALUE_MAX_CHARS: int = 256
