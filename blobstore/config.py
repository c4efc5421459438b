"""Configuration settings for the chunked blob store."""

import os
from common.constants import DEFAULT_CHUNK_SIZE_BYTES, DEFAULT_DATABASE_PATH


DATABASE_PATH = os.environ.get("PAYLOAD_STORE_DATABASE_PATH", DEFAULT_DATABASE_PATH)

CHUNK_SIZE_BYTES = int(os.environ.get("PAYLOAD_STORE_CHUNK_SIZE_BYTES", str(DEFAULT_CHUNK_SIZE_BYTES)))
