import logging
import os
import sys
from typing import Optional

from common.constants import LOG_VALUE_MAX_CHARS


class PayloadTruncationFilter(logging.Filter):
    """Filter to shorten payload bodies passed as log arguments."""

    def __init__(self, max_chars: int = LOG_VALUE_MAX_CHARS):
        super().__init__()
        self.max_chars = max_chars

    def filter(self, record: logging.LogRecord) -> bool:
        """Truncate oversized text and binary values in the log arguments."""
        if isinstance(record.msg, str) and len(record.msg) > self.max_chars * 4:
            record.msg = self._truncate(record.msg)

        if hasattr(record, 'args') and record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._truncate(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._truncate(arg) for arg in record.args)

        return True

    def _truncate(self, value):
        """Replace a long str/bytes value with its head and a size marker."""
        if isinstance(value, (bytes, bytearray, memoryview)):
            size = len(value) if not isinstance(value, memoryview) else value.nbytes
            if size > self.max_chars:
                return f"<{size} bytes: {bytes(value[:self.max_chars])!r}...>"
        elif isinstance(value, str) and len(value) > self.max_chars:
            return f"{value[:self.max_chars]}...<{len(value)} chars>"
        return value


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Args:
        component_name: Name of the component (e.g., 'blobstore', 'content_chunk')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO.
            On an already configured logger the level only changes when given explicitly.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(component_name)
    configured = bool(logger.handlers)

    if configured and log_level is None:
        return logger

    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger.setLevel(level)

    if configured:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    handler.addFilter(PayloadTruncationFilter())

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
