"""Ops entry point: inspect or purge the blob store.

Usage:
    python -m blobstore.maintenance stats
    python -m blobstore.maintenance purge [--older-than-days N]
"""

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from common.logging_config import setup_logging
from blobstore.bucket import get_default_store


class UsageError(Exception):
    """Raised when maintenance arguments are invalid."""

    pass


def parse_older_than(args: List[str]) -> Optional[datetime]:
    """Parse `purge` arguments into a cutoff instant, or None for everything."""
    if not args:
        return None
    if len(args) != 2 or args[0] != "--older-than-days":
        raise UsageError("purge accepts only --older-than-days N")
    try:
        days = int(args[1])
    except ValueError:
        raise UsageError(f"Invalid day count: {args[1]}")
    if days < 0:
        raise UsageError("Day count must not be negative")
    return datetime.now(timezone.utc) - timedelta(days=days)


async def run_command(argv: List[str]) -> str:
    if not argv:
        raise UsageError("Expected a command: stats or purge")

    command, args = argv[0], argv[1:]
    store = get_default_store()

    if command == "stats":
        if args:
            raise UsageError("stats takes no arguments")
        stats = await store.stats()
        return f"files={stats.file_count} chunks={stats.chunk_count} bytes={stats.total_bytes}"
    elif command == "purge":
        cutoff = parse_older_than(args)
        deleted = await store.delete_all(uploaded_before=cutoff)
        return f"deleted={deleted}"
    else:
        raise UsageError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for maintenance commands."""
    argv = list(sys.argv[1:] if argv is None else argv)
    log_level = 'DEBUG' if '--debug' in argv else os.getenv('LOG_LEVEL', 'INFO')
    if '--debug' in argv:
        argv.remove('--debug')

    logger = setup_logging('blobstore', log_level=log_level)

    try:
        print(asyncio.run(run_command(argv)))
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(__doc__, file=sys.stderr)
        return 2
    except Exception as e:
        logger.error(f"Maintenance command failed: {e}", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
