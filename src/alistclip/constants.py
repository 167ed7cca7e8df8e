#!/usr/bin/env python3
"""Constants for remote sync and clipboard access.

These constants control the fixed-delay retry budget for remote calls,
directory listing page size, and timeouts.
"""

# Total attempts (first try included) for list, upload and download.
MAX_ATTEMPTS: int = 3

# Fixed delay between attempts in seconds. No backoff is applied.
RETRY_DELAY: float = 2.0

# Rows requested per page from /api/fs/list.
LIST_PER_PAGE: int = 100

# Default HTTP timeout in seconds for each request.
DEFAULT_TIMEOUT: float = 30.0

# Timeout in seconds for reading the local clipboard, so an unresponsive
# selection owner cannot hang an upload.
CLIPBOARD_TIMEOUT: float = 2.0

# Chunk size for streaming downloads to disk.
DOWNLOAD_CHUNK_SIZE: int = 65536

# Default strftime pattern for clipboard file names.
DEFAULT_TIME_FORMAT: str = "%Y%m%d_%H%M%S"
