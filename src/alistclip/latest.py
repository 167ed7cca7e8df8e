#!/usr/bin/env python3
"""
Selection of the newest entry in the clipboard directory.

Only the most recently modified file in the slot is meaningful. Timestamps
are parsed as absolute times (Alist reports values such as
2024-05-17T13:47:55.4174917+08:00, with more fractional digits than
datetime accepts). An entry whose timestamp cannot be parsed is not
skipped: it still competes, ranked below every parsed entry and compared
to other unparsed entries by its raw string.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from alistclip.errors import NoContentError
from alistclip.remote_entry import RemoteEntry

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"\s*(?P<zone>Z|[+-]\d{2}:?\d{2})?$"
)


def parse_modified(raw: str) -> datetime | None:
    """
    Parse a listing timestamp into an aware datetime.

    Args:
        raw: Timestamp string from the server.

    Returns:
        Aware datetime, or None if raw is not a recognizable timestamp.
        Values without a UTC offset are taken as UTC.
    """
    match = _TIMESTAMP_RE.match(raw.strip())
    if match is None:
        return None
    try:
        parsed = datetime.strptime(
            f"{match['date']}T{match['time']}", "%Y-%m-%dT%H:%M:%S"
        )
    except ValueError:
        return None
    fraction = match["fraction"]
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    zone = match["zone"]
    if zone is None or zone == "Z":
        return parsed.replace(tzinfo=timezone.utc)
    sign = -1 if zone[0] == "-" else 1
    digits = zone[1:].replace(":", "")
    offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
    if offset >= timedelta(hours=24):
        return None
    return parsed.replace(tzinfo=timezone(sign * offset))


def _sort_key(entry: RemoteEntry) -> tuple[int, datetime] | tuple[int, str]:
    parsed = parse_modified(entry.modified)
    if parsed is None:
        logger.debug(
            "Failed to parse date %r for %s, using string comparison",
            entry.modified, entry.name,
        )
        return (0, entry.modified)
    return (1, parsed)


def select_latest(entries: Iterable[RemoteEntry]) -> RemoteEntry:
    """
    Return the most recently modified file entry.

    Directories are ignored. On equal timestamps the entry seen last wins.

    Args:
        entries: Listing rows in server order.

    Returns:
        The newest file entry.

    Raises:
        NoContentError: If there are no file entries.
    """
    latest: RemoteEntry | None = None
    latest_key: tuple[int, datetime] | tuple[int, str] | None = None
    for entry in entries:
        if entry.is_dir:
            continue
        key = _sort_key(entry)
        if latest_key is None or key >= latest_key:
            latest, latest_key = entry, key
    if latest is None:
        raise NoContentError("No files found in clipboard directory")
    logger.debug("Latest file: %s (modified %s)", latest.name, latest.modified)
    return latest
