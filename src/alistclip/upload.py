#!/usr/bin/env python3
"""Upload mode implementation for alistclip.

Captures the local clipboard and pushes it into the clipboard directory on
the Alist server. See sync_engine.py for the push steps.
"""

from __future__ import annotations

import logging

from alistclip.clipboard import read_clipboard
from alistclip.config import AlistConfig
from alistclip.errors import ClipboardError
from alistclip.remote_store import AlistClient
from alistclip.sync_engine import SyncEngine

logger = logging.getLogger(__name__)


async def run_upload(config: AlistConfig) -> str:
    """Push the current clipboard content to the Alist server.

    Args:
        config: Server, credentials and slot directory.

    Returns:
        Remote path of the uploaded snapshot.

    Raises:
        ClipboardError: If the clipboard is empty or unreadable.
        SyncError: If the upload fails.
    """
    logger.info("Getting clipboard content...")
    payload = await read_clipboard()
    if payload is None:
        raise ClipboardError("No content found in clipboard")

    async with AlistClient(config.server, timeout=config.timeout) as store:
        engine = SyncEngine.from_config(config, store)
        return await engine.push(payload)
