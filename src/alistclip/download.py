#!/usr/bin/env python3
"""Download mode implementation for alistclip.

Pulls the newest snapshot from the clipboard directory on the Alist server
and restores it to the local clipboard. See sync_engine.py for the pull
steps.
"""

from __future__ import annotations

from alistclip.clipboard import write_clipboard
from alistclip.config import AlistConfig
from alistclip.payload import Payload
from alistclip.remote_store import AlistClient
from alistclip.sync_engine import SyncEngine


async def run_download(config: AlistConfig) -> Payload:
    """Restore the newest remote snapshot to the clipboard.

    Args:
        config: Server, credentials and slot directory.

    Returns:
        The payload that was placed on the clipboard.

    Raises:
        SyncError: If the download or the clipboard write fails.
    """
    async with AlistClient(config.server, timeout=config.timeout) as store:
        engine = SyncEngine.from_config(config, store)
        return await engine.pull(write_clipboard)
