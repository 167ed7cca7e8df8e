#!/usr/bin/env python3
"""
Push and pull of the clipboard slot.

SyncEngine composes the content sniffer, the Alist client, the
authentication session, the latest-entry selector and the retry policy:

Push: classify -> name the object -> ensure token -> mkdir (idempotent)
      -> upload with retry -> release the spooled temp file.
Pull: ensure token -> list with retry -> select latest -> resolve raw URL
      -> download with retry into a scoped temp directory -> classify the
      bytes -> hand to the clipboard writer -> remove the temp directory.

Every failure leaves the engine as a SyncError, including local OSErrors
from temporary storage (kind LOCAL_IO). Temporary files are
released on every exit path.
"""
from __future__ import annotations

import logging
import tempfile
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path

from alistclip.config import AlistConfig
from alistclip.errors import AlistError, ClipboardError, EmptyContentError, SyncError
from alistclip.latest import select_latest
from alistclip.payload import Payload
from alistclip.remote_entry import SyncTarget
from alistclip.remote_store import AlistClient
from alistclip.retry_policy import RetryPolicy
from alistclip.session import SessionAuth
from alistclip.sniffer import PayloadKind

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[Payload], Awaitable[None]]


def build_filename(kind: PayloadKind, timestamp: str) -> str:
    """Name an uploaded snapshot by kind and timestamp."""
    if kind is PayloadKind.TEXT:
        return f"clipboard_{timestamp}.txt"
    return f"clipboard_image_{timestamp}.png"


class SyncEngine:
    """Synchronizes one clipboard slot directory."""

    def __init__(
        self,
        store: AlistClient,
        auth: SessionAuth,
        target: SyncTarget,
        time_format: str,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.auth = auth
        self.target = target
        self.time_format = time_format
        self.retry_policy = retry_policy or RetryPolicy()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: AlistConfig,
        store: AlistClient,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> SyncEngine:
        """Build an engine with a fresh SessionAuth for config."""
        return cls(
            store=store,
            auth=SessionAuth(config.auth_session(), store),
            target=SyncTarget(config.clipboard_dir),
            time_format=config.time_format,
            retry_policy=retry_policy,
            clock=clock,
        )

    async def push(self, payload: Payload) -> str:
        """
        Upload a clipboard payload to the slot.

        Args:
            payload: The captured clipboard content. Its temporary file, if
                any, is released before this returns or raises.

        Returns:
            Remote path of the uploaded object.

        Raises:
            SyncError: If any step fails.
        """
        try:
            classification = payload.ensure_classified()
            if not payload.data:
                raise EmptyContentError("Clipboard payload is empty")
            filename = build_filename(
                classification.kind, self._clock().strftime(self.time_format)
            )
            remote_path = self.target.path_for(filename)

            token = await self.auth.ensure_token()
            logger.info("Creating directory: %s", self.target.remote_directory)
            await self.store.mkdir(token, self.target.remote_directory)

            source = payload.spool()
            logger.info(
                "Uploading %s (%d bytes) to %s",
                classification.subtype, len(payload.data), remote_path,
            )
            await self.retry_policy.call(self.store.upload, token, remote_path, source)
        except (AlistError, OSError) as e:
            raise SyncError.from_error(e) from e
        finally:
            payload.release()
        logger.info("Successfully uploaded to %s", remote_path)
        return remote_path

    async def pull(self, writer: ClipboardWriter | None = None) -> Payload:
        """
        Download the newest object in the slot.

        Args:
            writer: Coroutine that restores the payload to the clipboard.
                It runs while the downloaded file still exists.

        Returns:
            The classified payload. Its bytes stay in memory; its temporary
            file has been removed.

        Raises:
            SyncError: If any step fails, including an empty slot
                (kind NO_CONTENT) or a writer failure (kind CLIPBOARD).
        """
        try:
            token = await self.auth.ensure_token()
            logger.info("Listing files in: %s", self.target.remote_directory)
            entries = await self.retry_policy.call(
                self.store.list_dir, token, self.target.remote_directory
            )
            latest = select_latest(entries)
            logger.info("Found latest file: %s", latest.path)

            raw_url = await self.store.get_raw_url(token, latest.path)
            with tempfile.TemporaryDirectory(prefix="alistclip-") as scratch:
                destination = Path(scratch) / (Path(latest.name).name or "clipboard")
                logger.info("Downloading file: %s", latest.path)
                await self.retry_policy.call(self.store.download, raw_url, destination)

                payload = Payload.from_file(destination)
                try:
                    payload.relabel()
                    logger.info(
                        "Downloaded %d bytes, handling as %s",
                        len(payload.data), payload.ensure_classified().subtype,
                    )
                    if writer is not None:
                        await writer(payload)
                finally:
                    payload.release()
        except (AlistError, ClipboardError, OSError) as e:
            raise SyncError.from_error(e) from e
        return payload
