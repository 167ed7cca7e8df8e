#!/usr/bin/env python3
"""Clipboard payload passed between the clipboard glue and the sync engine.

A Payload holds the raw bytes plus the classification produced by the
content sniffer. It may also own a temporary file on disk (spooled for
upload, or downloaded for restore); release() removes that file and must
run on every exit path once the payload has been consumed.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from alistclip.sniffer import Classification, PayloadKind, classify

logger = logging.getLogger(__name__)


@dataclass
class Payload:
    """One clipboard snapshot.

    Attributes:
        data: Raw payload bytes.
        mime_hint: MIME type reported by the source, if any. Never decides
            the kind on its own.
        filename_hint: Filename reported by the source, if any.
        classification: Sniffed kind and extension, or None until classified.
        path: Temporary file backing this payload, owned by it.
    """

    data: bytes
    mime_hint: str | None = None
    filename_hint: str | None = None
    classification: Classification | None = None
    path: Path | None = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_hint: str | None = None,
        filename_hint: str | None = None,
    ) -> Payload:
        """Create a payload and classify it immediately."""
        payload = cls(data=data, mime_hint=mime_hint, filename_hint=filename_hint)
        payload.ensure_classified()
        return payload

    @classmethod
    def from_file(cls, path: Path) -> Payload:
        """Create a classified payload backed by an existing file.

        The payload takes ownership of path; release() deletes it.
        """
        payload = cls(data=path.read_bytes(), filename_hint=path.name, path=path)
        payload.ensure_classified()
        return payload

    def ensure_classified(self) -> Classification:
        """Sniff the payload content if that has not happened yet.

        Returns:
            The payload's classification.
        """
        if self.classification is None:
            self.classification = classify(
                self.data, filename_hint=self.filename_hint, mime_hint=self.mime_hint
            )
        return self.classification

    @property
    def kind(self) -> PayloadKind:
        return self.ensure_classified().kind

    @property
    def extension(self) -> str:
        return self.ensure_classified().extension

    @property
    def is_text(self) -> bool:
        return self.kind is PayloadKind.TEXT

    def spool(self, directory: Path | None = None) -> Path:
        """Write the payload to a temporary file it owns.

        Args:
            directory: Directory for the file; the system default if None.

        Returns:
            Path of the temporary file. Reuses the existing one if present.
        """
        if self.path is not None:
            return self.path
        fd, name = tempfile.mkstemp(
            prefix="alistclip-", suffix=f".{self.extension}", dir=directory
        )
        # Owned before the write so a failed write is still released.
        self.path = Path(name)
        with os.fdopen(fd, "wb") as fh:
            fh.write(self.data)
        return self.path

    def relabel(self) -> Path | None:
        """Rename the backing file so its suffix matches the sniffed content.

        The sniffed extension always wins over the suffix the file arrived
        with.

        Returns:
            The (possibly new) backing file path, or None if there is none.
        """
        if self.path is None:
            return None
        wanted = f".{self.extension}"
        if self.path.suffix.lower() != wanted:
            target = self.path.with_suffix(wanted)
            logger.info(
                "Content of %s is %s, relabeling as %s",
                self.path.name, self.ensure_classified().subtype, target.name,
            )
            self.path = self.path.rename(target)
        return self.path

    def release(self) -> None:
        """Delete the backing temporary file, if any. Safe to call twice."""
        if self.path is None:
            return
        try:
            self.path.unlink(missing_ok=True)
        finally:
            self.path = None
