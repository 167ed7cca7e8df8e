#!/usr/bin/env python3
"""Directory listing rows and the clipboard slot on the Alist server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def join_remote_path(directory: str, name: str) -> str:
    """Join an Alist directory and an entry name with a single slash."""
    return f"{directory.rstrip('/')}/{name.lstrip('/')}"


@dataclass(frozen=True)
class RemoteEntry:
    """Snapshot of one row of a directory listing.

    Attributes:
        name: Entry name inside the directory.
        is_dir: True for sub-directories.
        modified: Modification time exactly as the server reported it.
        path: Absolute remote path of the entry.
        size: Size in bytes reported by the server.
    """

    name: str
    is_dir: bool
    modified: str
    path: str
    size: int = 0

    @classmethod
    def from_listing(cls, directory: str, row: dict[str, Any]) -> RemoteEntry:
        """Build an entry from one object of the listing's content array.

        Args:
            directory: The directory that was listed.
            row: Decoded JSON object with name, is_dir, modified and size.

        Returns:
            The RemoteEntry for the row.
        """
        name = str(row.get("name", ""))
        return cls(
            name=name,
            is_dir=bool(row.get("is_dir", False)),
            modified=str(row.get("modified") or ""),
            path=join_remote_path(directory, name),
            size=int(row.get("size") or 0),
        )


@dataclass(frozen=True)
class SyncTarget:
    """The single remote directory used as the clipboard slot.

    Every file inside it is a candidate snapshot; only the newest matters.
    """

    remote_directory: str

    def path_for(self, name: str) -> str:
        return join_remote_path(self.remote_directory, name)
