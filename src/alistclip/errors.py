#!/usr/bin/env python3
"""
Exception types for alistclip.

Remote store failures are raised as subclasses of AlistError by the
remote_store and session modules. The sync engine converts every failure it
sees into a single SyncError carrying a SyncErrorKind, which is the only
exception the CLI layer needs to handle.
"""
from __future__ import annotations

from enum import Enum


class AlistError(Exception):
    """Base class for errors reported while talking to the Alist server."""


class AuthError(AlistError):
    """
    Exception raised when credentials or the token are rejected.

    Credential problems are not transient, so this error is never retried.
    """


class NotFoundError(AlistError):
    """Raised when a path or raw download URL does not exist on the server."""


class NoContentError(NotFoundError):
    """Raised when the clipboard directory holds no file entries."""


class ServerError(AlistError):
    """
    Exception raised for a non-success response from the Alist server.

    Attributes:
        code: HTTP status or Alist response code, when one was received.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class TransportError(AlistError):
    """Raised when the HTTP request fails below the application layer."""


class EmptyContentError(AlistError):
    """Raised for a zero-byte upload artifact or download result."""


class ClipboardError(Exception):
    """
    Exception raised when the local clipboard cannot be read or written.

    Covers a missing display server, missing helper tools, and helper
    processes that exit with an error.
    """


class SyncErrorKind(Enum):
    """Category of a failed push or pull."""

    AUTH = "auth"
    NOT_FOUND = "not_found"
    NO_CONTENT = "no_content"
    SERVER = "server"
    TRANSPORT = "transport"
    EMPTY_CONTENT = "empty_content"
    CLIPBOARD = "clipboard"
    LOCAL_IO = "local_io"


# Order matters: subclasses before their parents.
_KIND_BY_TYPE: tuple[tuple[type[Exception], SyncErrorKind], ...] = (
    (AuthError, SyncErrorKind.AUTH),
    (NoContentError, SyncErrorKind.NO_CONTENT),
    (NotFoundError, SyncErrorKind.NOT_FOUND),
    (ServerError, SyncErrorKind.SERVER),
    (TransportError, SyncErrorKind.TRANSPORT),
    (EmptyContentError, SyncErrorKind.EMPTY_CONTENT),
    (ClipboardError, SyncErrorKind.CLIPBOARD),
    (OSError, SyncErrorKind.LOCAL_IO),
)


class SyncError(Exception):
    """
    Failure of a whole push or pull operation.

    Attributes:
        kind: The category of the underlying failure.
    """

    def __init__(self, kind: SyncErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def from_error(cls, error: Exception) -> SyncError:
        """
        Wrap a lower-level error, keeping its category.

        Args:
            error: An AlistError, a ClipboardError, or an OSError from
                local temporary storage.

        Returns:
            SyncError whose kind matches the type of error.

        Raises:
            TypeError: If error is not one of the known failure types.
        """
        for error_type, kind in _KIND_BY_TYPE:
            if isinstance(error, error_type):
                return cls(kind, str(error) or error_type.__name__)
        raise TypeError(f"Cannot convert {type(error).__name__} to SyncError")
