#!/usr/bin/env python3
"""Tests for SyncError conversion."""
import pytest

from alistclip.errors import (
    AuthError,
    ClipboardError,
    EmptyContentError,
    NoContentError,
    NotFoundError,
    ServerError,
    SyncError,
    SyncErrorKind,
    TransportError,
)


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (AuthError("a"), SyncErrorKind.AUTH),
        (NoContentError("n"), SyncErrorKind.NO_CONTENT),
        (NotFoundError("f"), SyncErrorKind.NOT_FOUND),
        (ServerError("s", code=500), SyncErrorKind.SERVER),
        (TransportError("t"), SyncErrorKind.TRANSPORT),
        (EmptyContentError("e"), SyncErrorKind.EMPTY_CONTENT),
        (ClipboardError("c"), SyncErrorKind.CLIPBOARD),
        (OSError(28, "No space left on device"), SyncErrorKind.LOCAL_IO),
        (PermissionError(13, "Permission denied"), SyncErrorKind.LOCAL_IO),
    ],
)
def test_from_error_keeps_kind(error: Exception, kind: SyncErrorKind) -> None:
    """Test each failure type maps to its SyncErrorKind."""
    wrapped = SyncError.from_error(error)
    assert wrapped.kind is kind
    assert str(wrapped) == str(error)


def test_from_error_rejects_unknown_types() -> None:
    """Test arbitrary exceptions are not silently converted."""
    with pytest.raises(TypeError):
        SyncError.from_error(RuntimeError("bug"))


def test_server_error_keeps_code() -> None:
    """Test ServerError exposes the response code."""
    assert ServerError("bad gateway", code=502).code == 502
