#!/usr/bin/env python3
"""Tests for lazy token acquisition."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from alistclip.errors import AuthError, TransportError
from alistclip.session import AuthSession, SessionAuth


def make_session(token: str | None = None) -> AuthSession:
    """Create an AuthSession with default credentials."""
    return AuthSession(server="http://alist.test", username="admin", password="pw", token=token)


@pytest.fixture
def mock_store() -> MagicMock:
    """Create a store whose login returns a token."""
    store = MagicMock()
    store.login = AsyncMock(return_value="fresh-token")
    return store


@pytest.mark.asyncio
async def test_supplied_token_skips_login(mock_store: MagicMock) -> None:
    """Test a pre-supplied token is used without any login call."""
    auth = SessionAuth(make_session("given"), mock_store)
    assert await auth.ensure_token() == "given"
    mock_store.login.assert_not_called()


@pytest.mark.asyncio
async def test_login_happens_once(mock_store: MagicMock) -> None:
    """Test the token from the first login is cached."""
    session = make_session()
    auth = SessionAuth(session, mock_store)
    assert await auth.ensure_token() == "fresh-token"
    assert await auth.ensure_token() == "fresh-token"
    mock_store.login.assert_awaited_once_with("admin", "pw")
    assert session.token == "fresh-token"


@pytest.mark.asyncio
async def test_failed_login_is_not_repeated(mock_store: MagicMock) -> None:
    """Test a rejected login raises AuthError and is not attempted again."""
    mock_store.login.side_effect = AuthError("password is incorrect")
    auth = SessionAuth(make_session(), mock_store)
    with pytest.raises(AuthError):
        await auth.ensure_token()
    with pytest.raises(AuthError):
        await auth.ensure_token()
    assert mock_store.login.await_count == 1


@pytest.mark.asyncio
async def test_transport_failure_propagates(mock_store: MagicMock) -> None:
    """Test a network failure during login is not disguised as AuthError."""
    mock_store.login.side_effect = TransportError("refused")
    auth = SessionAuth(make_session(), mock_store)
    with pytest.raises(TransportError):
        await auth.ensure_token()


def test_repr_hides_secrets() -> None:
    """Test password and token are excluded from repr."""
    text = repr(make_session("secret-token"))
    assert "password=" not in text
    assert "secret-token" not in text
