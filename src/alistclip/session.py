#!/usr/bin/env python3
"""Authentication session for the Alist server.

The token is obtained at most once per process: either it is supplied in
the configuration (and trusted without a validation call) or a single
login is made with the configured credentials. It is never refreshed; an
expired token surfaces as an AuthError from the remote store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from alistclip.errors import AuthError

if TYPE_CHECKING:
    from alistclip.remote_store import AlistClient

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """Credentials and the token for one server.

    Attributes:
        server: Base URL of the Alist server.
        username: Login name.
        password: Login password. Excluded from repr.
        token: Token once known, or None.
    """

    server: str
    username: str
    password: str = field(repr=False)
    token: str | None = field(default=None, repr=False)


class SessionAuth:
    """Lazily populates the token of an AuthSession."""

    def __init__(self, session: AuthSession, store: AlistClient) -> None:
        self.session = session
        self._store = store
        self._login_failed: AuthError | None = None

    async def ensure_token(self) -> str:
        """Return a token, logging in on first use if none was supplied.

        Returns:
            The authorization token.

        Raises:
            AuthError: If login fails. A failed login is not repeated; later
                calls raise the same error.
        """
        if self.session.token:
            return self.session.token
        if self._login_failed is not None:
            raise self._login_failed

        logger.info("Logging in to Alist server %s", self.session.server)
        try:
            token = await self._store.login(self.session.username, self.session.password)
        except AuthError as e:
            logger.error("Failed to login to Alist server: %s", e)
            self._login_failed = e
            raise
        self.session.token = token
        logger.info("Successfully logged in to Alist server")
        return token
