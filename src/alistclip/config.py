#!/usr/bin/env python3
"""Environment-sourced configuration.

Values come from the process environment, optionally seeded from a dotenv
file. Variables already present in the environment take precedence over
the file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from alistclip.constants import DEFAULT_TIME_FORMAT, DEFAULT_TIMEOUT
from alistclip.session import AuthSession

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "http://localhost:5244"
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password"
DEFAULT_CLIPBOARD_DIR = "/host/clipboard"


@dataclass(frozen=True)
class AlistConfig:
    """Settings for one push or pull.

    Attributes:
        server: Base URL of the Alist server.
        username: Login name, used when no token is supplied.
        password: Login password.
        clipboard_dir: Remote directory acting as the clipboard slot.
        token: Pre-issued token; skips the login call when set.
        time_format: strftime pattern for uploaded file names.
        timeout: HTTP timeout in seconds.
    """

    server: str = DEFAULT_SERVER
    username: str = DEFAULT_USERNAME
    password: str = field(default=DEFAULT_PASSWORD, repr=False)
    clipboard_dir: str = DEFAULT_CLIPBOARD_DIR
    token: str | None = field(default=None, repr=False)
    time_format: str = DEFAULT_TIME_FORMAT
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = ".env",
        environ: Mapping[str, str] | None = None,
    ) -> AlistConfig:
        """Build the configuration from environment variables.

        Args:
            env_file: Dotenv file loaded into os.environ first if it exists.
                Ignored when environ is given.
            environ: Mapping to read instead of os.environ.

        Returns:
            The configuration, with defaults for unset variables.

        Raises:
            ValueError: If ALIST_TIMEOUT is not a number.
        """
        if environ is None:
            if env_file is not None and Path(env_file).is_file():
                logger.debug("Loading environment from %s", env_file)
                load_dotenv(dotenv_path=env_file, override=False)
            environ = os.environ

        def get(name: str, default: str) -> str:
            return environ.get(name) or default

        timeout_raw = get("ALIST_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_raw)
        except ValueError as e:
            raise ValueError(f"ALIST_TIMEOUT must be a number, got {timeout_raw!r}") from e

        return cls(
            server=get("ALIST_SERVER", DEFAULT_SERVER).rstrip("/"),
            username=get("ALIST_USERNAME", DEFAULT_USERNAME),
            password=get("ALIST_PASSWORD", DEFAULT_PASSWORD),
            clipboard_dir=get("ALIST_CLIPBOARD_DIR", DEFAULT_CLIPBOARD_DIR),
            token=environ.get("ALIST_TOKEN") or None,
            time_format=get("TIME_FORMAT", DEFAULT_TIME_FORMAT),
            timeout=timeout,
        )

    def auth_session(self) -> AuthSession:
        """Create the process-wide AuthSession for this configuration."""
        return AuthSession(
            server=self.server,
            username=self.username,
            password=self.password,
            token=self.token,
        )
