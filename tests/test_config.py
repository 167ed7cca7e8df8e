#!/usr/bin/env python3
"""Tests for environment-sourced configuration."""
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from dotenv import dotenv_values

from alistclip.config import AlistConfig

ENV_EXAMPLE = Path(__file__).resolve().parent.parent / ".env.example"


def test_defaults_when_environment_is_empty() -> None:
    """Test unset variables fall back to the documented defaults."""
    config = AlistConfig.from_env(environ={})
    assert config.server == "http://localhost:5244"
    assert config.username == "admin"
    assert config.password == "password"
    assert config.clipboard_dir == "/host/clipboard"
    assert config.token is None
    assert config.time_format == "%Y%m%d_%H%M%S"
    assert config.timeout == 30.0


def test_values_are_read_from_environment() -> None:
    """Test every ALIST_* variable is honored."""
    config = AlistConfig.from_env(environ={
        "ALIST_SERVER": "https://files.example/",
        "ALIST_USERNAME": "me",
        "ALIST_PASSWORD": "pw",
        "ALIST_CLIPBOARD_DIR": "/clip",
        "ALIST_TOKEN": "tok",
        "TIME_FORMAT": "%s",
        "ALIST_TIMEOUT": "5",
    })
    assert config.server == "https://files.example"
    assert config.username == "me"
    assert config.clipboard_dir == "/clip"
    assert config.token == "tok"
    assert config.time_format == "%s"
    assert config.timeout == 5.0


def test_empty_token_means_login() -> None:
    """Test an empty ALIST_TOKEN is treated as not supplied."""
    assert AlistConfig.from_env(environ={"ALIST_TOKEN": ""}).token is None


def test_invalid_timeout_raises() -> None:
    """Test a non-numeric ALIST_TIMEOUT is rejected."""
    with pytest.raises(ValueError, match="ALIST_TIMEOUT"):
        AlistConfig.from_env(environ={"ALIST_TIMEOUT": "soon"})


def test_env_file_is_loaded_without_overriding(tmp_path: Path) -> None:
    """Test the dotenv file fills gaps but the environment wins."""
    env_file = tmp_path / ".env"
    env_file.write_text("ALIST_USERNAME=fromfile\nALIST_CLIPBOARD_DIR=/fromfile\n")
    with patch.dict(os.environ, {"ALIST_USERNAME": "fromenv"}, clear=True):
        config = AlistConfig.from_env(env_file)
    assert config.username == "fromenv"
    assert config.clipboard_dir == "/fromfile"


def test_missing_env_file_is_ignored(tmp_path: Path) -> None:
    """Test a missing dotenv file is not an error."""
    with patch.dict(os.environ, {}, clear=True):
        config = AlistConfig.from_env(tmp_path / "absent.env")
    assert config.username == "admin"


def test_auth_session_carries_token() -> None:
    """Test the AuthSession is seeded from the configuration."""
    session = AlistConfig(token="tok", username="u").auth_session()
    assert session.token == "tok"
    assert session.username == "u"


def test_repr_hides_password() -> None:
    """Test the password is not shown in repr."""
    assert "hunter2" not in repr(AlistConfig(password="hunter2"))


def test_env_example_matches_defaults() -> None:
    """Test the shipped .env.example lists every key with its default."""
    values = {k: v for k, v in dotenv_values(ENV_EXAMPLE).items() if v is not None}
    assert set(values) == {
        "ALIST_SERVER",
        "ALIST_USERNAME",
        "ALIST_PASSWORD",
        "ALIST_TOKEN",
        "ALIST_CLIPBOARD_DIR",
        "TIME_FORMAT",
        "ALIST_TIMEOUT",
    }
    assert AlistConfig.from_env(environ=values) == AlistConfig.from_env(environ={})
