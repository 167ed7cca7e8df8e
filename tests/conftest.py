#!/usr/bin/env python3
"""Pytest fixtures for alistclip tests.

Provides an in-memory Alist server mocked with respx, a zero-delay retry
policy, and sample payload bytes.
"""

import json
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

import httpx
import pytest
import respx

from alistclip.config import AlistConfig
from alistclip.retry_policy import RetryPolicy

BASE_URL = "http://alist.test"
TOKEN = "test-token"
SLOT = "/host/clipboard"

# Minimal PNG: signature followed by an IHDR chunk header.
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"


def alist_response(data: object = None, code: int = 200, message: str = "success") -> httpx.Response:
    """Build an Alist JSON envelope response."""
    return httpx.Response(200, json={"code": code, "message": message, "data": data})


class FakeAlist:
    """In-memory Alist server for a single directory tree.

    Attributes:
        files: Maps remote path to (content, modified timestamp string).
        dirs: Remote directories that exist.
        logins: Number of login calls received.
    """

    def __init__(self, router: respx.MockRouter) -> None:
        self.files: dict[str, tuple[bytes, str]] = {}
        self.dirs: set[str] = set()
        self.logins = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=8)))
        self.login_route = router.post(f"{BASE_URL}/api/auth/login").mock(side_effect=self._login)
        self.list_route = router.post(f"{BASE_URL}/api/fs/list").mock(side_effect=self._list)
        self.mkdir_route = router.post(f"{BASE_URL}/api/fs/mkdir").mock(side_effect=self._mkdir)
        self.get_route = router.post(f"{BASE_URL}/api/fs/get").mock(side_effect=self._get)
        self.put_route = router.put(f"{BASE_URL}/api/fs/put").mock(side_effect=self._put)
        self.raw_route = router.get(url__startswith=f"{BASE_URL}/d/").mock(side_effect=self._raw)

    def add_file(self, path: str, content: bytes, modified: str | None = None) -> None:
        """Place a file in the fake store."""
        self.files[path] = (content, modified or self._tick())

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat(timespec="microseconds")

    def _authorized(self, request: httpx.Request) -> bool:
        return request.headers.get("Authorization") == TOKEN

    def _login(self, request: httpx.Request) -> httpx.Response:
        self.logins += 1
        body = json.loads(request.content)
        if body == {"username": "admin", "password": "password"}:
            return alist_response({"token": TOKEN})
        return alist_response(None, code=400, message="password is incorrect")

    def _list(self, request: httpx.Request) -> httpx.Response:
        if not self._authorized(request):
            return alist_response(None, code=401, message="token is invalidated")
        path = json.loads(request.content)["path"].rstrip("/")
        rows = [
            {"name": p.rsplit("/", 1)[1], "is_dir": False, "modified": mod,
             "size": len(content), "type": 0}
            for p, (content, mod) in self.files.items()
            if p.rsplit("/", 1)[0] == path
        ]
        return alist_response({"content": rows or None, "total": len(rows)})

    def _mkdir(self, request: httpx.Request) -> httpx.Response:
        path = json.loads(request.content)["path"]
        if path in self.dirs:
            return alist_response(None, code=500, message="file already exists")
        self.dirs.add(path)
        return alist_response(None)

    def _get(self, request: httpx.Request) -> httpx.Response:
        path = json.loads(request.content)["path"]
        if path not in self.files:
            return alist_response(None, code=500, message="object not found")
        return alist_response({"raw_url": f"{BASE_URL}/d{path}?sign=abc", "type": 0})

    def _put(self, request: httpx.Request) -> httpx.Response:
        if not self._authorized(request):
            return alist_response(None, code=401, message="token is invalidated")
        path = unquote(request.headers["File-Path"])
        self.add_file(path, request.content)
        return alist_response({"task": {"id": "1"}})

    def _raw(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.path[len("/d"):])
        content, _ = self.files[path]
        return httpx.Response(200, content=content)


@pytest.fixture
def fake_alist() -> Generator[FakeAlist, None, None]:
    """Mock the Alist HTTP API with an in-memory store."""
    with respx.mock(assert_all_called=False) as router:
        yield FakeAlist(router)


@pytest.fixture
def config() -> AlistConfig:
    """Configuration pointing at the fake server."""
    return AlistConfig(server=BASE_URL, clipboard_dir=SLOT)


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Retry policy with the default attempt budget and no delay."""
    return RetryPolicy(delay=0)
