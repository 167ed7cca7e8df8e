#!/usr/bin/env python3
"""
Async client for the Alist file server API.

Every JSON endpoint answers with {"code": ..., "message": ..., "data": ...};
responses are decoded against that shape and failures are mapped onto the
AlistError hierarchy:

- HTTP or body code 401/403 -> AuthError
- body code 404, or a message saying "not found" -> NotFoundError
- any other non-200 -> ServerError
- connection, timeout, redirect and decoding failures -> TransportError

The client holds no authentication state. Callers pass the token to each
call; retries are applied by the caller through RetryPolicy.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from alistclip.constants import DEFAULT_TIMEOUT, DOWNLOAD_CHUNK_SIZE, LIST_PER_PAGE
from alistclip.errors import (
    AuthError,
    EmptyContentError,
    NotFoundError,
    ServerError,
    TransportError,
)
from alistclip.remote_entry import RemoteEntry

logger = logging.getLogger(__name__)

_AUTH_CODES = frozenset({401, 403})


class MkdirResult(Enum):
    """Outcome of an idempotent mkdir."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


def _decode(response: httpx.Response, operation: str) -> Any:
    """
    Decode an Alist JSON response and return its data member.

    Args:
        response: The HTTP response.
        operation: Short name of the call, used in error messages.

    Returns:
        The "data" value of a successful response (may be None).

    Raises:
        AuthError, NotFoundError, ServerError: Per the module mapping.
    """
    if response.status_code in _AUTH_CODES:
        raise AuthError(f"{operation}: HTTP {response.status_code}")
    if response.status_code != 200:
        raise ServerError(
            f"{operation}: HTTP {response.status_code}", code=response.status_code
        )
    try:
        body = response.json()
    except ValueError as e:
        raise ServerError(f"{operation}: response is not JSON") from e
    if not isinstance(body, dict):
        raise ServerError(f"{operation}: unexpected response shape")

    code = body.get("code")
    message = str(body.get("message") or "")
    if code == 200:
        return body.get("data")
    if code in _AUTH_CODES:
        raise AuthError(f"{operation}: {message or 'unauthorized'}")
    if code == 404 or "not found" in message.lower():
        raise NotFoundError(f"{operation}: {message or 'not found'}")
    raise ServerError(f"{operation}: {message or 'failed'} (code {code})", code=code)


class AlistClient:
    """Stateless wrapper around the Alist HTTP API.

    Use as an async context manager so the underlying httpx client is
    closed:

        async with AlistClient("http://localhost:5244") as store:
            token = await store.login("admin", "password")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, follow_redirects=True
        )

    async def __aenter__(self) -> AlistClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(
        self, endpoint: str, payload: dict[str, Any], token: str | None = None
    ) -> httpx.Response:
        headers = {"Authorization": token} if token else {}
        try:
            return await self._client.post(endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"POST {endpoint} failed: {e}") from e

    async def login(self, username: str, password: str) -> str:
        """
        Exchange credentials for a token.

        Raises:
            AuthError: If the server rejects the credentials or returns no
                token.
            TransportError: If the server cannot be reached.
        """
        response = await self._post(
            "/api/auth/login", {"username": username, "password": password}
        )
        try:
            data = _decode(response, "login")
        except (NotFoundError, ServerError) as e:
            raise AuthError(str(e)) from e
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthError("login: response contained no token")
        return str(token)

    async def list_dir(self, token: str, path: str) -> list[RemoteEntry]:
        """
        List a directory, bypassing the server-side listing cache.

        Pages are requested until the reported total is reached.

        Args:
            token: Authorization token.
            path: Remote directory path.

        Returns:
            Entries in server order.

        Raises:
            NotFoundError: If the directory does not exist.
            ServerError, TransportError, AuthError: On other failures.
        """
        entries: list[RemoteEntry] = []
        page = 1
        while True:
            response = await self._post(
                "/api/fs/list",
                {
                    "path": path,
                    "password": "",
                    "page": page,
                    "per_page": LIST_PER_PAGE,
                    "refresh": True,
                },
                token,
            )
            data = _decode(response, "list") or {}
            if not isinstance(data, dict):
                raise ServerError("list: unexpected response shape")
            rows = data.get("content") or []
            entries.extend(RemoteEntry.from_listing(path, row) for row in rows)
            total = int(data.get("total") or 0)
            if not rows or len(entries) >= total:
                break
            page += 1
        logger.debug("Listed %d entries in %s", len(entries), path)
        return entries

    async def mkdir(self, token: str, path: str) -> MkdirResult:
        """
        Create a directory; an existing directory counts as success.

        Raises:
            ServerError, TransportError, AuthError: On real failures.
        """
        response = await self._post("/api/fs/mkdir", {"path": path}, token)
        try:
            _decode(response, "mkdir")
        except (ServerError, NotFoundError) as e:
            if "already exists" in str(e).lower():
                logger.debug("Directory already exists: %s", path)
                return MkdirResult.ALREADY_EXISTS
            raise
        logger.debug("Directory created: %s", path)
        return MkdirResult.CREATED

    async def get_raw_url(self, token: str, path: str) -> str:
        """
        Resolve the raw download URL of a file.

        Raises:
            NotFoundError: If the file does not exist or has no raw URL.
        """
        response = await self._post(
            "/api/fs/get", {"path": path, "password": ""}, token
        )
        data = _decode(response, "get")
        raw_url = data.get("raw_url") if isinstance(data, dict) else None
        if not raw_url:
            raise NotFoundError(f"get: no download URL for {path}")
        return str(raw_url)

    async def download(self, url: str, destination: Path) -> int:
        """
        Stream a raw URL to a local file, truncating any earlier attempt.

        The request carries no Authorization header; raw URLs are signed.

        Returns:
            Number of bytes written.

        Raises:
            ServerError: On a non-success HTTP status.
            TransportError: On network failure.
            EmptyContentError: If the download is zero bytes.
        """
        try:
            async with self._client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise ServerError(
                        f"download: HTTP {response.status_code}",
                        code=response.status_code,
                    )
                with destination.open("wb") as fh:
                    async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_SIZE):
                        fh.write(chunk)
        except httpx.HTTPError as e:
            raise TransportError(f"download failed: {e}") from e
        size = destination.stat().st_size
        if size == 0:
            raise EmptyContentError(f"download: {url} returned no content")
        return size

    async def upload(self, token: str, remote_path: str, source: Path) -> None:
        """
        Upload a local file to remote_path in a single PUT.

        The server is asked to run the upload as a task, which also creates
        missing parent directories on its side.

        Raises:
            EmptyContentError: If source is empty.
            ServerError, TransportError, AuthError: On failure.
        """
        body = source.read_bytes()
        if not body:
            raise EmptyContentError(f"upload: {source} is empty")
        headers = {
            "Authorization": token,
            "File-Path": quote(remote_path, safe="/"),
            "As-Task": "true",
            "Content-Length": str(len(body)),
            "Content-Type": "application/octet-stream",
        }
        try:
            response = await self._client.put("/api/fs/put", content=body, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"PUT /api/fs/put failed: {e}") from e
        _decode(response, "upload")
        logger.debug("Uploaded %d bytes to %s", len(body), remote_path)
