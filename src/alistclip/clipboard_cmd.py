#!/usr/bin/env python3
"""Clipboard access through external helper commands.

wl-clipboard (wl-paste/wl-copy) is used on Wayland and xclip is used to
set the X11 clipboard. Both helpers fork a background process that keeps
serving the selection after this process exits, which a one-shot command
cannot do on its own.
"""

from __future__ import annotations

import asyncio
import logging
import shutil

from alistclip.constants import CLIPBOARD_TIMEOUT
from alistclip.errors import ClipboardError

logger = logging.getLogger(__name__)

_INSTALL_HINTS = {
    "wl-paste": "wl-clipboard",
    "wl-copy": "wl-clipboard",
    "xclip": "xclip",
}


def require_tool(name: str) -> str:
    """Return the full path of a helper command.

    Raises:
        ClipboardError: If the command is not installed.
    """
    path = shutil.which(name)
    if path is None:
        package = _INSTALL_HINTS.get(name, name)
        raise ClipboardError(f"{name} is not installed (install the {package} package)")
    return path


async def run_capture(*args: str, timeout: float = CLIPBOARD_TIMEOUT) -> bytes | None:
    """Run a helper and return its stdout.

    Returns:
        Captured stdout, or None if the helper exited non-zero (e.g. the
        requested type is not on the clipboard).

    Raises:
        ClipboardError: If the helper does not finish within timeout.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
    )
    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise ClipboardError(f"{args[0]} timed out after {timeout} seconds") from e
    if proc.returncode != 0:
        logger.debug("%s exited with status %s", args[0], proc.returncode)
        return None
    return stdout


async def run_feed(*args: str, data: bytes) -> None:
    """Run a helper with data on its stdin.

    stdout and stderr are discarded so the helper's forked background
    process cannot keep our pipes open.

    Raises:
        ClipboardError: If the helper exits non-zero.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )
    await proc.communicate(input=data)
    if proc.returncode != 0:
        raise ClipboardError(f"{args[0]} exited with status {proc.returncode}")


def pick_image_type(types: list[str]) -> str | None:
    """Choose the image MIME type to request from an offered type list.

    image/png is preferred; otherwise the first image/* type is used.
    """
    images = [t for t in types if t.startswith("image/")]
    if "image/png" in images:
        return "image/png"
    return images[0] if images else None


async def wayland_read() -> tuple[bytes, str | None] | None:
    """Read the Wayland clipboard, preferring image content.

    Returns:
        (data, mime_type) or None if the clipboard is empty.
    """
    wl_paste = require_tool("wl-paste")
    listing = await run_capture(wl_paste, "--list-types")
    types = listing.decode("utf-8", "replace").split() if listing else []
    image_type = pick_image_type(types)
    if image_type is not None:
        logger.info("Image data detected in clipboard (%s)", image_type)
        data = await run_capture(wl_paste, "--no-newline", "--type", image_type)
        if data:
            return data, image_type
        logger.warning("Failed to get image data from clipboard")
    data = await run_capture(wl_paste, "--no-newline")
    if data:
        return data, None
    return None


async def wayland_write(data: bytes, mime_type: str) -> None:
    """Place data on the Wayland clipboard as mime_type."""
    wl_copy = require_tool("wl-copy")
    await run_feed(wl_copy, "--type", mime_type, data=data)


async def xclip_write(data: bytes, mime_type: str) -> None:
    """Place data on the X11 CLIPBOARD selection as mime_type."""
    xclip = require_tool("xclip")
    target = "UTF8_STRING" if mime_type.startswith("text/") else mime_type
    await run_feed(xclip, "-selection", "clipboard", "-t", target, "-i", data=data)
