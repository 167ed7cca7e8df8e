"""Local clipboard access for alistclip.

This module is the boundary between the sync engine and the desktop
clipboard. It detects the display server and dispatches to the Wayland
helpers (wl-clipboard) or to X11 (python-xlib for reading, xclip for
writing).

The module provides:
- detect_display_server(): "wayland", "x11" or "unknown"
- read_clipboard(): capture the clipboard as a classified Payload
- write_clipboard(): restore a Payload to the clipboard
"""

from __future__ import annotations

import logging
import os

from alistclip.clipboard_cmd import wayland_read, wayland_write, xclip_write
from alistclip.clipboard_x11 import x11_read
from alistclip.errors import ClipboardError
from alistclip.payload import Payload

logger = logging.getLogger(__name__)


def detect_display_server() -> str:
    """Return the active display server based on the environment."""
    if os.environ.get("WAYLAND_DISPLAY"):
        return "wayland"
    if os.environ.get("DISPLAY"):
        return "x11"
    return "unknown"


def _require_display_server() -> str:
    server = detect_display_server()
    if server == "unknown":
        raise ClipboardError("Could not detect display server")
    logger.info("Detected %s display server", "Wayland" if server == "wayland" else "X11")
    return server


async def read_clipboard() -> Payload | None:
    """Capture the current clipboard content.

    Image content is preferred over text when both are offered.

    Returns:
        Classified Payload, or None if the clipboard is empty.

    Raises:
        ClipboardError: If the clipboard cannot be accessed.
    """
    server = _require_display_server()
    result = await (wayland_read() if server == "wayland" else x11_read())
    if result is None:
        logger.warning("No content found in clipboard")
        return None
    data, mime_type = result
    payload = Payload.from_bytes(data, mime_hint=mime_type)
    if payload.is_text:
        preview = data[:50].decode("utf-8", "replace")
        logger.info('Found text: "%s%s"', preview, "..." if len(data) > 50 else "")
    return payload


async def write_clipboard(payload: Payload) -> None:
    """Place a payload on the clipboard using its sniffed MIME type.

    Raises:
        ClipboardError: If the clipboard cannot be written.
    """
    server = _require_display_server()
    mime_type = payload.ensure_classified().mime_type
    if not payload.is_text:
        # Clipboard consumers only understand image targets for binary data.
        mime_type = mime_type if mime_type.startswith("image/") else "image/png"
    logger.info("Setting %s content to clipboard", mime_type)
    if server == "wayland":
        await wayland_write(payload.data, mime_type)
    else:
        await xclip_write(payload.data, mime_type)
