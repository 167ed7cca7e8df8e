#!/usr/bin/env python3
"""X11 clipboard reading via python-xlib.

This module reads the CLIPBOARD selection using the X11 selection protocol
on a hidden window:

- Validating X11 display connectivity
- Creating a hidden window to receive selection data
- Querying TARGETS and converting the selection to image/png or UTF8_STRING
- Reassembling INCR transfers used by owners for large content

Blocking Xlib event reads run in a worker thread. The worker waits on the
display socket with select() against a deadline, so an owner that never
answers makes the thread return by itself instead of hanging the upload.
"""

from __future__ import annotations

import asyncio
import logging
import os
import select
import time
from typing import TYPE_CHECKING

from Xlib import X

from alistclip.clipboard_cmd import pick_image_type
from alistclip.constants import CLIPBOARD_TIMEOUT
from alistclip.errors import ClipboardError

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)

# Property on our window that receives converted selection data.
TRANSFER_PROPERTY = "ALISTCLIP_SEL"

# Text targets in order of preference.
TEXT_TARGETS = ("UTF8_STRING", "text/plain;charset=utf-8", "STRING", "TEXT")


def open_display() -> Display:
    """Open the X11 display named by DISPLAY.

    Returns:
        Display object for X11 operations.

    Raises:
        ClipboardError: If DISPLAY is unset or the connection fails.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        raise ClipboardError("DISPLAY environment variable is not set")

    try:
        from Xlib.display import Display as XDisplay
        return XDisplay(display_name)
    except Exception as e:
        raise ClipboardError(f"Failed to connect to X11 display: {e}") from e


def create_hidden_window(display: Display) -> Window:
    """Create a 1x1 unmapped window that receives selection data.

    PropertyChangeMask is selected so INCR chunks can be followed.
    """
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )


def _as_bytes(value: object) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _next_event(display: Display, deadline: float | None) -> object:
    """Return the next X event, raising ClipboardError once deadline passes.

    With no deadline this blocks in display.next_event().
    """
    if deadline is None:
        return display.next_event()
    while not display.pending_events():
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ClipboardError("Clipboard read timed out waiting for the selection owner")
        select.select([display.fileno()], [], [], remaining)
    return display.next_event()


def _wait_for_selection_notify(display: Display, deadline: float | None) -> object:
    while True:
        event = _next_event(display, deadline)
        if event.type == X.SelectionNotify:
            return event


def _read_incr(
    display: Display, window: Window, prop_atom: int, deadline: float | None
) -> bytes:
    """Collect INCR chunks until the owner sends a zero-length chunk."""
    chunks: list[bytes] = []
    while True:
        event = _next_event(display, deadline)
        if (
            event.type != X.PropertyNotify
            or event.atom != prop_atom
            or event.state != X.PropertyNewValue
        ):
            continue
        prop = window.get_full_property(prop_atom, X.AnyPropertyType)
        window.delete_property(prop_atom)
        display.flush()
        if prop is None or not prop.value:
            return b"".join(chunks)
        chunks.append(_as_bytes(prop.value))


def convert_selection(
    display: Display,
    window: Window,
    selection_atom: int,
    target: str,
    deadline: float | None = None,
) -> bytes | None:
    """Convert a selection to target and return the raw property value.

    Blocks until the owner answers or deadline (a time.monotonic() value)
    passes; callers run it in a thread.

    Returns:
        Content bytes, or None if the owner refused the conversion.

    Raises:
        ClipboardError: If deadline passes first.
    """
    target_atom = display.intern_atom(target)
    prop_atom = display.intern_atom(TRANSFER_PROPERTY)
    window.convert_selection(selection_atom, target_atom, prop_atom, X.CurrentTime)
    display.flush()

    event = _wait_for_selection_notify(display, deadline)
    if event.property == X.NONE:
        logger.debug("Selection owner refused target %s", target)
        return None

    prop = window.get_full_property(prop_atom, X.AnyPropertyType)
    if prop is None:
        return None
    incr_atom = display.intern_atom("INCR")
    # Deleting the property starts an INCR transfer.
    window.delete_property(prop_atom)
    display.flush()
    if prop.property_type == incr_atom:
        logger.debug("Receiving %s via INCR", target)
        return _read_incr(display, window, prop_atom, deadline)
    return _as_bytes(prop.value)


def list_targets(
    display: Display,
    window: Window,
    selection_atom: int,
    deadline: float | None = None,
) -> list[str]:
    """Return the target names offered by the selection owner."""
    prop_atom = display.intern_atom(TRANSFER_PROPERTY)
    window.convert_selection(
        selection_atom, display.intern_atom("TARGETS"), prop_atom, X.CurrentTime
    )
    display.flush()
    event = _wait_for_selection_notify(display, deadline)
    if event.property == X.NONE:
        return []
    prop = window.get_full_property(prop_atom, X.AnyPropertyType)
    window.delete_property(prop_atom)
    display.flush()
    if prop is None:
        return []
    return [display.get_atom_name(atom) for atom in prop.value]


def pick_text_target(targets: list[str]) -> str:
    """Choose the text target to request; UTF8_STRING when nothing is offered."""
    for target in TEXT_TARGETS:
        if target in targets:
            return target
    return TEXT_TARGETS[0]


def _read_clipboard_blocking(
    display: Display, deadline: float
) -> tuple[bytes, str | None] | None:
    selection_atom = display.intern_atom("CLIPBOARD")
    if display.get_selection_owner(selection_atom) == X.NONE:
        logger.debug("No owner for CLIPBOARD selection")
        return None

    window = create_hidden_window(display)
    try:
        targets = list_targets(display, window, selection_atom, deadline)
        logger.debug("Clipboard targets: %s", ", ".join(targets))
        image_type = pick_image_type(targets)
        if image_type is not None:
            logger.info("Image data detected in clipboard (%s)", image_type)
            data = convert_selection(
                display, window, selection_atom, image_type, deadline
            )
            if data:
                return data, image_type
            logger.warning("Failed to get image data from clipboard")
        data = convert_selection(
            display, window, selection_atom, pick_text_target(targets), deadline
        )
        return (data, None) if data else None
    finally:
        window.destroy()
        display.flush()


async def x11_read(timeout: float = CLIPBOARD_TIMEOUT) -> tuple[bytes, str | None] | None:
    """Read the X11 CLIPBOARD selection, preferring image content.

    Returns:
        (data, mime_type) or None if the clipboard is empty. mime_type is
        None for text.

    Raises:
        ClipboardError: If the display is unavailable or the owner does not
            answer within timeout.
    """
    display = open_display()
    deadline = time.monotonic() + timeout
    try:
        return await asyncio.to_thread(_read_clipboard_blocking, display, deadline)
    finally:
        display.close()
