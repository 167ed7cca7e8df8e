#!/usr/bin/env python3
"""
Content sniffing for clipboard payloads.

Remote metadata cannot be trusted: uploads arrive with mismatched
extensions, and servers report generic octet-stream types. The bytes
themselves decide whether a payload is text or binary. Filename and MIME
hints are only consulted to pick a display extension when the content does
not imply one.

The same classify() function is used when capturing the clipboard for
upload and when restoring a downloaded file, so identical bytes always
classify identically in both directions.

Rules, first match wins:
1. PNG signature (89 50 4E 47) -> binary/png
2. MIME hint image/* -> binary/image
3. Empty, or printable ASCII only -> text
4. UTF-8 text without control characters -> text
5. Anything else -> binary/unknown
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Only the first four bytes of the PNG signature are required.
PNG_SIGNATURE: bytes = b"\x89PNG"

# Whitespace control bytes allowed in text in addition to 0x20-0x7E.
_TEXT_WHITESPACE: frozenset[int] = frozenset(b"\t\n\r\x0b\x0c")

_MIME_EXTENSIONS: dict[str, str] = {
    "jpeg": "jpg",
    "pjpeg": "jpg",
    "svg+xml": "svg",
    "x-icon": "ico",
    "vnd.microsoft.icon": "ico",
    "x-ms-bmp": "bmp",
}


class PayloadKind(Enum):
    """Whether a payload is restored as text or as binary data."""

    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class Classification:
    """
    Result of sniffing a byte buffer.

    Attributes:
        kind: TEXT or BINARY.
        subtype: "text", "png", "image" or "unknown".
        extension: Normalized file extension without the leading dot.
    """

    kind: PayloadKind
    subtype: str
    extension: str

    @property
    def mime_type(self) -> str:
        """MIME type to offer when placing the payload on a clipboard."""
        if self.kind is PayloadKind.TEXT:
            return "text/plain;charset=utf-8"
        if self.subtype == "png":
            return "image/png"
        if self.subtype == "image":
            return f"image/{'jpeg' if self.extension == 'jpg' else self.extension}"
        return "application/octet-stream"


def _is_printable_ascii(data: bytes) -> bool:
    return all(0x20 <= b <= 0x7E or b in _TEXT_WHITESPACE for b in data)


def _is_plain_utf8(data: bytes) -> bool:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return all(
        unicodedata.category(ch) != "Cc" or ord(ch) in _TEXT_WHITESPACE for ch in text
    )


def _extension_from_mime(mime_type: str) -> str:
    subtype = mime_type.split("/", 1)[1].split(";", 1)[0].strip().lower()
    return _MIME_EXTENSIONS.get(subtype, subtype or "bin")


def _extension_from_name(filename_hint: str | None) -> str | None:
    if not filename_hint:
        return None
    suffix = Path(filename_hint).suffix.lstrip(".").lower()
    # A text extension on content that failed the text checks is a mislabel.
    if suffix == "txt":
        return None
    return suffix or None


def classify(
    data: bytes,
    filename_hint: str | None = None,
    mime_hint: str | None = None,
) -> Classification:
    """
    Classify a byte buffer as text or binary by inspecting its content.

    Args:
        data: Raw payload bytes.
        filename_hint: Optional filename; only used to choose the extension
            of otherwise unrecognized binary content.
        mime_hint: Optional declared MIME type, e.g. the clipboard target
            the bytes were read from.

    Returns:
        Classification for the buffer. Identical inputs always produce
        identical results.
    """
    if data.startswith(PNG_SIGNATURE):
        return Classification(PayloadKind.BINARY, "png", "png")
    if mime_hint and mime_hint.lower().startswith("image/"):
        return Classification(PayloadKind.BINARY, "image", _extension_from_mime(mime_hint))
    if not data or _is_printable_ascii(data) or _is_plain_utf8(data):
        return Classification(PayloadKind.TEXT, "text", "txt")
    extension = _extension_from_name(filename_hint) or "bin"
    return Classification(PayloadKind.BINARY, "unknown", extension)


def classify_file(path: Path, mime_hint: str | None = None) -> Classification:
    """Classify a file on disk, using its name as the filename hint."""
    return classify(path.read_bytes(), filename_hint=path.name, mime_hint=mime_hint)
