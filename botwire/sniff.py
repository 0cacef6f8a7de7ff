"""Content-type sniffing for attachments uploaded without a filename.

Only a bounded prefix is inspected, and only well-known magic numbers are
trusted; anything else is reported as inconclusive.
"""

from __future__ import annotations

from typing import Optional

SNIFF_LEN = 512

# (offset, signature, mime type), checked in order.
_SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"BM", "image/bmp"),
    (0, b"\x00\x00\x01\x00", "image/x-icon"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b\x08", "application/x-gzip"),
    (0, b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (0, b"OggS\x00", "application/ogg"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"fLaC", "audio/flac"),
    (0, b"\x1aE\xdf\xa3", "video/webm"),
    (4, b"ftyp", "video/mp4"),
)

# RIFF containers: the format tag lives at offset 8.
_RIFF_FORMATS: dict[bytes, str] = {
    b"WEBP": "image/webp",
    b"WAVE": "audio/wave",
    b"AVI ": "video/avi",
}


def detect_content_type(data: bytes) -> Optional[str]:
    """Return the MIME type for *data*, or ``None`` when nothing matches."""
    head = bytes(data[:SNIFF_LEN])

    if head.startswith(b"RIFF") and len(head) >= 12:
        riff = _RIFF_FORMATS.get(head[8:12])
        if riff is not None:
            return riff

    for offset, signature, mime in _SIGNATURES:
        if head[offset:offset + len(signature)] == signature:
            return mime
    return None


def sniff_extension(data: bytes) -> str:
    """Return the MIME subtype of *data* for use as a file extension.

    ``b"\\x89PNG..."`` gives ``"png"``; unrecognised content gives ``""``.
    """
    mime = detect_content_type(data)
    if mime is None:
        return ""
    subtype = mime.split("/", 1)[1]
    return subtype.split(";", 1)[0].strip()
