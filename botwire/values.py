"""Parameter value kinds accepted by the dispatch engine.

A ParameterSet is a plain ``dict[str, Value]``.  Scalars, string enums, and
JSON-able structures (lists, dicts, pydantic models) are used as-is; files are
described with :class:`InputFile`, raw ``bytes``, or an open binary handle.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Dict, Optional, Union

from pydantic import BaseModel


class ParseMode(str, Enum):
    """Text formatting modes for ``parse_mode``."""

    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


class ChatAction(str, Enum):
    """Actions for ``sendChatAction``."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"
    RECORD_VIDEO = "record_video"
    UPLOAD_VIDEO = "upload_video"
    RECORD_VOICE = "record_voice"
    UPLOAD_VOICE = "upload_voice"
    UPLOAD_DOCUMENT = "upload_document"
    CHOOSE_STICKER = "choose_sticker"
    FIND_LOCATION = "find_location"
    RECORD_VIDEO_NOTE = "record_video_note"
    UPLOAD_VIDEO_NOTE = "upload_video_note"


class StickerFormat(str, Enum):
    """Sticker file formats for sticker upload endpoints."""

    STATIC = "static"
    ANIMATED = "animated"
    VIDEO = "video"


@dataclass(frozen=True)
class InputFile:
    """A file parameter: a remote reference or local content to upload.

    Exactly one of ``url``, ``file_id``, ``filepath`` or ``data`` should be
    set; use the ``from_*`` constructors.  ``filename`` overrides the name
    sent with uploaded content.
    """

    url: Optional[str] = None
    file_id: Optional[str] = None
    filepath: Optional[str] = None
    data: Optional[bytes] = None
    filename: Optional[str] = None

    @classmethod
    def from_url(cls, url: str) -> "InputFile":
        return cls(url=url)

    @classmethod
    def from_file_id(cls, file_id: str) -> "InputFile":
        return cls(file_id=file_id)

    @classmethod
    def from_path(cls, filepath: Union[str, "os.PathLike[str]"], filename: Optional[str] = None) -> "InputFile":
        return cls(filepath=os.fspath(filepath), filename=filename)

    @classmethod
    def from_bytes(cls, data: bytes, filename: Optional[str] = None) -> "InputFile":
        return cls(data=bytes(data), filename=filename)

    @property
    def is_upload(self) -> bool:
        """True when the file carries local content that must be streamed."""
        return self.filepath is not None or bool(self.data)


Value = Union[
    bool,
    int,
    float,
    str,
    Enum,
    InputFile,
    bytes,
    bytearray,
    BinaryIO,
    BaseModel,
    list,
    dict,
]

ParameterSet = Dict[str, Value]
