"""Parameter Encoder -- turn one parameter value into a form field or an attachment.

:func:`encode_param` returns the wire text for everything that can travel as
a plain form field, and an :class:`Attachment` for anything backed by local
binary content.  Values that fit neither raise :class:`EncodingError`; the
dispatchers log those and drop the field instead of failing the call.
"""

from __future__ import annotations

import io
import json
import os
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Optional, Tuple, Union

from pydantic import BaseModel

from botwire.exceptions import EncodingError
from botwire.sniff import sniff_extension
from botwire.values import InputFile


@dataclass(frozen=True)
class Attachment:
    """Binary content to be streamed as a form-file part named *field*.

    One of ``handle``, ``data`` or ``path`` is set.  Paths are opened only when
    :meth:`read` is called, and the opened handle is registered on the
    caller's :class:`~contextlib.ExitStack`.  Handles passed in by the caller
    are owned by the dispatcher, which closes them itself.
    """

    field: str
    handle: Optional[BinaryIO] = None
    data: Optional[bytes] = None
    path: Optional[str] = None
    filename: Optional[str] = None

    def read(self, stack: ExitStack) -> Tuple[str, bytes]:
        """Return ``(filename, content)``, scheduling any opened file for close.

        Text handles are uploaded as UTF-8.

        Raises:
            OSError: If a path cannot be opened or read.
            EncodingError: If a handle yields something other than bytes or text.
        """
        if self.handle is not None:
            content = self.handle.read()
            if isinstance(content, str):
                content = content.encode("utf-8")
            elif not isinstance(content, (bytes, bytearray)):
                raise EncodingError(self.field, f"handle returned {type(content).__name__}, expected bytes")
            content = bytes(content)
            name = getattr(self.handle, "name", None)
            return self.filename or _base_name(name) or self._synthesize(content), content

        if self.path is not None:
            fh = open(self.path, "rb")
            stack.callback(fh.close)
            content = fh.read()
            return self.filename or os.path.basename(self.path), content

        content = self.data or b""
        return self.filename or self._synthesize(content), content

    def _synthesize(self, content: bytes) -> str:
        extension = sniff_extension(content)
        return f"{self.field}.{extension}" if extension else self.field


def _base_name(name: Any) -> Optional[str]:
    if isinstance(name, str) and name:
        return os.path.basename(name)
    return None


def is_file_handle(value: Any) -> bool:
    """True for open file streams (binary or text) passed directly as a parameter."""
    return isinstance(value, io.IOBase) and hasattr(value, "read")


def is_attachment_value(value: Any) -> bool:
    """True when *value* carries local binary content."""
    if isinstance(value, InputFile):
        return value.is_upload
    return isinstance(value, (bytes, bytearray, memoryview)) or is_file_handle(value)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, InputFile):
        if obj.url is not None:
            return obj.url
        if obj.file_id is not None:
            return obj.file_id
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_param(field: str, value: Any) -> Union[str, Attachment]:
    """Encode *value* for the form field *field*.

    Returns:
        The wire text, or an :class:`Attachment` when the value must be
        uploaded as a file part.

    Raises:
        EncodingError: If the value has no wire representation.
    """
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return "true" if value else "false"
    # Enum before int/str: string enums are str subclasses.
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:.8f}"
    if isinstance(value, str):
        return value

    if isinstance(value, InputFile):
        if value.url is not None:
            return value.url
        if value.file_id is not None:
            return value.file_id
        if value.filepath is not None:
            return Attachment(field, path=value.filepath, filename=value.filename)
        if value.data:
            return Attachment(field, data=value.data, filename=value.filename)
        raise EncodingError(field, "is an InputFile without url, file_id, filepath or data")

    if isinstance(value, (bytes, bytearray, memoryview)):
        return Attachment(field, data=bytes(value))
    if is_file_handle(value):
        return Attachment(field, handle=value)

    try:
        return json.dumps(value, default=_json_default, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise EncodingError(field, f"could not be encoded as json: {exc}") from exc
