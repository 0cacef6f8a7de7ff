"""Tests for the Parameter Encoder and the Transport Selector."""

import io
import os
import sys
from contextlib import ExitStack

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.encoder import Attachment, encode_param, is_attachment_value
from botwire.exceptions import EncodingError
from botwire.models import BotCommand, InlineKeyboardButton, InlineKeyboardMarkup
from botwire.transport import needs_multipart
from botwire.values import ChatAction, InputFile, ParseMode

from conftest import PNG_BYTES


# ── Scalars ──────────────────────────────────────────────────────────────────


class TestScalarEncoding:
    """Numbers, booleans, strings and enums become canonical text."""

    def test_bool_true(self) -> None:
        assert encode_param("disable_notification", True) == "true"

    def test_bool_false(self) -> None:
        assert encode_param("disable_notification", False) == "false"

    def test_int(self) -> None:
        assert encode_param("message_id", 42) == "42"

    def test_64_bit_int(self) -> None:
        assert encode_param("chat_id", -1001234567890123) == "-1001234567890123"

    def test_float_eight_decimals(self) -> None:
        assert encode_param("latitude", 3.14159265) == "3.14159265"

    def test_float_pads_to_eight_decimals(self) -> None:
        assert encode_param("longitude", 1.5) == "1.50000000"

    def test_string_unchanged(self) -> None:
        assert encode_param("text", "hello world") == "hello world"

    def test_parse_mode_enum(self) -> None:
        assert encode_param("parse_mode", ParseMode.MARKDOWN_V2) == "MarkdownV2"

    def test_chat_action_enum(self) -> None:
        assert encode_param("action", ChatAction.TYPING) == "typing"


# ── Files ────────────────────────────────────────────────────────────────────


class TestFileEncoding:
    """Remote references are strings; local content is an attachment."""

    def test_url_reference(self) -> None:
        value = InputFile.from_url("https://example.com/cat.jpg")
        assert encode_param("photo", value) == "https://example.com/cat.jpg"

    def test_file_id_reference(self) -> None:
        assert encode_param("photo", InputFile.from_file_id("AgAD-file")) == "AgAD-file"

    def test_path_is_attachment(self) -> None:
        encoded = encode_param("document", InputFile.from_path("/tmp/report.pdf"))
        assert isinstance(encoded, Attachment)
        assert encoded.path == "/tmp/report.pdf"
        assert encoded.field == "document"

    def test_input_file_bytes_is_attachment(self) -> None:
        encoded = encode_param("photo", InputFile.from_bytes(PNG_BYTES, filename="cat.png"))
        assert isinstance(encoded, Attachment)
        assert encoded.data == PNG_BYTES
        assert encoded.filename == "cat.png"

    def test_raw_bytes_are_attachment(self) -> None:
        encoded = encode_param("photo", PNG_BYTES)
        assert isinstance(encoded, Attachment)
        assert encoded.data == PNG_BYTES

    def test_handle_is_attachment(self) -> None:
        handle = io.BytesIO(b"data")
        encoded = encode_param("document", handle)
        assert isinstance(encoded, Attachment)
        assert encoded.handle is handle

    def test_empty_input_file_raises(self) -> None:
        with pytest.raises(EncodingError) as exc_info:
            encode_param("photo", InputFile())
        assert exc_info.value.field == "photo"

    def test_input_file_with_empty_bytes_raises(self) -> None:
        """Empty content inside an InputFile has nothing to upload and no reference."""
        with pytest.raises(EncodingError):
            encode_param("photo", InputFile.from_bytes(b""))


# ── Structured values ────────────────────────────────────────────────────────


class TestJsonEncoding:
    """Everything else is compact JSON."""

    def test_list(self) -> None:
        assert encode_param("allowed_updates", ["message", "callback_query"]) == '["message","callback_query"]'

    def test_dict(self) -> None:
        assert encode_param("extra", {"a": [1, 2]}) == '{"a":[1,2]}'

    def test_non_ascii_kept(self) -> None:
        assert encode_param("options", ["café"]) == '["café"]'

    def test_model_drops_none_fields(self) -> None:
        markup = InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="Go", callback_data="go")]])
        assert encode_param("reply_markup", markup) == '{"inline_keyboard":[[{"text":"Go","callback_data":"go"}]]}'

    def test_list_of_models(self) -> None:
        commands = [BotCommand(command="start", description="Start the bot")]
        assert encode_param("commands", commands) == '[{"command":"start","description":"Start the bot"}]'

    def test_unserializable_raises(self) -> None:
        with pytest.raises(EncodingError) as exc_info:
            encode_param("weird", object())
        assert "could not be encoded as json" in str(exc_info.value)


# ── Attachment naming ────────────────────────────────────────────────────────


class TestAttachmentRead:
    """Attachment names come from the caller, the path, or sniffed content."""

    def test_bytes_name_from_sniffed_type(self) -> None:
        with ExitStack() as stack:
            name, content = Attachment("photo", data=PNG_BYTES).read(stack)
        assert name == "photo.png"
        assert content == PNG_BYTES

    def test_unknown_bytes_use_field_name(self) -> None:
        with ExitStack() as stack:
            name, _ = Attachment("document", data=b"plain words").read(stack)
        assert name == "document"

    def test_explicit_filename_wins(self) -> None:
        with ExitStack() as stack:
            name, _ = Attachment("photo", data=PNG_BYTES, filename="cat.png").read(stack)
        assert name == "cat.png"

    def test_path_is_opened_lazily_and_closed(self, tmp_path) -> None:
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.7 body")
        attachment = Attachment("document", path=str(path))
        with ExitStack() as stack:
            name, content = attachment.read(stack)
        assert name == "report.pdf"
        assert content == b"%PDF-1.7 body"

    def test_text_handle_read_as_utf8(self) -> None:
        with ExitStack() as stack:
            name, content = Attachment("document", handle=io.StringIO("hello")).read(stack)
        assert name == "document"
        assert content == b"hello"

    def test_missing_path_raises_os_error(self, tmp_path) -> None:
        attachment = Attachment("document", path=str(tmp_path / "missing.pdf"))
        with ExitStack() as stack, pytest.raises(OSError):
            attachment.read(stack)


# ── Transport Selector ───────────────────────────────────────────────────────


class TestTransportSelector:
    """Any attachment switches the whole request to multipart."""

    def test_plain_fields_are_urlencoded(self) -> None:
        assert needs_multipart({"chat_id": "1", "text": "hi"}) is False

    def test_raw_bytes_need_multipart(self) -> None:
        assert needs_multipart({"chat_id": "1", "photo": PNG_BYTES}) is True

    def test_empty_raw_bytes_still_need_multipart(self) -> None:
        assert needs_multipart({"photo": b""}) is True

    def test_remote_input_file_is_urlencoded(self) -> None:
        assert needs_multipart({"photo": InputFile.from_url("https://example.com/a.png")}) is False

    def test_local_input_file_needs_multipart(self) -> None:
        assert needs_multipart({"photo": InputFile.from_path("/tmp/a.png")}) is True

    def test_open_handle_needs_multipart(self) -> None:
        assert needs_multipart({"document": io.BytesIO(b"x")}) is True

    def test_empty_params(self) -> None:
        assert needs_multipart({}) is False

    def test_bytearray_is_attachment(self) -> None:
        assert is_attachment_value(bytearray(b"abc")) is True
