"""Tests for BotClient endpoint methods (network calls are mocked)."""

import io
import os
import sys
from unittest.mock import patch

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botwire.client import BotClient
from botwire.context import BotContext
from botwire.models import BotCommand, File, InlineKeyboardButton, InlineKeyboardMarkup, Message, User
from botwire.values import ChatAction, InputFile, ParseMode

from conftest import PNG_BYTES, TOKEN, make_response


@pytest.fixture()
def client(context: BotContext) -> BotClient:
    return BotClient(context)


def _body(send) -> bytes:
    return send.call_args.args[0].body


# ── Engine entry points ──────────────────────────────────────────────────────


class TestRequest:
    """request() never raises for transport or decode failures."""

    def test_get_me_success(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"id":1,"is_bot":true,"first_name":"Bot"}}'
        with patch.object(client.context.session, "send", return_value=make_response(raw)) as send:
            resp = client.get_me()
        assert resp.ok is True
        assert isinstance(resp.result, User)
        assert send.call_args.args[0].url.endswith("/getMe")

    def test_transport_failure_becomes_envelope(self, client: BotClient) -> None:
        error = requests.ConnectionError(f"HTTPSConnectionPool: /bot{TOKEN}/getMe refused")
        with patch.object(client.context.session, "send", side_effect=error):
            resp = client.get_me()
        assert resp.ok is False
        assert resp.result is None
        assert resp.description.startswith("getMe failed with error: request error:")
        assert TOKEN not in resp.description

    def test_decode_failure_becomes_envelope(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response(b"502 Bad Gateway")):
            resp = client.get_me()
        assert resp.ok is False
        assert resp.description.startswith("json parse error:")
        assert "502 Bad Gateway" in resp.description

    def test_api_error_passes_through(self, client: BotClient) -> None:
        raw = b'{"ok":false,"error_code":401,"description":"Unauthorized"}'
        with patch.object(client.context.session, "send", return_value=make_response(raw)):
            resp = client.get_me()
        assert resp.ok is False
        assert resp.error_code == 401
        assert resp.description == "Unauthorized"

    def test_failure_is_logged_redacted(self, client: BotClient, caplog) -> None:
        with patch.object(client.context.session, "send", side_effect=requests.ConnectionError(TOKEN)):
            with caplog.at_level("ERROR", logger="botwire"):
                client.get_me()
        assert caplog.records
        assert all(TOKEN not in record.getMessage() for record in caplog.records)


# ── Sending ──────────────────────────────────────────────────────────────────


class TestSendMethods:
    def test_send_message_options(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"message_id":10,"date":1,"chat":{"id":42,"type":"private"},"text":"*hi*"}}'
        markup = InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="Go", callback_data="go")]])
        with patch.object(client.context.session, "send", return_value=make_response(raw)) as send:
            resp = client.send_message(42, "*hi*", parse_mode=ParseMode.MARKDOWN_V2, reply_markup=markup)
        assert isinstance(resp.result, Message)
        assert resp.result.message_id == 10
        body = _body(send)
        assert b"parse_mode=MarkdownV2" in body
        assert b"chat_id=42" in body
        assert b"reply_markup=%7B%22inline_keyboard%22" in body

    def test_send_photo_bytes_is_multipart(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"message_id":11}}'
        with patch.object(client.context.session, "send", return_value=make_response(raw)) as send:
            resp = client.send_photo(42, PNG_BYTES, caption="cat")
        assert resp.ok is True
        prepared = send.call_args.args[0]
        assert prepared.headers["Content-Type"].startswith("multipart/form-data")
        assert b'filename="photo.png"' in prepared.body

    def test_send_photo_file_id_is_urlencoded(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"message_id":12}}'
        with patch.object(client.context.session, "send", return_value=make_response(raw)) as send:
            client.send_photo(42, InputFile.from_file_id("AgAD-file"))
        assert _body(send) == b"chat_id=42&photo=AgAD-file"

    def test_send_document_text_handle(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"message_id":13}}'
        handle = io.StringIO("hello")
        with patch.object(client.context.session, "send", return_value=make_response(raw)) as send:
            resp = client.send_document(1, handle)
        assert resp.ok is True
        assert b'name="document"; filename="document"\r\n' in _body(send)
        assert handle.closed

    def test_send_location_floats(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response(b'{"ok":true,"result":{"message_id":1}}')) as send:
            client.send_location(1, 51, -0.1275)
        assert _body(send) == b"chat_id=1&latitude=51.00000000&longitude=-0.12750000"

    def test_send_chat_action(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response()) as send:
            resp = client.send_chat_action(1, ChatAction.UPLOAD_PHOTO)
        assert resp.result is True
        assert _body(send) == b"action=upload_photo&chat_id=1"

    def test_set_my_commands_json(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response()) as send:
            client.set_my_commands([BotCommand(command="start", description="Start")])
        assert b"commands=%5B%7B%22command%22%3A%22start%22" in _body(send)

    def test_get_chat_member_count(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response(b'{"ok":true,"result":17}')):
            assert client.get_chat_member_count("@channel").result == 17


# ── Edit-style endpoints ─────────────────────────────────────────────────────


class TestEditMethods:
    def test_edit_message_text_returns_message(self, client: BotClient) -> None:
        raw = b'{"ok":true,"result":{"message_id":5,"text":"new"}}'
        with patch.object(client.context.session, "send", return_value=make_response(raw)):
            resp = client.edit_message_text("new", chat_id=1, message_id=5)
        assert resp.is_message
        assert resp.result_message.text == "new"

    def test_edit_inline_message_returns_bool(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response()):
            resp = client.edit_message_text("new", inline_message_id="abc")
        assert not resp.is_message
        assert resp.result_bool is True

    def test_edit_transport_failure(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", side_effect=requests.Timeout("slow")):
            resp = client.edit_message_reply_markup(chat_id=1, message_id=2)
        assert resp.ok is False
        assert resp.description.startswith("editMessageReplyMarkup failed with error:")

    def test_edit_ok_without_result(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response(b'{"ok":true}')):
            resp = client.edit_message_caption(chat_id=1, message_id=2, caption="c")
        assert resp.ok is False
        assert resp.result_message is None
        assert resp.result_bool is None

    def test_edit_unexpected_shape(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response(b'{"ok":true,"result":"yes"}')):
            resp = client.set_game_score(1, 100, inline_message_id="x")
        assert resp.ok is False
        assert "not in Message nor bool type" in resp.description


# ── Webhooks and files ───────────────────────────────────────────────────────


class TestWebhookAndFiles:
    def test_set_webhook_missing_certificate(self, client: BotClient, tmp_path) -> None:
        with patch.object(client.context.session, "send") as send:
            resp = client.set_webhook("https://example.com/hook", certificate=str(tmp_path / "missing.pem"))
        assert resp.ok is False
        assert resp.description.startswith("failed to open certificate:")
        send.assert_not_called()

    def test_set_webhook_uploads_certificate(self, client: BotClient, tmp_path) -> None:
        cert = tmp_path / "public.pem"
        cert.write_bytes(b"-----BEGIN CERTIFICATE-----")
        with patch.object(client.context.session, "send", return_value=make_response()) as send:
            resp = client.set_webhook("https://example.com/hook", certificate=str(cert))
        assert resp.result is True
        body = _body(send)
        assert b'name="certificate"; filename="public.pem"' in body
        assert b"https://example.com/hook" in body

    def test_set_webhook_without_certificate(self, client: BotClient) -> None:
        with patch.object(client.context.session, "send", return_value=make_response()) as send:
            client.set_webhook("https://example.com/hook", max_connections=5)
        assert _body(send) == b"max_connections=5&url=https%3A%2F%2Fexample.com%2Fhook"

    def test_get_file_url(self, client: BotClient) -> None:
        f = File(file_id="id", file_unique_id="u", file_path="photos/file_1.jpg")
        assert client.get_file_url(f) == f"https://api.telegram.org/file/bot{TOKEN}/photos/file_1.jpg"

    def test_get_file_url_from_path(self, client: BotClient) -> None:
        assert client.get_file_url("docs/a.pdf").endswith(f"bot{TOKEN}/docs/a.pdf")

    def test_get_file_url_requires_path(self, client: BotClient) -> None:
        with pytest.raises(ValueError):
            client.get_file_url(File(file_id="id", file_unique_id="u"))
