"""BotClient -- typed Telegram Bot API methods on top of the dispatch engine.

Every endpoint method assembles a parameter map and hands it to
:meth:`BotClient.request` (or :meth:`BotClient.request_message_or_bool` for
edit-style endpoints).  Required parameters are explicit; any optional API
parameter is passed through as a keyword option, e.g.::

    client.send_message(42, "*hi*", parse_mode=ParseMode.MARKDOWN_V2)

Methods never raise for transport or decoding problems: failures come back as
``ok=False`` envelopes whose ``description`` has the bot token redacted.
Call :meth:`~botwire.envelope.APIResponse.raise_for_error` to opt into
exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from botwire.context import BotContext
from botwire.envelope import APIResponse, APIResponseMessageOrBool, decode, decode_dual
from botwire.exceptions import DecodeError, TransportError
from botwire.models import (
    BotCommand,
    Chat,
    ChatMember,
    File,
    GameHighScore,
    InputMedia,
    Message,
    MessageId,
    Poll,
    StickerSet,
    Update,
    User,
    UserProfilePhotos,
    WebhookInfo,
)
from botwire.transport import dispatch
from botwire.values import ChatAction, InputFile, ParameterSet, StickerFormat

_logger = logging.getLogger("botwire.client")

ChatID = Union[int, str]
FileParam = Union[InputFile, str, bytes]


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    The client holds nothing but an immutable :class:`BotContext`, so one
    instance can serve concurrent callers.
    """

    def __init__(self, context: BotContext) -> None:
        self._context = context

    @property
    def context(self) -> BotContext:
        return self._context

    # ------------------------------------------------------------------
    #  Engine entry points
    # ------------------------------------------------------------------

    def request(self, method: str, params: Optional[ParameterSet], result_type: Any) -> APIResponse[Any]:
        """Dispatch *method* and decode the response as ``APIResponse[result_type]``."""
        try:
            raw = dispatch(self._context, method, params)
        except TransportError as exc:
            return APIResponse[result_type].failure(self._fail(method, f"{method} failed with error: {exc}"))
        try:
            return decode(raw, result_type)
        except DecodeError as exc:
            return APIResponse[result_type].failure(self._fail(method, str(exc)))

    def request_message_or_bool(self, method: str, params: Optional[ParameterSet]) -> APIResponseMessageOrBool:
        """Dispatch an edit-style *method* whose result is a Message or ``true``."""
        try:
            raw = dispatch(self._context, method, params)
        except TransportError as exc:
            return APIResponseMessageOrBool.failure(self._fail(method, f"{method} failed with error: {exc}"))
        try:
            return decode_dual(raw)
        except DecodeError as exc:
            return APIResponseMessageOrBool.failure(self._fail(method, str(exc)))

    def _fail(self, method: str, message: str) -> str:
        message = self._context.redact(message)
        _logger.error(message, extra={"api_endpoint": method})
        return message

    # ------------------------------------------------------------------
    #  Getting updates
    # ------------------------------------------------------------------

    def get_updates(self, **options: Any) -> APIResponse[List[Update]]:
        """Receive incoming updates using long polling."""
        return self.request("getUpdates", dict(options), List[Update])

    def set_webhook(self, url: str, certificate: Optional[str] = None, **options: Any) -> APIResponse[bool]:
        """Specify a url and receive incoming updates via an outgoing webhook.

        *certificate* is a path to the public key certificate; it is opened
        before dispatch and a failure to open it is returned as an envelope.
        """
        payload: Dict[str, Any] = dict(options)
        payload["url"] = url
        if certificate is not None:
            try:
                payload["certificate"] = open(certificate, "rb")
            except OSError as exc:
                return APIResponse[bool].failure(self._fail("setWebhook", f"failed to open certificate: {exc}"))
        if self._context.verbose:
            _logger.debug("Setting webhook url", extra={"api_endpoint": "setWebhook", "url": url})
        return self.request("setWebhook", payload, bool)

    def delete_webhook(self, drop_pending_updates: bool = False) -> APIResponse[bool]:
        """Remove webhook integration to switch back to getUpdates."""
        return self.request("deleteWebhook", {"drop_pending_updates": drop_pending_updates}, bool)

    def get_webhook_info(self) -> APIResponse[WebhookInfo]:
        return self.request("getWebhookInfo", {}, WebhookInfo)

    # ------------------------------------------------------------------
    #  Bot
    # ------------------------------------------------------------------

    def get_me(self) -> APIResponse[User]:
        """A simple method for testing your bot's auth token."""
        return self.request("getMe", {}, User)

    def log_out(self) -> APIResponse[bool]:
        return self.request("logOut", {}, bool)

    def close(self) -> APIResponse[bool]:
        return self.request("close", {}, bool)

    def set_my_commands(self, commands: Sequence[BotCommand], **options: Any) -> APIResponse[bool]:
        payload: Dict[str, Any] = dict(options)
        payload["commands"] = list(commands)
        return self.request("setMyCommands", payload, bool)

    def get_my_commands(self, **options: Any) -> APIResponse[List[BotCommand]]:
        return self.request("getMyCommands", dict(options), List[BotCommand])

    # ------------------------------------------------------------------
    #  Sending messages
    # ------------------------------------------------------------------

    def send_message(self, chat_id: ChatID, text: str, **options: Any) -> APIResponse[Message]:
        """Send a text message. On success, the sent Message is returned."""
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["text"] = text
        return self.request("sendMessage", payload, Message)

    def forward_message(self, chat_id: ChatID, from_chat_id: ChatID, message_id: int, **options: Any) -> APIResponse[Message]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["from_chat_id"] = from_chat_id
        payload["message_id"] = message_id
        return self.request("forwardMessage", payload, Message)

    def copy_message(self, chat_id: ChatID, from_chat_id: ChatID, message_id: int, **options: Any) -> APIResponse[MessageId]:
        """Copy a message without a link to the original. Returns the new MessageId."""
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["from_chat_id"] = from_chat_id
        payload["message_id"] = message_id
        return self.request("copyMessage", payload, MessageId)

    def _send_file(self, method: str, field: str, chat_id: ChatID, file: FileParam, options: Dict[str, Any]) -> APIResponse[Message]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload[field] = file
        return self.request(method, payload, Message)

    def send_photo(self, chat_id: ChatID, photo: FileParam, **options: Any) -> APIResponse[Message]:
        """Send a photo given as an :class:`InputFile`, raw bytes, or a file_id/URL string."""
        return self._send_file("sendPhoto", "photo", chat_id, photo, options)

    def send_audio(self, chat_id: ChatID, audio: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendAudio", "audio", chat_id, audio, options)

    def send_document(self, chat_id: ChatID, document: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendDocument", "document", chat_id, document, options)

    def send_video(self, chat_id: ChatID, video: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendVideo", "video", chat_id, video, options)

    def send_animation(self, chat_id: ChatID, animation: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendAnimation", "animation", chat_id, animation, options)

    def send_voice(self, chat_id: ChatID, voice: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendVoice", "voice", chat_id, voice, options)

    def send_sticker(self, chat_id: ChatID, sticker: FileParam, **options: Any) -> APIResponse[Message]:
        return self._send_file("sendSticker", "sticker", chat_id, sticker, options)

    def send_media_group(self, chat_id: ChatID, media: Sequence[InputMedia], **options: Any) -> APIResponse[List[Message]]:
        """Send a group of photos, videos or documents as an album."""
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["media"] = list(media)
        return self.request("sendMediaGroup", payload, List[Message])

    def send_location(self, chat_id: ChatID, latitude: float, longitude: float, **options: Any) -> APIResponse[Message]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["latitude"] = float(latitude)
        payload["longitude"] = float(longitude)
        return self.request("sendLocation", payload, Message)

    def send_poll(self, chat_id: ChatID, question: str, poll_options: Sequence[str], **options: Any) -> APIResponse[Message]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["question"] = question
        payload["options"] = list(poll_options)
        return self.request("sendPoll", payload, Message)

    def stop_poll(self, chat_id: ChatID, message_id: int, **options: Any) -> APIResponse[Poll]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["message_id"] = message_id
        return self.request("stopPoll", payload, Poll)

    def send_chat_action(self, chat_id: ChatID, action: ChatAction, **options: Any) -> APIResponse[bool]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["action"] = action
        return self.request("sendChatAction", payload, bool)

    # ------------------------------------------------------------------
    #  Files
    # ------------------------------------------------------------------

    def get_user_profile_photos(self, user_id: int, **options: Any) -> APIResponse[UserProfilePhotos]:
        payload: Dict[str, Any] = dict(options)
        payload["user_id"] = user_id
        return self.request("getUserProfilePhotos", payload, UserProfilePhotos)

    def get_file(self, file_id: str) -> APIResponse[File]:
        """Get basic info about a file and prepare it for downloading."""
        return self.request("getFile", {"file_id": file_id}, File)

    def get_file_url(self, file: Union[File, str]) -> str:
        """Download link for a :class:`File` (or its ``file_path``). No network call."""
        file_path = file.file_path if isinstance(file, File) else file
        if not file_path:
            raise ValueError("file has no file_path; call get_file first")
        return self._context.file_url(file_path)

    # ------------------------------------------------------------------
    #  Chats
    # ------------------------------------------------------------------

    def ban_chat_member(self, chat_id: ChatID, user_id: int, **options: Any) -> APIResponse[bool]:
        payload: Dict[str, Any] = dict(options)
        payload["chat_id"] = chat_id
        payload["user_id"] = user_id
        return self.request("banChatMember", payload, bool)

    def unban_chat_member(self, chat_id: ChatID, user_id: int, only_if_banned: bool = False) -> APIResponse[bool]:
        return self.request(
            "unbanChatMember",
            {"chat_id": chat_id, "user_id": user_id, "only_if_banned": only_if_banned},
            bool,
        )

    def leave_chat(self, chat_id: ChatID) -> APIResponse[bool]:
        return self.request("leaveChat", {"chat_id": chat_id}, bool)

    def get_chat(self, chat_id: ChatID) -> APIResponse[Chat]:
        return self.request("getChat", {"chat_id": chat_id}, Chat)

    def get_chat_administrators(self, chat_id: ChatID) -> APIResponse[List[ChatMember]]:
        return self.request("getChatAdministrators", {"chat_id": chat_id}, List[ChatMember])

    def get_chat_member_count(self, chat_id: ChatID) -> APIResponse[int]:
        return self.request("getChatMemberCount", {"chat_id": chat_id}, int)

    def get_chat_member(self, chat_id: ChatID, user_id: int) -> APIResponse[ChatMember]:
        return self.request("getChatMember", {"chat_id": chat_id, "user_id": user_id}, ChatMember)

    def export_chat_invite_link(self, chat_id: ChatID) -> APIResponse[str]:
        """Generate a new primary invite link; returns the link as a string."""
        return self.request("exportChatInviteLink", {"chat_id": chat_id}, str)

    def set_chat_photo(self, chat_id: ChatID, photo: Union[InputFile, bytes]) -> APIResponse[bool]:
        return self.request("setChatPhoto", {"chat_id": chat_id, "photo": photo}, bool)

    def set_chat_title(self, chat_id: ChatID, title: str) -> APIResponse[bool]:
        return self.request("setChatTitle", {"chat_id": chat_id, "title": title}, bool)

    def answer_callback_query(self, callback_query_id: str, **options: Any) -> APIResponse[bool]:
        """Acknowledge a callback query so the spinner disappears for the user."""
        payload: Dict[str, Any] = dict(options)
        payload["callback_query_id"] = callback_query_id
        return self.request("answerCallbackQuery", payload, bool)

    # ------------------------------------------------------------------
    #  Updating messages
    # ------------------------------------------------------------------

    def edit_message_text(self, text: str, **options: Any) -> APIResponseMessageOrBool:
        """Edit text of a message.

        Returns the edited Message for bot-sent messages, ``true`` for
        inline messages.
        """
        payload: Dict[str, Any] = dict(options)
        payload["text"] = text
        return self.request_message_or_bool("editMessageText", payload)

    def edit_message_caption(self, **options: Any) -> APIResponseMessageOrBool:
        return self.request_message_or_bool("editMessageCaption", dict(options))

    def edit_message_media(self, media: InputMedia, **options: Any) -> APIResponseMessageOrBool:
        payload: Dict[str, Any] = dict(options)
        payload["media"] = media
        return self.request_message_or_bool("editMessageMedia", payload)

    def edit_message_reply_markup(self, **options: Any) -> APIResponseMessageOrBool:
        return self.request_message_or_bool("editMessageReplyMarkup", dict(options))

    def edit_message_live_location(self, latitude: float, longitude: float, **options: Any) -> APIResponseMessageOrBool:
        payload: Dict[str, Any] = dict(options)
        payload["latitude"] = float(latitude)
        payload["longitude"] = float(longitude)
        return self.request_message_or_bool("editMessageLiveLocation", payload)

    def stop_message_live_location(self, **options: Any) -> APIResponseMessageOrBool:
        return self.request_message_or_bool("stopMessageLiveLocation", dict(options))

    def delete_message(self, chat_id: ChatID, message_id: int) -> APIResponse[bool]:
        return self.request("deleteMessage", {"chat_id": chat_id, "message_id": message_id}, bool)

    # ------------------------------------------------------------------
    #  Stickers and games
    # ------------------------------------------------------------------

    def get_sticker_set(self, name: str) -> APIResponse[StickerSet]:
        return self.request("getStickerSet", {"name": name}, StickerSet)

    def upload_sticker_file(self, user_id: int, sticker: Union[InputFile, bytes], sticker_format: StickerFormat) -> APIResponse[File]:
        """Upload a sticker file for later use in sticker set methods."""
        return self.request(
            "uploadStickerFile",
            {"user_id": user_id, "sticker": sticker, "sticker_format": sticker_format},
            File,
        )

    def set_game_score(self, user_id: int, score: int, **options: Any) -> APIResponseMessageOrBool:
        payload: Dict[str, Any] = dict(options)
        payload["user_id"] = user_id
        payload["score"] = score
        return self.request_message_or_bool("setGameScore", payload)

    def get_game_high_scores(self, user_id: int, **options: Any) -> APIResponse[List[GameHighScore]]:
        payload: Dict[str, Any] = dict(options)
        payload["user_id"] = user_id
        return self.request("getGameHighScores", payload, List[GameHighScore])
