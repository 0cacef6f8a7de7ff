"""botwire -- Telegram Bot API client: request dispatch and envelope decoding.

:class:`BotClient` wraps the Bot API endpoints on top of the dispatch engine
(:mod:`botwire.transport`) and the envelope decoder (:mod:`botwire.envelope`).

Usage::

    from botwire import BotClient, BotContext, InputFile

    client = BotClient(BotContext(token="123:ABC"))
    sent = client.send_photo(42, InputFile.from_path("cat.jpg"), caption="meow")
    if not sent.ok:
        print(sent.description)
"""

from botwire.client import BotClient
from botwire.context import BotContext
from botwire.envelope import APIResponse, APIResponseMessageOrBool, decode, decode_dual
from botwire.exceptions import (
    APIException,
    BotwireError,
    DecodeError,
    EncodingError,
    TransportError,
)
from botwire.transport import dispatch
from botwire.values import ChatAction, InputFile, ParseMode, StickerFormat

__all__ = [
    "BotClient",
    "BotContext",
    "APIResponse",
    "APIResponseMessageOrBool",
    "decode",
    "decode_dual",
    "dispatch",
    "InputFile",
    "ChatAction",
    "ParseMode",
    "StickerFormat",
    "BotwireError",
    "EncodingError",
    "TransportError",
    "DecodeError",
    "APIException",
]
