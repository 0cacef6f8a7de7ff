"""Transport Selector and HTTP Dispatchers.

:func:`dispatch` posts one Bot API method call and returns the raw response
bytes.  Requests carrying any attachment go out as ``multipart/form-data``;
everything else is sent ``application/x-www-form-urlencoded``.

Every error raised from here is a :class:`TransportError` whose message has
already been token-redacted.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import List, Tuple
from urllib.parse import urlencode

import requests

from botwire.context import BotContext
from botwire.encoder import Attachment, encode_param, is_attachment_value, is_file_handle
from botwire.exceptions import EncodingError, TransportError
from botwire.values import ParameterSet

_logger = logging.getLogger("botwire.transport")

FORM_URLENCODED = "application/x-www-form-urlencoded"
OCTET_STREAM = "application/octet-stream"


def needs_multipart(params: ParameterSet) -> bool:
    """Transport Selector: multipart if any value is an attachment.

    The decision covers the whole request; the API does not accept a mix of
    encodings in a single call.
    """
    return any(is_attachment_value(value) for value in params.values())


def dispatch(context: BotContext, method: str, params: ParameterSet | None = None) -> bytes:
    """POST *method* with *params* and return the raw response body.

    Handles passed in *params* (open files, or files opened from an
    :class:`~botwire.values.InputFile` path) are closed before this returns.

    Raises:
        TransportError: If the request cannot be built, sent, or read.
    """
    params = params or {}
    api_url = context.api_url(method)

    if context.verbose:
        _logger.debug(
            "Sending request",
            extra={"api_endpoint": method, "url": context.redact(api_url), "params": sorted(params)},
        )

    if needs_multipart(params):
        return request_multipart(context, api_url, method, params)
    return request_urlencoded(context, api_url, method, params)


def encode_urlencoded_body(params: ParameterSet, method: str = "") -> str:
    """Encode every representable field into one urlencoded body.

    Keys are sorted so that the same ParameterSet always yields the same
    body.  Fields that fail to encode are logged and left out.
    """
    fields: List[Tuple[str, str]] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        try:
            encoded = encode_param(key, value)
        except EncodingError as exc:
            _logger.error("Parameter dropped", extra={"api_endpoint": method, "field": key, "error": str(exc)})
            continue
        if isinstance(encoded, Attachment):
            _logger.error(
                "Attachment parameter cannot be urlencoded",
                extra={"api_endpoint": method, "field": key},
            )
            continue
        fields.append((key, encoded))
    return urlencode(fields)


def request_urlencoded(context: BotContext, api_url: str, method: str, params: ParameterSet) -> bytes:
    """Send *params* as ``application/x-www-form-urlencoded``."""
    body = encode_urlencoded_body(params, method)
    headers = {
        "Content-Type": FORM_URLENCODED,
        "Content-Length": str(len(body.encode("utf-8"))),
    }
    request = requests.Request("POST", api_url, data=body.encode("utf-8"), headers=headers)
    return _send(context, request, method)


def request_multipart(context: BotContext, api_url: str, method: str, params: ParameterSet) -> bytes:
    """Send *params* as ``multipart/form-data``.

    Attachment bytes become form-file parts named after their field; all
    other values are written as ordinary form fields.  A field that cannot
    be opened, read, or encoded is logged and skipped.
    """
    with ExitStack() as stack:
        for value in params.values():
            if is_file_handle(value):
                stack.callback(value.close)

        # A None filename makes requests write a plain form field.
        parts: List[Tuple[str, tuple]] = []

        for key, value in params.items():
            if value is None:
                continue
            try:
                encoded = encode_param(key, value)
            except EncodingError as exc:
                _logger.error("Parameter dropped", extra={"api_endpoint": method, "field": key, "error": str(exc)})
                continue

            if not isinstance(encoded, Attachment):
                parts.append((key, (None, encoded)))
                continue

            try:
                filename, content = encoded.read(stack)
            # ValueError: a caller handle that was already closed
            except (OSError, ValueError, EncodingError) as exc:
                _logger.error(
                    "Could not read attachment",
                    extra={"api_endpoint": method, "field": key, "error": context.redact(str(exc))},
                )
                continue
            parts.append((key, (filename, content, OCTET_STREAM)))

        if not parts:
            _logger.warning("Multipart request has no encodable fields", extra={"api_endpoint": method})

        request = requests.Request("POST", api_url, files=parts)
        return _send(context, request, method)


def _send(context: BotContext, request: requests.Request, method: str) -> bytes:
    try:
        prepared = context.session.prepare_request(request)
    except (requests.RequestException, ValueError, TypeError) as exc:
        # the requests exception text carries the unredacted URL
        message = context.redact(f"building request error: {exc}")
        _logger.error(message, extra={"api_endpoint": method})
        raise TransportError(message) from None

    try:
        response = context.session.send(prepared, timeout=context.timeout, stream=True)
    except requests.RequestException as exc:
        message = context.redact(f"request error: {exc}")
        _logger.error(message, extra={"api_endpoint": method})
        raise TransportError(message) from None

    try:
        return response.content
    except requests.RequestException as exc:
        message = context.redact(f"response read error: {exc}")
        _logger.error(message, extra={"api_endpoint": method})
        raise TransportError(message) from None
    finally:
        response.close()
