"""Decode webhook request bodies into :class:`~botwire.models.Update` records.

Serving HTTP is left to the application; it passes each raw request body to
:func:`handle_webhook_body` together with its update handler.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from pydantic import ValidationError

from botwire.envelope import body_snippet
from botwire.exceptions import DecodeError
from botwire.models import Update

_logger = logging.getLogger("botwire.webhook")

UpdateHandler = Callable[[Optional[Update], Optional[Exception]], None]


def parse_update(body: bytes) -> Update:
    """Parse one webhook body.

    Raises:
        DecodeError: If the body is not a JSON update record.
    """
    try:
        return Update.model_validate_json(body)
    except ValidationError as exc:
        snippet = body_snippet(body)
        raise DecodeError(f"json parse error: {exc.error_count()} validation error(s) ({snippet})", body=snippet) from None


def handle_webhook_body(body: bytes, handler: UpdateHandler) -> None:
    """Decode *body* and pass the result to *handler*.

    The handler receives ``(update, None)`` on success and
    ``(None, DecodeError)`` when the body is malformed, so bad deliveries
    are never dropped silently.
    """
    try:
        update = parse_update(body)
    except DecodeError as exc:
        _logger.error("Could not parse webhook body", extra={"error": str(exc)})
        handler(None, exc)
        return

    _logger.debug("Received webhook update", extra={"update_id": update.update_id})
    handler(update, None)
