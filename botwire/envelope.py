"""Envelope Decoder -- parse ``{ok, result, description}`` responses into typed results.

:func:`decode` validates a response body against ``APIResponse[T]`` for the
result type an endpoint declares.  :func:`decode_dual` handles the edit-style
endpoints whose ``result`` is either the edited :class:`Message` or ``true``.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar, get_args

from pydantic import BaseModel, ValidationError

from botwire.exceptions import APIException, DecodeError
from botwire.models import Message, ResponseParameters

T = TypeVar("T")

MAX_BODY_SNIPPET = 1024


class APIResponse(BaseModel, Generic[T]):
    """Generic success/failure wrapper every API response is decoded into."""

    ok: bool
    result: Optional[T] = None
    description: Optional[str] = None
    error_code: Optional[int] = None
    parameters: Optional[ResponseParameters] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def failure(cls, description: str) -> "APIResponse[Any]":
        """Build the ``ok: false`` envelope used for local failures."""
        return cls(ok=False, description=description)

    def raise_for_error(self) -> "APIResponse[T]":
        """Raise :class:`APIException` unless ``ok`` is true; return self otherwise."""
        if not self.ok:
            raise APIException(self.error_code, self.description)
        return self


class APIResponseMessageOrBool(BaseModel):
    """Result of an edit-style call: the edited message, or ``true``.

    On success exactly one of ``result_message`` / ``result_bool`` is set.
    """

    ok: bool
    description: Optional[str] = None
    error_code: Optional[int] = None
    parameters: Optional[ResponseParameters] = None
    result_message: Optional[Message] = None
    result_bool: Optional[bool] = None

    @classmethod
    def failure(cls, description: str) -> "APIResponseMessageOrBool":
        return cls(ok=False, description=description)

    @property
    def is_message(self) -> bool:
        return self.result_message is not None

    def raise_for_error(self) -> "APIResponseMessageOrBool":
        if not self.ok:
            raise APIException(self.error_code, self.description)
        return self


def body_snippet(raw: bytes) -> str:
    """Bounded, printable rendering of a response body for diagnostics."""
    text = raw.decode("utf-8", errors="replace")
    if len(text) > MAX_BODY_SNIPPET:
        return text[:MAX_BODY_SNIPPET] + "..."
    return text


def decode(raw: bytes, result_type: Any) -> APIResponse[Any]:
    """Validate *raw* as ``APIResponse[result_type]``.

    Validation is strict: a JSON string ``"true"`` is not a boolean and a
    number is not a string.

    Raises:
        DecodeError: If the body is not JSON, does not fit the shape, or is
            ``ok`` without the ``result`` the endpoint declares.
    """
    try:
        envelope = _validate(raw, result_type)
    except ValidationError as exc:
        snippet = body_snippet(raw)
        raise DecodeError(f"json parse error: {_summarize(exc)} ({snippet})", body=snippet) from None

    if envelope.ok and envelope.result is None and not _allows_none(result_type):
        snippet = body_snippet(raw)
        raise DecodeError(f"json parse error: ok response without result ({snippet})", body=snippet)
    return envelope


def decode_dual(raw: bytes) -> APIResponseMessageOrBool:
    """Decode an edit-style response, trying the Message shape, then bool.

    A successful envelope always fills exactly one of the two result slots;
    ``ok: false`` envelopes fill neither.

    Raises:
        DecodeError: If the body fits neither shape; both attempts are named.
    """
    try:
        as_message = _validate(raw, Message)
    except ValidationError as exc:
        message_failure = _summarize(exc)
    else:
        if not as_message.ok or as_message.result is not None:
            return APIResponseMessageOrBool(
                ok=as_message.ok,
                description=as_message.description,
                error_code=as_message.error_code,
                parameters=as_message.parameters,
                result_message=as_message.result,
            )
        message_failure = "result: missing"

    try:
        as_bool = _validate(raw, bool)
    except ValidationError as exc:
        bool_failure = _summarize(exc)
    else:
        if as_bool.result is not None:
            return APIResponseMessageOrBool(
                ok=as_bool.ok,
                description=as_bool.description,
                error_code=as_bool.error_code,
                parameters=as_bool.parameters,
                result_bool=as_bool.result,
            )
        bool_failure = "result: missing"

    snippet = body_snippet(raw)
    raise DecodeError(
        "json parse error: not in Message nor bool type "
        f"(as Message: {message_failure}; as bool: {bool_failure}) ({snippet})",
        body=snippet,
    )


def _validate(raw: bytes, result_type: Any) -> APIResponse[Any]:
    return APIResponse[result_type].model_validate_json(raw, strict=True)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors(include_url=False)[:3]:
        location = ".".join(str(item) for item in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    if exc.error_count() > 3:
        parts.append(f"and {exc.error_count() - 3} more")
    return "; ".join(parts)


def _allows_none(result_type: Any) -> bool:
    if result_type is Any or result_type is type(None):
        return True
    return type(None) in get_args(result_type)
