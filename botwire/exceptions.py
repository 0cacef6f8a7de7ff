"""Exception hierarchy for the botwire Telegram SDK."""

from typing import Optional


class BotwireError(Exception):
    """Base class for every error raised inside the SDK."""


class EncodingError(BotwireError):
    """A single parameter could not be represented on the wire.

    Non-fatal: the dispatcher logs it and omits the field from the request.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"parameter '{field}' {message}")


class TransportError(BotwireError):
    """Building the request, the network exchange, or reading the body failed.

    The message is always token-redacted before the exception is created.
    """


class DecodeError(BotwireError):
    """The response body did not match the expected envelope shape.

    Attributes:
        body: Bounded snippet of the raw response body.
    """

    def __init__(self, message: str, body: str = "") -> None:
        self.body = body
        super().__init__(message)


class APIException(BotwireError):
    """The Bot API answered with ``ok: false``.

    Raised only when a caller opts in via
    :meth:`botwire.envelope.APIResponse.raise_for_error`.

    Attributes:
        error_code: ``error_code`` from the envelope, when present.
        description: ``description`` from the envelope.
    """

    def __init__(self, error_code: Optional[int], description: Optional[str] = None) -> None:
        """Initialise with the API error code and optional description."""
        self.error_code = error_code
        self.description = description or "Unknown error"
        super().__init__(f"API error {error_code}: {self.description}")
