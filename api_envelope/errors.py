"""Error hierarchy for the envelope library.

Recoverable data errors extend EnvelopeError and carry an HTTP status code and
a default message, so a host application can render any of them as an error
envelope. Contract violations (building a success envelope with an error
status code or the reverse) raise StatusCodeContractError instead, which is
an AssertionError and is never rendered as a response.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from api_envelope.models.responses import ApiResponse


class EnvelopeError(Exception):
    """Base error for all recoverable envelope errors."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class EnvelopeEncodeError(EnvelopeError):
    """Envelope payload could not be serialized."""

    status_code = 500
    message = "Response could not be encoded"


class EnvelopeDecodeError(EnvelopeError):
    """Compact envelope bytes could not be restored."""

    status_code = 500
    message = "Response could not be decoded"


class InvalidJsonBodyError(EnvelopeError):
    """Client sent a JSON body that could not be decoded."""

    status_code = 400
    message = "body contains badly-formed JSON"


class ApiResponseError(EnvelopeError):
    """An ApiResponse raised as an exception.

    The envelope stays a plain value; this wrapper is what crosses ``raise``
    boundaries. ``str(err)`` is the envelope message.
    """

    def __init__(self, response: ApiResponse) -> None:
        self.response = response
        self.status_code = response.status_code
        super().__init__(response.message, error_code=response.error_code)
        # An empty envelope message must not fall back to the class default.
        self.message = response.message

    def __str__(self) -> str:
        return self.response.message


class StatusCodeContractError(AssertionError):
    """Envelope constructor called with a status code outside its range."""

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)
