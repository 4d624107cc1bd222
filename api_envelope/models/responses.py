"""Generic API response envelope model.

All API responses are wrapped in this envelope for consistency:
{ success: bool, message: str, errorCode?: str, data?: T, meta?: any }

The transport status code travels with the envelope but is never part of the
JSON form. Constructors check it against the success flag: error envelopes
need a status code of 400 or above, success envelopes one below 400.
"""

from __future__ import annotations

import logging
import pickle
from http import HTTPStatus
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic_core import PydanticSerializationError

from api_envelope.config.settings import get_settings
from api_envelope.decoding.decoder import decode_model
from api_envelope.errors import (
    ApiResponseError,
    EnvelopeDecodeError,
    EnvelopeEncodeError,
    StatusCodeContractError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SUCCESS_MESSAGE = "Request was successful"
DEFAULT_BAD_REQUEST_MESSAGE = "Request is in a bad format"
DEFAULT_UNAUTHORIZED_MESSAGE = "Not authenticated to perform the requested action"
DEFAULT_FORBIDDEN_MESSAGE = "Not authorized to perform the requested action"
DEFAULT_NOT_FOUND_MESSAGE = "Requested resource not found"
DEFAULT_CONFLICT_MESSAGE = "Requested resource already exist"
DEFAULT_INTERNAL_ERROR_MESSAGE = "Something went wrong on our end."

# Keys read back by ApiResponse.from_json
_WIRE_KEYS = frozenset({"success", "message", "errorCode", "data", "meta"})
# Omitted from the JSON form when None
_OPTIONAL_FIELDS = ("error_code", "data", "meta")


class ApiResponse(BaseModel, Generic[T]):
    """JSON envelope for all API responses.

    Every field except ``meta`` is frozen once the envelope is built.
    """

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(default=0, exclude=True, frozen=True)
    success: StrictBool = Field(default=False, frozen=True)
    message: StrictStr = Field(default="", frozen=True)
    error_code: StrictStr | None = Field(default=None, alias="errorCode", frozen=True)
    data: T | None = Field(default=None, frozen=True)
    meta: Any = None  # pagination and the like

    @field_validator("error_code")
    @classmethod
    def blank_error_code_is_absent(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    def __str__(self) -> str:
        return self.message

    def as_error(self) -> ApiResponseError:
        """Wrap the envelope in an exception so it can be raised."""
        return ApiResponseError(self)

    # -- compact form -------------------------------------------------------

    def to_bytes(self) -> bytes:
        """Encode the full envelope, status code included, as pickle bytes.

        Only meant for trusted Python peers running this same library.
        """
        try:
            return pickle.dumps(self, protocol=get_settings().compact_protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as exc:
            logger.warning(
                "Envelope payload cannot be pickled: %s",
                exc,
                extra={"status_code": self.status_code, "error_code": self.error_code},
            )
            raise EnvelopeEncodeError(f"response is not encodable: {exc}") from exc

    @classmethod
    def from_bytes(cls, raw: bytes) -> ApiResponse:
        """Restore an envelope produced by :meth:`to_bytes`."""
        try:
            response = pickle.loads(raw)
        except (
            pickle.UnpicklingError,
            EOFError,
            AttributeError,
            ImportError,
            IndexError,
            TypeError,
            ValueError,
        ) as exc:
            raise EnvelopeDecodeError(f"response is not decodable: {exc}") from exc
        # ApiResponse[Item] accepts any ApiResponse; parametrizing only narrows data
        origin = cls.__pydantic_generic_metadata__["origin"] or cls
        if not isinstance(response, origin):
            raise EnvelopeDecodeError(
                f"expected {cls.__name__}, got {type(response).__name__}"
            )
        return response

    # -- JSON form ----------------------------------------------------------

    def to_json(self) -> str:
        """Encode the public fields as compact JSON text."""
        omitted = {name for name in _OPTIONAL_FIELDS if getattr(self, name) is None}
        try:
            return self.model_dump_json(by_alias=True, exclude=omitted)
        except PydanticSerializationError as exc:
            logger.warning(
                "Envelope payload cannot be represented as JSON: %s",
                exc,
                extra={"status_code": self.status_code, "error_code": self.error_code},
            )
            raise EnvelopeEncodeError(f"response is not JSON-encodable: {exc}") from exc

    @classmethod
    def from_json(cls, raw: bytes | str) -> ApiResponse:
        """Decode JSON text produced by :meth:`to_json`.

        The status code is not part of the JSON form and comes back as 0.
        Raises a JsonDecodeError subclass on malformed input.
        """
        return decode_model(raw, cls, fields=_WIRE_KEYS)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def new_response(
    status_code: int,
    success: bool,
    message: str,
    error_code: str = "",
    data: Any = None,
) -> ApiResponse:
    """Build an envelope without checking status code against ``success``.

    A blank ``error_code`` is stored as absent.
    """
    return ApiResponse(
        status_code=int(status_code),
        success=success,
        message=message,
        error_code=error_code,
        data=data,
    )


def error_response(status_code: int, message: str, error_code: str = "") -> ApiResponse:
    """Build a failed envelope.

    Raises
    ------
    StatusCodeContractError
        ``status_code`` is below 400. This is a bug in the caller.
    """
    if status_code < HTTPStatus.BAD_REQUEST:
        logger.error(
            "Error response requested with non-error status code %d",
            status_code,
            extra={"status_code": int(status_code), "error_code": error_code},
        )
        raise StatusCodeContractError(
            "cannot build an error response with a non-error status code",
            int(status_code),
        )
    return new_response(status_code, False, message, error_code, None)


def success_response(status_code: int, message: str = "", data: Any = None) -> ApiResponse:
    """Build a successful envelope, defaulting an empty message.

    Raises
    ------
    StatusCodeContractError
        ``status_code`` is 400 or above. This is a bug in the caller.
    """
    if status_code >= HTTPStatus.BAD_REQUEST:
        logger.error(
            "Success response requested with error status code %d",
            status_code,
            extra={"status_code": int(status_code)},
        )
        raise StatusCodeContractError(
            "cannot build a success response with an error status code",
            int(status_code),
        )
    return new_response(status_code, True, message or DEFAULT_SUCCESS_MESSAGE, "", data)


def ok(message: str = "", data: Any = None) -> ApiResponse:
    """200 OK."""
    return success_response(HTTPStatus.OK, message, data)


def created(message: str = "", data: Any = None) -> ApiResponse:
    """201 Created."""
    return success_response(HTTPStatus.CREATED, message, data)


def list_response(message: str = "", data: Any = None, meta: Any = None) -> ApiResponse:
    """200 OK carrying a collection plus its pagination ``meta``."""
    response = success_response(HTTPStatus.OK, message, data)
    response.meta = meta
    return response


def bad_request(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(HTTPStatus.BAD_REQUEST, message or DEFAULT_BAD_REQUEST_MESSAGE, error_code)


def unauthorized(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(HTTPStatus.UNAUTHORIZED, message or DEFAULT_UNAUTHORIZED_MESSAGE, error_code)


def forbidden(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(HTTPStatus.FORBIDDEN, message or DEFAULT_FORBIDDEN_MESSAGE, error_code)


def not_found(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(HTTPStatus.NOT_FOUND, message or DEFAULT_NOT_FOUND_MESSAGE, error_code)


def conflict(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(HTTPStatus.CONFLICT, message or DEFAULT_CONFLICT_MESSAGE, error_code)


def internal_server_error(message: str = "", error_code: str = "") -> ApiResponse:
    return error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR, message or DEFAULT_INTERNAL_ERROR_MESSAGE, error_code
    )
