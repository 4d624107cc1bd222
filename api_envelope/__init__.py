"""Standardized API response envelopes and JSON decode-error classification."""

from api_envelope.decoding import (
    EmptyJsonBodyError,
    JsonDecodeError,
    JsonSyntaxError,
    JsonTypeMismatchError,
    UnexpectedEndOfJsonError,
    classify_json_error,
    decode_json,
    decode_model,
)
from api_envelope.errors import (
    ApiResponseError,
    EnvelopeDecodeError,
    EnvelopeEncodeError,
    EnvelopeError,
    InvalidJsonBodyError,
    StatusCodeContractError,
)
from api_envelope.models import (
    ApiResponse,
    bad_request,
    conflict,
    created,
    error_response,
    forbidden,
    internal_server_error,
    list_response,
    new_response,
    not_found,
    ok,
    success_response,
    unauthorized,
)

__all__ = [
    "ApiResponse",
    "ApiResponseError",
    "EmptyJsonBodyError",
    "EnvelopeDecodeError",
    "EnvelopeEncodeError",
    "EnvelopeError",
    "InvalidJsonBodyError",
    "JsonDecodeError",
    "JsonSyntaxError",
    "JsonTypeMismatchError",
    "StatusCodeContractError",
    "UnexpectedEndOfJsonError",
    "bad_request",
    "classify_json_error",
    "conflict",
    "created",
    "decode_json",
    "decode_model",
    "error_response",
    "forbidden",
    "internal_server_error",
    "list_response",
    "new_response",
    "not_found",
    "ok",
    "success_response",
    "unauthorized",
]
