"""JSON decoding and decode-error classification."""

from api_envelope.decoding.classifier import classify_json_error
from api_envelope.decoding.decoder import (
    decode_json,
    decode_model,
    error_from_json_decode_error,
)
from api_envelope.decoding.errors import (
    EmptyJsonBodyError,
    JsonDecodeError,
    JsonSyntaxError,
    JsonTypeMismatchError,
    UnexpectedEndOfJsonError,
)

__all__ = [
    "EmptyJsonBodyError",
    "JsonDecodeError",
    "JsonSyntaxError",
    "JsonTypeMismatchError",
    "UnexpectedEndOfJsonError",
    "classify_json_error",
    "decode_json",
    "decode_model",
    "error_from_json_decode_error",
]
