"""Public models for the envelope library."""

from api_envelope.models.responses import (
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
    "bad_request",
    "conflict",
    "created",
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
