"""FastAPI adapter: envelope responses, JSON body reading and exception handlers.

The handlers turn raised envelopes, JSON decode errors, request validation
errors and unhandled exceptions into envelope responses. No routes are
declared here.
"""

from __future__ import annotations

import logging
import traceback
from typing import TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import BaseModel

from api_envelope.decoding.classifier import classify_json_error
from api_envelope.decoding.decoder import decode_model
from api_envelope.decoding.errors import JsonDecodeError
from api_envelope.errors import ApiResponseError, EnvelopeError, StatusCodeContractError
from api_envelope.models.responses import (
    ApiResponse,
    bad_request,
    internal_server_error,
    new_response,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def envelope_response(envelope: ApiResponse) -> Response:
    """Render an envelope as a JSON response with its own status code."""
    if not envelope.status_code:
        raise StatusCodeContractError("cannot render an envelope without a status code", 0)
    return Response(
        content=envelope.to_json(),
        status_code=envelope.status_code,
        media_type="application/json",
    )


async def read_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """Decode the request body into ``model``.

    Decode failures raise JsonDecodeError subclasses, which the registered
    handlers answer with a 400 envelope.
    """
    body = await request.body()
    return decode_model(body, model)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


async def _api_response_error_handler(_request: Request, exc: ApiResponseError) -> Response:
    """Handle envelopes raised through ApiResponse.as_error()."""
    return envelope_response(exc.response)


async def _json_decode_error_handler(_request: Request, exc: JsonDecodeError) -> Response:
    """Handle malformed request bodies (400)."""
    _, detail = classify_json_error(exc)
    logger.info(
        "Rejected request body: %s",
        detail,
        extra={"json_error_kind": exc.kind, "status_code": 400},
    )
    return envelope_response(bad_request(str(detail), "invalid_json"))


async def _envelope_error_handler(_request: Request, exc: EnvelopeError) -> Response:
    """Handle the remaining EnvelopeError subclasses.

    Server-side failures answer with the class default message and no meta;
    the specific message and details only go to the log.
    """
    if exc.status_code >= 500:
        logger.error(
            "%s: %s %s",
            type(exc).__name__,
            exc.message,
            exc.details,
            extra={"status_code": exc.status_code},
        )
        return envelope_response(new_response(exc.status_code, False, type(exc).message))
    response = new_response(exc.status_code, False, exc.message)
    response.meta = exc.details or None
    return envelope_response(response)


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> Response:
    """Handle FastAPI / Pydantic RequestValidationError (400)."""
    field_errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    response = bad_request("Validation error", "validation_error")
    response.meta = {"fields": field_errors}
    return envelope_response(response)


async def _unhandled_error_handler(_request: Request, exc: Exception) -> Response:
    """Catch-all for unhandled exceptions: log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return envelope_response(internal_server_error())


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ApiResponseError, _api_response_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(JsonDecodeError, _json_decode_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(EnvelopeError, _envelope_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
