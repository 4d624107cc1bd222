"""Integration with FastAPI host applications."""

from api_envelope.integration.fastapi_handlers import (
    envelope_response,
    read_json_body,
    register_error_handlers,
)

__all__ = [
    "envelope_response",
    "read_json_body",
    "register_error_handlers",
]
