"""Pydantic Settings for the envelope library.

All environment variables use the API_ENVELOPE_ prefix.
Example: API_ENVELOPE_LOG_LEVEL=DEBUG, API_ENVELOPE_COMPACT_PROTOCOL=4
"""

from __future__ import annotations

import pickle
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class EnvelopeSettings(BaseSettings):
    """Library configuration validated from environment variables."""

    log_level: str = "INFO"

    # Pickle protocol used by ApiResponse.to_bytes
    compact_protocol: int = Field(
        default=pickle.HIGHEST_PROTOCOL, ge=2, le=pickle.HIGHEST_PROTOCOL
    )

    model_config = {"env_prefix": "API_ENVELOPE_"}


@lru_cache
def get_settings() -> EnvelopeSettings:
    """Return the process-wide settings, loaded on first use."""
    return EnvelopeSettings()
