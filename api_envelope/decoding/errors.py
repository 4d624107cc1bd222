"""Tagged JSON decode errors.

Each kind of decode failure is its own class carrying its own structured
payload, so callers can discriminate with ``isinstance`` and read offsets and
field names from attributes instead of parsing message text.
"""

from __future__ import annotations

from api_envelope.errors import EnvelopeError


class JsonDecodeError(EnvelopeError):
    """Base error for a JSON document that could not be decoded."""

    status_code = 400
    message = "Invalid JSON"
    kind = "invalid"


class JsonSyntaxError(JsonDecodeError):
    """Badly-formed JSON. ``offset`` is the 1-based position of the bad character."""

    kind = "syntax"

    def __init__(self, offset: int) -> None:
        self.offset = offset
        super().__init__(f"invalid JSON syntax at character {offset}", offset=offset)


class UnexpectedEndOfJsonError(JsonDecodeError):
    """Input ended in the middle of a JSON value."""

    message = "unexpected end of JSON input"
    kind = "unexpected_eof"


class JsonTypeMismatchError(JsonDecodeError):
    """Well-formed JSON whose value does not fit the target type.

    ``field`` is the dotted path of the offending key, empty for the top-level
    value. ``offset`` is the 1-based position of the offending value.
    """

    kind = "type_mismatch"

    def __init__(self, field: str, offset: int, expected: str | None = None) -> None:
        self.field = field
        self.offset = offset
        self.expected = expected
        text = f"cannot decode JSON value for field {field!r} at character {offset}"
        if expected:
            text = f"{text}: {expected}"
        super().__init__(text, field=field, offset=offset)


class EmptyJsonBodyError(JsonDecodeError):
    """Input held no JSON value at all."""

    message = "empty JSON input"
    kind = "empty"
