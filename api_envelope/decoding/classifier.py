"""Classification of JSON decode errors into client-facing messages."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import TypeVar

from api_envelope.decoding.decoder import error_from_json_decode_error
from api_envelope.decoding.errors import (
    EmptyJsonBodyError,
    JsonDecodeError,
    JsonSyntaxError,
    JsonTypeMismatchError,
    UnexpectedEndOfJsonError,
)
from api_envelope.errors import InvalidJsonBodyError

logger = logging.getLogger(__name__)

ErrorT = TypeVar("ErrorT", bound=BaseException)

_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def classify_json_error(
    err: BaseException | None,
) -> tuple[bool, BaseException | None]:
    """Tell whether ``err`` came from JSON decoding and describe it.

    The error and everything it wraps (``__cause__``, then ``__context__``)
    are searched for each decode error kind in turn; the first kind found
    decides the message. A stdlib ``json.JSONDecodeError`` anywhere in the
    chain counts as its tagged equivalent.

    Returns
    -------
    tuple
        ``(False, None)`` for ``None``; ``(True, InvalidJsonBodyError)`` for a
        JSON decode error; ``(False, err)`` with the very same object for
        anything else. Never raises.
    """
    if err is None:
        return False, None

    chain = [_as_tagged(link) for link in _unwrap(err)]

    syntax = _find(chain, JsonSyntaxError)
    if syntax is not None:
        return True, _detail(
            err, syntax, f"body contains badly-formed JSON (at character {syntax.offset})"
        )

    eof = _find(chain, UnexpectedEndOfJsonError)
    if eof is not None:
        return True, _detail(err, eof, "body contains badly-formed JSON")

    mismatch = _find(chain, JsonTypeMismatchError)
    if mismatch is not None:
        field = _quote(mismatch.field)
        return True, _detail(
            err,
            mismatch,
            f"body contains incorrect JSON type [for field {field}] "
            f"(at character {mismatch.offset})",
        )

    empty = _find(chain, EmptyJsonBodyError)
    if empty is not None:
        return True, _detail(err, empty, "body must not be empty")

    return False, err


def _unwrap(err: BaseException) -> Iterator[BaseException]:
    """Yield ``err`` and the exceptions it wraps, stopping on cycles."""
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def _as_tagged(err: BaseException) -> BaseException:
    if isinstance(err, json.JSONDecodeError):
        return error_from_json_decode_error(err)
    return err


def _find(chain: list[BaseException], kind: type[ErrorT]) -> ErrorT | None:
    for link in chain:
        if isinstance(link, kind):
            return link
    return None


def _detail(original: BaseException, match: JsonDecodeError, message: str) -> InvalidJsonBodyError:
    logger.debug("Classified JSON decode error: %s", message, extra={"json_error_kind": match.kind})
    detail = InvalidJsonBodyError(message)
    detail.__cause__ = original
    return detail


def _quote(text: str) -> str:
    """Double-quote ``text`` with Go-style escapes for non-printable characters.

    Printable characters, non-ASCII included, are kept as they are.
    """
    parts = ['"']
    for char in text:
        code = ord(char)
        if char in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        elif code < 0x80:
            parts.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)
