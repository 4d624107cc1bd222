"""JSON decoding with tagged errors.

Wraps ``json.loads`` and pydantic validation so that every failure surfaces as
one of the JsonDecodeError kinds, chained to the exception that caused it.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Collection, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from api_envelope.decoding.errors import (
    EmptyJsonBodyError,
    JsonDecodeError,
    JsonSyntaxError,
    JsonTypeMismatchError,
    UnexpectedEndOfJsonError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Insignificant whitespace as defined by RFC 8259
_JSON_WHITESPACE = " \t\n\r"
_WHITESPACE = re.compile(r"[ \t\n\r]*")

_LITERALS = ("true", "false", "null")
_NUMBER_CHARS = "0123456789+-.eE"
_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
# Anything a complete number can start with, "-" and "1." and "1e+" included
_NUMBER_PREFIX = re.compile(r"-?(?:(?:0|[1-9]\d*)(?:\.\d*|(?:\.\d+)?[eE][+-]?\d*)?)?")

_SCANNER = json.JSONDecoder()


def error_from_json_decode_error(exc: json.JSONDecodeError) -> JsonDecodeError:
    """Translate a stdlib decode error into its tagged equivalent.

    Only the structured ``doc`` and ``pos`` attributes are inspected. A
    document that stops inside a string, number or literal is an unexpected
    end rather than a syntax error.
    """
    doc, pos = exc.doc, exc.pos
    if not doc.strip(_JSON_WHITESPACE):
        return EmptyJsonBodyError()
    if _ends_inside_value(doc, pos):
        return UnexpectedEndOfJsonError()
    return JsonSyntaxError(pos + 1)


def decode_json(raw: bytes | str) -> Any:
    """Decode a JSON document into plain Python values.

    Raises
    ------
    EmptyJsonBodyError
        ``raw`` is empty or whitespace only.
    UnexpectedEndOfJsonError
        ``raw`` ends inside a value.
    JsonSyntaxError
        ``raw`` is not well-formed JSON (including invalid UTF-8).
    """
    return _loads(_to_text(raw))


def decode_model(
    raw: bytes | str,
    model: type[ModelT],
    *,
    fields: Collection[str] | None = None,
) -> ModelT:
    """Decode a JSON object into ``model``.

    Parameters
    ----------
    raw:
        The JSON document.
    model:
        Pydantic model the top-level object is validated against.
    fields:
        When given, only these top-level keys are read; every other key is
        ignored as if it were unknown to the model.

    Raises
    ------
    JsonTypeMismatchError
        The document is well-formed but is not an object or does not validate.
        Only the first validation error is reported.
    """
    text = _to_text(raw)
    document = _loads(text)

    if not isinstance(document, dict):
        raise JsonTypeMismatchError(
            "", _value_end(text, ()), expected=f"object expected for {model.__name__}"
        )
    if fields is not None:
        document = {key: value for key, value in document.items() if key in fields}

    try:
        return model.model_validate(document)
    except ValidationError as exc:
        first = exc.errors()[0]
        path = _document_path(document, first["loc"], missing=first["type"] == "missing")
        field = ".".join(str(part) for part in path)
        offset = _value_end(text, path)
        logger.debug(
            "JSON document does not match %s",
            model.__name__,
            extra={"json_error_kind": JsonTypeMismatchError.kind, "field": field, "offset": offset},
        )
        raise JsonTypeMismatchError(field, offset, expected=first["msg"]) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_text(raw: bytes | str) -> str:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise JsonSyntaxError(exc.start + 1) from exc
    return raw


def _loads(text: str) -> Any:
    if not text.strip(_JSON_WHITESPACE):
        raise EmptyJsonBodyError()
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise error_from_json_decode_error(exc) from exc


def _ends_inside_value(doc: str, pos: int) -> bool:
    """True when the document stops partway through the token at ``pos``."""
    if pos >= len(doc.rstrip(_JSON_WHITESPACE)):
        return True
    if doc[pos] == '"':
        return _starts_value(doc, pos, "[{,:") and _is_unterminated_string(doc, pos)
    # The stdlib reports a cut-off number at the first character it could not
    # use, which may sit after a valid leading part ("1." fails at ".").
    start = pos
    while start > 0 and doc[start - 1] in _NUMBER_CHARS:
        start -= 1
    if not _starts_value(doc, start, "[,:"):
        return False
    token = doc[start:]
    if any(literal.startswith(token) for literal in _LITERALS):
        return True
    return _NUMBER_PREFIX.fullmatch(token) is not None and _NUMBER.fullmatch(token) is None


def _starts_value(doc: str, index: int, openers: str) -> bool:
    """True when a token at ``index`` sits where the grammar expects one."""
    before = doc[:index].rstrip(_JSON_WHITESPACE)
    return not before or before[-1] in openers


def _is_unterminated_string(doc: str, pos: int) -> bool:
    """True when a string opens at ``pos`` and never closes."""
    index = pos + 1
    while index < len(doc):
        char = doc[index]
        if char == "\\":
            index += 2
            continue
        if char == '"':
            return False
        index += 1
    return True


def _document_path(
    document: Any, loc: Sequence[int | str], *, missing: bool = False
) -> list[int | str]:
    """Keep the parts of a validation location that exist in ``document``.

    Pydantic adds union member tags such as ``int`` or ``list[int]`` to the
    location; those never name a key or index and are dropped. A key that is
    absent is kept only when it is the last part of a ``missing`` error.
    """
    path: list[int | str] = []
    node = document
    for index, part in enumerate(loc):
        if isinstance(node, dict) and isinstance(part, str):
            if part in node:
                path.append(part)
                node = node[part]
            elif missing and index == len(loc) - 1:
                path.append(part)
        elif isinstance(node, list) and isinstance(part, int) and 0 <= part < len(node):
            path.append(part)
            node = node[part]
    return path


def _value_end(text: str, path: Sequence[int | str]) -> int:
    """Return the position just past the value at ``path`` in ``text``.

    When the path runs out of the document the deepest value found is used,
    so a missing key reports the end of the object that should contain it.
    """
    start = _skip_whitespace(text, 0)
    for part in path:
        child = _child_start(text, start, part)
        if child is None:
            break
        start = child
    return _scan_value(text, start)


def _child_start(text: str, start: int, part: int | str) -> int | None:
    """Find where member ``part`` of the container at ``start`` begins."""
    if text.startswith("{", start) and isinstance(part, str):
        found = None
        index = _skip_whitespace(text, start + 1)
        while not text.startswith("}", index):
            key, index = _SCANNER.raw_decode(text, index)
            index = _skip_whitespace(text, _skip_whitespace(text, index) + 1)
            if key == part:
                # Repeated keys resolve to the last one, as json.loads does
                found = index
            index = _next_member(text, _scan_value(text, index))
        return found
    if text.startswith("[", start) and isinstance(part, int):
        index = _skip_whitespace(text, start + 1)
        position = 0
        while not text.startswith("]", index):
            if position == part:
                return index
            index = _next_member(text, _scan_value(text, index))
            position += 1
    return None


def _scan_value(text: str, start: int) -> int:
    return _SCANNER.raw_decode(text, start)[1]


def _skip_whitespace(text: str, index: int) -> int:
    return _WHITESPACE.match(text, index).end()


def _next_member(text: str, index: int) -> int:
    index = _skip_whitespace(text, index)
    if text.startswith(",", index):
        index = _skip_whitespace(text, index + 1)
    return index
