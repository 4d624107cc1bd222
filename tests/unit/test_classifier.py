"""Unit tests for JSON decode-error classification."""

from __future__ import annotations

import json

import pytest

from api_envelope.decoding.classifier import classify_json_error
from api_envelope.decoding.decoder import decode_json
from api_envelope.decoding.errors import (
    EmptyJsonBodyError,
    JsonSyntaxError,
    JsonTypeMismatchError,
    UnexpectedEndOfJsonError,
)
from api_envelope.errors import InvalidJsonBodyError


def _raised(exc: BaseException) -> BaseException:
    """Return ``exc`` after it has been raised, so its traceback is populated."""
    try:
        raise exc
    except BaseException as caught:  # noqa: BLE001
        return caught


class TestClassifyDirect:
    def test_none(self):
        assert classify_json_error(None) == (False, None)

    def test_syntax_error(self):
        ok, detail = classify_json_error(JsonSyntaxError(5))
        assert ok is True
        assert isinstance(detail, InvalidJsonBodyError)
        assert str(detail) == "body contains badly-formed JSON (at character 5)"

    def test_unexpected_eof(self):
        ok, detail = classify_json_error(UnexpectedEndOfJsonError())
        assert ok is True
        assert str(detail) == "body contains badly-formed JSON"

    def test_type_mismatch(self):
        ok, detail = classify_json_error(JsonTypeMismatchError("age", 90))
        assert ok is True
        assert str(detail) == 'body contains incorrect JSON type [for field "age"] (at character 90)'

    def test_type_mismatch_without_field(self):
        _, detail = classify_json_error(JsonTypeMismatchError("", 1))
        assert str(detail) == 'body contains incorrect JSON type [for field ""] (at character 1)'

    def test_field_name_is_quoted_and_escaped(self):
        _, detail = classify_json_error(JsonTypeMismatchError('we"ird', 3))
        assert str(detail) == 'body contains incorrect JSON type [for field "we\\"ird"] (at character 3)'

    @pytest.mark.parametrize(
        "field,quoted",
        [
            ("a\x01b", '"a\\x01b"'),
            ("tab\there", '"tab\\there"'),
            ("back\\slash", '"back\\\\slash"'),
            ("del\x7f", '"del\\x7f"'),
            ("café", '"café"'),
            ("nb\u0085sp", '"nb\\u0085sp"'),
        ],
    )
    def test_field_name_escapes(self, field, quoted):
        _, detail = classify_json_error(JsonTypeMismatchError(field, 3))
        assert str(detail) == f"body contains incorrect JSON type [for field {quoted}] (at character 3)"

    def test_empty_body(self):
        ok, detail = classify_json_error(EmptyJsonBodyError())
        assert ok is True
        assert str(detail) == "body must not be empty"

    def test_generic_error_passes_through_unchanged(self):
        err = ValueError("just a normal error")
        ok, detail = classify_json_error(err)
        assert ok is False
        assert detail is err

    def test_detail_is_chained_to_original(self):
        err = JsonSyntaxError(1)
        _, detail = classify_json_error(err)
        assert detail.__cause__ is err
        assert detail.status_code == 400


class TestClassifyWrapped:
    def test_explicit_cause(self):
        inner = JsonTypeMismatchError("items.0", 12)
        outer = _raised(RuntimeError("request failed"))
        outer.__cause__ = inner
        ok, detail = classify_json_error(outer)
        assert ok is True
        assert "items.0" in str(detail)

    def test_implicit_context(self):
        try:
            try:
                decode_json("")
            except EmptyJsonBodyError:
                raise LookupError("while reading body")
        except LookupError as exc:
            outer = exc
        ok, detail = classify_json_error(outer)
        assert ok is True
        assert str(detail) == "body must not be empty"

    def test_suppressed_context_is_not_followed(self):
        try:
            try:
                decode_json("")
            except EmptyJsonBodyError:
                raise LookupError("unrelated") from None
        except LookupError as exc:
            outer = exc
        ok, detail = classify_json_error(outer)
        assert ok is False
        assert detail is outer

    def test_kind_order_beats_chain_order(self):
        outer = JsonTypeMismatchError("age", 9)
        outer.__cause__ = JsonSyntaxError(4)
        _, detail = classify_json_error(outer)
        assert str(detail) == "body contains badly-formed JSON (at character 4)"

    def test_cycle_terminates(self):
        first = ValueError("a")
        second = ValueError("b")
        first.__cause__ = second
        second.__cause__ = first
        assert classify_json_error(first) == (False, first)


class TestClassifyStdlib:
    @pytest.mark.parametrize(
        "text,message",
        [
            ('{"a" 1}', "body contains badly-formed JSON (at character 6)"),
            ('{"a": 1', "body contains badly-formed JSON"),
            ("", "body must not be empty"),
        ],
    )
    def test_json_decode_error(self, text, message):
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads(text)
        ok, detail = classify_json_error(exc_info.value)
        assert ok is True
        assert str(detail) == message

    def test_decoder_output(self):
        with pytest.raises(JsonSyntaxError) as exc_info:
            decode_json("[1,,2]")
        _, detail = classify_json_error(exc_info.value)
        assert str(detail) == "body contains badly-formed JSON (at character 4)"
