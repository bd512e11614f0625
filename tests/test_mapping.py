"""Tests for the map cursor: missing and unknown field policies."""

import logging
from dataclasses import dataclass
from typing import Optional

import pytest

from docbridge import (
    END,
    ContractViolation,
    DecoderConfig,
    EndOfStream,
    InvalidType,
    MapCursor,
    UnitSource,
    UnknownField,
    ValueCursor,
    decode,
)
from docbridge.typed import INT, STR, FieldIdentifier, Option, UNIT
from docbridge.values import to_value


@dataclass
class WithOptional:
    x: Optional[int]
    y: int


@dataclass
class WithRequired:
    x: int
    y: int


@dataclass
class KnowsAC:
    a: int
    c: Optional[int]


@dataclass
class KnowsACStrict:
    a: int
    c: int


def _cursor(obj):
    return MapCursor(ValueCursor(), to_value(obj).entries)


class TestMissingField:
    def test_optional_defaults_to_none(self):
        assert decode(to_value({"y": 2}), WithOptional) == WithOptional(x=None, y=2)

    def test_required_is_end_of_stream(self):
        with pytest.raises(EndOfStream) as exc_info:
            decode(to_value({"y": 2}), WithRequired)
        assert "'x'" in exc_info.value.message

    def test_unit_source_answers(self):
        source = UnitSource("f")
        assert Option(INT).reconstruct(source) is None
        assert UNIT.reconstruct(source) is None
        with pytest.raises(EndOfStream):
            STR.reconstruct(source)


class TestUnknownField:
    def test_truncates_at_first_unknown_key(self):
        decoded = decode(to_value({"a": 1, "b": 2, "c": 3}), KnowsAC)
        assert decoded == KnowsAC(a=1, c=None)

    def test_later_field_not_recovered(self):
        with pytest.raises(EndOfStream):
            decode(to_value({"a": 1, "b": 2, "c": 3}), KnowsACStrict)

    def test_known_keys_before_unknown_survive(self):
        decoded = decode(to_value({"c": 3, "a": 1, "b": 2}), KnowsACStrict)
        assert decoded == KnowsACStrict(a=1, c=3)

    def test_scan_stays_ended(self):
        access = _cursor({"a": 1, "b": 2, "c": 3})
        keys = FieldIdentifier(frozenset({"a", "c"}))
        assert access.next_key(keys) == "a"
        assert access.next_value(INT) == 1
        assert access.next_key(keys) is END
        assert access.size_hint() == (0, 0)
        assert access.next_key(keys) is END
        access.finish()

    def test_size_hint_after_truncation(self):
        access = _cursor({"b": 2, "a": 1, "c": 3})
        assert access.size_hint() == (3, 3)
        assert access.next_key(FieldIdentifier(frozenset({"a"}))) is END
        assert access.size_hint() == (0, 0)
        assert access.remaining == 0

    def test_deny_unknown_fields(self):
        with pytest.raises(UnknownField) as exc_info:
            decode(
                to_value({"a": 1, "b": 2}),
                KnowsAC,
                DecoderConfig(deny_unknown_fields=True),
            )
        assert exc_info.value.name == "b"

    def test_truncation_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="docbridge"):
            decode(to_value({"a": 1, "b": 2}), KnowsAC)
        assert "unknown key 'b'" in caplog.text


class TestProtocol:
    def test_entries_in_insertion_order(self):
        access = _cursor({"z": 1, "a": 2})
        assert access.next_entry(STR, INT) == ("z", 1)
        assert access.next_entry(STR, INT) == ("a", 2)
        assert access.next_entry(STR, INT) is END

    def test_size_hint_is_exact(self):
        access = _cursor({"a": 1, "b": 2})
        assert access.size_hint() == (2, 2)
        access.next_key(STR)
        assert access.size_hint() == (1, 1)

    def test_value_without_key(self):
        with pytest.raises(ContractViolation):
            _cursor({"a": 1}).next_value(INT)

    def test_key_twice_without_value(self):
        access = _cursor({"a": 1, "b": 2})
        access.next_key(STR)
        with pytest.raises(ContractViolation):
            access.next_key(STR)

    def test_finish_ignores_trailing_entries(self):
        access = _cursor({"a": 1, "b": 2})
        assert access.next_entry(STR, INT) == ("a", 1)
        access.finish()

    def test_value_error_propagates(self):
        with pytest.raises(InvalidType):
            decode(to_value({"x": None, "y": 1}), WithRequired)


def test_dict_keeps_order():
    decoded = decode(to_value({"b": 1, "a": 2}), dict[str, int])
    assert list(decoded) == ["b", "a"]
