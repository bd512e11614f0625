"""Tests for single-key document unions."""

import enum
from dataclasses import dataclass

import pytest

from docbridge import (
    ContractViolation,
    EndOfStream,
    ExpectedEnum,
    ExpectedSingleKeyMap,
    ExpectedStruct,
    ExpectedTuple,
    InvalidType,
    Syntax,
    Tagged,
    ValueCursor,
    Variant,
    VariantCursor,
    Visitor,
    decode,
)
from docbridge.typed import INT, STR
from docbridge.values import Null, VArray, VInt32, VString, to_value


@dataclass
class Running:
    pid: int


State = Tagged(
    "State",
    Running=Running,
    Stopped=None,
    Moved=tuple[int, int],
    Renamed=str,
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class TestTagged:
    def test_struct_payload(self):
        assert decode(to_value({"Running": {"pid": 42}}), State) == Variant(
            "Running", Running(pid=42)
        )

    def test_unit_payload(self):
        assert decode(to_value({"Stopped": None}), State) == Variant("Stopped")

    def test_tuple_payload(self):
        assert decode(to_value({"Moved": [3, 4]}), State) == Variant("Moved", (3, 4))

    def test_newtype_payload(self):
        assert decode(to_value({"Renamed": "x"}), State) == Variant("Renamed", "x")

    def test_two_keys(self):
        with pytest.raises(ExpectedSingleKeyMap) as exc_info:
            decode(to_value({"Running": 1, "Extra": 2}), State)
        assert exc_info.value.count == 2

    def test_empty_document(self):
        with pytest.raises(ExpectedSingleKeyMap):
            decode(to_value({}), State)

    def test_not_a_document(self):
        with pytest.raises(ExpectedEnum):
            decode(VString("Running"), State)

    def test_struct_payload_shape(self):
        with pytest.raises(ExpectedStruct):
            decode(to_value({"Running": 1}), State)

    def test_tuple_payload_shape(self):
        with pytest.raises(ExpectedTuple):
            decode(to_value({"Moved": 1}), State)

    def test_unit_payload_must_be_null(self):
        with pytest.raises(InvalidType):
            decode(to_value({"Stopped": 1}), State)

    def test_unknown_variant(self):
        with pytest.raises(Syntax):
            decode(to_value({"Paused": None}), State)


class TestEnum:
    def test_member(self):
        assert decode(to_value({"GREEN": None}), Color) is Color.GREEN

    def test_unknown_member(self):
        with pytest.raises(Syntax) as exc_info:
            decode(to_value({"BLUE": None}), Color)
        assert "BLUE" in exc_info.value.message

    def test_inside_struct(self):
        @dataclass
        class Pixel:
            color: Color

        assert decode(to_value({"color": {"RED": None}}), Pixel) == Pixel(Color.RED)


class TestVariantCursor:
    def test_each_slot_used_once(self):
        variant = VariantCursor(ValueCursor(), VString("A"), VInt32(1))
        assert variant.variant_name(STR) == "A"
        assert variant.newtype_payload(INT) == 1
        with pytest.raises(EndOfStream):
            variant.newtype_payload(INT)

    def test_failed_cursor_refuses_reuse(self):
        variant = VariantCursor(ValueCursor(), VString("A"), Null)
        variant.variant_name(STR)
        with pytest.raises(EndOfStream):
            variant.variant_name(STR)
        with pytest.raises(ContractViolation):
            variant.unit_payload()

    def test_empty_tuple_payload_offered_as_unit(self):
        variant = VariantCursor(ValueCursor(), VString("A"), VArray([]))

        class UnitOnly(Visitor):
            def visit_unit(self):
                return ()

        assert variant.tuple_payload(0, UnitOnly()) == ()
