"""Tests for annotation-driven targets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NewType, Optional

import pytest

from docbridge import EndOfStream, InvalidType, Value, decode, target_for
from docbridge.typed import FLOAT, ListOf, Option, Struct
from docbridge.values import Null, VArray, VDocument, VInt32, VInt64, VObjectId, VString, to_value

UserId = NewType("UserId", int)


@dataclass
class Point:
    x: float
    y: float


@dataclass
class Shape:
    name: str
    points: list[Point]
    tags: dict[str, str] = field(default_factory=dict)
    owner: Optional[UserId] = None


@dataclass
class Tree:
    label: str
    children: list[Tree] = field(default_factory=list)


class Celsius:
    def __init__(self, degrees):
        self.degrees = degrees

    @classmethod
    def reconstruct(cls, source):
        return cls(FLOAT.reconstruct(source))


@dataclass
class Scaled:
    factor: int

    def reconstruct(self, source):
        return self.factor * target_for(int).reconstruct(source)


def test_nested_dataclasses():
    value = to_value({"name": "tri", "points": [{"x": 0, "y": 1.5}], "owner": 7})
    assert decode(value, Shape) == Shape("tri", [Point(0.0, 1.5)], {}, UserId(7))


def test_dataclass_default_not_replaced():
    assert decode(to_value({"name": "n", "points": []}), Shape).tags == {}


def test_recursive_dataclass():
    value = to_value({"label": "root", "children": [{"label": "leaf"}]})
    assert decode(value, Tree) == Tree("root", [Tree("leaf")])


def test_missing_list_field():
    with pytest.raises(EndOfStream):
        decode(to_value({"name": "n"}), Shape)


class TestScalars:
    def test_bool_rejects_int(self):
        with pytest.raises(InvalidType) as exc_info:
            decode(VInt32(1), bool)
        assert exc_info.value.found == "int32"

    def test_float_accepts_ints(self):
        assert decode(VInt32(2), float) == 2.0
        assert decode(VInt64(2**40), float) == float(2**40)

    def test_null_into_none(self):
        assert decode(Null, None) is None

    def test_str_rejects_null(self):
        with pytest.raises(InvalidType):
            decode(Null, str)


def test_newtype():
    assert decode(VInt32(7), UserId) == 7


def test_custom_reconstruct():
    assert decode(to_value(21.5), Celsius).degrees == 21.5


def test_unhashable_target_instance():
    assert Scaled.__hash__ is None
    target = Scaled(3)
    assert target_for(target) is target
    assert decode(VInt32(2), Scaled(3)) == 6
    assert decode(to_value([1, 2]), ListOf(Scaled(2))) == [2, 4]


class TestValueTargets:
    def test_value_identity(self):
        value = to_value({"a": [1, None, "x"], "b": {"c": 2.5}})
        assert decode(value, Value) == value

    def test_document(self):
        doc = to_value({"a": 1})
        assert decode(doc, VDocument) == doc

    def test_document_rejects_object_id(self):
        oid = VObjectId.from_hex("507f1f77bcf86cd799439011")
        with pytest.raises(InvalidType):
            decode(oid, VDocument)

    def test_any(self):
        assert decode(VString("x"), Any) == VString("x")


class TestTargetFor:
    def test_cached(self):
        assert target_for(Point) is target_for(Point)
        assert isinstance(target_for(Point), Struct)

    def test_optional_forms(self):
        assert target_for(Optional[int]) == Option(target_for(int))
        assert target_for(int | None) == Option(target_for(int))

    def test_unsupported(self):
        with pytest.raises(TypeError):
            target_for(int | str)
        with pytest.raises(TypeError):
            target_for(set[int])

    def test_bare_containers(self):
        assert decode(to_value([1, "a"]), list) == [VInt32(1), VString("a")]
        assert decode(to_value({"k": 1}), dict) == {"k": VInt32(1)}
        assert decode(VArray([]), tuple) == ()
