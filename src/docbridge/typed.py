"""Targets for plain Python types.

``target_for`` turns a type annotation into an object with a
``reconstruct(source)`` method, so callers can decode into ``int``,
``list[str]``, ``Optional[Point]``, dataclasses and enums without writing
visitors themselves.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import types
import typing
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin, get_type_hints

from .errors import InvalidType, Syntax
from .protocol import END, UnknownKey, Visitor
from .values import (
    Null,
    Value,
    VArray,
    VBool,
    VDocument,
    VDouble,
    VInt32,
    VInt64,
    VObjectId,
    VString,
    from_extended_document,
    kind_of,
)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

class _BoolVisitor(Visitor):
    expecting = "a boolean"

    def visit_bool(self, value: bool) -> bool:
        return value


class _IntVisitor(Visitor):
    expecting = "an integer"

    def visit_int32(self, value: int) -> int:
        return value

    def visit_int64(self, value: int) -> int:
        return value


class _FloatVisitor(Visitor):
    expecting = "a float"

    def visit_float(self, value: float) -> float:
        return value

    def visit_int32(self, value: int) -> float:
        return float(value)

    def visit_int64(self, value: int) -> float:
        return float(value)


class _StrVisitor(Visitor):
    expecting = "a string"

    def visit_str(self, value: str) -> str:
        return value


class _UnitVisitor(Visitor):
    expecting = "null"

    def visit_unit(self) -> None:
        return None


@dataclass(frozen=True)
class Scalar:
    """Issues the ``decode_<request>`` shape request with a fixed visitor."""

    request: str
    visitor: Visitor

    def reconstruct(self, source) -> Any:
        return getattr(source, f"decode_{self.request}")(self.visitor)


BOOL = Scalar("bool", _BoolVisitor())
INT = Scalar("int", _IntVisitor())
FLOAT = Scalar("float", _FloatVisitor())
STR = Scalar("str", _StrVisitor())
UNIT = Scalar("unit", _UnitVisitor())


# ---------------------------------------------------------------------------
# Option / newtype
# ---------------------------------------------------------------------------

class _OptionVisitor(Visitor):
    expecting = "an optional value"

    def __init__(self, inner) -> None:
        self.inner = inner

    def visit_none(self) -> None:
        return None

    def visit_some(self, source) -> Any:
        return self.inner.reconstruct(source)


@dataclass(frozen=True)
class Option:
    inner: Any

    def reconstruct(self, source) -> Any:
        return source.decode_option(_OptionVisitor(self.inner))


class _NewtypeVisitor(Visitor):
    def __init__(self, wrap, inner) -> None:
        self.wrap = wrap
        self.inner = inner
        self.expecting = f"a {getattr(wrap, '__name__', 'newtype')}"

    def visit_newtype(self, source) -> Any:
        return self.wrap(self.inner.reconstruct(source))


@dataclass(frozen=True)
class Newtype:
    """Transparent wrapper: ``wrap`` applied to whatever ``inner`` decodes."""

    name: str
    wrap: Any
    inner: Any

    def reconstruct(self, source) -> Any:
        return source.decode_newtype(self.name, _NewtypeVisitor(self.wrap, self.inner))


# ---------------------------------------------------------------------------
# Sequences and maps
# ---------------------------------------------------------------------------

class _ListVisitor(Visitor):
    expecting = "an array"

    def __init__(self, item, factory) -> None:
        self.item = item
        self.factory = factory

    def visit_unit(self) -> Any:
        return self.factory([])

    def visit_seq(self, seq) -> Any:
        out = []
        while True:
            element = seq.next_element(self.item)
            if element is END:
                break
            out.append(element)
        seq.finish()
        return self.factory(out)


@dataclass(frozen=True)
class ListOf:
    item: Any
    factory: Any = list

    def reconstruct(self, source) -> Any:
        return source.decode_seq(_ListVisitor(self.item, self.factory))


class _TupleVisitor(Visitor):
    def __init__(self, items) -> None:
        self.items = items
        self.expecting = f"an array of {len(items)} element(s)"

    def visit_unit(self) -> tuple:
        if self.items:
            return self._invalid("unit")
        return ()

    def visit_seq(self, seq) -> tuple:
        out = []
        for index, item in enumerate(self.items):
            element = seq.next_element(item)
            if element is END:
                raise Syntax(f"expected {len(self.items)} element(s), found {index}")
            out.append(element)
        seq.finish()
        return tuple(out)


@dataclass(frozen=True)
class TupleOf:
    items: tuple

    def reconstruct(self, source) -> tuple:
        return source.decode_seq(_TupleVisitor(self.items))


class _DictVisitor(Visitor):
    expecting = "a document"

    def __init__(self, key, value) -> None:
        self.key = key
        self.value = value

    def visit_map(self, access) -> dict:
        out = {}
        while True:
            entry = access.next_entry(self.key, self.value)
            if entry is END:
                break
            key, value = entry
            out[key] = value
        access.finish()
        return out


@dataclass(frozen=True)
class DictOf:
    key: Any
    value: Any

    def reconstruct(self, source) -> dict:
        return source.decode_map(_DictVisitor(self.key, self.value))


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

class _FieldVisitor(Visitor):
    expecting = "a field name"

    def __init__(self, names: frozenset[str]) -> None:
        self.names = names

    def visit_str(self, value: str) -> str | UnknownKey:
        if value in self.names:
            return value
        return UnknownKey(value)


@dataclass(frozen=True)
class FieldIdentifier:
    """Key target that reports unrecognised names as ``UnknownKey``."""

    names: frozenset[str]

    def reconstruct(self, source) -> str | UnknownKey:
        return source.decode_str(_FieldVisitor(self.names))


class _StructVisitor(Visitor):
    def __init__(self, struct: "Struct") -> None:
        self.struct = struct
        self.expecting = f"a {struct.cls.__name__} document"

    def visit_map(self, access) -> Any:
        targets = self.struct.field_targets()
        keys = FieldIdentifier(frozenset(targets))
        values: dict[str, Any] = {}
        while True:
            name = access.next_key(keys)
            if name is END:
                break
            values[name] = access.next_value(targets[name])
        access.finish()

        for name, target in targets.items():
            if name not in values and name not in self.struct.defaulted:
                values[name] = access.missing_field(name, target)
        return self.struct.cls(**values)


class Struct:
    """Named-field target for a dataclass. Field targets resolve lazily."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        self.defaulted = frozenset(
            f.name for f in dataclasses.fields(cls)
            if f.init and (f.default is not dataclasses.MISSING
                           or f.default_factory is not dataclasses.MISSING)
        )
        self._targets: dict[str, Any] | None = None

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(self.cls) if f.init)

    def field_targets(self) -> dict[str, Any]:
        if self._targets is None:
            hints = get_type_hints(self.cls)
            self._targets = {name: target_for(hints[name]) for name in self.fields}
        return self._targets

    def visitor(self) -> _StructVisitor:
        return _StructVisitor(self)

    def reconstruct(self, source) -> Any:
        return source.decode_struct(self.cls.__name__, self.fields, self.visitor())


# ---------------------------------------------------------------------------
# Unions
# ---------------------------------------------------------------------------

class _EnumVisitor(Visitor):
    def __init__(self, cls: type[enum.Enum]) -> None:
        self.cls = cls
        self.expecting = f"a {cls.__name__} variant"

    def visit_enum(self, variant) -> enum.Enum:
        name = variant.variant_name(STR)
        try:
            member = self.cls[name]
        except KeyError:
            raise Syntax(
                f"unknown variant {name!r}, expected one of {list(self.cls.__members__)}"
            ) from None
        variant.unit_payload()
        return member


@dataclass(frozen=True)
class EnumOf:
    """``enum.Enum`` members encoded as ``{"MemberName": null}``."""

    cls: type

    def reconstruct(self, source) -> enum.Enum:
        return source.decode_enum(
            self.cls.__name__, tuple(self.cls.__members__), _EnumVisitor(self.cls)
        )


@dataclass(frozen=True)
class Variant:
    """Decoded tagged-union value."""

    name: str
    payload: Any = None


class _TaggedVisitor(Visitor):
    def __init__(self, tagged: "Tagged") -> None:
        self.tagged = tagged
        self.expecting = f"a {tagged.name} variant"

    def visit_enum(self, variant) -> Variant:
        name = variant.variant_name(STR)
        if name not in self.tagged.cases:
            raise Syntax(f"unknown variant {name!r}, expected one of {list(self.tagged.cases)}")
        payload_type = self.tagged.cases[name]

        if payload_type is None:
            variant.unit_payload()
            return Variant(name)
        target = target_for(payload_type)
        if isinstance(target, Struct):
            return Variant(name, variant.struct_payload(target.fields, target.visitor()))
        if isinstance(target, TupleOf):
            return Variant(name, variant.tuple_payload(len(target.items), _TupleVisitor(target.items)))
        return Variant(name, variant.newtype_payload(target))


class Tagged:
    """Union encoded as a single-key document ``{variant: payload}``.

    Each case maps a variant name to its payload type: ``None`` for a unit
    variant, a dataclass for named fields, a fixed ``tuple[...]`` for
    positional fields, anything else for a single payload value::

        State = Tagged("State", Running=Running, Stopped=None, Moved=tuple[int, int])
    """

    def __init__(self, name: str, **cases: Any) -> None:
        self.name = name
        self.cases = cases

    def reconstruct(self, source) -> Variant:
        return source.decode_enum(self.name, tuple(self.cases), _TaggedVisitor(self))

    def __repr__(self) -> str:
        return f"Tagged({self.name!r}, {', '.join(self.cases)})"


# ---------------------------------------------------------------------------
# Dynamic values
# ---------------------------------------------------------------------------

class _ValueVisitor(Visitor):
    """Rebuilds a value tree from whatever the source offers."""

    expecting = "any value"

    def visit_bool(self, value: bool) -> Value:
        return VBool(value)

    def visit_int32(self, value: int) -> Value:
        return VInt32(value)

    def visit_int64(self, value: int) -> Value:
        return VInt64(value)

    def visit_float(self, value: float) -> Value:
        return VDouble(value)

    def visit_str(self, value: str) -> Value:
        return VString(value)

    def visit_unit(self) -> Value:
        return Null

    def visit_none(self) -> Value:
        return Null

    def visit_some(self, source) -> Value:
        return VALUE.reconstruct(source)

    def visit_newtype(self, source) -> Value:
        return VALUE.reconstruct(source)

    def visit_seq(self, seq) -> Value:
        items = []
        while True:
            element = seq.next_element(VALUE)
            if element is END:
                break
            items.append(element)
        seq.finish()
        return VArray(items)

    def visit_map(self, access) -> Value:
        entries: dict[str, Value] = {}
        while True:
            entry = access.next_entry(STR, VALUE)
            if entry is END:
                break
            key, value = entry
            entries[key] = value
        access.finish()
        return from_extended_document(VDocument(entries))


class _ValueTarget:
    def reconstruct(self, source) -> Value:
        return source.decode_any(_ValueVisitor())


VALUE = _ValueTarget()


@dataclass(frozen=True)
class ValueOf:
    """Rebuild a value through the map shape and insist on one value class."""

    cls: type

    def reconstruct(self, source) -> Any:
        value = source.decode_map(_ValueVisitor())
        if not isinstance(value, self.cls):
            raise InvalidType(kind_of(value), f"a {self.cls.kind}")
        return value


# ---------------------------------------------------------------------------
# Annotation → target
# ---------------------------------------------------------------------------

_SCALARS = {bool: BOOL, int: INT, float: FLOAT, str: STR, type(None): UNIT, None: UNIT}


def target_for(tp: Any) -> Any:
    """Return the target that reconstructs annotation *tp*.

    Objects that already have a ``reconstruct`` method are returned as-is,
    hashable or not. Raises ``TypeError`` for annotations with no
    reconstruction rule.
    """
    if hasattr(tp, "reconstruct"):
        return tp
    return _target_for_annotation(tp)


@functools.lru_cache(maxsize=None)
def _target_for_annotation(tp: Any) -> Any:
    if tp in _SCALARS:
        return _SCALARS[tp]
    if tp is typing.Any or tp == Value:
        return VALUE
    if tp in (VDocument, VObjectId):
        return ValueOf(tp)

    origin, args = get_origin(tp), get_args(tp)

    if origin in (Union, types.UnionType):
        present = tuple(arg for arg in args if arg is not type(None))
        if len(present) == len(args):
            raise TypeError(f"only Optional unions are supported, got {tp!r}")
        return Option(target_for(present[0] if len(present) == 1 else Union[present]))
    if tp is list or origin is list:
        return ListOf(target_for(args[0]) if args else VALUE)
    if tp is tuple or origin is tuple:
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return ListOf(target_for(args[0]) if args else VALUE, tuple)
        if args == ((),):
            return TupleOf(())
        return TupleOf(tuple(target_for(arg) for arg in args))
    if tp is dict or origin is dict:
        if args:
            return DictOf(target_for(args[0]), target_for(args[1]))
        return DictOf(STR, VALUE)
    if isinstance(tp, enum.EnumMeta):
        return EnumOf(tp)
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        return Struct(tp)
    if isinstance(tp, typing.NewType):
        return Newtype(tp.__name__, tp, target_for(tp.__supertype__))
    raise TypeError(f"no reconstruction rule for {tp!r}")
