"""Union cursor: a single-entry document read as ``{variant: payload}``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from .errors import ExpectedSingleKeyMap, ExpectedStruct, ExpectedTuple, ExpectedVariantName
from .mapping import MapCursor
from .protocol import Reconstruct, Visitor
from .seq import SeqCursor
from .slot import Slot, guarded
from .values import Value, VArray, VDocument, VString, kind_of

if TYPE_CHECKING:
    from .cursor import ValueCursor


class _UnitVisitor(Visitor):
    expecting = "a unit payload"

    def visit_unit(self) -> None:
        return None


class _Unit:
    def reconstruct(self, source) -> None:
        return source.decode_unit(_UnitVisitor())


_UNIT = _Unit()


class VariantCursor:
    """Discriminant and payload of one union value, each usable once."""

    def __init__(self, de: "ValueCursor", variant: Value, payload: Value) -> None:
        self._de = de
        self._variant = Slot(variant)
        self._payload = Slot(payload)
        self._failed: Exception | None = None

    @classmethod
    def from_document(cls, de: "ValueCursor", doc: VDocument) -> "VariantCursor":
        if len(doc.entries) != 1:
            raise ExpectedSingleKeyMap(len(doc.entries))
        first = next(iter(doc.entries.items()), None)
        if first is None:
            raise ExpectedVariantName()
        name, payload = first
        return cls(de, VString(name), payload)

    @guarded
    def variant_name(self, target: Reconstruct) -> Any:
        return self._de.reconstruct(self._variant.take(), target)

    @guarded
    def unit_payload(self) -> None:
        return self._de.reconstruct(self._payload.take(), _UNIT)

    @guarded
    def newtype_payload(self, target: Reconstruct) -> Any:
        return self._de.reconstruct(self._payload.take(), target)

    @guarded
    def tuple_payload(self, arity: int, visitor: Visitor) -> Any:
        value = self._payload.take()
        if not isinstance(value, VArray):
            raise ExpectedTuple(kind_of(value))
        with self._de.nested():
            return SeqCursor(self._de, value.items).decode_any(visitor)

    @guarded
    def struct_payload(self, fields: Sequence[str], visitor: Visitor) -> Any:
        value = self._payload.take()
        if not isinstance(value, VDocument):
            raise ExpectedStruct(kind_of(value))
        with self._de.nested():
            return MapCursor(self._de, value.entries).decode_any(visitor)
