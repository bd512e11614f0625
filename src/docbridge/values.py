"""Dynamic value tree consumed by the decoding cursors."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import ClassVar, Union

_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1
_OID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


class VNull:
    """Singleton for the null value."""

    kind = "null"
    _instance: "VNull | None" = None

    def __new__(cls) -> "VNull":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Null"

    def __bool__(self) -> bool:
        return False


Null = VNull()


@dataclass(slots=True)
class VBool:
    value: bool
    kind: ClassVar[str] = "boolean"


@dataclass(slots=True)
class VInt32:
    value: int
    kind: ClassVar[str] = "int32"

    def __post_init__(self) -> None:
        if not _INT32_MIN <= self.value <= _INT32_MAX:
            raise ValueError(f"{self.value} does not fit in 32 bits")


@dataclass(slots=True)
class VInt64:
    value: int
    kind: ClassVar[str] = "int64"

    def __post_init__(self) -> None:
        if not _INT64_MIN <= self.value <= _INT64_MAX:
            raise ValueError(f"{self.value} does not fit in 64 bits")


@dataclass(slots=True)
class VDouble:
    value: float
    kind: ClassVar[str] = "double"


@dataclass(slots=True)
class VString:
    value: str
    kind: ClassVar[str] = "string"


@dataclass(slots=True)
class VArray:
    items: list["Value"] = field(default_factory=list)
    kind: ClassVar[str] = "array"

    def __len__(self) -> int:
        return len(self.items)


@dataclass(slots=True)
class VDocument:
    """Ordered string-keyed map. Insertion order is significant."""

    entries: dict[str, "Value"] = field(default_factory=dict)
    kind: ClassVar[str] = "document"

    def __len__(self) -> int:
        return len(self.entries)


# ---------------------------------------------------------------------------
# Extended types
# ---------------------------------------------------------------------------

class ExtendedValue:
    """Base for non-primitive values that have a document representation."""

    __slots__ = ()

    def to_extended_document(self) -> VDocument:
        raise NotImplementedError


@dataclass(slots=True)
class VObjectId(ExtendedValue):
    raw: bytes
    kind: ClassVar[str] = "object id"

    def __post_init__(self) -> None:
        if len(self.raw) != 12:
            raise ValueError("an object id is exactly 12 bytes")

    @classmethod
    def from_hex(cls, text: str) -> "VObjectId":
        return cls(bytes.fromhex(text))

    @property
    def hex(self) -> str:
        return self.raw.hex()

    def to_extended_document(self) -> VDocument:
        return VDocument({"$oid": VString(self.hex)})


@dataclass(slots=True)
class VDateTime(ExtendedValue):
    millis: int  # milliseconds since the Unix epoch, UTC
    kind: ClassVar[str] = "datetime"

    def to_extended_document(self) -> VDocument:
        return VDocument({"$date": VDocument({"$numberLong": VInt64(self.millis)})})


@dataclass(slots=True)
class VBinary(ExtendedValue):
    subtype: int
    data: bytes
    kind: ClassVar[str] = "binary"

    def to_extended_document(self) -> VDocument:
        return VDocument({
            "$binary": VString(base64.b64encode(self.data).decode("ascii")),
            "$type": VString(f"{self.subtype:02x}"),
        })


@dataclass(slots=True)
class VTimestamp(ExtendedValue):
    time: int
    increment: int
    kind: ClassVar[str] = "timestamp"

    def to_extended_document(self) -> VDocument:
        return VDocument({
            "$timestamp": VDocument({"t": VInt64(self.time), "i": VInt64(self.increment)}),
        })


@dataclass(slots=True)
class VRegex(ExtendedValue):
    pattern: str
    options: str = ""
    kind: ClassVar[str] = "regex"

    def to_extended_document(self) -> VDocument:
        return VDocument({"$regex": VString(self.pattern), "$options": VString(self.options)})


Value = Union[
    VNull, VBool, VInt32, VInt64, VDouble, VString, VArray, VDocument,
    VObjectId, VDateTime, VBinary, VTimestamp, VRegex,
]


def kind_of(value: object) -> str:
    """Human-readable tag of *value* for diagnostics."""
    return getattr(value, "kind", type(value).__name__)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def from_extended_document(doc: VDocument) -> Value:
    """Rebuild an extended value from its document form.

    Documents that do not match a known extended shape are returned as-is.
    """
    entries = doc.entries
    keys = set(entries)

    if keys == {"$oid"}:
        oid = entries["$oid"]
        if isinstance(oid, VString) and _OID_RE.match(oid.value):
            return VObjectId.from_hex(oid.value)

    if keys == {"$date"}:
        inner = entries["$date"]
        if isinstance(inner, VDocument) and set(inner.entries) == {"$numberLong"}:
            millis = inner.entries["$numberLong"]
            if isinstance(millis, (VInt32, VInt64)):
                return VDateTime(millis.value)

    if keys == {"$binary", "$type"}:
        data, subtype = entries["$binary"], entries["$type"]
        if isinstance(data, VString) and isinstance(subtype, VString):
            try:
                return VBinary(int(subtype.value, 16), base64.b64decode(data.value, validate=True))
            except (ValueError, binascii.Error):
                return doc

    if keys == {"$timestamp"}:
        inner = entries["$timestamp"]
        if isinstance(inner, VDocument) and set(inner.entries) == {"t", "i"}:
            t, i = inner.entries["t"], inner.entries["i"]
            if isinstance(t, (VInt32, VInt64)) and isinstance(i, (VInt32, VInt64)):
                return VTimestamp(t.value, i.value)

    if keys == {"$regex", "$options"}:
        pattern, options = entries["$regex"], entries["$options"]
        if isinstance(pattern, VString) and isinstance(options, VString):
            return VRegex(pattern.value, options.value)

    return doc


def to_value(obj: object) -> Value:
    """Build a value tree from plain Python data.

    - None → Null
    - bool → VBool (checked before int)
    - int → VInt32 when it fits, else VInt64
    - float → VDouble, str → VString, bytes → generic VBinary
    - list / tuple → VArray, dict → VDocument (keys must be str)
    - existing values pass through unchanged
    """
    if obj is None:
        return Null
    if isinstance(obj, (VNull, VBool, VInt32, VInt64, VDouble, VString,
                        VArray, VDocument, ExtendedValue)):
        return obj
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, int):
        if _INT32_MIN <= obj <= _INT32_MAX:
            return VInt32(obj)
        return VInt64(obj)
    if isinstance(obj, float):
        return VDouble(obj)
    if isinstance(obj, str):
        return VString(obj)
    if isinstance(obj, bytes):
        return VBinary(0, obj)
    if isinstance(obj, (list, tuple)):
        return VArray([to_value(item) for item in obj])
    if isinstance(obj, dict):
        entries: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"document keys must be str, got {type(key).__name__}")
            entries[key] = to_value(item)
        return VDocument(entries)
    raise TypeError(f"cannot convert {type(obj).__name__} to a value")
