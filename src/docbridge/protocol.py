"""Shape-request protocol shared by every cursor.

A *target* is anything with a ``reconstruct(source)`` method. It issues one
shape request against the *source* (``decode_any``, ``decode_option``,
``decode_enum`` ...) and passes a *visitor*; the source answers by calling
back exactly one ``visit_*`` method with the content it holds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

from .errors import ExpectedEnum, InvalidType

if TYPE_CHECKING:
    from .mapping import MapCursor
    from .seq import SeqCursor
    from .variant import VariantCursor


@runtime_checkable
class Reconstruct(Protocol):
    def reconstruct(self, source: "Source") -> Any: ...


# ---------------------------------------------------------------------------
# End-of-iteration sentinel
# ---------------------------------------------------------------------------

class _End:
    """Singleton returned by ``next_element`` / ``next_key`` when exhausted."""

    _instance: "_End | None" = None

    def __new__(cls) -> "_End":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "END"

    def __bool__(self) -> bool:
        return False


END = _End()


# ---------------------------------------------------------------------------
# Key decoding outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UnknownKey:
    """Returned by a field-identifier target for a key it does not know."""

    name: str


class KeyStep(Enum):
    KEY = auto()
    NO_MORE_KEYS = auto()


# ---------------------------------------------------------------------------
# Visitor
# ---------------------------------------------------------------------------

class Visitor:
    """Callback surface. Every default rejects the content it is given."""

    expecting = "a value"

    def _invalid(self, found: str) -> Any:
        raise InvalidType(found, self.expecting)

    def visit_bool(self, value: bool) -> Any:
        return self._invalid("boolean")

    def visit_int32(self, value: int) -> Any:
        return self._invalid("int32")

    def visit_int64(self, value: int) -> Any:
        return self._invalid("int64")

    def visit_float(self, value: float) -> Any:
        return self._invalid("double")

    def visit_str(self, value: str) -> Any:
        return self._invalid("string")

    def visit_unit(self) -> Any:
        return self._invalid("unit")

    def visit_none(self) -> Any:
        return self._invalid("none")

    def visit_some(self, source: "Source") -> Any:
        return self._invalid("some")

    def visit_newtype(self, source: "Source") -> Any:
        return self._invalid("newtype")

    def visit_seq(self, seq: "SeqCursor") -> Any:
        return self._invalid("sequence")

    def visit_map(self, access: "MapCursor") -> Any:
        return self._invalid("map")

    def visit_enum(self, variant: "VariantCursor") -> Any:
        return self._invalid("enum")


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------

class Source:
    """Base for anything a target can issue shape requests against.

    The content is self-describing, so the typed hints (``decode_bool``,
    ``decode_seq`` ...) fall back to ``decode_any``; only sources with no
    content of their own (the missing-field source) distinguish them.
    """

    def decode_any(self, visitor: Visitor) -> Any:
        raise NotImplementedError

    def decode_unit(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_bool(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_int(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_float(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_str(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_seq(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_map(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        return self.decode_map(visitor)

    def decode_option(self, visitor: Visitor) -> Any:
        return self.decode_any(visitor)

    def decode_newtype(self, name: str, visitor: Visitor) -> Any:
        return visitor.visit_newtype(self)

    def decode_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        raise ExpectedEnum(type(self).__name__)
