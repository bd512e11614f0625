"""Map cursor: walks the entries of a document, plus the missing-field source."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from .errors import ContractViolation, EndOfStream, UnknownField
from .protocol import END, KeyStep, Reconstruct, Source, UnknownKey, Visitor
from .slot import Slot, guarded
from .values import Value, VString

if TYPE_CHECKING:
    from .cursor import ValueCursor

logger = logging.getLogger(__name__)


class MapCursor(Source):
    """Single-pass cursor over a document's entries in insertion order.

    ``next_key`` buffers the entry's value; ``next_value`` must be called
    before the following ``next_key``. Trailing entries are ignored by
    ``finish``.
    """

    def __init__(self, de: "ValueCursor", entries: dict[str, Value]) -> None:
        self._de = de
        self._iter = iter(entries.items())
        self._remaining = len(entries)
        self._value = Slot()
        self._failed: Exception | None = None

    @property
    def remaining(self) -> int:
        return self._remaining

    @guarded
    def decode_any(self, visitor: Visitor) -> Any:
        return visitor.visit_map(self)

    @guarded
    def next_key(self, target: Reconstruct) -> Any:
        """Decode the next key into *target*, or return ``END``.

        A key the target does not recognise ends the scan: the rest of the
        document is never reached.
        """
        step, key = self._key_step(target)
        if step is KeyStep.NO_MORE_KEYS:
            return END
        return key

    def _key_step(self, target: Reconstruct) -> tuple[KeyStep, Any]:
        if self._remaining == 0:
            return KeyStep.NO_MORE_KEYS, None

        name, value = next(self._iter)
        self._remaining -= 1
        self._value.put(value)

        key = self._de.reconstruct(VString(name), target)
        if isinstance(key, UnknownKey):
            if self._de.config.deny_unknown_fields:
                raise UnknownField(key.name)
            logger.debug(
                "unknown key %r ends the key scan; %d entr(ies) skipped",
                key.name, self._remaining,
            )
            self._value.clear()
            self._remaining = 0
            return KeyStep.NO_MORE_KEYS, None
        return KeyStep.KEY, key

    @guarded
    def next_value(self, target: Reconstruct) -> Any:
        if self._value.is_empty:
            raise ContractViolation("next_value called without a preceding next_key")
        return self._de.reconstruct(self._value.take(), target)

    def next_entry(self, key_target: Reconstruct, value_target: Reconstruct) -> Any:
        """Return ``(key, value)`` for the next entry, or ``END``."""
        key = self.next_key(key_target)
        if key is END:
            return END
        return key, self.next_value(value_target)

    @guarded
    def finish(self) -> None:
        return None

    @guarded
    def missing_field(self, name: str, target: Reconstruct) -> Any:
        """Default a field the document never supplied.

        Optional targets become none and unit targets become unit; anything
        else fails with ``EndOfStream``.
        """
        logger.debug("field %r missing, trying its default", name)
        return target.reconstruct(UnitSource(name))

    def size_hint(self) -> tuple[int, int]:
        return self._remaining, self._remaining


class UnitSource(Source):
    """Content-less source standing in for a missing field."""

    def __init__(self, field: str | None = None) -> None:
        self.field = field

    def _missing(self) -> EndOfStream:
        if self.field is None:
            return EndOfStream()
        return EndOfStream(f"missing field {self.field!r}")

    def decode_any(self, visitor: Visitor) -> Any:
        return visitor.visit_unit()

    def decode_unit(self, visitor: Visitor) -> Any:
        return visitor.visit_unit()

    def decode_option(self, visitor: Visitor) -> Any:
        return visitor.visit_none()

    def decode_bool(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_int(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_float(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_str(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_seq(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_map(self, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_struct(self, name: str, fields: Sequence[str], visitor: Visitor) -> Any:
        raise self._missing()

    def decode_newtype(self, name: str, visitor: Visitor) -> Any:
        raise self._missing()

    def decode_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        raise self._missing()
