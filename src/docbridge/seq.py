"""Sequence cursor: walks the elements of an array."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .errors import LengthMismatch
from .protocol import END, Reconstruct, Source, Visitor
from .slot import guarded
from .values import Value

if TYPE_CHECKING:
    from .cursor import ValueCursor

logger = logging.getLogger(__name__)


class SeqCursor(Source):
    """Single-pass cursor over an array's elements.

    ``remaining`` always equals the number of elements not yet handed out.
    Each element is decoded through the owning ``ValueCursor``'s slot.
    """

    def __init__(self, de: "ValueCursor", items: list[Value]) -> None:
        self._de = de
        self._iter = iter(items)
        self._remaining = len(items)
        self._failed: Exception | None = None

    @property
    def remaining(self) -> int:
        return self._remaining

    @guarded
    def decode_any(self, visitor: Visitor) -> Any:
        # An empty array is offered as unit so unit-like targets can accept it.
        if self._remaining == 0:
            return visitor.visit_unit()
        return visitor.visit_seq(self)

    @guarded
    def next_element(self, target: Reconstruct) -> Any:
        """Decode the next element into *target*, or return ``END``."""
        if self._remaining == 0:
            return END
        value = next(self._iter)
        self._remaining -= 1
        return self._de.reconstruct(value, target)

    @guarded
    def finish(self) -> None:
        if self._remaining != 0:
            logger.debug("sequence finished with %d element(s) unread", self._remaining)
            raise LengthMismatch(self._remaining)

    def size_hint(self) -> tuple[int, int]:
        return self._remaining, self._remaining
