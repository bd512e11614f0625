"""Value cursor: the root of every decode and its tag dispatch."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from .config import DEFAULT_CONFIG, DecoderConfig
from .errors import DepthLimitExceeded, ExpectedEnum, Syntax
from .mapping import MapCursor
from .protocol import Reconstruct, Source, Visitor
from .seq import SeqCursor
from .slot import Slot, guarded
from .values import (
    ExtendedValue,
    Value,
    VArray,
    VBool,
    VDocument,
    VDouble,
    VInt32,
    VInt64,
    VNull,
    VString,
    kind_of,
)
from .variant import VariantCursor

logger = logging.getLogger(__name__)


class ValueCursor(Source):
    """Holds at most one pending value and routes it to a visitor by tag.

    Child cursors feed their elements back through this cursor's slot, so
    one ``ValueCursor`` serves the whole decode call tree and tracks its
    nesting depth.
    """

    def __init__(self, value: Value | None = None, config: DecoderConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._slot = Slot(value)
        self._depth = 0
        self._failed: Exception | None = None

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def is_empty(self) -> bool:
        return self._slot.is_empty

    @contextmanager
    def nested(self) -> Iterator[None]:
        if self._depth >= self.config.max_depth:
            raise DepthLimitExceeded(self.config.max_depth)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # -- Slot transfer --------------------------------------------------

    @guarded
    def supply(self, value: Value) -> None:
        self._slot.put(value)

    def reconstruct(self, value: Value, target: Reconstruct) -> Any:
        """Put *value* in the slot and let *target* consume it."""
        self.supply(value)
        return target.reconstruct(self)

    # -- Shape requests -------------------------------------------------

    @guarded
    def decode_any(self, visitor: Visitor) -> Any:
        return self._dispatch(self._slot.take(), visitor)

    @guarded
    def decode_option(self, visitor: Visitor) -> Any:
        if isinstance(self._slot.peek(), VNull):
            self._slot.take()
            return visitor.visit_none()
        # The value stays pending for the inner target to consume.
        with self.nested():
            return visitor.visit_some(self)

    @guarded
    def decode_newtype(self, name: str, visitor: Visitor) -> Any:
        with self.nested():
            return visitor.visit_newtype(self)

    @guarded
    def decode_enum(self, name: str, variants: Sequence[str], visitor: Visitor) -> Any:
        value = self._slot.take()
        if not isinstance(value, VDocument):
            raise ExpectedEnum(kind_of(value))
        variant = VariantCursor.from_document(self, value)
        with self.nested():
            return visitor.visit_enum(variant)

    def _dispatch(self, value: Value, visitor: Visitor) -> Any:
        if isinstance(value, VDouble):
            return visitor.visit_float(value.value)
        if isinstance(value, VString):
            return visitor.visit_str(value.value)
        if isinstance(value, VArray):
            with self.nested():
                return visitor.visit_seq(SeqCursor(self, value.items))
        if isinstance(value, VDocument):
            with self.nested():
                return visitor.visit_map(MapCursor(self, value.entries))
        if isinstance(value, VBool):
            return visitor.visit_bool(value.value)
        if isinstance(value, VNull):
            return visitor.visit_unit()
        if isinstance(value, VInt32):
            return visitor.visit_int32(value.value)
        if isinstance(value, VInt64):
            return visitor.visit_int64(value.value)
        if isinstance(value, ExtendedValue):
            doc = value.to_extended_document()
            logger.debug("decoding %s through its extended document", kind_of(value))
            with self.nested():
                return visitor.visit_map(MapCursor(self, doc.entries))
        raise Syntax(f"cannot decode {type(value).__name__}")
