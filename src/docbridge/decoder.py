"""Entry point: decode a value tree into a target type."""

from __future__ import annotations

from typing import Any

from .config import DEFAULT_CONFIG, DecoderConfig
from .cursor import ValueCursor
from .errors import DepthLimitExceeded
from .typed import target_for
from .values import Value


def decode(value: Value, target: Any, config: DecoderConfig = DEFAULT_CONFIG) -> Any:
    """Reconstruct *target* from *value*.

    *target* is either a type annotation understood by ``target_for``
    (``int``, ``list[str]``, a dataclass, an ``enum.Enum`` ...) or any object
    with a ``reconstruct(source)`` method. Failures raise a ``DecoderError``;
    a tree too deep for the interpreter stack raises ``DepthLimitExceeded``
    even when ``config.max_depth`` was not reached.
    """
    cursor = ValueCursor(value, config)
    try:
        return target_for(target).reconstruct(cursor)
    except RecursionError:
        raise DepthLimitExceeded(config.max_depth) from None
