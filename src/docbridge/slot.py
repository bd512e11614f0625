"""Single-value pending slot and the failed-cursor guard."""

from __future__ import annotations

import functools
from typing import Callable, TypeVar

from .errors import ContractViolation, EndOfStream
from .values import Value

F = TypeVar("F", bound=Callable)


class Slot:
    """Holds at most one value; ``take`` moves it out."""

    __slots__ = ("_value", "_holding")

    def __init__(self, value: Value | None = None) -> None:
        self._value = value
        self._holding = value is not None

    @property
    def is_empty(self) -> bool:
        return not self._holding

    def put(self, value: Value) -> None:
        if self._holding:
            raise ContractViolation("pending slot refilled before its value was consumed")
        self._value = value
        self._holding = True

    def peek(self) -> Value:
        if not self._holding:
            raise EndOfStream()
        return self._value

    def take(self) -> Value:
        if not self._holding:
            raise EndOfStream()
        value = self._value
        self._value = None
        self._holding = False
        return value

    def clear(self) -> None:
        self._value = None
        self._holding = False

    def __repr__(self) -> str:
        if self._holding:
            return f"Slot({self._value!r})"
        return "Slot(<empty>)"


def guarded(method: F) -> F:
    """Poison the cursor once *method* raises; later calls are refused."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._failed is not None:
            raise ContractViolation(
                f"{type(self).__name__} cannot be reused after {self._failed!r}"
            )
        try:
            return method(self, *args, **kwargs)
        except Exception as exc:
            self._failed = exc
            raise

    return wrapper  # type: ignore[return-value]
