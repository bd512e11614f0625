"""Error taxonomy for docbridge decoding."""

from __future__ import annotations


class DecoderError(Exception):
    """Base class for every decode failure.

    ``kind`` is a stable, machine-readable tag; ``message`` is the human
    readable context.
    """

    kind = "decoder"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class EndOfStream(DecoderError):
    kind = "end_of_stream"

    def __init__(self, message: str = "no value left to decode") -> None:
        super().__init__(message)


class ExpectedEnum(DecoderError):
    kind = "expected_enum"

    def __init__(self, found: str) -> None:
        super().__init__(f"expected an enum document, found {found}")
        self.found = found


class ExpectedSingleKeyMap(DecoderError):
    kind = "expected_single_key_map"

    def __init__(self, count: int) -> None:
        super().__init__(f"expected a document with exactly one entry, found {count}")
        self.count = count


class ExpectedVariantName(DecoderError):
    kind = "expected_variant_name"

    def __init__(self) -> None:
        super().__init__("expected a variant name")


class ExpectedTuple(DecoderError):
    kind = "expected_tuple"

    def __init__(self, found: str) -> None:
        super().__init__(f"expected a tuple payload, found {found}")
        self.found = found


class ExpectedStruct(DecoderError):
    kind = "expected_struct"

    def __init__(self, found: str) -> None:
        super().__init__(f"expected a struct payload, found {found}")
        self.found = found


class LengthMismatch(DecoderError):
    kind = "length_mismatch"

    def __init__(self, remaining: int) -> None:
        super().__init__(f"{remaining} trailing element(s) left unread")
        self.remaining = remaining


class UnknownField(DecoderError):
    kind = "unknown_field"

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown field {name!r}")
        self.name = name


class Syntax(DecoderError):
    """Shape mismatch not covered by a more specific kind."""

    kind = "syntax"


class InvalidType(Syntax):
    kind = "invalid_type"

    def __init__(self, found: str, expecting: str) -> None:
        super().__init__(f"invalid type: {found}, expected {expecting}")
        self.found = found
        self.expecting = expecting


class DepthLimitExceeded(DecoderError):
    kind = "depth_limit_exceeded"

    def __init__(self, limit: int) -> None:
        super().__init__(f"nesting deeper than {limit} levels")
        self.limit = limit


class ContractViolation(DecoderError):
    """A cursor was driven out of protocol (programmer error)."""

    kind = "contract_violation"
