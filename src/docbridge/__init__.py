"""docbridge — type-directed decoding of dynamic document trees."""

import logging

from .config import DEFAULT_CONFIG, DecoderConfig
from .cursor import ValueCursor
from .decoder import decode
from .errors import (
    ContractViolation,
    DecoderError,
    DepthLimitExceeded,
    EndOfStream,
    ExpectedEnum,
    ExpectedSingleKeyMap,
    ExpectedStruct,
    ExpectedTuple,
    ExpectedVariantName,
    InvalidType,
    LengthMismatch,
    Syntax,
    UnknownField,
)
from .mapping import MapCursor, UnitSource
from .protocol import END, Reconstruct, Source, UnknownKey, Visitor
from .seq import SeqCursor
from .typed import Tagged, Variant, target_for
from .values import (
    Null,
    Value,
    VArray,
    VBinary,
    VBool,
    VDateTime,
    VDocument,
    VDouble,
    VInt32,
    VInt64,
    VNull,
    VObjectId,
    VRegex,
    VString,
    VTimestamp,
    from_extended_document,
    to_value,
)
from .variant import VariantCursor

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "decode",
    "target_for",
    "DecoderConfig",
    "DEFAULT_CONFIG",
    "ValueCursor",
    "SeqCursor",
    "MapCursor",
    "UnitSource",
    "VariantCursor",
    "Visitor",
    "Source",
    "Reconstruct",
    "END",
    "UnknownKey",
    "Tagged",
    "Variant",
    "DecoderError",
    "EndOfStream",
    "ExpectedEnum",
    "ExpectedSingleKeyMap",
    "ExpectedVariantName",
    "ExpectedTuple",
    "ExpectedStruct",
    "LengthMismatch",
    "UnknownField",
    "Syntax",
    "InvalidType",
    "DepthLimitExceeded",
    "ContractViolation",
    "Value",
    "Null",
    "VNull",
    "VBool",
    "VInt32",
    "VInt64",
    "VDouble",
    "VString",
    "VArray",
    "VDocument",
    "VObjectId",
    "VDateTime",
    "VBinary",
    "VTimestamp",
    "VRegex",
    "from_extended_document",
    "to_value",
]
