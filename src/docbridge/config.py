"""Decoder configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DecoderConfig:
    """Knobs shared by every cursor of one decode call.

    - ``max_depth``: maximum nesting of array/document/enum/option levels
      before ``DepthLimitExceeded`` is raised.
    - ``deny_unknown_fields``: raise ``UnknownField`` on an unrecognised
      key instead of ending the key scan.
    """

    max_depth: int = 64
    deny_unknown_fields: bool = False

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")


DEFAULT_CONFIG = DecoderConfig()
