"""
Decoder configuration.

Limits are applied centrally by the decoder to bound the work done on
untrusted input.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DecodeLimits:
    """Bounds on the size of a decoded filter tree."""

    max_depth: int = 64
    max_nodes: int = 10_000

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("max_depth must be positive")
        if self.max_nodes < 1:
            raise ValueError("max_nodes must be positive")


DEFAULT_DECODE_LIMITS = DecodeLimits()
