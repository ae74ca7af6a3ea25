from __future__ import annotations

from typing import Protocol, runtime_checkable

UINT64_MASK = (1 << 64) - 1
INT64_SIGN = 1 << 63


@runtime_checkable
class Hasher(Protocol):
    """Maps a string and an integer seed to a signed 64-bit value.

    Implementations must be deterministic for a given ``(key, seed)`` pair
    and should produce a different value for a different seed. The ring only
    relies on the seed to break slot collisions during placement.
    """

    def hash(self, key: str, seed: int) -> int: ...


def to_signed64(value: int) -> int:
    value &= UINT64_MASK
    return value - (1 << 64) if value & INT64_SIGN else value
