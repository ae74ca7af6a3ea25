from __future__ import annotations

from enum import Enum
from zlib import crc32

import mmh3
import xxhash

from hashring.hashers.base import to_signed64

UINT32_MASK = (1 << 32) - 1


def murmur3(key: str, seed: int) -> int:
    # mmh3 only takes 32-bit seeds
    high, _ = mmh3.hash64(key, seed & UINT32_MASK, signed=True)
    return high


def xx_hash(key: str, seed: int) -> int:
    return to_signed64(xxhash.xxh64_intdigest(key.encode(), seed=seed))


def crc32_hash(key: str, seed: int) -> int:
    return crc32(key.encode(), seed & UINT32_MASK)


class DefaultHasher(Enum):
    MURMUR_3 = "murmur3"
    XX_HASH = "xxhash"
    CRC32 = "crc32"

    def hash(self, key: str, seed: int) -> int:
        return _FUNCTIONS[self](key, seed)

    def __repr__(self) -> str:
        return f"DefaultHasher.{self.name}"


_FUNCTIONS = {
    DefaultHasher.MURMUR_3: murmur3,
    DefaultHasher.XX_HASH: xx_hash,
    DefaultHasher.CRC32: crc32_hash,
}
