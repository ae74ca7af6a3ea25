from .base import Hasher, to_signed64
from .default import DefaultHasher

__all__ = [
    "Hasher",
    "DefaultHasher",
    "to_signed64",
]
