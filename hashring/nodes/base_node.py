from __future__ import annotations

from abc import ABC, abstractmethod


class Node(ABC):
    """A ring member identified by a stable string label.

    Two nodes are the same member when their labels match, whatever their
    concrete type.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def key(self) -> str:
        pass

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.key
