from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hashring.nodes import Node


@dataclass(slots=True, eq=False)
class Partition:
    """One virtual copy of a node placed at a single ring slot."""

    index: int
    node: Node
    slot: int | None = None

    @property
    def partition_key(self) -> str:
        return f"{self.node.key}:{self.index}"

    @property
    def placed(self) -> bool:
        return self.slot is not None

    def assign_slot(self, slot: int) -> None:
        if self.slot is not None:
            raise ValueError(
                f"Partition {self.partition_key} already placed at slot {self.slot}"
            )
        if slot < 0:
            raise ValueError(f"Slot can not be negative: {slot}")
        self.slot = slot

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Partition):
            return NotImplemented
        return self.partition_key == other.partition_key

    def __hash__(self) -> int:
        return hash(self.partition_key)
