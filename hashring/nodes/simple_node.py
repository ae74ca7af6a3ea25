from __future__ import annotations

from dataclasses import dataclass

from hashring.nodes.base_node import Node


@dataclass(frozen=True, slots=True, eq=False)
class SimpleNode(Node):
    label: str

    @property
    def key(self) -> str:
        return self.label

    @classmethod
    def of(cls, label: str) -> SimpleNode:
        return cls(label)
