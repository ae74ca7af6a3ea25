from __future__ import annotations

from dataclasses import dataclass

from hashring.nodes.base_node import Node

DEFAULT_DC = "default"


@dataclass(frozen=True, slots=True, eq=False)
class ServerNode(Node):
    ip: str
    port: int
    dc: str = DEFAULT_DC

    def __post_init__(self) -> None:
        if not self.ip:
            raise ValueError("IP can not be empty")
        if not self.dc:
            raise ValueError("DC can not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"Port out of range: {self.port}")

    @property
    def key(self) -> str:
        return f"{self.dc}:{self.ip}:{self.port}"
