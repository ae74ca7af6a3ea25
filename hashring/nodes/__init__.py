from .base_node import Node
from .server_node import ServerNode
from .simple_node import SimpleNode

__all__ = [
    "Node",
    "SimpleNode",
    "ServerNode",
]
