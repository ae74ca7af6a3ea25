from hashring.hashers import DefaultHasher, Hasher
from hashring.nodes import Node, ServerNode, SimpleNode
from hashring.partition import Partition
from hashring.ring import HashRing
from hashring.utils.config import ConfigError, RingConfig

__version__ = "0.1.0"

__all__ = [
    "HashRing",
    "RingConfig",
    "ConfigError",
    "Hasher",
    "DefaultHasher",
    "Node",
    "SimpleNode",
    "ServerNode",
    "Partition",
]
