from __future__ import annotations

from dataclasses import dataclass, field
from os import getenv
from random import randrange
from typing import TYPE_CHECKING

from hashring.hashers import DefaultHasher, Hasher
from hashring.nodes import Node, SimpleNode

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_PARTITION_RATE = 1000
DEFAULT_HASHER = DefaultHasher.MURMUR_3


class ConfigError(ValueError):
    pass


def generate_name() -> str:
    return f"hash_ring_{randrange(10_000)}"


@dataclass(frozen=True, slots=True)
class RingConfig:
    name: str = field(default_factory=generate_name)
    hasher: Hasher = DEFAULT_HASHER
    partition_rate: int = DEFAULT_PARTITION_RATE
    nodes: Iterable[Node] = ()

    def __post_init__(self) -> None:
        if self.name is None:
            raise ConfigError("Name can not be null")
        if self.nodes is None:
            raise ConfigError("Nodes list can not be null")
        if not isinstance(self.hasher, Hasher):
            raise ConfigError(f"Not a hasher: {self.hasher!r}")
        if isinstance(self.partition_rate, bool) or not isinstance(
            self.partition_rate, int
        ):
            raise ConfigError(
                f"Partition rate must be an integer, got {self.partition_rate!r}"
            )
        if self.partition_rate < 1:
            raise ConfigError("Partition rate can not be less than 1")
        object.__setattr__(self, "nodes", tuple(self.nodes))


@dataclass(frozen=True, slots=True)
class Config:
    ring: RingConfig
    replicas: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Config:
        hasher_name = getenv("HASH_RING_HASHER", DEFAULT_HASHER.name)
        try:
            hasher = DefaultHasher[hasher_name.upper()]
        except KeyError:
            known = ", ".join(h.name for h in DefaultHasher)
            raise ConfigError(
                f"Unknown hasher {hasher_name!r}, expected one of: {known}"
            ) from None

        nodes_str = getenv("HASH_RING_NODES", "")
        nodes = [
            SimpleNode(label.strip()) for label in nodes_str.split(",") if label.strip()
        ]

        name = getenv("HASH_RING_NAME")
        ring = RingConfig(
            name=name if name else generate_name(),
            hasher=hasher,
            partition_rate=_int_from_env(
                "HASH_RING_PARTITION_RATE", DEFAULT_PARTITION_RATE
            ),
            nodes=nodes,
        )

        return cls(
            ring=ring,
            replicas=_int_from_env("HASH_RING_REPLICAS", 1),
            log_level=getenv("LOG_LEVEL", "INFO").upper(),
        )


def _int_from_env(name: str, default: int) -> int:
    raw = getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
