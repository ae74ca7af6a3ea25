from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from pytest import fixture

from hashring.nodes import SimpleNode
from hashring.ring import HashRing

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping


class StubHasher:
    """Hasher backed by a fixed ``(key, seed) -> value`` table."""

    def __init__(self, table: Mapping[tuple[str, int], int]) -> None:
        self._table = dict(table)
        self.calls: list[tuple[str, int]] = []

    def hash(self, key: str, seed: int) -> int:
        self.calls.append((key, seed))
        return self._table[(key, seed)]

    def __repr__(self) -> str:
        return "StubHasher"


def slot_table(**slots: int) -> dict[tuple[str, int], int]:
    """Build seed-0 entries, e.g. ``slot_table(k15=15)``."""
    return {(key, 0): value for key, value in slots.items()}


SCENARIO_TABLE: dict[tuple[str, int], int] = {
    ("a:0", 0): 10,
    ("a:1", 0): 40,
    ("a:2", 0): 70,
    ("b:0", 0): 20,
    ("b:1", 0): 50,
    ("b:2", 0): 80,
    ("c:0", 0): 30,
    ("c:1", 0): 60,
    ("c:2", 0): 85,
    **slot_table(k15=15, k45=45, k82=82, k86=86, k90=90, k10=10, k0=0),
    ("neg", 0): -55,
}


@fixture
def node_a() -> SimpleNode:
    return SimpleNode("a")


@fixture
def node_b() -> SimpleNode:
    return SimpleNode("b")


@fixture
def node_c() -> SimpleNode:
    return SimpleNode("c")


@fixture
def stub_hasher() -> StubHasher:
    return StubHasher(SCENARIO_TABLE)


@fixture
def stub_ring(stub_hasher: StubHasher) -> HashRing:
    return HashRing("stub", stub_hasher, partition_rate=3)


@fixture
def log_messages() -> Generator[list[str], None, None]:
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
