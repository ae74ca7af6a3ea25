from __future__ import annotations

from itertools import chain
from typing import TYPE_CHECKING

from loguru import logger
from sortedcontainers import SortedDict

from hashring.nodes import Node
from hashring.partition import Partition
from hashring.utils.config import RingConfig
from hashring.utils.metrics import MetricsCollector, Timer
from hashring.utils.rwlock import ReadWriteLock

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from hashring.hashers import Hasher

COLLISION_WARNING_THRESHOLD = 64


class HashRing:
    """Consistent hash ring with virtual partitions.

    Every node is placed on the ring ``partition_rate`` times. A key belongs
    to the node owning the first partition at or after the key's slot,
    wrapping past the largest slot back to the smallest one. Membership
    changes take the write side of a fair reader/writer lock and lookups take
    the read side, so a reader never sees a half-added or half-removed node.
    """

    def __init__(self, name: str, hasher: Hasher, partition_rate: int) -> None:
        self._name = name
        self._hasher = hasher
        self._partition_rate = partition_rate
        self._lock = ReadWriteLock()
        self._nodes: dict[Node, set[Partition]] = {}
        self._ring: SortedDict[int, Partition] = SortedDict()
        self._metrics = MetricsCollector()

    @classmethod
    def from_config(cls, config: RingConfig | None = None) -> HashRing:
        config = config if config is not None else RingConfig()
        ring = cls(config.name, config.hasher, config.partition_rate)
        ring.add_all(config.nodes)
        logger.info(f"Built {ring!r}")
        return ring

    @property
    def name(self) -> str:
        return self._name

    @property
    def hasher(self) -> Hasher:
        return self._hasher

    @property
    def partition_rate(self) -> int:
        return self._partition_rate

    def add(self, node: Node | None) -> bool:
        if node is None:
            return False
        with self._lock.write_locked():
            if node in self._nodes:
                return False
            with Timer() as timer:
                collisions = self._place_all([node])
            sizes = len(self._nodes), len(self._ring)

        logger.debug(f"Added node {node.key} to ring {self._name}")
        self._record_placement([node], collisions, timer.duration, *sizes)
        return True

    def add_all(self, nodes: Iterable[Node | None] | None) -> bool:
        candidates = list(nodes) if nodes is not None else []
        with self._lock.write_locked():
            fresh = [
                node
                for node in dict.fromkeys(candidates)
                if node is not None and node not in self._nodes
            ]
            if not fresh:
                return False
            with Timer() as timer:
                collisions = self._place_all(fresh)
            sizes = len(self._nodes), len(self._ring)

        logger.debug(
            f"Added {len(fresh)} node(s) to ring {self._name}: "
            f"{', '.join(node.key for node in fresh)}"
        )
        self._record_placement(fresh, collisions, timer.duration, *sizes)
        return True

    def remove(self, node: Node | None) -> bool:
        if node is None:
            return False
        with self._lock.write_locked():
            if node not in self._nodes:
                return False
            self._unplace(node)
            sizes = len(self._nodes), len(self._ring)

        logger.debug(f"Removed node {node.key} from ring {self._name}")
        self._metrics.record_membership(self._name, "remove")
        self._metrics.update_ring_size(self._name, *sizes)
        return True

    def contains(self, node: Node | None) -> bool:
        if node is None:
            return False
        with self._lock.read_locked():
            return node in self._nodes

    def get_nodes(self) -> set[Node]:
        with self._lock.read_locked():
            return set(self._nodes)

    def size(self) -> int:
        with self._lock.read_locked():
            return len(self._nodes)

    def locate(self, key: str | None) -> Node | None:
        """Return the node responsible for ``key``, or None on an empty ring."""
        if key is None:
            return None
        with self._lock.read_locked():
            if not self._nodes:
                return None
            partition = self._locate_partition(self._hash(key))

        self._metrics.record_lookup(self._name, "single")
        return partition.node

    def locate_nodes(self, key: str | None, count: int) -> set[Node]:
        """Return up to ``count`` distinct nodes for ``key``.

        Walks clockwise from the key's slot to the end of the ring, then
        wraps from the start up to the key's slot, collecting distinct owners.
        When ``count`` covers the whole membership every node is returned.
        """
        if key is None or count <= 0:
            return set()
        with self._lock.read_locked():
            if count >= len(self._nodes):
                found = set(self._nodes)
            else:
                slot = self._hash(key)
                found = self._find_nodes(
                    chain(
                        self._ring.irange(minimum=slot),
                        self._ring.irange(maximum=slot, inclusive=(True, False)),
                    ),
                    count,
                )

        self._metrics.record_lookup(self._name, "multi")
        return found

    def close(self) -> None:
        """Drop this ring's metric series; the ring itself stays usable."""
        self._metrics.forget(self._name)

    def __contains__(self, node: object) -> bool:
        return isinstance(node, Node) and self.contains(node)

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return (
            f"HashRing[nodes={len(self._nodes)}, name='{self._name}', "
            f"hasher={self._hasher!r}, partition_rate={self._partition_rate}]"
        )

    def _place_all(self, nodes: list[Node]) -> int:
        """Place every node in ``nodes``; all of them or, on error, none."""
        placed: list[Node] = []
        collisions = 0
        try:
            for node in nodes:
                partitions = self._create_partitions(node)
                self._nodes[node] = set(partitions)
                placed.append(node)
                collisions += self._distribute_partitions(partitions)
        except Exception:
            for node in placed:
                self._unplace(node)
            raise
        return collisions

    def _unplace(self, node: Node) -> None:
        for partition in self._nodes.pop(node):
            if partition.placed:
                del self._ring[partition.slot]

    def _create_partitions(self, node: Node) -> list[Partition]:
        # index order keeps collision resolution independent of str hashing
        return [Partition(index, node) for index in range(self._partition_rate)]

    def _distribute_partitions(self, partitions: list[Partition]) -> int:
        collisions = 0
        for partition in partitions:
            slot, attempts = self._find_slot(partition.partition_key)
            partition.assign_slot(slot)
            self._ring[slot] = partition
            collisions += attempts - 1
        return collisions

    def _find_slot(self, partition_key: str) -> tuple[int, int]:
        # Unbounded: a hasher that never varies with the seed spins here.
        seed = 0
        slot = self._hash(partition_key, seed)
        while slot in self._ring:
            seed += 1
            if seed == COLLISION_WARNING_THRESHOLD:
                logger.warning(
                    f"Partition {partition_key} collided {seed} times on ring "
                    f"{self._name}; hasher {self._hasher!r} may ignore its seed"
                )
            slot = self._hash(partition_key, seed)
        return slot, seed + 1

    def _locate_partition(self, slot: int) -> Partition:
        index = self._ring.bisect_left(slot)
        if index == len(self._ring):
            index = 0
        return self._ring.peekitem(index)[1]

    def _find_nodes(self, slots: Iterator[int], count: int) -> set[Node]:
        found: set[Node] = set()
        for slot in slots:
            found.add(self._ring[slot].node)
            if len(found) >= count:
                break
        return found

    def _hash(self, key: str, seed: int = 0) -> int:
        return abs(self._hasher.hash(key, seed))

    def _record_placement(
        self,
        nodes: list[Node],
        collisions: int,
        latency: float,
        node_count: int,
        partition_count: int,
    ) -> None:
        self._metrics.record_membership(self._name, "add", len(nodes))
        self._metrics.record_collisions(self._name, collisions)
        self._metrics.record_placement(self._name, latency)
        self._metrics.update_ring_size(self._name, node_count, partition_count)
