from __future__ import annotations

from pytest import fixture, mark

from hashring.hashers import DefaultHasher
from hashring.nodes import SimpleNode
from hashring.ring import HashRing

KEYS = [f"key-{i}" for i in range(2000)]


class TestLocateScenario:
    @fixture
    def ring(self, stub_ring: HashRing) -> HashRing:
        stub_ring.add_all([SimpleNode("a"), SimpleNode("b")])
        return stub_ring

    def test_ceiling_lookup(self, ring: HashRing) -> None:
        assert ring.locate("k15") == SimpleNode("b")

    def test_exact_slot_hit(self, ring: HashRing) -> None:
        assert ring.locate("k10") == SimpleNode("a")

    def test_wraps_past_largest_slot(self, ring: HashRing) -> None:
        assert ring.locate("k90") == SimpleNode("a")

    def test_below_smallest_slot(self, ring: HashRing) -> None:
        assert ring.locate("k0") == SimpleNode("a")

    def test_negative_hash_uses_absolute_value(self, ring: HashRing) -> None:
        assert ring.locate("neg") == SimpleNode("a")

    def test_locate_nodes_forward_scan(self, ring: HashRing) -> None:
        assert ring.locate_nodes("k45", 2) == {SimpleNode("b"), SimpleNode("a")}
        assert ring.locate_nodes("k45", 1) == {SimpleNode("b")}

    def test_locate_none_key(self, ring: HashRing) -> None:
        assert ring.locate(None) is None
        assert ring.locate_nodes(None, 2) == set()

    def test_locate_nodes_non_positive_count(self, ring: HashRing) -> None:
        assert ring.locate_nodes("k45", 0) == set()
        assert ring.locate_nodes("k45", -3) == set()


class TestLocateWraparound:
    @fixture
    def ring(self, stub_ring: HashRing) -> HashRing:
        # slots: 10a 20b 30c 40a 50b 60c 70a 80b 85c
        stub_ring.add_all([SimpleNode("a"), SimpleNode("b"), SimpleNode("c")])
        return stub_ring

    def test_locate_nodes_wraps_to_start(self, ring: HashRing) -> None:
        assert ring.locate_nodes("k86", 2) == {SimpleNode("a"), SimpleNode("b")}

    def test_locate_nodes_forward_then_wrap(self, ring: HashRing) -> None:
        assert ring.locate_nodes("k82", 2) == {SimpleNode("c"), SimpleNode("a")}

    def test_count_covering_all_nodes(self, ring: HashRing) -> None:
        everyone = {SimpleNode("a"), SimpleNode("b"), SimpleNode("c")}

        assert ring.locate_nodes("k45", 3) == everyone
        assert ring.locate_nodes("k45", 10) == everyone

    def test_removing_owner_of_largest_slot(self, ring: HashRing) -> None:
        assert ring.locate("k82") == SimpleNode("c")

        ring.remove(SimpleNode("c"))

        assert ring.locate("k82") == SimpleNode("a")
        assert ring.locate("k86") == SimpleNode("a")
        assert ring.locate_nodes("k82", 1) == {SimpleNode("a")}


class TestLocateEmptyRing:
    def test_locate_on_empty_ring(self) -> None:
        ring = HashRing("empty", DefaultHasher.MURMUR_3, partition_rate=10)

        assert ring.locate("any-key") is None
        assert ring.locate_nodes("any-key", 3) == set()

    def test_locate_after_removing_last_node(self) -> None:
        ring = HashRing("empty", DefaultHasher.MURMUR_3, partition_rate=10)
        ring.add(SimpleNode("only"))
        ring.remove(SimpleNode("only"))

        assert ring.locate("any-key") is None


class TestLocateProperties:
    @fixture
    def ring(self) -> HashRing:
        ring = HashRing("props", DefaultHasher.MURMUR_3, partition_rate=100)
        ring.add_all(SimpleNode(f"node-{i}") for i in range(5))
        return ring

    def test_single_node_gets_everything(self) -> None:
        ring = HashRing("solo", DefaultHasher.MURMUR_3, partition_rate=10)
        ring.add(SimpleNode("node-1"))

        assert {ring.locate(key) for key in KEYS[:100]} == {SimpleNode("node-1")}

    def test_deterministic(self, ring: HashRing) -> None:
        first = [ring.locate(key) for key in KEYS]
        second = [ring.locate(key) for key in KEYS]

        assert first == second

    def test_same_nodes_same_placement(self, ring: HashRing) -> None:
        other = HashRing("other", DefaultHasher.MURMUR_3, partition_rate=100)
        other.add_all(SimpleNode(f"node-{i}") for i in reversed(range(5)))

        assert [ring.locate(k) for k in KEYS] == [other.locate(k) for k in KEYS]

    def test_keys_spread_across_nodes(self, ring: HashRing) -> None:
        owners = {ring.locate(key) for key in KEYS}

        assert owners == ring.get_nodes()

    @mark.parametrize("count", [1, 2, 3, 4, 5, 6, 50])
    def test_replica_count_bound(self, ring: HashRing, count: int) -> None:
        live = ring.get_nodes()
        for key in KEYS[:200]:
            found = ring.locate_nodes(key, count)
            assert len(found) == min(count, ring.size())
            assert found <= live

    def test_primary_is_first_replica(self, ring: HashRing) -> None:
        for key in KEYS[:200]:
            assert ring.locate(key) in ring.locate_nodes(key, 2)
            assert ring.locate_nodes(key, 1) == {ring.locate(key)}

    def test_removed_node_never_located(self, ring: HashRing) -> None:
        removed = SimpleNode("node-2")
        ring.remove(removed)

        assert not ring.contains(removed)
        assert all(ring.locate(key) != removed for key in KEYS)
        assert all(removed not in ring.locate_nodes(key, 3) for key in KEYS[:200])

    def test_adding_node_moves_about_one_share_of_keys(self, ring: HashRing) -> None:
        before = {key: ring.locate(key) for key in KEYS}
        newcomer = SimpleNode("node-5")
        ring.add(newcomer)
        after = {key: ring.locate(key) for key in KEYS}

        moved = [key for key in KEYS if before[key] != after[key]]
        fraction = len(moved) / len(KEYS)
        expected = 1 / ring.size()
        assert expected * 0.5 < fraction < expected * 1.5
        assert all(after[key] == newcomer for key in moved)

    def test_removing_node_only_moves_its_keys(self, ring: HashRing) -> None:
        before = {key: ring.locate(key) for key in KEYS}
        leaving = SimpleNode("node-0")
        ring.remove(leaving)
        after = {key: ring.locate(key) for key in KEYS}

        for key in KEYS:
            if before[key] != leaving:
                assert after[key] == before[key]
