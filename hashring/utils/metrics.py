from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from time import perf_counter
from typing import Any

from prometheus_client import Counter, Gauge, Histogram
from prometheus_client.metrics import MetricWrapperBase


@dataclass(slots=True)
class Metrics:
    nodes: Gauge = field(
        default_factory=lambda: Gauge(
            "hashring_nodes",
            "Number of live nodes on the ring",
            ["ring"],
        )
    )
    partitions: Gauge = field(
        default_factory=lambda: Gauge(
            "hashring_partitions",
            "Number of occupied ring slots",
            ["ring"],
        )
    )
    membership_changes: Counter = field(
        default_factory=lambda: Counter(
            "hashring_membership_changes_total",
            "Nodes added to or removed from the ring",
            ["ring", "action"],
        )
    )
    lookups: Counter = field(
        default_factory=lambda: Counter(
            "hashring_lookups_total",
            "Key lookups served by the ring",
            ["ring", "kind"],
        )
    )
    slot_collisions: Counter = field(
        default_factory=lambda: Counter(
            "hashring_slot_collisions_total",
            "Placement attempts that hit an occupied slot",
            ["ring"],
        )
    )
    placement_latency: Histogram = field(
        default_factory=lambda: Histogram(
            "hashring_placement_seconds",
            "Time spent placing the partitions of new nodes",
            ["ring"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
        )
    )


class MetricsCollector:
    """Process-wide ring metrics.

    Every series is labelled by ring name and lives until ``forget`` is
    called for that name, so short-lived rings should be closed.
    """

    _instance: MetricsCollector | None = None
    _metrics: Metrics | None = None
    _series: defaultdict[str, set[tuple[MetricWrapperBase, tuple[str, ...]]]]
    _series_lock: Lock

    def __new__(cls) -> MetricsCollector:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._metrics = Metrics()
            cls._series = defaultdict(set)
            cls._series_lock = Lock()
        return cls._instance

    @property
    def metrics(self) -> Metrics:
        if self._metrics is None:
            self._metrics = Metrics()
        return self._metrics

    def update_ring_size(self, ring: str, nodes: int, partitions: int) -> None:
        self._child(self.metrics.nodes, ring).set(nodes)
        self._child(self.metrics.partitions, ring).set(partitions)

    def record_membership(self, ring: str, action: str, count: int = 1) -> None:
        if count:
            self._child(self.metrics.membership_changes, ring, action).inc(count)

    def record_lookup(self, ring: str, kind: str) -> None:
        self._child(self.metrics.lookups, ring, kind).inc()

    def record_collisions(self, ring: str, count: int) -> None:
        if count:
            self._child(self.metrics.slot_collisions, ring).inc(count)

    def record_placement(self, ring: str, latency: float) -> None:
        self._child(self.metrics.placement_latency, ring).observe(latency)

    def forget(self, ring: str) -> None:
        with self._series_lock:
            for metric, labels in self._series.pop(ring, set()):
                metric.remove(*labels)

    def _child(self, metric: MetricWrapperBase, ring: str, *extra: str) -> Any:
        labels = (ring, *extra)
        with self._series_lock:
            self._series[ring].add((metric, labels))
            return metric.labels(*labels)


class Timer:
    def __init__(self) -> None:
        self._start: float = 0.0
        self.duration: float = 0.0

    def __enter__(self) -> Timer:
        self._start = perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.duration = perf_counter() - self._start
