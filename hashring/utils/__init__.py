from hashring.utils.config import Config, ConfigError, RingConfig
from hashring.utils.metrics import Metrics, MetricsCollector
from hashring.utils.rwlock import ReadWriteLock

__all__ = [
    "Config",
    "ConfigError",
    "RingConfig",
    "Metrics",
    "MetricsCollector",
    "ReadWriteLock",
]
