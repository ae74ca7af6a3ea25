from __future__ import annotations

import sys

from loguru import logger

from hashring.ring import HashRing
from hashring.utils.config import Config, ConfigError

USAGE = "usage: python -m hashring KEY [KEY ...]"
LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def describe(ring: HashRing, key: str, replicas: int) -> str:
    owner = ring.locate(key)
    line = f"{key} -> {owner.key if owner else '<none>'}"
    if replicas > 1:
        labels = sorted(node.key for node in ring.locate_nodes(key, replicas))
        line += f" [{', '.join(labels)}]"
    return line


def main(args: list[str] | None = None) -> int:
    keys = sys.argv[1:] if args is None else args
    if not keys:
        print(USAGE, file=sys.stderr)
        return 2

    try:
        config = Config.from_env()
    except ConfigError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1

    logger.remove()
    logger.add(sys.stderr, level=config.log_level, format=LOG_FORMAT)

    ring = HashRing.from_config(config.ring)
    if not ring.size():
        logger.warning("Ring has no nodes, set HASH_RING_NODES")

    for key in keys:
        print(describe(ring, key, config.replicas))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
