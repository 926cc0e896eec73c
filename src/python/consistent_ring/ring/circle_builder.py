"""Circle builder — places virtual nodes on the hash ring.

Each node receives a number of virtual node labels proportional to its
share of the total weight::

    count = floor(VIRTUAL_NODE_FACTOR * node_count * weight / total_weight)

Label ``j`` of node ``n`` is ``"n-j"``; every key the hash function
derives from that label is placed on the ring and owned by ``n``.

This module is stateless: it reads its inputs and returns a freshly
built :class:`Circle`.  Nothing is published until the key list is
fully sorted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import time
from types import MappingProxyType
from typing import Mapping, Sequence

from prometheus_client import Counter, Histogram

from ..hashing import HashFunction
from ..keys import HashKey

logger = logging.getLogger(__name__)

# Virtual node labels per node when all weights are equal
VIRTUAL_NODE_FACTOR = 40
DEFAULT_WEIGHT = 1

RING_BUILD_COUNTER = Counter("hash_ring_build_total", "Total number of ring snapshots built")
RING_BUILD_HISTOGRAM = Histogram("hash_ring_build_duration_seconds", "Duration of ring builds in seconds")
RING_KEY_COLLISIONS = Counter("hash_ring_key_collisions_total", "Total number of virtual keys overwritten by a later placement")


@dataclass(frozen=True)
class Circle:
    """The built ring: sorted keys plus ownership.

    Attributes:
        sorted_keys: Strictly ascending virtual node keys.
        owners: Mapping of virtual node key → node.
        virtual_nodes: Mapping of node → number of labels placed.
        collisions: Number of keys that were overwritten.
    """

    sorted_keys: tuple[HashKey, ...]
    owners: Mapping[HashKey, str]
    virtual_nodes: Mapping[str, int]
    collisions: int = 0


def effective_weight(weights: Mapping[str, int], node: str) -> int:
    """Return the weight of ``node``, defaulting absent or non-positive weights."""
    weight = weights.get(node, DEFAULT_WEIGHT)
    return weight if weight > 0 else DEFAULT_WEIGHT


def virtual_node_count(
    weight: int,
    total_weight: int,
    node_count: int,
    factor: int = VIRTUAL_NODE_FACTOR,
) -> int:
    """Number of virtual node labels for a node (before the floor-to-one rule)."""
    return (factor * node_count * weight) // total_weight


def build_circle(
    nodes: Sequence[str],
    weights: Mapping[str, int],
    hash_function: HashFunction,
    virtual_node_factor: int = VIRTUAL_NODE_FACTOR,
) -> Circle:
    """Build a ring for ``nodes``.

    Args:
        nodes: Distinct node identifiers.  The order only matters when
            two virtual keys collide (the later node wins).
        weights: Mapping of node → weight.
        hash_function: Produces the virtual node keys.
        virtual_node_factor: Multiplier for virtual node counts.

    Returns:
        A fully sorted :class:`Circle`.
    """
    start_time = time()
    try:
        total_weight = sum(effective_weight(weights, node) for node in nodes)
        node_count = len(nodes)

        owners: dict[HashKey, str] = {}
        keys: list[HashKey] = []
        counts: dict[str, int] = {}
        collisions = 0

        for node in nodes:
            weight = effective_weight(weights, node)
            count = virtual_node_count(weight, total_weight, node_count, virtual_node_factor)
            if count < 1:
                logger.warning(
                    "Node '%s' (weight %d of %d) rounds down to no virtual nodes; placing one",
                    node,
                    weight,
                    total_weight,
                )
                count = 1
            counts[node] = count

            for j in range(count):
                for key in hash_function.virtual_keys(f"{node}-{j}"):
                    if key in owners:
                        collisions += 1
                        logger.debug(
                            "Virtual key collision: %r moves from '%s' to '%s'",
                            key,
                            owners[key],
                            node,
                        )
                    else:
                        keys.append(key)
                    owners[key] = node

        keys.sort()
        if collisions:
            RING_KEY_COLLISIONS.inc(collisions)

        logger.debug(
            "Built ring with %d nodes and %d virtual keys (%d collisions, hash=%s)",
            node_count,
            len(keys),
            collisions,
            hash_function.name,
        )
        return Circle(
            sorted_keys=tuple(keys),
            owners=MappingProxyType(owners),
            virtual_nodes=MappingProxyType(counts),
            collisions=collisions,
        )
    finally:
        RING_BUILD_COUNTER.inc()
        RING_BUILD_HISTOGRAM.observe(time() - start_time)
