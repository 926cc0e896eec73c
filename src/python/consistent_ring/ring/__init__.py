"""Ring construction, lookup and snapshot publication."""

from .circle_builder import DEFAULT_WEIGHT, VIRTUAL_NODE_FACTOR, Circle, build_circle, virtual_node_count
from .hash_ring import HashRing
from .ring_reference import RingReference

__all__ = [
    "Circle",
    "DEFAULT_WEIGHT",
    "HashRing",
    "RingReference",
    "VIRTUAL_NODE_FACTOR",
    "build_circle",
    "virtual_node_count",
]
