"""Consistent Ring — weighted consistent hashing for client-side sharding.

Maps string keys to one node, or to an ordered list of distinct
replica nodes, so that adding or removing a node only remaps a small
fraction of keys.  Rings are immutable snapshots: every mutation
returns a new ring and leaves the old one usable.

Quick Start::

    from consistent_ring import HashRing, RingReference

    ring = HashRing(["10.0.0.1:9100", "10.0.0.2:9100", "10.0.0.3:9100"])
    owner = ring.get_node("user:42")
    replicas = ring.get_nodes("user:42", 2)

    # Weighted nodes
    ring = HashRing.with_weights({"big": 3, "small": 1})

    # Custom hash function
    from consistent_ring import HashDigest
    ring = HashRing.with_hash(["a", "b"], HashDigest.sha256().int64_pair_hash())

    # Share the current ring between threads
    current = RingReference(ring)
    current.update(lambda r: r.add_node("c"))
"""

from .exceptions import (
    HashFunctionError,
    HashRingError,
    InvalidHashFunctionError,
    InvalidHashOutputError,
    InvalidLengthError,
    RingInconsistencyError,
)
from .hashing import DEFAULT_HASH_FUNCTION, HashDigest, HashFunction
from .keys import HashKey, Int64PairHashKey, Uint32HashKey
from .models import RingSummary
from .ring import VIRTUAL_NODE_FACTOR, HashRing, RingReference

__all__ = [
    # Main entry points
    "HashRing",
    "RingReference",
    # Hashing
    "DEFAULT_HASH_FUNCTION",
    "HashDigest",
    "HashFunction",
    "HashKey",
    "Int64PairHashKey",
    "Uint32HashKey",
    "VIRTUAL_NODE_FACTOR",
    # Models
    "RingSummary",
    # Exceptions
    "HashFunctionError",
    "HashRingError",
    "InvalidHashFunctionError",
    "InvalidHashOutputError",
    "InvalidLengthError",
    "RingInconsistencyError",
]
