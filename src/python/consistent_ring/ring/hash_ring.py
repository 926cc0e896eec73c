"""Hash ring — an immutable consistent hashing snapshot.

A :class:`HashRing` is built once, at construction, and never changes
afterwards.  Lookups only read the snapshot and are safe to call from
any number of threads.  The mutation methods (``add_node``,
``remove_node``, ...) never touch the receiver: they copy the node
order and weights, rebuild a brand-new ring and return it, or return
the receiver itself when the change is a no-op.

Publishing the "current" ring to other threads is up to the caller;
see :class:`~consistent_ring.ring.ring_reference.RingReference`.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from collections.abc import Iterable, Mapping

from ..exceptions import RingInconsistencyError
from ..hashing import DEFAULT_HASH_FUNCTION, HashFunction, resolve_hash_function
from ..keys import HashKey
from ..models import RingSummary
from .circle_builder import DEFAULT_WEIGHT, VIRTUAL_NODE_FACTOR, build_circle

logger = logging.getLogger(__name__)

WeightsInput = Mapping[str, int] | Iterable[tuple[str, int]]


def _coerce_weight(weight: int) -> int:
    return weight if weight > 0 else DEFAULT_WEIGHT


def _merge_weights(weights: WeightsInput) -> dict[str, int]:
    # First occurrence fixes the node position, last occurrence the weight
    items = weights.items() if isinstance(weights, Mapping) else weights
    merged: dict[str, int] = {}
    for node, weight in items:
        merged[node] = _coerce_weight(weight)
    return merged


class HashRing:
    """Consistent hashing ring over weighted nodes.

    Parameters:
        nodes: Iterable of node identifiers (a bare ``str`` raises
            ``TypeError``).  Duplicates collapse to their first occurrence.
        weights: Optional mapping of node → weight.  Nodes missing from
            the mapping, or with a weight ``<= 0``, get weight 1.
        hash_function: Hash function for virtual node placement and
            lookups.  Defaults to MD5 with three 32-bit keys per digest.
        virtual_node_factor: Multiplier for virtual node counts.
    """

    def __init__(
        self,
        nodes: Iterable[str] = (),
        weights: Mapping[str, int] | None = None,
        hash_function: HashFunction | None = None,
        virtual_node_factor: int = VIRTUAL_NODE_FACTOR,
    ) -> None:
        if virtual_node_factor < 1:
            raise ValueError("virtual_node_factor must be >= 1")
        if isinstance(nodes, str):
            raise TypeError("nodes must be an iterable of node identifiers, not a str")
        weights = weights or {}
        self._nodes: tuple[str, ...] = tuple(dict.fromkeys(nodes))
        self._weights: dict[str, int] = {
            node: _coerce_weight(weights.get(node, DEFAULT_WEIGHT))
            for node in self._nodes
        }
        self._hash_function = hash_function or DEFAULT_HASH_FUNCTION
        self._virtual_node_factor = virtual_node_factor
        self._circle = build_circle(
            self._nodes,
            self._weights,
            self._hash_function,
            self._virtual_node_factor,
        )

    # ── Constructors ──────────────────────────────────────────────

    @classmethod
    def with_weights(
        cls,
        weights: WeightsInput,
        hash_function: HashFunction | None = None,
        virtual_node_factor: int = VIRTUAL_NODE_FACTOR,
    ) -> HashRing:
        """Build a ring whose node set is the keys of ``weights``.

        ``weights`` may also be a sequence of ``(node, weight)`` pairs.
        Non-positive weights are coerced to 1.
        """
        merged = _merge_weights(weights)
        return cls(merged.keys(), merged, hash_function, virtual_node_factor)

    @classmethod
    def with_hash(cls, nodes: Iterable[str], hash_fn: object) -> HashRing:
        """Build a ring with a custom hash function.

        Raises:
            InvalidHashFunctionError: If ``hash_fn`` is missing or unsupported.
            InvalidHashOutputError: If ``hash_fn`` fails validation.
        """
        return cls(nodes, hash_function=resolve_hash_function(hash_fn))

    @classmethod
    def with_hash_and_weights(cls, weights: WeightsInput, hash_fn: object) -> HashRing:
        """Weighted variant of :meth:`with_hash`."""
        return cls.with_weights(weights, hash_function=resolve_hash_function(hash_fn))

    # ── Properties ────────────────────────────────────────────────

    @property
    def nodes(self) -> list[str]:
        return list(self._nodes)

    @property
    def weights(self) -> dict[str, int]:
        return dict(self._weights)

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def virtual_node_factor(self) -> int:
        return self._virtual_node_factor

    def size(self) -> int:
        """Number of distinct nodes (not virtual nodes)."""
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._weights

    def __repr__(self) -> str:
        return f"HashRing(nodes={list(self._nodes)!r}, weights={self._weights!r})"

    # ── Lookup ────────────────────────────────────────────────────

    def gen_key(self, key: str) -> HashKey:
        """Return the ring position key for ``key``."""
        return self._hash_function.key_for(key)

    def get_node_pos(self, key: str) -> int | None:
        """Return the index of the first virtual key strictly greater than
        the hash of ``key``, wrapping to 0 past the end.  ``None`` if the
        ring is empty."""
        sorted_keys = self._circle.sorted_keys
        if not sorted_keys:
            return None
        pos = bisect_right(sorted_keys, self.gen_key(key))
        if pos == len(sorted_keys):
            return 0
        return pos

    def get_node(self, key: str) -> str | None:
        """Return the node owning ``key``, or ``None`` if the ring is empty."""
        pos = self.get_node_pos(key)
        if pos is None:
            return None
        return self._circle.owners[self._circle.sorted_keys[pos]]

    def get_nodes(self, key: str, size: int) -> list[str] | None:
        """Return ``size`` distinct nodes for ``key`` in ring order.

        Returns ``None`` when the ring is empty or ``size`` is negative or
        larger than the number of nodes; never a truncated list.

        Raises:
            RingInconsistencyError: If the whole ring was walked without
                finding ``size`` distinct owners.
        """
        if size < 0 or size > len(self._nodes):
            return None
        pos = self.get_node_pos(key)
        if pos is None:
            return None

        sorted_keys = self._circle.sorted_keys
        owners = self._circle.owners
        key_count = len(sorted_keys)

        found: list[str] = []
        seen: set[str] = set()
        for offset in range(key_count):
            if len(found) == size:
                break
            node = owners[sorted_keys[(pos + offset) % key_count]]
            if node not in seen:
                seen.add(node)
                found.append(node)

        if len(found) < size:
            raise RingInconsistencyError(size, len(found))
        return found

    # ── Mutation (copy-on-write) ──────────────────────────────────

    def add_node(self, node: str) -> HashRing:
        return self.add_weighted_node(node, 1)

    def add_weighted_node(self, node: str, weight: int) -> HashRing:
        """Return a ring with ``node`` added, or this ring if ``weight <= 0``
        or the node is already present."""
        if weight <= 0 or node in self._weights:
            logger.debug("Skipping add of node '%s' (weight %d); ring unchanged", node, weight)
            return self
        weights = dict(self._weights)
        weights[node] = weight
        return self._rebuild(self._nodes + (node,), weights)

    def update_weighted_node(self, node: str, weight: int) -> HashRing:
        """Return a ring with the weight of ``node`` changed, or this ring if
        ``weight <= 0``, the node is absent or the weight is unchanged."""
        if weight <= 0 or node not in self._weights or self._weights[node] == weight:
            logger.debug("Skipping weight update of node '%s' to %d; ring unchanged", node, weight)
            return self
        weights = dict(self._weights)
        weights[node] = weight
        return self._rebuild(self._nodes, weights)

    def remove_node(self, node: str) -> HashRing:
        """Return a ring without ``node``, or this ring if it is absent."""
        if node not in self._weights:
            logger.debug("Skipping removal of absent node '%s'; ring unchanged", node)
            return self
        weights = dict(self._weights)
        del weights[node]
        return self._rebuild(tuple(n for n in self._nodes if n != node), weights)

    def update_with_weights(self, weights: WeightsInput) -> HashRing:
        """Return a ring built from ``weights`` if it differs from the
        current weight mapping (membership or any value), else this ring."""
        merged = _merge_weights(weights)
        if merged == self._weights:
            return self
        return HashRing.with_weights(
            merged,
            hash_function=self._hash_function,
            virtual_node_factor=self._virtual_node_factor,
        )

    def _rebuild(self, nodes: tuple[str, ...], weights: dict[str, int]) -> HashRing:
        logger.debug("Rebuilding ring for %d nodes", len(nodes))
        return HashRing(
            nodes,
            weights,
            hash_function=self._hash_function,
            virtual_node_factor=self._virtual_node_factor,
        )

    # ── Introspection ─────────────────────────────────────────────

    def describe(self) -> RingSummary:
        """Return a serializable summary of this snapshot."""
        return RingSummary(
            hash_function=self._hash_function.name,
            virtual_node_factor=self._virtual_node_factor,
            nodes=list(self._nodes),
            weights=dict(self._weights),
            virtual_nodes=dict(self._circle.virtual_nodes),
            key_count=len(self._circle.sorted_keys),
            collisions=self._circle.collisions,
        )
