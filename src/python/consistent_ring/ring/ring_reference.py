"""Ring reference — the atomically swapped "current ring".

Rings are immutable, so sharing one between threads needs no locking.
What does need coordination is replacing the shared ring with a new
snapshot.  :class:`RingReference` holds the current snapshot and
serializes writers; readers just call :meth:`RingReference.get` and keep
using whatever snapshot they got.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .hash_ring import HashRing

logger = logging.getLogger(__name__)


class RingReference:
    """Thread-safe holder of the current :class:`HashRing`.

    The version is bumped every time a different snapshot is published.

    Parameters:
        ring: The initial snapshot.
    """

    def __init__(self, ring: HashRing) -> None:
        self._lock = threading.Lock()
        self._ring = ring
        self._version = 0

    # ── Properties ────────────────────────────────────────────────

    @property
    def version(self) -> int:
        return self._version

    # ── Query ─────────────────────────────────────────────────────

    def get(self) -> HashRing:
        """Return the current snapshot."""
        return self._ring

    # ── Mutation ──────────────────────────────────────────────────

    def set(self, ring: HashRing) -> None:
        """Unconditionally publish ``ring``."""
        with self._lock:
            self._publish(ring)

    def compare_and_set(self, expected: HashRing, ring: HashRing) -> bool:
        """Publish ``ring`` only if the current snapshot is ``expected``.

        Returns:
            True if ``ring`` was published.
        """
        with self._lock:
            if self._ring is not expected:
                return False
            self._publish(ring)
            return True

    def update(self, mutation: Callable[[HashRing], HashRing]) -> HashRing:
        """Apply ``mutation`` to the current snapshot and publish the result.

        Writers are serialized, so concurrent updates are never lost.

        Example::

            reference.update(lambda ring: ring.add_weighted_node("node4", 2))

        Returns:
            The published snapshot.
        """
        with self._lock:
            ring = mutation(self._ring)
            self._publish(ring)
            return ring

    def _publish(self, ring: HashRing) -> None:
        if ring is self._ring:
            return
        self._ring = ring
        self._version += 1
        logger.info(
            "Hash ring updated to version %d (%d nodes)",
            self._version,
            ring.size(),
        )
