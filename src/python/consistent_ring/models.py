"""Data models for the consistent hashing ring.

All models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RingSummary(BaseModel):
    """Read-only description of a ring snapshot."""

    hash_function: str
    """Name of the hash function used to place virtual nodes."""

    virtual_node_factor: int
    """Multiplier used when computing virtual node counts."""

    nodes: list[str] = Field(default_factory=list)
    """Distinct node identifiers in ring order."""

    weights: dict[str, int] = Field(default_factory=dict)
    """Mapping of node → weight."""

    virtual_nodes: dict[str, int] = Field(default_factory=dict)
    """Mapping of node → number of virtual node labels placed."""

    key_count: int = 0
    """Number of entries in the sorted key list."""

    collisions: int = 0
    """Number of keys whose owner was overwritten by a later placement."""

    @property
    def total_weight(self) -> int:
        return sum(self.weights.values())
