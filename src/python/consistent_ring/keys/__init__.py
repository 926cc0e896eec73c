"""Ordered hash key types."""

from .hash_key import HashKey, Int64PairHashKey, Uint32HashKey

__all__ = [
    "HashKey",
    "Int64PairHashKey",
    "Uint32HashKey",
]
