"""Hash function adapters — digest + key representation."""

from .hash_digest import DEFAULT_HASH_FUNCTION, DEFAULT_KEYS_PER_DIGEST, HashDigest, resolve_hash_function
from .hash_function import CANARY_INPUT, HashFunction

__all__ = [
    "CANARY_INPUT",
    "DEFAULT_HASH_FUNCTION",
    "DEFAULT_KEYS_PER_DIGEST",
    "HashDigest",
    "HashFunction",
    "resolve_hash_function",
]
