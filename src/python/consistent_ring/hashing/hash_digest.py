"""Builder for composing a digest with a hash key representation.

Example::

    hash_function = HashDigest.sha256().int64_pair_hash()
    ring = HashRing.with_hash(["node1", "node2"], hash_function)
"""

from __future__ import annotations

import hashlib
from typing import Any, Callable

from ..exceptions import InvalidHashFunctionError
from ..keys import Int64PairHashKey, Uint32HashKey
from .hash_function import DigestFunc, HashFunction, KeyFactory

# Number of 32-bit keys the default ring derives from one MD5 digest
DEFAULT_KEYS_PER_DIGEST = 3


class HashDigest:
    """First half of the builder: wraps a ``bytes -> bytes`` digest.

    Parameters:
        digest: The digest function.
        name: Name used for the resulting :class:`HashFunction`.
    """

    def __init__(self, digest: DigestFunc, name: str = "custom") -> None:
        if not callable(digest):
            raise InvalidHashFunctionError(digest)
        self._digest = digest
        self._name = name

    @classmethod
    def from_hashlib(cls, algorithm: str | Callable[..., Any]) -> HashDigest:
        """Wrap a hashlib algorithm name or a hashlib-style constructor."""
        if isinstance(algorithm, str):
            try:
                hashlib.new(algorithm)
            except ValueError as e:
                raise InvalidHashFunctionError(algorithm) from e
            return cls(lambda data: hashlib.new(algorithm, data).digest(), name=algorithm)
        if callable(algorithm):
            try:
                name = algorithm().name
            except Exception as e:
                raise InvalidHashFunctionError(algorithm) from e
            return cls(lambda data: algorithm(data).digest(), name=name)
        raise InvalidHashFunctionError(algorithm)

    @classmethod
    def md5(cls) -> HashDigest:
        return cls(lambda data: hashlib.md5(data).digest(), name="md5")

    @classmethod
    def sha1(cls) -> HashDigest:
        return cls(lambda data: hashlib.sha1(data).digest(), name="sha1")

    @classmethod
    def sha256(cls) -> HashDigest:
        return cls(lambda data: hashlib.sha256(data).digest(), name="sha256")

    @classmethod
    def sha512(cls) -> HashDigest:
        return cls(lambda data: hashlib.sha512(data).digest(), name="sha512")

    # ── Key representations ───────────────────────────────────────

    def use(self, key_factory: KeyFactory, key_width: int, windows: int = 1) -> HashFunction:
        """Finish the builder with an arbitrary key factory."""
        return HashFunction(
            digest=self._digest,
            key_factory=key_factory,
            key_width=key_width,
            windows=windows,
            name=self._name,
        )

    def uint32_hash(self, windows: int = 1) -> HashFunction:
        return self.use(Uint32HashKey.from_bytes, Uint32HashKey.WIDTH, windows)

    def int64_pair_hash(self, windows: int = 1) -> HashFunction:
        return self.use(Int64PairHashKey.from_bytes, Int64PairHashKey.WIDTH, windows)


def resolve_hash_function(value: object) -> HashFunction:
    """Turn the ``hash_fn`` argument of the ring constructors into a
    validated :class:`HashFunction`.

    Accepts a ready :class:`HashFunction`, a :class:`HashDigest` (finished
    with 128-bit keys), or a hashlib algorithm name or constructor such
    as ``"sha512"`` / ``hashlib.sha512`` (likewise finished with 128-bit
    keys).

    Raises:
        InvalidHashFunctionError: For ``None`` or unsupported values.
        InvalidHashOutputError: If the digest is too short for the keys.
    """
    if value is None:
        raise InvalidHashFunctionError(None)
    if isinstance(value, HashFunction):
        return value
    if isinstance(value, HashDigest):
        return value.int64_pair_hash()
    if isinstance(value, str) or callable(value):
        return HashDigest.from_hashlib(value).int64_pair_hash()
    raise InvalidHashFunctionError(value)


# MD5 digest, three little-endian 32-bit keys from bytes [0:4], [4:8], [8:12]
DEFAULT_HASH_FUNCTION = HashDigest.md5().uint32_hash(windows=DEFAULT_KEYS_PER_DIGEST)
