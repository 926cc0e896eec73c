"""Hash function adapter — turns strings into ordered hash keys.

A :class:`HashFunction` composes a digest (``bytes -> bytes``) with a
key factory (``bytes -> HashKey``).  One digest can feed several ring
placements: the digest is cut into ``windows`` disjoint slices of
``key_width`` bytes and each slice becomes one key.

The pipeline is validated when the function is created by pushing a
canary input through it, so a misconfigured digest or key factory
fails at construction instead of deep inside a lookup.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..exceptions import HashFunctionError, HashRingError, InvalidHashOutputError, InvalidLengthError
from ..keys import HashKey

logger = logging.getLogger(__name__)

# Input used to validate a hash function before it is handed to a ring
CANARY_INPUT = "consistent-ring-canary"

DigestFunc = Callable[[bytes], bytes]
KeyFactory = Callable[[bytes], HashKey]


class HashFunction:
    """Maps string keys to :class:`HashKey` values.

    Parameters:
        digest: Function producing raw digest bytes for an input.
        key_factory: Function building a key from ``key_width`` bytes.
        key_width: Number of digest bytes consumed per key.
        windows: Number of keys derived from a single digest when
            placing virtual nodes.  Lookups always use the first window.
        name: Human readable name used in logs and ``repr``.

    Raises:
        InvalidHashOutputError: If the canary input cannot be turned
            into ``windows`` valid keys.
    """

    def __init__(
        self,
        digest: DigestFunc,
        key_factory: KeyFactory,
        key_width: int,
        windows: int = 1,
        name: str = "custom",
    ) -> None:
        if key_width < 1:
            raise ValueError("key_width must be >= 1")
        if windows < 1:
            raise ValueError("windows must be >= 1")
        self._digest = digest
        self._key_factory = key_factory
        self._key_width = key_width
        self._windows = windows
        self._name = name
        self._validate()

    # ── Properties ────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def key_width(self) -> int:
        return self._key_width

    @property
    def windows(self) -> int:
        return self._windows

    # ── Hashing ───────────────────────────────────────────────────

    def key_for(self, key: str) -> HashKey:
        """Return the lookup key for ``key`` (first digest window)."""
        return self._run(key, 1)[0]

    def virtual_keys(self, label: str) -> list[HashKey]:
        """Return one key per digest window for a virtual node label."""
        return self._run(label, self._windows)

    def _run(self, key: str, windows: int) -> list[HashKey]:
        try:
            return self._derive(key.encode("utf-8"), windows)
        except Exception as e:
            raise HashFunctionError(key, str(e)) from e

    def _derive(self, data: bytes, windows: int) -> list[HashKey]:
        digest = self._digest(data)
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            raise InvalidHashOutputError(
                f"digest returned {type(digest).__name__}, expected bytes"
            )
        width = self._key_width
        needed = width * windows
        if len(digest) < needed:
            raise InvalidLengthError(needed, len(digest))

        keys: list[HashKey] = []
        for i in range(windows):
            key = self._key_factory(bytes(digest[i * width:(i + 1) * width]))
            if not isinstance(key, HashKey):
                raise InvalidHashOutputError(
                    f"key factory returned {type(key).__name__}, expected HashKey"
                )
            keys.append(key)
        return keys

    def _validate(self) -> None:
        try:
            self._derive(CANARY_INPUT.encode("utf-8"), self._windows)
        except InvalidHashOutputError:
            raise
        except HashRingError as e:
            raise InvalidHashOutputError(e.message) from e
        except Exception as e:
            raise InvalidHashOutputError(str(e)) from e
        logger.debug(
            "Validated hash function %s (key_width=%d, windows=%d)",
            self._name,
            self._key_width,
            self._windows,
        )

    def __repr__(self) -> str:
        return (
            f"HashFunction(name={self._name!r}, key_width={self._key_width}, "
            f"windows={self._windows})"
        )
