"""Ordered hash keys.

The ring only needs a strict total order over hash outputs, so the key
representation is pluggable.  Two concrete forms are provided:

* :class:`Uint32HashKey`: 4 digest bytes, little-endian unsigned.
  Cheap to build and compare, with a higher collision rate.
* :class:`Int64PairHashKey`: 16 digest bytes split into two signed
  little-endian 64-bit halves, ordered by ``(high, low)``.

Concrete keys are frozen dataclasses with generated ordering, so they
work directly with ``sorted`` and ``bisect``.  Keys of different
concrete types are not comparable.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import ClassVar

from ..exceptions import InvalidLengthError


class HashKey(abc.ABC):
    """A totally ordered value derived from raw hash bytes."""

    WIDTH: ClassVar[int]
    """Number of digest bytes consumed by :meth:`from_bytes`."""

    @classmethod
    @abc.abstractmethod
    def from_bytes(cls, data: bytes) -> HashKey:
        """Build a key from the leading ``WIDTH`` bytes of ``data``."""
        ...

    def less(self, other: HashKey) -> bool:
        return self < other


@dataclass(frozen=True, order=True)
class Uint32HashKey(HashKey):
    """Unsigned 32-bit key read little-endian from 4 digest bytes."""

    WIDTH: ClassVar[int] = 4

    value: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Uint32HashKey:
        if len(data) < cls.WIDTH:
            raise InvalidLengthError(cls.WIDTH, len(data))
        return cls(int.from_bytes(data[:4], byteorder="little", signed=False))


@dataclass(frozen=True, order=True)
class Int64PairHashKey(HashKey):
    """128-bit key made of two signed 64-bit halves.

    Bytes 0..8 (little-endian) form ``high`` and bytes 8..16 form
    ``low``; ordering is lexicographic on ``(high, low)``.
    """

    WIDTH: ClassVar[int] = 16

    high: int
    low: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Int64PairHashKey:
        if len(data) < cls.WIDTH:
            raise InvalidLengthError(cls.WIDTH, len(data))
        return cls(
            high=int.from_bytes(data[:8], byteorder="little", signed=True),
            low=int.from_bytes(data[8:16], byteorder="little", signed=True),
        )
