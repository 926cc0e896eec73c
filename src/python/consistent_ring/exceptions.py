"""Exception hierarchy for the consistent hashing ring."""

from __future__ import annotations


class HashRingError(Exception):
    """Base exception for all hash ring errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


# ── Hash Function Errors ──────────────────────────────────────────

class InvalidHashFunctionError(HashRingError):
    """Raised when a ring is constructed without a usable hash function."""

    def __init__(self, hash_function: object = None) -> None:
        self.hash_function = hash_function
        if hash_function is None:
            msg = "A hash function is required."
        else:
            msg = f"Unsupported hash function: {hash_function!r}"
        super().__init__(msg)


class InvalidHashOutputError(HashRingError):
    """Raised when a hash function cannot produce a valid key from its digest."""

    def __init__(self, reason: str = "") -> None:
        msg = "Hash function output cannot be turned into a hash key."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)


class InvalidLengthError(InvalidHashOutputError):
    """Raised when a key factory receives fewer bytes than it needs."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected at least {expected} bytes, got {actual}")


class HashFunctionError(HashRingError):
    """Raised when a validated hash function fails on a later input."""

    def __init__(self, key: str, reason: str = "") -> None:
        self.key = key
        msg = f"Hash function failed for key '{key}'."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)


# ── Ring Errors ───────────────────────────────────────────────────

class RingInconsistencyError(HashRingError):
    """Raised when the ring holds fewer distinct owners than its node count."""

    def __init__(self, requested: int, found: int) -> None:
        self.requested = requested
        self.found = found
        super().__init__(
            f"Walked the whole ring but found only {found} of {requested} distinct nodes."
        )
