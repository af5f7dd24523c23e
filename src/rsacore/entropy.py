"""Random byte sources and unbiased range sampling.

The random source is a capability handed to whatever needs it instead of a process-wide generator. Production
code uses the CSPRNG behind `secrets`, tests may pass a seeded source to make prime and key generation
reproducible.

Typical usage example:

    src = SystemRandomSource()
    witness = random_in_range(2, w - 2, src)
    same = random_in_range(2, w - 2, SeededRandomSource(1234))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import random
import secrets
import threading
from typing import Protocol


class RandomSource(Protocol):
    """Anything able to hand out random bytes."""

    def get_bytes(self, length: int) -> bytes:
        """Return `length` random bytes."""
        ...


class SystemRandomSource:
    """Cryptographically secure source backed by the operating system's CSPRNG."""

    def get_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)


class SeededRandomSource:
    """Deterministic source for reproducible runs.

    Not suitable for real keys! Mersenne Twister output is predictable once enough of it is observed.

    Attributes:
        seed: The seed the source was created with.
    """

    def __init__(self, seed: int | str | bytes) -> None:
        self.seed = seed
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def get_bytes(self, length: int) -> bytes:
        with self._lock:
            return self._rng.randbytes(length)


def default_source() -> RandomSource:
    """Source used whenever a caller does not provide one."""
    return SystemRandomSource()


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to an unsigned big-endian integer.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int) -> bytes:
    """Converts an integer to a fixed-length unsigned big-endian byte string.

    Args:
        msg: The integer to unmarshal.
        fixedlen: The target length of the byte string.

    Returns:
        The representative bytes. (AKA Octet String)
    """
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def byte_length(value: int) -> int:
    """Length of the minimal unsigned big-endian encoding of `value`."""
    return max(1, (value.bit_length() + 7) // 8)


def random_in_range(low: int, high: int, source: RandomSource | None = None) -> int:
    """Draw a uniformly distributed integer from [low, high].

    Draws as many bytes as the range itself occupies and rejects values outside of it, which keeps the result
    free of modulo bias.

    Args:
        low: Inclusive lower bound.
        high: Inclusive upper bound.
        source: Random source to draw from. Defaults to the system CSPRNG.

    Returns:
        A random integer `low <= x <= high`.

    Raises:
        ValueError: If the range is empty.
    """
    span = high - low + 1
    if span < 1:
        raise ValueError(f"Empty range [{low}, {high}]")
    if source is None:
        source = default_source()
    size = byte_length(span)
    while True:
        value = bytes_to_integer(source.get_bytes(size))
        if value < span:
            return value + low
