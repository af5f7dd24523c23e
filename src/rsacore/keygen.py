"""Core Key Generation Utility, mainly focusing on the generation of random large primes.

Random odd candidates of an exact bit length are drawn from an injected random source and filtered through trial
division and the Miller-Rabin probabilistic primality test. Two distinct primes are then composed into an RSA
keypair with the fixed public exponent 65537.

Typical usage example:

    get_pre_primes(12000)
    p = generate_large_prime(512)
    (n, e), (n, d, p, q) = generate_key_pair(512)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import threading
import warnings

from rsacore.entropy import bytes_to_integer
from rsacore.entropy import default_source
from rsacore.entropy import random_in_range
from rsacore.entropy import RandomSource
from rsacore.exceptions import GenerationCancelled
from rsacore.exceptions import KeyGenerationError
from rsacore.exceptions import PrimeGenerationError
from rsacore.modmath import gcd
from rsacore.modmath import mod_exp
from rsacore.modmath import mod_inverse

logger = logging.getLogger(__name__)

PUBLIC_EXPONENT: int = 65537
MILLER_RABIN_ROUNDS: int = 10
DEFAULT_PRIME_BITS: int = 512

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_SMALL_PRIMES_BOUND: int = 10000
_ATTEMPT_FACTOR: int = 10


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = _SMALL_PRIMES_BOUND, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    The module level cache is reused unless a greater range is requested, `change` forces it, or it is empty.

    Args:
        n: The number up to which to generate primes. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = _SMALL_PRIMES_BOUND) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Passed to `get_pre_primes()`.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime * prime > no:
            return True
        if no % prime == 0:
            return False
    return True


def is_probable_prime(w: int, k: int = MILLER_RABIN_ROUNDS, source: RandomSource | None = None) -> bool:
    """Perform the Miller-Rabin primality test.

    Writes w - 1 as m * 2**a with m odd, then runs `k` rounds, each with a fresh witness drawn uniformly from
    [2, w - 2]. A prime is never rejected, a composite survives all rounds with probability at most 4**-k.

    Args:
        w: Integer to be tested.
        k: Number of Miller-Rabin rounds to perform. Defaults to 10.
        source: Random source for the witnesses. Defaults to the system CSPRNG.

    Returns:
        True if `w` is probably prime, False otherwise.

    Raises:
        ValueError: If `k` < 1.
    """
    if k < 1:
        raise ValueError("Number of Miller-Rabin rounds must be >= 1")
    if w < 2:
        return False
    if w < 4:
        return True  # 2 and 3, the witness range [2, w - 2] is empty for 3.
    if w % 2 == 0:
        return False
    if source is None:
        source = default_source()
    m = w - 1
    a = 0
    while m % 2 == 0:
        m //= 2
        a += 1
    for _ in range(k):
        b = random_in_range(2, w - 2, source)
        z = mod_exp(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(a - 1):
            z = (z * z) % w
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int,
                k: int = MILLER_RABIN_ROUNDS,
                n: int = _SMALL_PRIMES_BOUND,
                source: RandomSource | None = None) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    Trial division only discards composites early, the verdict for a prime is the Miller-Rabin one.

    Args:
        candidate: The candidate prime to test.
        k: Number of Miller-Rabin rounds to perform. Defaults to 10.
        n: The number up to which to generate primes. Passed to `_trial_division()`.
        source: Random source for the Miller-Rabin witnesses.

    Returns:
        True if `candidate` is probably prime, False otherwise.

    Raises:
        ValueError: If `k` < 1.
    """
    if k < 1:
        raise ValueError("Number of Miller-Rabin rounds must be >= 1")
    if not _trial_division(candidate, n):
        return False
    return is_probable_prime(candidate, k, source)


def generate_large_prime(bits: int,
                         source: RandomSource | None = None,
                         cancel: threading.Event | None = None,
                         attempts: int | None = None) -> int:
    """Generate a probable prime of exactly `bits` bits.

    Each attempt draws `bits // 8` bytes, forces the top bit of the most significant byte (exact length) and the
    low bit of the least significant one (odd) and tests the big-endian result. By the prime number theorem about
    one in every `bits * ln(2) / 2` odd candidates is prime, so the default budget of `10 * bits` attempts is
    only exhausted by a broken random source.

    Args:
        bits: The size of the prime in bits. Must be a positive multiple of 8.
        source: Random source for candidates and witnesses. Defaults to the system CSPRNG.
        cancel: Optional cancellation token. Checked before every attempt.
        attempts: Maximum number of candidates to test. Defaults to `10 * bits`.

    Returns:
        An odd probable prime `p` with `p.bit_length() == bits`.

    Raises:
        ValueError: If `bits` is not a positive multiple of 8.
        GenerationCancelled: If `cancel` got set before a prime was found.
        PrimeGenerationError: If no prime was found within `attempts` candidates.
    """
    if bits < 8 or bits % 8 != 0:
        raise ValueError("Prime size must be a positive multiple of 8 bits.")
    if source is None:
        source = default_source()
    rep_cap = _ATTEMPT_FACTOR * bits if attempts is None else attempts
    for attempt in range(1, rep_cap + 1):
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled(f"Prime search cancelled after {attempt - 1} candidates.")
        byts = bytearray(source.get_bytes(bits // 8))
        byts[0] |= 0x80
        byts[-1] |= 0x01
        candidate = bytes_to_integer(byts)
        if check_prime(candidate, source=source):
            logger.debug("Found %d-bit probable prime after %d candidates", bits, attempt)
            return candidate
    raise PrimeGenerationError(f"Run an improbable {rep_cap} amount of loops with no prime found. "
                               "Check the random number source.")


def generate_primes(bits: int = DEFAULT_PRIME_BITS,
                    source: RandomSource | None = None,
                    cancel: threading.Event | None = None) -> tuple[int, int]:
    """Generates a pair of distinct probable primes.

    Args:
        bits: The size of each prime in bits. Defaults to 512.
        source: Random source to draw from. Defaults to the system CSPRNG.
        cancel: Optional cancellation token, passed on to `generate_large_prime`.

    Returns:
        Two distinct probable primes (p, q) of `bits` bits each.
    """
    if bits < DEFAULT_PRIME_BITS:
        warnings.warn(f"{bits}-bit primes give a trivially factorable modulus! Use for testing only.", RuntimeWarning)
    if source is None:
        source = default_source()
    p = generate_large_prime(bits, source, cancel)
    q = generate_large_prime(bits, source, cancel)
    while p == q:  # (Un)Likely story.
        logger.debug("Second prime equals the first one, resampling")
        q = generate_large_prime(bits, source, cancel)
    return p, q


def derive_private_exponent(p: int, q: int, pub: int = PUBLIC_EXPONENT) -> int:
    """Derives the private exponent for a prime pair.

    Args:
        p: First prime.
        q: Second prime. Must differ from `p`.
        pub: The public exponent. Defaults to 65537.

    Returns:
        d in [0, phi) with pub * d = 1 (mod phi), phi = (p - 1) * (q - 1).

    Raises:
        KeyGenerationError: If the primes are equal, or `pub` is out of (1, phi) or not coprime with phi.
    """
    if p == q:
        raise KeyGenerationError("Primes p and q must be distinct.")
    phi = (p - 1) * (q - 1)
    if not 1 < pub < phi:
        raise KeyGenerationError("Public exponent must lie strictly between 1 and phi.")
    if gcd(pub, phi) != 1:
        raise KeyGenerationError("Public exponent and phi are not coprime. Key generation failed.")
    return mod_inverse(pub, phi)


def generate_key_pair(bits: int = DEFAULT_PRIME_BITS,
                      source: RandomSource | None = None,
                      cancel: threading.Event | None = None) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates an RSA key pair.

    A failing coprimality check between 65537 and phi aborts the generation, there is no retry with new primes.

    Args:
        bits: The size of each prime in bits. Defaults to 512, giving a 1024-bit modulus.
        source: Random source to draw from. Defaults to the system CSPRNG.
        cancel: Optional cancellation token for the prime search.

    Returns:
        A tuple of (public, private) sub-tuples, (modulus, exponent) and (modulus, exponent, p, q).

    Raises:
        KeyGenerationError: If the public exponent is not coprime with phi.
    """
    p, q = generate_primes(bits, source, cancel)
    n = p * q
    d = derive_private_exponent(p, q, PUBLIC_EXPONENT)
    logger.debug("Generated %d-bit modulus", n.bit_length())
    return (n, PUBLIC_EXPONENT), (n, d, p, q)
