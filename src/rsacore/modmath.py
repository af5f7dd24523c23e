"""Stateless modular arithmetic on Python's arbitrary-precision integers.

Everything RSA needs from number theory: the Euclidean GCD, the modular inverse through the Extended Euclidean
Algorithm and square-and-multiply modular exponentiation. Key generation and the cipher route every
modular operation through here rather than the builtin three-argument `pow`.

Typical usage example:

    gcd(65537, phi)
    d = mod_inverse(65537, phi)
    c = mod_exp(m, 65537, n)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


def gcd(a: int, b: int) -> int:
    """Implements the iterative Euclidean Algorithm.

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of `a` and `b`.
    """
    while b != 0:
        a, b = b, a % b
    return a


def mod_inverse(a: int, m: int) -> int:
    """Computes the multiplicative inverse of `a` modulo `m`.

    Extended Euclidean Algorithm keeping only the coefficient of `a`. The pair (a, m) is reduced through the
    quotient-remainder relation while the coefficients follow x0' = x1 - q*x0, until `a` drops to 1.

    Args:
        a: The number to invert. Reduced modulo `m` first.
        m: The modulus. Must be >= 1.

    Returns:
        x in [0, m) such that a*x = 1 (mod m). 0 when `m` is 1.

    Raises:
        ValueError: If `m` < 1 or `a` and `m` are not coprime.
    """
    if m < 1:
        raise ValueError("Modulus must be >= 1")
    if m == 1:
        return 0
    m0 = m
    a %= m
    x0, x1 = 0, 1
    while a > 1:
        if m == 0:
            raise ValueError("Arguments are not coprime, no modular inverse exists")
        q = a // m
        a, m = m, a % m
        x0, x1 = x1 - q * x0, x0
    if a != 1:
        raise ValueError("Arguments are not coprime, no modular inverse exists")
    if x1 < 0:
        x1 += m0
    return x1


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """Square-and-multiply modular exponentiation.

    Walks the exponent from its least significant bit. Set bits multiply the accumulator by the current power
    of the base, every step squares that power.

    Args:
        base: The base. Reduced modulo `modulus` first.
        exponent: The exponent. Must be >= 0.
        modulus: The modulus. Must be >= 1.

    Returns:
        base**exponent mod modulus.

    Raises:
        ValueError: If `exponent` is negative or `modulus` < 1.
    """
    if exponent < 0:
        raise ValueError("Exponent must be >= 0")
    if modulus < 1:
        raise ValueError("Modulus must be >= 1")
    result = 1 % modulus  # x**0 mod 1 is 0, not 1.
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result
