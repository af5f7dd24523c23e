"""Provides the textbook RSA keypair and its encrypt/decrypt transforms.

Encryption is the raw RSA primitive, c = m**e mod n, without padding or randomization: the same message under the
same key always yields the same ciphertext. Keys are immutable values and the private exponent is never exposed.

Typical usage example:

    kp = Keypair.generate()
    n, e = kp.public_key
    c = kp.public_key.encrypt(12345)
    m = kp.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import threading
from typing import Any, NamedTuple

from rsacore import keygen
from rsacore.entropy import RandomSource
from rsacore.exceptions import KeyGenerationError
from rsacore.exceptions import RangeError
from rsacore.modmath import mod_exp


def _c_rsa(value: int, expo: int, mod: int, name: str) -> int:
    """Performs the core RSA operation after checking the representative is in range."""
    if not 0 <= value < mod:
        raise RangeError(name, mod)
    return mod_exp(value, expo, mod)


class PublicKey(NamedTuple):
    """The public half of a keypair, unpacks as `(n, e)`.

    Attributes:
        n: The modulus of the keypair.
        e: The public exponent.
    """
    n: int
    e: int

    @property
    def bsize(self) -> int:
        """Length of the modulus in bytes."""
        return (self.n.bit_length() + 7) // 8

    def encrypt(self, message: int) -> int:
        """Encrypts an int-marshalled message.

        Args:
            message: The message representative, 0 <= message < n.

        Returns:
            The ciphertext, message**e mod n.

        Raises:
            RangeError: If the message is out of range for the key.
        """
        return _c_rsa(message, self.e, self.n, "message")


class Keypair:
    """RSA keypair: two distinct primes and the exponents derived from them.

    Constructed once and never mutated. Only the modulus and the public exponent are reachable from outside,
    decryption is the sole use of the private exponent.

    Attributes:
        n: The modulus of the keypair.
        e: The public exponent.
        public_key: The (n, e) public key view.
    """

    __slots__ = ("_p", "_q", "_n", "_phi", "_e", "_d")

    def __init__(self, p: int, q: int, pub_exp: int = keygen.PUBLIC_EXPONENT, priv_exp: int | None = None) -> None:
        """Initialize and validate the keypair.

        Args:
            p: The private prime 1.
            q: The private prime 2.
            pub_exp: The public exponent. Defaults to 65537.
            priv_exp: The private exponent. Derived from the primes if not provided.

        Raises:
            KeyGenerationError: If the components do not form a valid keypair.
        """
        for prime in (p, q):
            if not keygen.check_prime(prime):
                raise KeyGenerationError(f"Key component {prime} is not a prime.")
        d = keygen.derive_private_exponent(p, q, pub_exp)
        if priv_exp is not None and priv_exp != d:
            raise KeyGenerationError("Private exponent is not the inverse of the public exponent modulo phi.")
        for name, value in (("_p", p), ("_q", q), ("_n", p * q), ("_phi", (p - 1) * (q - 1)), ("_e", pub_exp),
                            ("_d", d)):
            object.__setattr__(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._n}, e={self._e})"

    @property
    def n(self) -> int:
        return self._n

    @property
    def e(self) -> int:
        return self._e

    @property
    def public_key(self) -> PublicKey:
        return PublicKey(self._n, self._e)

    @property
    def bsize(self) -> int:
        """Length of the modulus in bytes."""
        return (self._n.bit_length() + 7) // 8

    def encrypt(self, message: int) -> int:
        """Encrypts with the public half of the keypair. See `PublicKey.encrypt`."""
        return _c_rsa(message, self._e, self._n, "message")

    def decrypt(self, cipher: int) -> int:
        """Decrypts an int-marshalled ciphertext.

        Args:
            cipher: The ciphertext representative, 0 <= cipher < n.

        Returns:
            The message, cipher**d mod n.

        Raises:
            RangeError: If the ciphertext is out of range for the key.
        """
        return _c_rsa(cipher, self._d, self._n, "cipher")

    @classmethod
    def generate(cls,
                 prime_bits: int = keygen.DEFAULT_PRIME_BITS,
                 source: RandomSource | None = None,
                 cancel: threading.Event | None = None) -> "Keypair":
        """Generates a fresh keypair with the public exponent 65537.

        Args:
            prime_bits: The size of each prime. Defaults to 512.
            source: Random source to draw from. Defaults to the system CSPRNG.
            cancel: Optional cancellation token for the prime search.

        Returns:
            A ready-to-use keypair.

        Raises:
            KeyGenerationError: If 65537 is not coprime with phi of the sampled primes.
        """
        (_, pub), (_, d, p, q) = keygen.generate_key_pair(prime_bits, source, cancel)
        return cls(p, q, pub, d)
