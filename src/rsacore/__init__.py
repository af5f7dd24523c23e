"""Textbook RSA from first principles.

Provides key generation from two large probable primes and the raw RSA encrypt/decrypt transforms, together with
the arithmetic underneath: Miller-Rabin primality testing, unbiased random sampling, the Euclidean GCD, the modular
inverse and square-and-multiply modular exponentiation.

Typical usage example:

    kp = Keypair.generate()
    c = kp.public_key.encrypt(12345)
    m = kp.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.entropy import random_in_range
from rsacore.entropy import SeededRandomSource
from rsacore.entropy import SystemRandomSource
from rsacore.exceptions import GenerationCancelled
from rsacore.exceptions import KeyGenerationError
from rsacore.exceptions import PrimeGenerationError
from rsacore.exceptions import RangeError
from rsacore.exceptions import RSACoreError
from rsacore.keygen import check_prime
from rsacore.keygen import generate_key_pair
from rsacore.keygen import generate_large_prime
from rsacore.keygen import generate_primes
from rsacore.keygen import is_probable_prime
from rsacore.keygen import PUBLIC_EXPONENT
from rsacore.modmath import gcd
from rsacore.modmath import mod_exp
from rsacore.modmath import mod_inverse
from rsacore.rsa import Keypair
from rsacore.rsa import PublicKey

__version__ = "0.1.0"
__all__ = [
    "Keypair",
    "PublicKey",
    "PUBLIC_EXPONENT",
    "generate_key_pair",
    "generate_primes",
    "generate_large_prime",
    "is_probable_prime",
    "check_prime",
    "gcd",
    "mod_inverse",
    "mod_exp",
    "random_in_range",
    "SystemRandomSource",
    "SeededRandomSource",
    "RSACoreError",
    "RangeError",
    "KeyGenerationError",
    "PrimeGenerationError",
    "GenerationCancelled",
]
