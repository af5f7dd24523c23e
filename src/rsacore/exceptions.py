"""Exceptions raised by the RSA core.

Plain argument validation in the arithmetic helpers raises the builtin ValueError. The classes below cover
the failures that belong to RSA itself, so callers can catch them without swallowing unrelated errors.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSACoreError(Exception):
    """Base class of every RSA core failure."""


class RangeError(RSACoreError, ValueError):
    """A message or ciphertext representative lies outside [0, n-1]."""

    def __init__(self, name: str, mod: int) -> None:
        super().__init__(f"{name.capitalize()} representative must be in range [0, n-1]")
        self.name = name
        self.mod = mod


class KeyGenerationError(RSACoreError, RuntimeError):
    """The keypair could not be built, e.g. the public exponent is not coprime with phi."""


class PrimeGenerationError(KeyGenerationError):
    """The bounded prime search ran out of attempts."""


class GenerationCancelled(PrimeGenerationError):
    """The prime search was interrupted through its cancellation token."""
