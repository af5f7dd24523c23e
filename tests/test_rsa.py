# pylint: disable=protected-access,missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import math
import threading

from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

import rsacore
from rsacore.entropy import SeededRandomSource
import rsacore.rsa as rsac

TARGET_SIZES = [1024, 2048]
e = 65537


@pytest.fixture(scope="module", params=TARGET_SIZES)
def reference_key(request) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=e, key_size=request.param)


@pytest.fixture(scope="module")
def generated() -> rsac.Keypair:
    return rsac.Keypair.generate(source=SeededRandomSource(1024))


def test_textbook_values(textbook_keypair):
    assert textbook_keypair.n == 3233
    assert textbook_keypair.e == 17
    assert textbook_keypair._phi == 3120
    assert textbook_keypair._d == 2753


def test_textbook_encrypt_decrypt(textbook_keypair):
    assert textbook_keypair.encrypt(65) == 2790
    assert textbook_keypair.public_key.encrypt(65) == 2790
    assert textbook_keypair.decrypt(2790) == 65


def test_textbook_full_roundtrip(textbook_keypair):
    for m in range(textbook_keypair.n):
        assert textbook_keypair.decrypt(textbook_keypair.encrypt(m)) == m


@pytest.mark.parametrize("value", [-1, 3233, 3234, 2**64])
def test_range_enforced(textbook_keypair, value):
    with pytest.raises(rsacore.RangeError):
        textbook_keypair.encrypt(value)
    with pytest.raises(rsacore.RangeError):
        textbook_keypair.public_key.encrypt(value)
    with pytest.raises(rsacore.RangeError):
        textbook_keypair.decrypt(value)


def test_range_error_is_value_error(generated):
    with pytest.raises(ValueError):
        generated.decrypt(generated.n)
    with pytest.raises(ValueError):
        generated.encrypt(-1)


@pytest.mark.parametrize("value", [0, 1, 3232])
def test_range_bounds_accepted(textbook_keypair, value):
    assert textbook_keypair.decrypt(textbook_keypair.encrypt(value)) == value


def test_generated_invariants(generated):
    assert generated._p != generated._q
    assert generated._p.bit_length() == generated._q.bit_length() == 512
    assert generated.n == generated._p * generated._q
    assert generated._phi == (generated._p - 1) * (generated._q - 1)
    assert generated.e == rsacore.PUBLIC_EXPONENT
    assert math.gcd(generated.e, generated._phi) == 1
    assert 0 <= generated._d < generated._phi
    assert (generated.e * generated._d) % generated._phi == 1
    assert generated.n.bit_length() in (1023, 1024)
    assert generated.bsize == 128


@pytest.mark.parametrize("message", [0, 1, 2, 12345, 17092025232642, 2**1000 + 7])
def test_generated_roundtrip(generated, message):
    c = generated.public_key.encrypt(message)
    assert 0 <= c < generated.n
    assert generated.decrypt(c) == message


def test_generated_roundtrip_random(generated, seeded_source):
    for _ in range(20):
        m = rsacore.random_in_range(0, generated.n - 1, seeded_source)
        assert generated.decrypt(generated.encrypt(m)) == m


def test_encrypt_deterministic(generated):
    assert generated.encrypt(424242) == generated.encrypt(424242)
    assert generated.public_key.encrypt(424242) == generated.encrypt(424242)


def test_encrypt_matches_builtin(generated):
    assert generated.encrypt(98765) == pow(98765, generated.e, generated.n)


def test_generate_repeatable():
    a = rsac.Keypair.generate(256, SeededRandomSource(5))
    b = rsac.Keypair.generate(256, SeededRandomSource(5))
    assert a.public_key == b.public_key


@pytest.mark.slow
def test_generate_distinct_keys():
    keys = [rsac.Keypair.generate() for _ in range(3)]
    assert len({kp.n for kp in keys}) == 3
    for kp in keys:
        assert kp._p != kp._q


def test_generate_mocked(mocker):
    p, q = 2**127 - 1, 2**521 - 1
    d = pow(e, -1, (p - 1) * (q - 1))
    gen = mocker.patch("rsacore.keygen.generate_key_pair", return_value=((p * q, e), (p * q, d, p, q)))
    kp = rsac.Keypair.generate(512)
    gen.assert_called_once_with(512, None, None)
    assert kp.n == p * q
    assert kp._d == d
    assert (kp._p, kp._q) == (p, q)


def test_generate_cancelled():
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(rsacore.GenerationCancelled):
        rsac.Keypair.generate(cancel=cancel)


def test_generate_fails_fatally(mocker):
    mocker.patch("rsacore.keygen.generate_primes", return_value=(61, 53))
    # 65537 exceeds phi = 3120.
    with pytest.raises(rsacore.KeyGenerationError):
        rsac.Keypair.generate()


def test_priv_exp_checked():
    assert rsac.Keypair(61, 53, 17, 2753).decrypt(2790) == 65
    with pytest.raises(rsacore.KeyGenerationError):
        rsac.Keypair(61, 53, 17, 2754)
    with pytest.raises(rsacore.KeyGenerationError):
        rsac.Keypair(61, 53, 17, 2753 + 3120)


def test_equal_primes_rejected():
    with pytest.raises(rsacore.KeyGenerationError):
        rsac.Keypair(2**127 - 1, 2**127 - 1)


@pytest.mark.parametrize("p,q,pub", [
    (4, 9, 5),
    (61, 55, 17),
    (1, 53, 17),
    (561, 53, 17),
    ((2**61 - 1) * (2**127 - 1), 2**521 - 1, 65537),
])
def test_composite_primes_rejected(p, q, pub):
    with pytest.raises(rsacore.KeyGenerationError):
        rsac.Keypair(p, q, pub)


def test_public_key_view(generated):
    n, pub = generated.public_key
    assert (n, pub) == (generated.n, generated.e)
    assert isinstance(generated.public_key, rsac.PublicKey)
    assert generated.public_key.bsize == generated.bsize


@pytest.mark.parametrize("attr", ["n", "e", "_d", "_p", "d", "public_key"])
def test_immutable(textbook_keypair, attr):
    with pytest.raises(AttributeError):
        setattr(textbook_keypair, attr, 7)
    with pytest.raises(AttributeError):
        delattr(textbook_keypair, attr)
    assert textbook_keypair._d == 2753


def test_public_key_immutable(textbook_keypair):
    with pytest.raises(AttributeError):
        textbook_keypair.public_key.n = 5  # type: ignore[misc]


def test_private_parts_hidden(generated):
    assert not hasattr(generated, "d")
    assert not hasattr(generated, "p")
    assert str(generated._d) not in repr(generated)
    assert repr(generated) == f"Keypair(n={generated.n}, e=65537)"


def test_instances_independent():
    a = rsac.Keypair(61, 53, 17)
    b = rsac.Keypair(61, 53, 17)
    assert a is not b
    assert a.public_key == b.public_key


def test_against_reference(reference_key):
    privs = reference_key.private_numbers()
    pubs = reference_key.public_key().public_numbers()
    kp = rsac.Keypair(privs.p, privs.q, pubs.e)
    assert kp.n == pubs.n
    lam = math.lcm(privs.p - 1, privs.q - 1)
    assert kp._d % lam == privs.d % lam
    message = 17092025232642
    assert kp.decrypt(pow(message, pubs.e, pubs.n)) == message
    assert pow(kp.encrypt(message), privs.d, pubs.n) == message
