"""Configures pytest further: speed tiers and the seed of the deterministic random source."""
import pytest

from rsacore.entropy import SeededRandomSource
from rsacore.rsa import Keypair


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")
    parser.addoption("--run-extreme", action="store_true", default=False, help="run extreme value extremely slow tests")
    parser.addoption("--seed", type=int, default=20251018, help="seed for the seeded_source fixture")


def pytest_collection_modifyitems(config, items):
    skipdict = {}
    if config.getoption("--skip-slow"):
        skipdict["slow"] = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    if not config.getoption("--run-extreme"):
        skipdict["extreme"] = pytest.mark.skip(reason="Extreme test: needs --run-extreme option")
    if not skipdict:
        return
    for item in items:
        for k, v in skipdict.items():
            if k in item.keywords:
                item.add_marker(v)


@pytest.fixture
def seeded_source(request) -> SeededRandomSource:
    """A fresh deterministic random source per test."""
    return SeededRandomSource(request.config.getoption("--seed"))


@pytest.fixture(scope="session")
def textbook_keypair() -> Keypair:
    """The classic p=61, q=53, e=17 example: n=3233, d=2753."""
    return Keypair(61, 53, 17)
