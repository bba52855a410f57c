"""
Shared fixtures for urlsigner tests.
"""

import hashlib
from datetime import datetime, timezone
from urllib.parse import SplitResult

import pytest

from urlsigner import SignerConfig, SignerProvider, create_signer

PROVIDER_PRIVATE_KEY = "dev"

# 2019-03-27 12:00:00 UTC
FIXED_NOW = datetime(2019, 3, 27, 12, 0, 0, tzinfo=timezone.utc)


class MutableClock:
    """Clock whose current time can be moved by tests."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now
        self.calls = 0

    def __call__(self) -> datetime:
        self.calls += 1
        return self.now


@pytest.fixture
def clock():
    """Provide a controllable clock set to FIXED_NOW."""
    return MutableClock()


@pytest.fixture
def signer():
    """Provide a signer with the default configuration and the wall clock."""
    return create_signer(PROVIDER_PRIVATE_KEY)


@pytest.fixture
def fixed_signer(clock):
    """Provide a signer whose clock is frozen at FIXED_NOW."""
    config = SignerConfig(PROVIDER_PRIVATE_KEY, algorithm=hashlib.sha256, clock=clock)
    return SignerProvider(config)


@pytest.fixture
def host_only_url():
    return SplitResult("https", "app.dev", "", "", "")


@pytest.fixture
def query_only_url():
    return SplitResult("", "", "", "a=2&b=3", "")


@pytest.fixture
def host_and_query_url():
    return SplitResult("https", "app.dev", "", "a=2&b=3", "")


@pytest.fixture
def host_and_query_sorted_url():
    return SplitResult("https", "app.dev", "", "a=2&z=3", "")
