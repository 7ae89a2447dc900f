# tests/conftest.py
from __future__ import annotations

import time

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from pitch_proxy.cache import ResponseCache
from pitch_proxy.config import Settings
from pitch_proxy.main import create_app
from pitch_proxy.proxy import ProxyService


APP_ID = "AAFtestapp"


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVendor:
    """Records calls and returns a canned result (or raises)."""

    def __init__(self, result="vendor answer", exc: Exception | None = None):
        self.result = result
        self.exc = exc
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        if self.exc is not None:
            raise self.exc
        return self.result


@pytest.fixture(scope="session")
def signing_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def make_token(signing_key):
    """Mint a host-style user token signed with the test key."""
    def _make(**overrides):
        claims = {
            "aud": APP_ID,
            "userId": "user-123",
            "brandId": "brand-456",
            "iat": int(time.time()),
            "exp": int(time.time()) + 300,
        }
        claims.update(overrides)
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(claims, signing_key, algorithm="RS256", headers={"kid": "test-kid"})
    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def settings():
    return Settings(app_id=APP_ID, gemini_key="fake-gemini", pexels_key="fake-pexels")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=60, timer=clock)


@pytest.fixture
def gemini_vendor():
    return FakeVendor(result="Plain answer")


@pytest.fixture
def pexels_vendor():
    return FakeVendor(result={"photos": [{"id": 1, "alt": "a cat"}], "page": 1})


@pytest.fixture
def client(settings, cache, gemini_vendor, pexels_vendor, signing_key):
    """TestClient with fake vendors, an injected cache and a local signing key."""
    service = ProxyService(settings, cache, generate=gemini_vendor, search=pexels_vendor)
    app = create_app(
        settings,
        cache=cache,
        service=service,
        key_resolver=lambda token: signing_key.public_key(),
    )
    return TestClient(app)
