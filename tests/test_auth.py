"""Tests for bearer token authentication."""
from __future__ import annotations

import time

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from conftest import APP_ID

from pitch_proxy.auth import TokenVerifier, extract_bearer_token
from pitch_proxy.error_codes import TOKEN_INVALID, TOKEN_MISSING
from pitch_proxy.errors import AuthError


@pytest.fixture
def verifier(signing_key):
    return TokenVerifier(APP_ID, lambda token: signing_key.public_key())


class TestExtractBearerToken:

    def test_valid_header(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "abc"])
    def test_rejects_missing_or_malformed(self, header):
        with pytest.raises(AuthError) as excinfo:
            extract_bearer_token(header)
        assert excinfo.value.code == TOKEN_MISSING


class TestTokenVerifier:

    def test_valid_token(self, verifier, make_token):
        ctx = verifier.verify(make_token())
        assert ctx.app_id == APP_ID
        assert ctx.user_id == "user-123"
        assert ctx.brand_id == "brand-456"

    def test_wrong_audience(self, verifier, make_token):
        with pytest.raises(AuthError) as excinfo:
            verifier.verify(make_token(aud="someone-else"))
        assert excinfo.value.code == TOKEN_INVALID

    def test_expired(self, verifier, make_token):
        with pytest.raises(AuthError):
            verifier.verify(make_token(exp=int(time.time()) - 10))

    def test_missing_user_claim(self, verifier, make_token):
        with pytest.raises(AuthError, match="userId"):
            verifier.verify(make_token(userId=None))

    def test_signed_by_other_key(self, verifier):
        import jwt

        other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        token = jwt.encode({"aud": APP_ID, "userId": "u", "brandId": "b"}, other, algorithm="RS256")
        with pytest.raises(AuthError):
            verifier.verify(token)

    def test_garbage_token(self, verifier):
        with pytest.raises(AuthError):
            verifier.verify("not-a-jwt")

    def test_unsigned_token_rejected(self, verifier):
        import jwt

        token = jwt.encode({"aud": APP_ID, "userId": "u", "brandId": "b"}, None, algorithm="none")
        with pytest.raises(AuthError):
            verifier.verify(token)


class TestAuthOnRoutes:

    @pytest.mark.parametrize("path,body", [
        ("/gemini", {"prompt": "idea"}),
        ("/pexel", {"query": "cat", "items": 5}),
    ])
    def test_missing_token_is_401(self, client, gemini_vendor, pexels_vendor, cache, path, body):
        resp = client.post(path, json=body)

        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthorized"
        assert "X-Request-ID" in resp.headers
        # Rejected before any cache lookup or vendor call
        assert gemini_vendor.calls == []
        assert pexels_vendor.calls == []
        assert len(cache) == 0

    def test_invalid_token_is_401(self, client, gemini_vendor, make_token):
        token = make_token(aud="wrong-app")
        resp = client.post("/gemini", json={"prompt": "idea"}, headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401
        assert gemini_vendor.calls == []

    def test_health_does_not_need_token(self, client):
        assert client.get("/health").status_code == 200
