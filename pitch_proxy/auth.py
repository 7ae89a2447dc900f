"""
Bearer token authentication for proxy routes.

The panel sends the host-issued user token (a JWT signed with the host's
RS256 keys) as `Authorization: Bearer <token>`. A token is accepted only if
its signature checks out against the host's JWKS for our app id, its
audience is our app id, and it names a user and a brand.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import jwt
from fastapi import Request

from pitch_proxy.error_codes import TOKEN_INVALID, TOKEN_MISSING
from pitch_proxy.errors import AuthError
from pitch_proxy.logging_utils import log_event


ALGORITHMS = ["RS256"]

KeyResolver = Callable[[str], Any]


@dataclass(frozen=True)
class AuthContext:
    app_id: str
    user_id: str
    brand_id: str


def jwks_key_resolver(jwks_url: str) -> KeyResolver:
    """Resolve signing keys from the host's JWKS endpoint (keys cached by PyJWKClient)."""
    client = jwt.PyJWKClient(jwks_url, cache_keys=True)

    def resolve(token: str) -> Any:
        return client.get_signing_key_from_jwt(token).key

    return resolve


class TokenVerifier:
    def __init__(self, app_id: str, key_resolver: KeyResolver):
        self.app_id = app_id
        self._resolve_key = key_resolver

    def verify(self, token: str) -> AuthContext:
        """
        Verify a host-issued user token.

        Raises:
            AuthError(TOKEN_INVALID) on bad signature, wrong audience,
            expiry, unknown key id, or missing user/brand claims.
        """
        try:
            key = self._resolve_key(token)
            claims = jwt.decode(token, key, algorithms=ALGORITHMS, audience=self.app_id)
        except jwt.PyJWTError as exc:
            raise AuthError(TOKEN_INVALID, f"Invalid token: {type(exc).__name__}")

        user_id = claims.get("userId")
        brand_id = claims.get("brandId")
        if not user_id or not brand_id:
            raise AuthError(TOKEN_INVALID, "Token is missing userId or brandId")

        return AuthContext(app_id=self.app_id, user_id=user_id, brand_id=brand_id)


def extract_bearer_token(authorization: str | None) -> str:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        raise AuthError(TOKEN_MISSING, "Missing Authorization header")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError(TOKEN_MISSING, "Authorization header must be 'Bearer <token>'")
    return token


def require_user(request: Request) -> AuthContext:
    """
    FastAPI dependency for proxy routes.

    Runs before the route body, so a rejected request never reaches the
    cache or a vendor.
    """
    verifier: TokenVerifier = request.app.state.verifier
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        ctx = verifier.verify(token)
    except AuthError as exc:
        log_event(
            "auth_rejected",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            code=exc.code,
        )
        raise

    return ctx
