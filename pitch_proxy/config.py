"""Startup configuration.

Read once from the environment (after .env is loaded) into a frozen
Settings object. CANVA_APP_ID is required; vendor keys are optional and
their absence only disables the matching endpoint.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from pitch_proxy.cache import DEFAULT_MAXSIZE, DEFAULT_TTL_SECONDS
from pitch_proxy.errors import ConfigError


JWKS_URL_TEMPLATE = "https://api.canva.com/rest/v1/apps/{app_id}/jwks"

DEFAULT_PORT = 3001
DEFAULT_HOST = "0.0.0.0"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_VENDOR_TIMEOUT_SECONDS = 30


@dataclass(frozen=True)
class Settings:
    app_id: str
    gemini_key: str | None = None
    pexels_key: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    gemini_model: str = DEFAULT_GEMINI_MODEL
    cache_ttl_seconds: int = DEFAULT_TTL_SECONDS
    cache_maxsize: int = DEFAULT_MAXSIZE
    vendor_timeout_seconds: int = DEFAULT_VENDOR_TIMEOUT_SECONDS

    @property
    def jwks_url(self) -> str:
        return JWKS_URL_TEMPLATE.format(app_id=self.app_id)


def _optional(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value


def _int(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = _optional(env, name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"The {name} environment variable must be an integer, got {raw!r}.")
    if value < minimum:
        raise ConfigError(f"The {name} environment variable must be at least {minimum}, got {value}.")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read from. Defaults to os.environ after loading .env.

    Returns:
        Settings

    Raises:
        ConfigError if CANVA_APP_ID is missing or a numeric variable is malformed.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    app_id = _optional(env, "CANVA_APP_ID")
    if app_id is None:
        raise ConfigError(
            "The CANVA_APP_ID environment variable is undefined. Set the variable in the project's .env file."
        )

    return Settings(
        app_id=app_id,
        gemini_key=_optional(env, "GEMINI_KEY"),
        pexels_key=_optional(env, "PEXEL_KEY"),
        host=_optional(env, "CANVA_BACKEND_HOST") or DEFAULT_HOST,
        port=_int(env, "CANVA_BACKEND_PORT", DEFAULT_PORT),
        gemini_model=_optional(env, "GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        cache_ttl_seconds=_int(env, "CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS),
        cache_maxsize=_int(env, "CACHE_MAXSIZE", DEFAULT_MAXSIZE),
        vendor_timeout_seconds=_int(env, "VENDOR_TIMEOUT_SECONDS", DEFAULT_VENDOR_TIMEOUT_SECONDS),
    )
