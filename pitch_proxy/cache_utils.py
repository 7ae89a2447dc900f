"""Cache utilities for proxy response caching.

Provides deterministic cache key computation for the response cache.
"""
from __future__ import annotations

import hashlib
import json


def compute_cache_key(*parts: str | None) -> str:
    """
    Compute deterministic cache key from request parameters.

    Key = SHA256(json([part, ...]))

    IMPORTANT INVARIANTS:
    - No normalization: case and whitespace differences produce different keys
    - None is hashed as the empty string
    - Parts are JSON-encoded, so a separator inside one part can't shift
      text into its neighbour

    Args:
        *parts: Request parameters in a fixed order, usually led by the
            endpoint name (e.g., "gemini", prompt, type, instruction)

    Returns:
        64-character hex string (SHA-256 hash)
    """
    # ASCII-escaped so lone surrogates in user text still encode
    raw = json.dumps(["" if p is None else str(p) for p in parts])
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def gemini_cache_key(prompt: str | None, type_: str, system_instruction: str | None) -> str:
    return compute_cache_key("gemini", prompt, type_, system_instruction)


def pexel_cache_key(query: str | None) -> str:
    # items (per_page) is intentionally left out of the key
    return compute_cache_key("pexel", query)
