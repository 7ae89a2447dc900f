from __future__ import annotations

import json
import time
import urllib.parse
import urllib.request
from typing import Any

from pitch_proxy.error_codes import EMPTY_INPUT, PEXELS_DISABLED
from pitch_proxy.logging_utils import log_event


PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"


def search_photos(
    query: str | None,
    items: int | str | None,
    *,
    api_key: str | None,
    timeout: float = 30.0,
) -> dict[str, Any] | str:
    """
    Search Pexels for photos.

    Contract:
    - Returns "" (and logs) when the key or query is missing
    - Returns the decoded search result ({"photos": [...], "page": ..., ...})
    - Raises on HTTP / network / decode errors

    Args:
        query: Search text, passed through unchanged
        items: Page size (per_page); omitted when not given
        api_key: Pexels API key
        timeout: Socket timeout in seconds
    """
    if not api_key:
        log_event("pexels_disabled", reason="PEXEL_KEY not set", code=PEXELS_DISABLED)
        return ""
    if not query:
        log_event("pexels_empty_input", reason="empty query", code=EMPTY_INPUT)
        return ""

    t0 = time.perf_counter()
    body = _call_pexels(query, items, api_key=api_key, timeout=timeout)
    log_event(
        "pexels_call",
        status="ok",
        latency_ms=int((time.perf_counter() - t0) * 1000),
        photos=len(body.get("photos", [])) if isinstance(body, dict) else 0,
    )

    return body or ""


def _call_pexels(query: str, items: int | str | None, *, api_key: str, timeout: float) -> Any:
    params = {"query": query}
    if items:
        params["per_page"] = str(items)

    req = urllib.request.Request(
        f"{PEXELS_SEARCH_URL}?{urllib.parse.urlencode(params)}",
        headers={
            "Authorization": api_key,
            "Accept": "application/json",
        },
    )

    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return json.loads(resp.read().decode("utf-8"))
