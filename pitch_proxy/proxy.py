"""Cache-then-vendor logic behind the proxy routes."""
from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable

from pitch_proxy.auth import AuthContext
from pitch_proxy.cache import ResponseCache
from pitch_proxy.cache_utils import gemini_cache_key, pexel_cache_key
from pitch_proxy.clients.gemini import generate_plain_text
from pitch_proxy.clients.pexels import search_photos
from pitch_proxy.config import Settings
from pitch_proxy.instructions import resolve_type, select_system_instruction
from pitch_proxy.logging_utils import log_event
from pitch_proxy.schemas import GeminiRequest, PexelRequest


GenerateFn = Callable[[str | None, str | None], str]
SearchFn = Callable[[str | None, Any], Any]


class ProxyService:
    """
    Owns the response cache and the vendor callables.

    Vendor callables are blocking and run in a worker thread, bounded by
    settings.vendor_timeout_seconds. Vendor exceptions (including timeouts)
    propagate to the route, which turns them into a generic 500.

    Empty results ("" from a disabled vendor or empty input) are never
    cached, so a lookup only hits on a real vendor answer.

    Concurrent requests for the same key are not coalesced: both miss and
    both call the vendor; the later set wins.
    """

    def __init__(
        self,
        settings: Settings,
        cache: ResponseCache,
        *,
        generate: GenerateFn | None = None,
        search: SearchFn | None = None,
    ):
        self.settings = settings
        self.cache = cache
        self._generate = generate or functools.partial(
            generate_plain_text,
            api_key=settings.gemini_key,
            model=settings.gemini_model,
        )
        self._search = search or functools.partial(
            search_photos,
            api_key=settings.pexels_key,
            timeout=settings.vendor_timeout_seconds,
        )

    async def generate(
        self, req: GeminiRequest, *, request_id: str | None = None, auth: AuthContext | None = None
    ) -> str:
        type_ = resolve_type(req.type)
        system_instruction = select_system_instruction(type_, req.slides, req.system_instruction)

        key = gemini_cache_key(req.prompt, type_, system_instruction)
        cached = self.cache.get(key)
        if cached:
            log_event("cache_hit", request_id=request_id, endpoint="gemini", key=key[:12])
            return cached

        log_event(
            "cache_miss", request_id=request_id, endpoint="gemini", key=key[:12], type=type_, **_caller(auth)
        )
        result = await self._call_vendor(self._generate, req.prompt, system_instruction)
        if result:
            self.cache.set(key, result)
        return result

    async def search_photos(
        self, req: PexelRequest, *, request_id: str | None = None, auth: AuthContext | None = None
    ) -> Any:
        key = pexel_cache_key(req.query)
        cached = self.cache.get(key)
        if cached:
            log_event("cache_hit", request_id=request_id, endpoint="pexel", key=key[:12])
            return cached

        log_event(
            "cache_miss", request_id=request_id, endpoint="pexel", key=key[:12], items=req.items, **_caller(auth)
        )
        result = await self._call_vendor(self._search, req.query, req.items)
        if result:
            self.cache.set(key, result)
        return result

    async def _call_vendor(self, fn: Callable[..., Any], *args: Any) -> Any:
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args),
            timeout=self.settings.vendor_timeout_seconds,
        )


def _caller(auth: AuthContext | None) -> dict[str, str]:
    if auth is None:
        return {}
    return {"user_id": auth.user_id, "brand_id": auth.brand_id}
