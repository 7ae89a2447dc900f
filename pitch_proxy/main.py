from __future__ import annotations

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from pitch_proxy.auth import AuthContext, KeyResolver, TokenVerifier, jwks_key_resolver, require_user
from pitch_proxy.cache import ResponseCache
from pitch_proxy.config import Settings, load_settings
from pitch_proxy.error_codes import EMPTY_INPUT, VENDOR_FAIL
from pitch_proxy.errors import GENERIC_FAILURE_MESSAGE, AuthError, error_body
from pitch_proxy.logging_utils import log_event
from pitch_proxy.middleware import request_id_middleware
from pitch_proxy.proxy import ProxyService
from pitch_proxy.schemas import GeminiRequest, PexelRequest, ProxyResult


def create_app(
    settings: Settings | None = None,
    *,
    cache: ResponseCache | None = None,
    service: ProxyService | None = None,
    key_resolver: KeyResolver | None = None,
) -> FastAPI:
    """
    Build the proxy app.

    Everything stateful (cache, vendor callables, token key source) is
    created here and hung off app.state, so each app instance is isolated.
    """
    if settings is None:
        settings = load_settings()
    if cache is None:
        cache = ResponseCache(ttl_seconds=settings.cache_ttl_seconds, maxsize=settings.cache_maxsize)
    if service is None:
        service = ProxyService(settings, cache)
    if key_resolver is None:
        key_resolver = jwks_key_resolver(settings.jwks_url)

    app = FastAPI(title="pitch-proxy")
    app.state.settings = settings
    app.state.proxy = service
    app.state.verifier = TokenVerifier(settings.app_id, key_resolver)

    # The panel is served from the host's origin, not ours
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.middleware("http")(request_id_middleware)

    @app.get("/health")
    def health(request: Request):
        log_event("health_check", request_id=request.state.request_id)
        return {"status": "ok"}

    @app.post("/gemini")
    async def gemini(request: Request, payload: GeminiRequest | None = None, auth: AuthContext = Depends(require_user)):
        # A missing body is an empty request, not a client error
        if payload is None:
            payload = GeminiRequest()
        rid = request.state.request_id
        try:
            result = await request.app.state.proxy.generate(payload, request_id=rid, auth=auth)
        except Exception as exc:
            return _vendor_failure(rid, "gemini", exc, auth)
        return ProxyResult(result=result)

    @app.post("/pexel")
    async def pexel(request: Request, payload: PexelRequest | None = None, auth: AuthContext = Depends(require_user)):
        if payload is None:
            payload = PexelRequest()
        rid = request.state.request_id
        try:
            result = await request.app.state.proxy.search_photos(payload, request_id=rid, auth=auth)
        except Exception as exc:
            return _vendor_failure(rid, "pexel", exc, auth)
        return ProxyResult(result=result)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return _unauthorized(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """
        Unusable bodies (malformed JSON, a non-object body) degrade to an empty
        result like any other missing input. The token is still checked first:
        FastAPI can reject a body before the auth dependency has run.
        """
        try:
            await run_in_threadpool(require_user, request)
        except AuthError as auth_exc:
            return _unauthorized(auth_exc)

        log_event(
            "invalid_input",
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
            code=EMPTY_INPUT,
            errors=[err.get("type") for err in exc.errors()],
        )
        return JSONResponse(status_code=200, content=ProxyResult(result="").model_dump())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        # Don't leak details to the client, but do log them
        log_event("internal_error", request_id=rid, error_type=type(exc).__name__)
        resp = JSONResponse(status_code=500, content=error_body(error=GENERIC_FAILURE_MESSAGE).model_dump(exclude_none=True))
        if rid:
            resp.headers["X-Request-ID"] = rid
        return resp

    return app


def _unauthorized(exc: AuthError) -> JSONResponse:
    payload = error_body(error="unauthorized", message=exc.message)
    return JSONResponse(status_code=401, content=payload.model_dump(exclude_none=True))


def _vendor_failure(request_id: str, endpoint: str, exc: Exception, auth: AuthContext) -> JSONResponse:
    log_event(
        "vendor_fail",
        request_id=request_id,
        endpoint=endpoint,
        user_id=auth.user_id,
        brand_id=auth.brand_id,
        code=VENDOR_FAIL,
        error_type=type(exc).__name__,
    )
    payload = error_body(error=GENERIC_FAILURE_MESSAGE)
    return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))


def main() -> None:
    settings = load_settings()
    log_event("startup", host=settings.host, port=settings.port, app_id=settings.app_id)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
