import time
import uuid

from fastapi import Request

from pitch_proxy.logging_utils import log_event


async def request_id_middleware(request: Request, call_next):
    # Unique id for this request, visible to handlers and echoed back to the panel
    request_id = uuid.uuid4().hex
    request.state.request_id = request_id

    t0 = time.perf_counter()
    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    log_event(
        "request",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        latency_ms=int((time.perf_counter() - t0) * 1000),
    )
    return response
