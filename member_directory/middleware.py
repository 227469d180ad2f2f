# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP Middleware — request ID propagation and Prometheus metrics."""
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from member_directory.core.logging import request_id_var
from member_directory.metrics import REQUEST_COUNT, REQUEST_LATENCY, HTTP_ERRORS

SKIP_PATHS = frozenset({"/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc"})


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded; unmatched paths collapse
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in SKIP_PATHS:
            return await call_next(request)
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        endpoint = _endpoint_label(request)
        status = str(response.status_code)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(elapsed)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(method=request.method, endpoint=endpoint, status=status).inc()
        return response
