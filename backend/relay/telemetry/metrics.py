"""Prometheus metrics for the HTTP surface."""
from __future__ import annotations

import time

from fastapi import Request
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Histogram, generate_latest

LABELS = ["method", "path", "status"]
DURATION_BUCKETS = (0.1, 0.3, 0.5, 1.0, 3.0, 5.0, 10.0)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    LABELS,
)
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    LABELS,
    buckets=DURATION_BUCKETS,
)


def record_request(method: str, path: str, status: int, duration: float) -> None:
    labels = (method, path, str(status))
    HTTP_REQUESTS_TOTAL.labels(*labels).inc()
    HTTP_REQUEST_DURATION_SECONDS.labels(*labels).observe(max(0.0, duration))


async def metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = int(response.status_code)
        return response
    finally:
        record_request(
            request.method,
            request.url.path,
            status_code,
            time.perf_counter() - start,
        )


def render_latest() -> tuple[bytes, str]:
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
