"""Prometheus metrics middleware for FastAPI."""

from __future__ import annotations

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from stockwise.core.logging import set_request_id
from stockwise.core.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect HTTP metrics and bind a request id for log correlation."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics."""
        request_id = set_request_id(request.headers.get("X-Request-ID"))
        method = request.method
        endpoint = normalize_path(request.url.path)

        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status="500").inc()
            raise
        finally:
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                time.time() - start_time
            )
            http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

        http_requests_total.labels(
            method=method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        response.headers["X-Request-ID"] = request_id
        return response


def normalize_path(path: str) -> str:
    """Replace numeric path segments (notification ids) with a placeholder.

    Examples:
        /api/v1/notifications/42/read -> /api/v1/notifications/{id}/read
        /api/v1/insights/stock -> /api/v1/insights/stock
    """
    parts = path.split("?")[0].split("/")
    return "/".join("{id}" if part.isdigit() else part for part in parts)
