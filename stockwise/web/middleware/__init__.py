"""FastAPI middleware."""

from __future__ import annotations

from stockwise.web.middleware.prometheus import PrometheusMiddleware

__all__ = ["PrometheusMiddleware"]
