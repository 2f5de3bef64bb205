"""Prometheus metrics for monitoring."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Summary

# HTTP Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
)

# Analytics metrics
insights_generated_total = Counter(
    "insights_generated_total",
    "Total insights produced by analytics components",
    ["component", "type"],
)

analysis_duration_seconds = Summary(
    "analysis_duration_seconds",
    "Analytics component execution time",
    ["component"],
)

forecast_points_total = Counter(
    "forecast_points_total",
    "Total forecast points generated",
    ["series"],  # series: demand, revenue
)

# Notification metrics
notifications_created_total = Counter(
    "notifications_created_total",
    "Total notifications persisted from smart alerts",
    ["type"],  # type: critical, warning
)

notifications_deduplicated_total = Counter(
    "notifications_deduplicated_total",
    "Total alert batches skipped because the signature was unchanged",
)

# System metrics
app_uptime_seconds = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)

app_info = Gauge(
    "app_info",
    "Application info",
    ["version", "environment"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors by type",
    ["error_type", "component"],
)
