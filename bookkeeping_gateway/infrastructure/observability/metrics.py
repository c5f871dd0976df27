"""Prometheus metrics for upstream API health and preview usage"""

from prometheus_client import Counter, Histogram

# Upstream bookkeeping API
upstream_latency_histogram = Histogram(
    "bookkeeping_upstream_latency_seconds",
    "Bookkeeping API response time",
    ["method", "endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

upstream_failure_counter = Counter(
    "bookkeeping_upstream_failures_total",
    "Failed bookkeeping API calls",
    ["endpoint", "reason"],  # reason: timeout | network | status | payload
)

# Previews
preview_counter = Counter(
    "bookkeeping_preview_total",
    "Credit previews computed",
    ["kind"],  # debt | payment | credit_application | sale
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_preview(kind: str) -> None:
    preview_counter.labels(kind=kind).inc()
