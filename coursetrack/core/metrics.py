"""Application metrics using the Prometheus client library.

All metrics are defined here so there is a single inventory of what the
service measures.  Other modules import a metric and increment/observe it
at the point of action.

Prometheus scrapes GET /metrics; see coursetrack/api/metrics_endpoint.py.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Activity ingestion is one insert plus one section query; summaries
    # on a cache miss read every activity of the unit.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Tracking metrics
# ---------------------------------------------------------------------------

ACTIVITIES_RECORDED = Counter(
    "activities_recorded_total",
    "Activity submissions by outcome",
    ["result"],  # "accepted" or "duplicate"
)

SECTION_COMPLETIONS = Counter(
    "section_completions_total",
    "New completion markers written",
    ["source"],  # "promoted" (reached 100%) or "manual" (explicit mark)
)

CACHE_OPERATIONS = Counter(
    "cache_operations_total",
    "Cache get operations by result",
    ["operation"],  # "hit" or "miss"
)
