"""
Prometheus metrics for the corporate license service.

HTTP metrics are recorded by MetricsMiddleware; business counters are
bumped by BusinessMetricsEventHandler from published domain events.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Entitlement metrics
demo_grants_total = Counter(
    "demo_grants_total",
    "Total demo entitlements granted",
)

client_links_total = Counter(
    "client_links_total",
    "Total paid links, by whether a previous period was resumed",
    ["continued"],
)

client_unlinks_total = Counter(
    "client_unlinks_total",
    "Total client unlinks",
)

client_tokens_issued_total = Counter(
    "client_tokens_issued_total",
    "Total client tokens issued",
)

license_keys_exhausted_total = Counter(
    "license_keys_exhausted_total",
    "Total demo grants refused because no free license key remained",
)

license_keys_generated_total = Counter(
    "license_keys_generated_total",
    "Total license keys added to the inventory",
)

corporations_created_total = Counter(
    "corporations_created_total",
    "Total corporations created",
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
    ["namespace"],
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["namespace"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total domain errors returned to callers",
    ["error_code"],
)
