"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Histogram

# ============================================================
# HTTP Metrics
# ============================================================

http_requests_total = Counter(
    "sceau_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "sceau_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

http_errors_total = Counter(
    "sceau_http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "error_type"],
)

# ============================================================
# Sign-In Metrics
# ============================================================

challenges_issued_total = Counter(
    "sceau_challenges_issued_total",
    "Total sign-in challenges issued",
)

verification_failures_total = Counter(
    "sceau_verification_failures_total",
    "Total rejected sign-in verifications",
    ["kind"],
)

audit_records_total = Counter(
    "sceau_audit_records_total",
    "Total audit records emitted",
    ["method", "status"],
)

# ============================================================
# Nonce Store Metrics
# ============================================================

nonce_store_duration_seconds = Histogram(
    "sceau_nonce_store_duration_seconds",
    "Nonce store operation duration in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
