# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the member directory."""
from prometheus_client import Counter, Histogram

MEMBER_OPERATIONS = Counter(
    "member_operations_total",
    "Member operations by outcome (ok or the refusal kind)",
    ["operation", "outcome"],
)
STORE_FAILURES = Counter(
    "member_store_failures_total",
    "Store calls that raised",
    ["operation"],
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
