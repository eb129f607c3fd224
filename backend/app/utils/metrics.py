"""
Prometheus metrics definitions.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Upload metrics (asset = photo | document)
upload_slots_issued_total = Counter(
    'upload_slots_issued_total',
    'Total presigned upload slots issued',
    ['asset']
)

uploads_confirmed_total = Counter(
    'uploads_confirmed_total',
    'Total uploads confirmed and persisted',
    ['asset']
)

uploads_rejected_total = Counter(
    'uploads_rejected_total',
    'Upload confirmations rejected by storage verification',
    ['asset']
)

assets_deleted_total = Counter(
    'assets_deleted_total',
    'Total assets deleted',
    ['asset']
)

storage_cleanup_failures_total = Counter(
    'storage_cleanup_failures_total',
    'Storage deletes that failed during asset deletion',
    ['asset']
)
