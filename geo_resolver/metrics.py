"""Prometheus metrics"""

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)
REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration',
    ['method', 'endpoint']
)
PROVIDER_ATTEMPTS = Counter(
    'provider_attempts_total',
    'Provider attempts by outcome',
    ['operation', 'source', 'outcome']
)
PROVIDER_LATENCY = Histogram(
    'provider_attempt_duration_seconds',
    'Duration of provider attempts that reached the network',
    ['operation', 'source']
)
RESOLUTIONS = Counter(
    'resolutions_total',
    'Completed resolutions by answering source',
    ['operation', 'source']
)
