"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Registration metrics
registration_attempts = Counter(
    'registration_attempts_total',
    'Total registration attempts',
    ['status']  # success, not_found, past, full, conflict, error
)

registration_latency = Histogram(
    'registration_latency_seconds',
    'Registration transaction latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Database metrics
db_operations = Counter(
    'db_operations_total',
    'Total database units of work',
    ['operation', 'outcome']  # outcome: committed, rejected, failed
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_registration_attempt(status: str):
    """Record registration attempt. Status: success, not_found, past, full, conflict, error"""
    registration_attempts.labels(status=status).inc()


def record_db_operation(operation: str, outcome: str):
    """Record a unit of work. Outcome: committed, rejected, failed"""
    db_operations.labels(operation=operation, outcome=outcome).inc()
