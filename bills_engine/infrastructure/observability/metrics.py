"""Prometheus metrics for obligation mutations, rejected actions and ledger deliveries"""

from prometheus_client import Counter, Histogram

# Mutation metrics
mutation_counter = Counter(
    "bills_mutation_total",
    "Obligation mutations applied",
    ["operation", "kind"],
)

precondition_failure_counter = Counter(
    "bills_precondition_failures_total",
    "Mutations rejected by a precondition",
    ["code"],  # already_paid | nothing_to_settle | debt_already_settled | ...
)

# Ledger webhook metrics
webhook_latency_histogram = Histogram(
    "ledger_webhook_latency_seconds",
    "Ledger webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "ledger_webhook_failures_total",
    "Failed ledger webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_mutation(operation: str, kind: str) -> None:
    mutation_counter.labels(operation=operation, kind=kind).inc()


def record_precondition_failure(code: str) -> None:
    precondition_failure_counter.labels(code=code).inc()
