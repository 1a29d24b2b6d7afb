"""Prometheus metrics for the Ledger Desk service.

Metrics are organized into two categories:

Business Metrics (for Finance/Operations):
- ledger_transactions_created_total: Submissions by type and initial status
- ledger_transaction_transitions_total: Approvals and rejections
- ledger_posted_amount_total: Base-currency amount posted to balances
- ledger_report_requests_total: Report generation by report kind

Technical Metrics (for Engineering/SRE):
- ledger_posting_latency_seconds: Latency of the post + status-flip unit
- ledger_state_conflicts_total: Operations refused due to transaction status
- ledger_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from decimal import Decimal
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics
# =============================================================================

transactions_created_total = Counter(
    "ledger_transactions_created_total",
    "Total number of transactions submitted",
    ["type", "status"],  # status: pending, approved
)

transaction_transitions_total = Counter(
    "ledger_transaction_transitions_total",
    "Total number of status transitions out of pending",
    ["transition"],  # approved, rejected
)

posted_amount_total = Counter(
    "ledger_posted_amount_total",
    "Total base-currency amount posted to bank-account balances",
    ["type"],
)

report_requests_total = Counter(
    "ledger_report_requests_total",
    "Total number of reports generated",
    ["report"],
)


# =============================================================================
# Technical Metrics
# =============================================================================

posting_latency = Histogram(
    "ledger_posting_latency_seconds",
    "Latency of posting a transaction together with its status change",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

state_conflicts_total = Counter(
    "ledger_state_conflicts_total",
    "Operations refused because the transaction was not pending",
    ["operation"],  # update, approve, reject
)

http_requests_total = Counter(
    "ledger_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "ledger_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_transaction_created(txn_type: str, status: str) -> None:
    """Record a transaction submission."""
    transactions_created_total.labels(type=txn_type, status=status).inc()


def record_transition(transition: str) -> None:
    """Record a pending -> approved/rejected transition."""
    transaction_transitions_total.labels(transition=transition).inc()


def record_posting(txn_type: str, amount: Decimal) -> None:
    """Record an amount posted to balances."""
    posted_amount_total.labels(type=txn_type).inc(float(amount))


def record_state_conflict(operation: str) -> None:
    """Record an operation rejected due to the transaction status."""
    state_conflicts_total.labels(operation=operation).inc()


def record_report(report: str) -> None:
    """Record a generated report."""
    report_requests_total.labels(report=report).inc()


@contextmanager
def track_posting_latency() -> Generator[None, None, None]:
    """Context manager to track posting latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        posting_latency.observe(duration)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
