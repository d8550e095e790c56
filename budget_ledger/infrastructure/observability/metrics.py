"""Prometheus metrics for ingestion volume, rule application and API latency"""

from prometheus_client import Counter, Histogram

# Ingestion metrics
transactions_ingested_counter = Counter(
    "ledger_transactions_ingested_total",
    "Raw transaction records handled by ingestion",
    ["account", "outcome"],  # inserted | updated | skipped
)

rules_applied_counter = Counter(
    "ledger_rules_applied_total",
    "Transactions auto-categorized by description rules",
)

transfers_redetected_counter = Counter(
    "ledger_transfers_redetected_total",
    "Transactions re-evaluated by bulk transfer detection",
)

# Feed metrics
feed_fetch_failures_counter = Counter(
    "feed_fetch_failures_total",
    "Failed transaction feed calls",
)

feed_latency_histogram = Histogram(
    "feed_latency_seconds",
    "Transaction feed response time",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ingestion(account: str, inserted: int, updated: int, skipped: int) -> None:
    """Record per-account ingestion outcomes"""
    for outcome, count in (("inserted", inserted), ("updated", updated), ("skipped", skipped)):
        if count:
            transactions_ingested_counter.labels(account=account, outcome=outcome).inc(count)
