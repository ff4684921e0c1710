"""Monitoring utilities leveraging Prometheus client."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

graphrag_queries_total = Counter(
    "culturegraph_queries_total",
    "GraphRAG queries processed",
    ["status"],
)

graphrag_query_latency_seconds = Histogram(
    "culturegraph_query_latency_seconds",
    "End-to-end GraphRAG query latency",
)

cache_lookups_total = Counter(
    "culturegraph_cache_lookups_total",
    "Query cache lookups",
    ["kind", "result"],
)

backend_failures_total = Counter(
    "culturegraph_backend_failures_total",
    "Failed calls to a backing store",
    ["backend"],
)

traversal_paths = Histogram(
    "culturegraph_traversal_paths",
    "Paths returned per graph traversal",
    buckets=(0, 1, 2, 5, 10, 25, 50),
)


def observe_query(status: str, duration_seconds: float) -> None:
    graphrag_queries_total.labels(status=status).inc()
    graphrag_query_latency_seconds.observe(duration_seconds)


def record_cache_lookup(kind: str, hit: bool) -> None:
    cache_lookups_total.labels(kind=kind, result="hit" if hit else "miss").inc()


def record_backend_failure(backend: str) -> None:
    backend_failures_total.labels(backend=backend).inc()
