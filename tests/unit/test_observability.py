from prometheus_client import REGISTRY

from culturegraph.core.observability import _parse_headers
from culturegraph.utils.monitoring import observe_query, record_backend_failure, record_cache_lookup


def sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_otlp_headers_are_parsed_leniently():
    assert _parse_headers(None) == {}
    assert _parse_headers("api-key=abc, x-team = culture ,broken,") == {"api-key": "abc", "x-team": "culture"}


def test_metrics_helpers_increment_labelled_series():
    queries_before = sample("culturegraph_queries_total", status="error")
    hits_before = sample("culturegraph_cache_lookups_total", kind="semantic", result="hit")
    failures_before = sample("culturegraph_backend_failures_total", backend="neo4j")

    observe_query("error", 0.25)
    record_cache_lookup("semantic", hit=True)
    record_backend_failure("neo4j")

    assert sample("culturegraph_queries_total", status="error") == queries_before + 1
    assert sample("culturegraph_cache_lookups_total", kind="semantic", result="hit") == hits_before + 1
    assert sample("culturegraph_backend_failures_total", backend="neo4j") == failures_before + 1
