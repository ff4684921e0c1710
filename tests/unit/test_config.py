import pytest
from pydantic import ValidationError

from culturegraph.core.config import Settings


def test_defaults(settings):
    assert settings.NEO4J_URI == "bolt://localhost:7687"
    assert settings.GRAPH_TRAVERSAL_MAX_DEPTH <= settings.GRAPH_TRAVERSAL_HARD_CAP
    assert settings.hybrid_weights == {"graph": 0.6, "vector": 0.3, "text": 0.1}
    assert "WORSHIPS" in settings.context_relationship_types


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NEO4J_URI", "neo4j+s://graph.example.com:7687")
    monkeypatch.setenv("CONTEXT_RELATIONSHIP_TYPES", "worships, part_of,")
    monkeypatch.setenv("HYBRID_VECTOR_WEIGHT", "0.4")

    settings = Settings(_env_file=None)

    assert settings.NEO4J_URI == "neo4j+s://graph.example.com:7687"
    assert settings.context_relationship_types == ["WORSHIPS", "PART_OF"]
    assert settings.hybrid_weights["vector"] == 0.4


def test_reasoning_depth_cannot_exceed_hard_cap():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, GRAPH_REASONING_DEPTH=6, GRAPH_TRAVERSAL_HARD_CAP=5)


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, NEO4J_URI="http://localhost:7474")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, HYBRID_GRAPH_WEIGHT=1.2)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="VERBOSE")
