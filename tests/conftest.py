import pytest

from culturegraph.core.config import Settings
from culturegraph.knowledge.retrieval.cache import QueryCache

from tests.fakes import InMemoryGraphGateway


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def graph(settings) -> InMemoryGraphGateway:
    return InMemoryGraphGateway(settings)


@pytest.fixture
def cache(settings) -> QueryCache:
    return QueryCache(settings)


@pytest.fixture
def diwali_graph(graph) -> InMemoryGraphGateway:
    graph.add_entity(
        "Diwali",
        type="festival",
        description="Festival of lights celebrated across India.",
        region="All India",
        category="Hindu Festival",
        significance="Worship of Goddess Lakshmi",
    )
    graph.add_entity(
        "Lakshmi",
        type="deity",
        description="Hindu goddess of wealth and prosperity.",
        region="All India",
        category="Hindu Deity",
    )
    graph.relate("Diwali", "Lakshmi", "WORSHIPS", strength=0.9)
    return graph
