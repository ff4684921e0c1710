import pytest

from culturegraph.core.config import Settings
from culturegraph.knowledge.retrieval.context import NO_ENTITIES_INSIGHT, NOT_FOUND_ANSWER
from culturegraph.knowledge.retrieval.graph_rag import APOLOGY_ANSWER, GraphRAGService
from culturegraph.knowledge.vector.search import TextSearchItem

from tests.fakes import StubTextStore


def knowledge_store():
    return StubTextStore(
        [
            TextSearchItem(
                id="kb-diwali",
                content="Diwali marks the return of Rama to Ayodhya.",
                score=3.2,
                metadata={"title": "Diwali", "category": "festival"},
            )
        ]
    )


@pytest.mark.asyncio
async def test_known_festival_is_answered_from_the_graph(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, knowledge_store(), settings=settings)

    response = await service.graph_rag_query("Tell me about Diwali")

    assert response.success
    assert response.error is None
    assert {node.name for node in response.context.nodes} == {"Diwali", "Lakshmi"}
    assert [rel.type for rel in response.context.relationships] == ["WORSHIPS"]
    assert "Diwali" in response.answer
    assert "Lakshmi" in response.answer
    assert response.confidence == pytest.approx(0.8)
    assert response.execution_time_ms >= 0


@pytest.mark.asyncio
async def test_unknown_concept_returns_not_found_with_floor_confidence(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, knowledge_store(), settings=settings)

    response = await service.graph_rag_query("nonexistent concept xyz123")

    assert response.success
    assert response.context.nodes == []
    assert response.context.insights == [NO_ENTITIES_INSIGHT]
    assert response.confidence == 0.5
    assert response.answer == NOT_FOUND_ANSWER


@pytest.mark.asyncio
async def test_disconnected_graph_store_fails_without_raising(diwali_graph, settings):
    diwali_graph.connected = False
    service = GraphRAGService(diwali_graph, knowledge_store(), settings=settings)

    response = await service.graph_rag_query("Diwali")

    assert not response.success
    assert response.error == "graph store unavailable"
    assert response.answer == APOLOGY_ANSWER
    assert response.sources == []
    assert response.reasoning == ["Error: graph store unavailable"]
    assert response.confidence == 0.0
    assert response.context.nodes == []


@pytest.mark.asyncio
async def test_reasoning_and_sources_include_vector_contribution(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, knowledge_store(), settings=settings)

    response = await service.graph_rag_query("Tell me about Diwali")

    assert response.reasoning == [
        '1. Searched for entities related to: "Tell me about Diwali"',
        "2. Found 2 relevant cultural entities",
        "3. Explored 1 relationships",
        "4. Generated insights from 1 connection paths",
        "5. Enhanced with vector search results",
    ]
    assert [source.type for source in response.sources] == ["graph", "vector"]
    vector_source = response.sources[1]
    assert vector_source.relevance == 0.8
    assert vector_source.nodes[0].id == "kb-diwali"
    assert vector_source.nodes[0].labels == ["VectorResult"]


@pytest.mark.asyncio
async def test_graph_only_query(diwali_graph, settings):
    text_store = knowledge_store()
    service = GraphRAGService(diwali_graph, text_store, settings=settings)

    response = await service.graph_rag_query("Tell me about Diwali", include_vector=False, generate_reasoning=False)

    assert response.success
    assert response.reasoning == []
    assert [source.type for source in response.sources] == ["graph"]
    assert text_store.calls["search_knowledge"] == 0


@pytest.mark.asyncio
async def test_vector_outage_does_not_fail_the_query(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, StubTextStore(error=ConnectionError("refused")), settings=settings)

    response = await service.graph_rag_query("Tell me about Diwali")

    assert response.success
    assert len(response.reasoning) == 4
    assert [source.type for source in response.sources] == ["graph"]


@pytest.mark.asyncio
async def test_blank_question_is_reported_as_failure(diwali_graph, settings):
    response = await GraphRAGService(diwali_graph, settings=settings).graph_rag_query("   ")

    assert not response.success
    assert response.error == "question must not be blank"
    assert diwali_graph.calls["semantic"] == 0


@pytest.mark.asyncio
async def test_depth_below_one_is_reported_as_failure(diwali_graph, settings):
    response = await GraphRAGService(diwali_graph, settings=settings).graph_rag_query(
        "Tell me about Diwali", max_depth=0
    )

    assert not response.success
    assert response.error == "Invalid GraphRAGOptions: max_depth"
    assert response.context.paths == []
    assert diwali_graph.calls["traverse"] == 0


@pytest.mark.asyncio
async def test_slow_graph_hits_the_query_deadline(diwali_graph):
    settings = Settings(_env_file=None, QUERY_TIMEOUT_SECONDS=0.05)
    diwali_graph.delays["semantic"] = 0.5
    service = GraphRAGService(diwali_graph, settings=settings)

    response = await service.graph_rag_query("Tell me about Diwali")

    assert not response.success
    assert "timed out" in response.error


@pytest.mark.asyncio
async def test_repeated_questions_reuse_cached_retrieval(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, settings=settings)

    first = await service.graph_rag_query("Tell me about Diwali")
    second = await service.graph_rag_query("Tell me about Diwali")

    assert first.answer == second.answer
    assert diwali_graph.calls["semantic"] == 1
    assert diwali_graph.calls["traverse"] == 1


@pytest.mark.asyncio
async def test_confidence_never_drops_below_floor(diwali_graph, settings):
    service = GraphRAGService(diwali_graph, settings=settings)

    for question in ("Tell me about Diwali", "Lakshmi", "nonexistent concept xyz123"):
        response = await service.graph_rag_query(question)
        assert response.success
        assert response.confidence >= settings.CONFIDENCE_FLOOR


@pytest.mark.asyncio
async def test_health_reports_both_stores(diwali_graph, settings):
    health = await GraphRAGService(diwali_graph, knowledge_store(), settings=settings).health()

    assert health["graph"].connected
    assert health["text"].connected

    health = await GraphRAGService(diwali_graph, settings=settings).health()
    assert not health["text"].connected
