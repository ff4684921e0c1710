import asyncio

import pytest

from culturegraph.core.config import Settings
from culturegraph.core.exceptions import ValidationFailedError
from culturegraph.knowledge.vector.search import KNOWLEDGE_MAPPINGS, TextStoreGateway


class StubIndices:
    def __init__(self, existing):
        self.existing = set(existing)
        self.created = {}

    async def exists(self, index):
        return index in self.existing

    async def create(self, index, mappings):
        self.created[index] = mappings
        self.existing.add(index)


class StubElasticsearch:
    def __init__(self, hits=None, *, error=None, delay=0.0, existing=()):
        self.hits = hits or []
        self.error = error
        self.delay = delay
        self.searches = []
        self.indexed = []
        self.indices = StubIndices(existing)

    async def search(self, index, query, size):
        self.searches.append({"index": index, "query": query, "size": size})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"hits": {"hits": self.hits[:size]}}

    async def index(self, index, id, document):
        if self.error is not None:
            raise self.error
        self.indexed.append({"index": index, "id": id, "document": document})

    async def info(self):
        if self.error is not None:
            raise self.error
        return {"version": {"number": "8.11.1"}}


HITS = [
    {
        "_id": "kb-1",
        "_score": 4.2,
        "_source": {"title": "Diwali", "content": "Festival of lights.", "category": "festival"},
    },
    {
        "_id": "kb-2",
        "_score": 1.1,
        "_source": {"title": "Lakshmi Puja", "content": "Evening worship of Lakshmi.", "category": "ritual"},
    },
]


ARTICLE = {
    "title": "Onam",
    "content": "Harvest festival of Kerala.",
    "category": "festival",
    "language": "Malayalam",
    "source": "wikipedia",
    "tags": ["harvest", "kerala"],
}


@pytest.mark.asyncio
async def test_knowledge_search_maps_hits(settings):
    client = StubElasticsearch(HITS)
    gateway = TextStoreGateway(client, settings)

    response = await gateway.search_knowledge("Diwali", category="festival", limit=2)

    assert response.success
    assert [item.id for item in response.items] == ["kb-1", "kb-2"]
    assert response.items[0].content == "Festival of lights."
    assert response.items[0].score == 4.2
    assert response.items[0].metadata == {"title": "Diwali", "category": "festival"}

    search = client.searches[0]
    assert search["index"] == settings.ELASTICSEARCH_KNOWLEDGE_INDEX
    assert search["size"] == 2
    assert search["query"]["bool"]["filter"] == [{"term": {"category": "festival"}}]


@pytest.mark.asyncio
async def test_document_search_uses_documents_index(settings):
    client = StubElasticsearch(HITS)

    response = await TextStoreGateway(client, settings).search_documents("lights", limit=1)

    assert response.total_results == 1
    assert client.searches[0]["index"] == settings.ELASTICSEARCH_DOCUMENTS_INDEX
    assert client.searches[0]["query"]["multi_match"]["fields"] == ["content", "fileName"]


@pytest.mark.asyncio
async def test_search_failures_come_back_as_unsuccessful(settings):
    failing = TextStoreGateway(StubElasticsearch(error=ConnectionError("Connection refused")), settings)
    missing = TextStoreGateway(None, settings)

    failed = await failing.search_knowledge("Diwali")
    unavailable = await missing.search_knowledge("Diwali")

    assert not failed.success
    assert "Connection refused" in failed.error
    assert not unavailable.success
    assert unavailable.items == []


@pytest.mark.asyncio
async def test_slow_search_times_out():
    settings = Settings(_env_file=None, VECTOR_QUERY_TIMEOUT_SECONDS=0.01)

    response = await TextStoreGateway(StubElasticsearch(HITS, delay=0.5), settings).search_knowledge("Diwali")

    assert not response.success
    assert response.error == "Text search timed out"


@pytest.mark.asyncio
async def test_add_knowledge_indexes_validated_articles(settings):
    client = StubElasticsearch()

    document_id = await TextStoreGateway(client, settings).add_knowledge(ARTICLE)

    assert document_id
    (indexed,) = client.indexed
    assert indexed["id"] == document_id
    assert indexed["document"]["title"] == "Onam"
    assert indexed["document"]["region"] is None
    assert "dateAdded" in indexed["document"]


@pytest.mark.asyncio
async def test_add_knowledge_rejects_incomplete_articles(settings):
    client = StubElasticsearch()
    payload = {key: value for key, value in ARTICLE.items() if key != "source"}

    with pytest.raises(ValidationFailedError) as excinfo:
        await TextStoreGateway(client, settings).add_knowledge(payload)

    assert excinfo.value.details["fields"] == ["source"]
    assert client.indexed == []


@pytest.mark.asyncio
async def test_add_knowledge_returns_none_when_store_rejects(settings):
    client = StubElasticsearch(error=RuntimeError("index read-only"))

    assert await TextStoreGateway(client, settings).add_knowledge(ARTICLE) is None


@pytest.mark.asyncio
async def test_check_connection_reports_version(settings):
    status = await TextStoreGateway(StubElasticsearch(), settings).check_connection()
    down = await TextStoreGateway(StubElasticsearch(error=ConnectionError("refused")), settings).check_connection()

    assert status.connected
    assert status.version == "8.11.1"
    assert not down.connected
    assert down.error == "refused"


@pytest.mark.asyncio
async def test_ensure_indices_creates_only_missing_indices(settings):
    client = StubElasticsearch(existing=[settings.ELASTICSEARCH_DOCUMENTS_INDEX])

    await TextStoreGateway(client, settings).ensure_indices()

    assert client.indices.created == {settings.ELASTICSEARCH_KNOWLEDGE_INDEX: KNOWLEDGE_MAPPINGS}
