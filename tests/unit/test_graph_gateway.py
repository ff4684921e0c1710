import asyncio

import pytest

from culturegraph.core.config import Settings
from culturegraph.core.database import DatabaseManager
from culturegraph.core.exceptions import ConfirmationRequiredError, GraphQueryError
from culturegraph.knowledge.graph.manager import GraphStoreGateway


class StubResult:
    def __init__(self, rows):
        self._rows = rows

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for row in self._rows:
            yield row


class StubSession:
    def __init__(self, driver):
        self.driver = driver

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def run(self, statement, params=None):
        self.driver.statements.append((statement, params))
        if self.driver.delay:
            await asyncio.sleep(self.driver.delay)
        if self.driver.fail_on and self.driver.fail_on in statement:
            raise RuntimeError("Invalid input 'BOOM'")
        return StubResult(self.driver.rows.get(statement, []))

    async def execute_write(self, work):
        self.driver.transactions += 1
        return await work(self)


class StubDriver:
    def __init__(self, rows=None, *, fail_on=None, delay=0.0):
        self.rows = rows or {}
        self.fail_on = fail_on
        self.delay = delay
        self.statements = []
        self.transactions = 0
        self.databases = []

    def session(self, database=None):
        self.databases.append(database)
        return StubSession(self)


@pytest.mark.asyncio
async def test_execute_query_converts_rows(settings):
    driver = StubDriver({"RETURN 1 AS ok": [{"ok": 1}]})
    gateway = GraphStoreGateway(driver, settings)

    result = await gateway.execute_query("RETURN 1 AS ok")

    assert result.success
    assert result.rows == [{"ok": 1}]
    assert result.total_results == 1
    assert driver.databases == ["neo4j"]


@pytest.mark.asyncio
async def test_execute_query_reports_store_errors(settings):
    gateway = GraphStoreGateway(StubDriver(fail_on="BOOM"), settings)

    result = await gateway.execute_query("MATCH (n) RETURN BOOM", {"x": 1})

    assert not result.success
    assert "Invalid input" in result.error
    assert result.parameters == {"x": 1}


@pytest.mark.asyncio
async def test_execute_query_without_driver(settings):
    result = await GraphStoreGateway(None, settings).execute_query("RETURN 1")

    assert not result.success
    assert result.error == "Neo4j driver not initialized"


@pytest.mark.asyncio
async def test_execute_query_times_out():
    settings = Settings(_env_file=None, GRAPH_QUERY_TIMEOUT_SECONDS=0.01)
    gateway = GraphStoreGateway(StubDriver(delay=0.5), settings)

    result = await gateway.execute_query("RETURN 1")

    assert not result.success
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_transaction_reports_every_statement_on_failure(settings):
    driver = StubDriver(fail_on="BOOM")
    gateway = GraphStoreGateway(driver, settings)

    results = await gateway.execute_transaction(
        [
            ("CREATE (n:CulturalEntity {name: $name})", {"name": "Holi"}),
            ("RETURN BOOM", {}),
        ]
    )

    assert driver.transactions == 1
    assert [r.success for r in results] == [False, False]
    assert results[0].error == results[1].error


@pytest.mark.asyncio
async def test_transaction_success_keeps_statement_order(settings):
    driver = StubDriver({"RETURN 1 AS a": [{"a": 1}], "RETURN 2 AS b": [{"b": 2}]})
    gateway = GraphStoreGateway(driver, settings)

    results = await gateway.execute_transaction([("RETURN 1 AS a", {}), ("RETURN 2 AS b", None)])

    assert [r.rows for r in results] == [[{"a": 1}], [{"b": 2}]]
    assert await gateway.execute_transaction([]) == []


@pytest.mark.asyncio
async def test_check_connection_reads_server_version(graph):
    status = await graph.check_connection()
    assert status.connected
    assert status.version == "5.15.0"

    graph.connected = False
    status = await graph.check_connection()
    assert not status.connected
    assert status.error


@pytest.mark.asyncio
async def test_clear_graph_requires_confirmation(diwali_graph):
    with pytest.raises(ConfirmationRequiredError):
        await diwali_graph.clear_graph()
    with pytest.raises(ConfirmationRequiredError):
        await diwali_graph.clear_graph(confirm="yes")
    assert len(diwali_graph.nodes) == 2

    result = await diwali_graph.clear_graph(confirm=True)

    assert result.success
    assert not diwali_graph.nodes
    assert not diwali_graph.relationships


@pytest.mark.asyncio
async def test_metrics_density_and_degree(diwali_graph):
    diwali_graph.add_entity("Holi", type="festival", description="Festival of colours.")

    metrics = await diwali_graph.get_metrics()

    assert metrics.total_nodes == 3
    assert metrics.total_relationships == 1
    assert metrics.node_types == {"CulturalEntity": 3}
    assert metrics.relationship_types == {"WORSHIPS": 1}
    assert metrics.density == pytest.approx(1 / 6)
    assert metrics.average_degree == pytest.approx(2 / 3)


@pytest.mark.asyncio
async def test_metrics_on_empty_graph(graph):
    metrics = await graph.get_metrics()

    assert metrics.total_nodes == 0
    assert metrics.density == 0.0
    assert metrics.average_degree == 0.0


@pytest.mark.asyncio
async def test_schema_lists_labels_and_constraints(diwali_graph):
    schema = await diwali_graph.get_schema()

    assert schema.node_labels == ["CulturalEntity"]
    assert schema.relationship_types == ["WORSHIPS"]
    assert schema.constraints[0]["name"] == "cultural_entity_name"
    assert schema.indexes[0]["type"] == "FULLTEXT"


@pytest.mark.asyncio
async def test_schema_raises_when_store_unreachable(graph):
    graph.connected = False

    with pytest.raises(GraphQueryError):
        await graph.get_schema()
    with pytest.raises(GraphQueryError):
        await graph.get_metrics()


@pytest.mark.asyncio
async def test_initialize_schema_runs_every_statement(graph):
    results = await graph.initialize_schema()

    assert results
    assert all(result.success for result in results)
    assert graph.calls["schema"] == len(results)


def test_database_manager_builds_gateways_from_its_settings(settings):
    database = DatabaseManager(settings)

    graph = database.graph_gateway()
    text = database.text_gateway()

    assert graph.driver is None
    assert graph.settings is settings
    assert text.client is None
    assert text.settings is settings
