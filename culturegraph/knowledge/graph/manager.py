"""Graph store gateway."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from neo4j import AsyncDriver
from opentelemetry import trace

from culturegraph.core.config import Settings, get_settings
from culturegraph.core.exceptions import ConfirmationRequiredError, GraphQueryError
from culturegraph.knowledge.graph import queries
from culturegraph.knowledge.graph.conversion import convert_record
from culturegraph.knowledge.graph.models import ConnectionStatus, GraphMetrics, GraphSchema, QueryResult
from culturegraph.utils.monitoring import record_backend_failure

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

Statement = Tuple[str, Mapping[str, Any]]


class GraphStoreGateway:
    """Parameterized access to the cultural graph.

    `execute_query`, `execute_transaction` and `check_connection` never raise
    for store errors: they report them through `success=False`. Only the typed
    helpers (`get_schema`, `get_metrics`) raise `GraphQueryError`, since their
    return values have no room for a failure flag.
    """

    def __init__(self, driver: Optional[AsyncDriver], settings: Optional[Settings] = None) -> None:
        self.driver = driver
        self.settings = settings or get_settings()

    async def execute_query(self, statement: str, parameters: Optional[Mapping[str, Any]] = None) -> QueryResult:
        params = dict(parameters or {})
        started = time.perf_counter()

        if self.driver is None:
            logger.warning("Neo4j driver not initialized; cannot execute query.")
            return QueryResult(
                success=False,
                error="Neo4j driver not initialized",
                statement=statement,
                parameters=params,
            )

        with tracer.start_as_current_span("graph.execute_query"):
            try:
                rows = await asyncio.wait_for(
                    self._run(statement, params),
                    timeout=self.settings.GRAPH_QUERY_TIMEOUT_SECONDS,
                )
            except asyncio.TimeoutError:
                record_backend_failure("neo4j")
                logger.error("Graph query timed out after %ss", self.settings.GRAPH_QUERY_TIMEOUT_SECONDS)
                return QueryResult(
                    success=False,
                    execution_time_ms=_elapsed_ms(started),
                    error=f"Query timed out after {self.settings.GRAPH_QUERY_TIMEOUT_SECONDS}s",
                    statement=statement,
                    parameters=params,
                )
            except Exception as exc:
                record_backend_failure("neo4j")
                logger.error("Graph query failed: %s", exc)
                return QueryResult(
                    success=False,
                    execution_time_ms=_elapsed_ms(started),
                    error=str(exc) or exc.__class__.__name__,
                    statement=statement,
                    parameters=params,
                )

        return QueryResult(
            success=True,
            rows=rows,
            execution_time_ms=_elapsed_ms(started),
            statement=statement,
            parameters=params,
        )

    async def execute_transaction(self, statements: Sequence[Statement]) -> List[QueryResult]:
        """Run every statement inside one write transaction.

        The transaction commits as a unit, so on failure every statement is
        reported as failed even if some of them ran before the error.
        """

        batch = [(statement, dict(params or {})) for statement, params in statements]
        if not batch:
            return []

        started = time.perf_counter()
        if self.driver is None:
            logger.warning("Neo4j driver not initialized; cannot execute transaction.")
            return [
                QueryResult(success=False, error="Neo4j driver not initialized", statement=s, parameters=p)
                for s, p in batch
            ]

        async def work(tx) -> List[List[Dict[str, Any]]]:
            outputs = []
            for statement, params in batch:
                result = await tx.run(statement, params)
                outputs.append([convert_record(record) async for record in result])
            return outputs

        with tracer.start_as_current_span("graph.execute_transaction"):
            try:
                outputs = await asyncio.wait_for(
                    self._write(work),
                    timeout=self.settings.GRAPH_QUERY_TIMEOUT_SECONDS,
                )
            except Exception as exc:
                record_backend_failure("neo4j")
                message = str(exc) or exc.__class__.__name__
                if isinstance(exc, asyncio.TimeoutError):
                    message = f"Transaction timed out after {self.settings.GRAPH_QUERY_TIMEOUT_SECONDS}s"
                logger.error("Graph transaction of %d statements failed: %s", len(batch), message)
                elapsed = _elapsed_ms(started)
                return [
                    QueryResult(success=False, execution_time_ms=elapsed, error=message, statement=s, parameters=p)
                    for s, p in batch
                ]

        elapsed = _elapsed_ms(started)
        return [
            QueryResult(success=True, rows=rows, execution_time_ms=elapsed, statement=s, parameters=p)
            for rows, (s, p) in zip(outputs, batch)
        ]

    async def check_connection(self) -> ConnectionStatus:
        result = await self.execute_query(queries.SERVER_VERSION)
        if not result.success:
            return ConnectionStatus(connected=False, error=result.error)
        version = result.rows[0].get("version") if result.rows else None
        return ConnectionStatus(connected=True, version=version)

    async def get_schema(self) -> GraphSchema:
        labels, rel_types, constraints, indexes = await asyncio.gather(
            self.execute_query(queries.LIST_LABELS),
            self.execute_query(queries.LIST_RELATIONSHIP_TYPES),
            self.execute_query(queries.LIST_CONSTRAINTS),
            self.execute_query(queries.LIST_INDEXES),
        )
        _require(labels, rel_types, constraints, indexes)
        return GraphSchema(
            node_labels=[row["label"] for row in labels.rows],
            relationship_types=[row["relationshipType"] for row in rel_types.rows],
            constraints=list(constraints.rows),
            indexes=list(indexes.rows),
        )

    async def get_metrics(self) -> GraphMetrics:
        nodes, relationships, node_types, rel_types = await asyncio.gather(
            self.execute_query(queries.COUNT_NODES),
            self.execute_query(queries.COUNT_RELATIONSHIPS),
            self.execute_query(queries.COUNT_NODE_LABELS),
            self.execute_query(queries.COUNT_RELATIONSHIP_TYPES),
        )
        _require(nodes, relationships, node_types, rel_types)

        total_nodes = int(nodes.rows[0]["nodeCount"]) if nodes.rows else 0
        total_relationships = int(relationships.rows[0]["relCount"]) if relationships.rows else 0
        density = 0.0
        if total_nodes > 1:
            density = total_relationships / (total_nodes * (total_nodes - 1))
        average_degree = (2 * total_relationships / total_nodes) if total_nodes else 0.0

        return GraphMetrics(
            total_nodes=total_nodes,
            total_relationships=total_relationships,
            node_types={row["label"]: int(row["count"]) for row in node_types.rows},
            relationship_types={row["relType"]: int(row["count"]) for row in rel_types.rows},
            density=density,
            average_degree=average_degree,
        )

    async def initialize_schema(self) -> List[QueryResult]:
        """Create constraints and indexes; failures are logged, never raised."""

        results = []
        for statement in queries.SCHEMA_STATEMENTS:
            result = await self.execute_query(statement)
            if result.success:
                logger.info("Executed: %s", statement)
            else:
                logger.warning("Schema statement failed (%s): %s", result.error, statement)
            results.append(result)
        return results

    async def clear_graph(self, confirm: bool = False) -> QueryResult:
        if confirm is not True:
            raise ConfirmationRequiredError(
                error_code="CONFIRMATION_REQUIRED",
                message="Clearing the graph removes every node and relationship; pass confirm=True",
            )
        logger.warning("Clearing all graph data")
        return await self.execute_query(queries.CLEAR_GRAPH)

    async def _run(self, statement: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        async with self.driver.session(database=self.settings.NEO4J_DATABASE) as session:
            result = await session.run(statement, params)
            return [convert_record(record) async for record in result]

    async def _write(self, work):
        async with self.driver.session(database=self.settings.NEO4J_DATABASE) as session:
            return await session.execute_write(work)


def _require(*results: QueryResult) -> None:
    for result in results:
        if not result.success:
            raise GraphQueryError(
                error_code="GRAPH_QUERY_FAILED",
                message=result.error or "Graph query failed",
                details={"statement": (result.statement or "").strip()},
            )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
