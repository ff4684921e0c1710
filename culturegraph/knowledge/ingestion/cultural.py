"""Entity and relationship loading for the cultural graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from culturegraph.core.exceptions import CultureGraphError, GraphQueryError
from culturegraph.knowledge.graph import queries
from culturegraph.knowledge.graph.manager import GraphStoreGateway
from culturegraph.knowledge.graph.models import CulturalEntity, GraphNode, QueryResult
from culturegraph.knowledge.ingestion.seed_data import CULTURAL_ENTITIES, CULTURAL_RELATIONSHIPS
from culturegraph.knowledge.retrieval.cache import QueryCache
from culturegraph.models.entity import CulturalEntityInput, CulturalRelationshipInput, validate_payload

logger = logging.getLogger(__name__)


@dataclass
class BulkLoadResult:
    """Outcome of a bulk load; succeeds when at least one item was written."""

    success: bool
    created: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class GraphInitializationResult:
    success: bool
    entities: int = 0
    relationships: int = 0
    errors: List[str] = field(default_factory=list)


class CulturalGraphLoader:
    """Write path for cultural entities and the relationships between them.

    Every successful write invalidates the query cache so later reads never
    see results computed against the previous graph.
    """

    def __init__(self, gateway: GraphStoreGateway, cache: Optional[QueryCache] = None) -> None:
        self.gateway = gateway
        self.cache = cache

    async def upsert_entity(self, payload: Any, *, invalidate: bool = True) -> CulturalEntity:
        entity = validate_payload(CulturalEntityInput, payload)
        params = entity.to_parameters()
        params["timestamp"] = _now()

        result = await self.gateway.execute_query(queries.UPSERT_CULTURAL_ENTITY, params)
        _raise_for_failure(result, f"Failed to upsert {entity.name}")
        node = result.rows[0].get("entity") if result.rows else None
        if not isinstance(node, GraphNode):
            raise GraphQueryError(
                error_code="GRAPH_QUERY_FAILED",
                message=f"Upsert of {entity.name} returned no entity",
            )

        if invalidate:
            await self._invalidate()
        logger.info("Upserted cultural entity %s", entity.name)
        return CulturalEntity.from_node(node)

    async def upsert_relationship(self, payload: Any, *, invalidate: bool = True) -> str:
        relationship = validate_payload(CulturalRelationshipInput, payload)
        result = await self.gateway.execute_query(
            queries.build_relationship_upsert(relationship.type),
            relationship.to_parameters(),
        )
        label = f"{relationship.from_name} -[{relationship.type.value}]-> {relationship.to_name}"
        _raise_for_failure(result, f"Failed to create {label}")
        if not result.rows:
            raise GraphQueryError(
                error_code="GRAPH_QUERY_FAILED",
                message=f"Failed to create {label}: endpoint entity not found",
                details={"from": relationship.from_name, "to": relationship.to_name},
            )
        if invalidate:
            await self._invalidate()
        return relationship.type.value

    async def load_entities(self, entities: Iterable[Mapping[str, Any]]) -> BulkLoadResult:
        entities = list(entities)
        logger.info("Loading %d cultural entities", len(entities))
        result = BulkLoadResult(success=False)
        for payload in entities:
            try:
                await self.upsert_entity(payload, invalidate=False)
            except CultureGraphError as exc:
                result.failed += 1
                result.errors.append(f"{_name_of(payload)}: {exc.message}")
                logger.warning("Entity %s not loaded: %s", _name_of(payload), exc.message)
            else:
                result.created += 1
        return await self._finish(result, "entities")

    async def load_relationships(self, relationships: Iterable[Mapping[str, Any]]) -> BulkLoadResult:
        relationships = list(relationships)
        logger.info("Loading %d cultural relationships", len(relationships))
        result = BulkLoadResult(success=False)
        for payload in relationships:
            try:
                await self.upsert_relationship(payload, invalidate=False)
            except CultureGraphError as exc:
                result.failed += 1
                result.errors.append(exc.message)
                logger.warning("Relationship not loaded: %s", exc.message)
            else:
                result.created += 1
        return await self._finish(result, "relationships")

    async def initialize_cultural_graph(self) -> GraphInitializationResult:
        await self.gateway.initialize_schema()

        entities = await self.load_entities(CULTURAL_ENTITIES)
        if not entities.success:
            return GraphInitializationResult(success=False, errors=entities.errors)

        relationships = await self.load_relationships(CULTURAL_RELATIONSHIPS)
        return GraphInitializationResult(
            success=relationships.success,
            entities=entities.created,
            relationships=relationships.created,
            errors=entities.errors + relationships.errors,
        )

    async def clear_graph(self, confirm: bool = False) -> QueryResult:
        result = await self.gateway.clear_graph(confirm=confirm)
        await self._invalidate()
        return result

    async def _finish(self, result: BulkLoadResult, kind: str) -> BulkLoadResult:
        result.success = result.created > 0
        if result.created:
            await self._invalidate()
        if result.failed:
            logger.warning("Loaded %d/%d %s", result.created, result.created + result.failed, kind)
        else:
            logger.info("Loaded %d %s", result.created, kind)
        return result

    async def _invalidate(self) -> None:
        if self.cache is not None:
            await self.cache.invalidate()


def _raise_for_failure(result: QueryResult, message: str) -> None:
    if not result.success:
        raise GraphQueryError(
            error_code="GRAPH_QUERY_FAILED",
            message=f"{message}: {result.error}",
        )


def _name_of(payload: Any) -> str:
    if isinstance(payload, Mapping):
        return str(payload.get("name") or "<unnamed>")
    return str(getattr(payload, "name", "<unnamed>"))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
