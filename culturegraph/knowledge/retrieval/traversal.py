"""Bounded-depth path expansion from a seed node."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from culturegraph.core.config import Settings, get_settings
from culturegraph.knowledge.graph import queries
from culturegraph.knowledge.graph.manager import GraphStoreGateway
from culturegraph.knowledge.graph.models import GraphNode, GraphPath, GraphRelationship
from culturegraph.knowledge.retrieval.cache import QueryCache
from culturegraph.models.entity import validate_payload
from culturegraph.models.query import TraversalQuery
from culturegraph.utils.monitoring import traversal_paths

logger = logging.getLogger(__name__)


@dataclass
class TraversalResult:
    success: bool
    paths: List[GraphPath] = field(default_factory=list)
    nodes: List[GraphNode] = field(default_factory=list)
    relationships: List[GraphRelationship] = field(default_factory=list)
    total_paths: int = 0
    traversal_depth: int = 0
    execution_time_ms: float = 0.0
    error: Optional[str] = None


class GraphTraversalEngine:
    """Expand paths from a start node with direction, type and label filters.

    Nodes and relationships are reported once each across all returned paths,
    paths come back shortest first, and the number of paths is capped by
    ``GRAPH_MAX_RESULTS``. A start node with no matching paths, or one that
    does not exist, is a successful empty result; the flat ``nodes`` list
    then stays empty as well.
    """

    def __init__(
        self,
        gateway: GraphStoreGateway,
        cache: Optional[QueryCache] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.gateway = gateway
        self.settings = settings or get_settings()
        self.cache = cache

    def clamp_depth(self, max_depth: Optional[int]) -> int:
        depth = self.settings.GRAPH_TRAVERSAL_MAX_DEPTH if max_depth is None else int(max_depth)
        return min(depth, self.settings.GRAPH_TRAVERSAL_HARD_CAP)

    async def traverse(self, query: Union[TraversalQuery, Mapping[str, Any]]) -> TraversalResult:
        request = validate_payload(TraversalQuery, query)
        depth = self.clamp_depth(request.max_depth)
        limit = self.settings.GRAPH_MAX_RESULTS

        statement = queries.build_traversal(request.direction, depth, request.relationship_types)
        params: Dict[str, Any] = {
            "startNodeId": request.start_node_id,
            "nodeLabels": [label.value for label in request.filters.node_labels],
            "relationshipTypes": [rel.value for rel in request.relationship_types],
            "direction": request.direction.value,
            "maxDepth": depth,
            "limit": limit,
        }

        async def run() -> TraversalResult:
            return await self._execute(statement, params, depth, limit)

        if self.cache is None:
            return await run()
        return await self.cache.get_or_compute("traverse", params, run, cacheable=lambda result: result.success)

    async def _execute(self, statement: str, params: Dict[str, Any], depth: int, limit: int) -> TraversalResult:
        started = time.perf_counter()
        result = await self.gateway.execute_query(statement, params)
        if not result.success:
            logger.error("Graph traversal from %s failed: %s", params["startNodeId"], result.error)
            return TraversalResult(
                success=False,
                execution_time_ms=_elapsed_ms(started),
                error=result.error or "Graph traversal failed",
            )

        collected: List[GraphPath] = []
        for row in result.rows:
            path = row.get("path")
            if not isinstance(path, GraphPath):
                path = GraphPath.from_segments(row.get("pathNodes") or [], row.get("pathRels") or [])
            # The store enforces the bound, but a path longer than asked for is never reported.
            if path.length > depth:
                continue
            collected.append(path)

        collected.sort(key=lambda item: item.length)
        paths = collected[:limit]

        nodes: Dict[str, GraphNode] = {}
        relationships: Dict[str, GraphRelationship] = {}
        for path in paths:
            for node in path.nodes:
                nodes.setdefault(node.id, node)
            for rel in path.relationships:
                relationships.setdefault(rel.id, rel)

        traversal_paths.observe(len(paths))
        return TraversalResult(
            success=True,
            paths=paths,
            nodes=list(nodes.values()),
            relationships=list(relationships.values()),
            total_paths=len(paths),
            traversal_depth=depth,
            execution_time_ms=_elapsed_ms(started),
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
