"""Natural-language concept lookup over the graph's full-text index."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from culturegraph.core.config import Settings, get_settings
from culturegraph.knowledge.graph import queries
from culturegraph.knowledge.graph.manager import GraphStoreGateway
from culturegraph.knowledge.graph.models import GraphNode
from culturegraph.knowledge.retrieval.cache import QueryCache
from culturegraph.models.entity import validate_payload
from culturegraph.models.query import SemanticQuery

logger = logging.getLogger(__name__)


@dataclass
class SemanticHit:
    node: GraphNode
    score: float


@dataclass
class SemanticSearchResult:
    success: bool
    items: List[SemanticHit] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: Optional[str] = None

    @property
    def total_results(self) -> int:
        return len(self.items)


class SemanticGraphSearch:
    """Full-text match over entity name, description and significance.

    Scores are relative: each batch is divided by its best raw score, so the
    top hit always scores 1.0 and ``min_score`` is a fraction of it.
    """

    def __init__(
        self,
        gateway: GraphStoreGateway,
        cache: Optional[QueryCache] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.gateway = gateway
        self.cache = cache
        self.settings = settings or get_settings()

    async def search(self, query: Union[SemanticQuery, Mapping[str, Any]]) -> SemanticSearchResult:
        request = validate_payload(SemanticQuery, query)
        max_results = request.max_results or self.settings.GRAPH_MAX_RESULTS
        min_score = self.settings.SEMANTIC_MIN_SCORE if request.min_score is None else request.min_score
        context = (request.context or "").strip()

        search_term = queries.escape_fulltext(request.concept)
        if context:
            search_term = f"{search_term} {queries.escape_fulltext(context)}"

        params: Dict[str, Any] = {
            "indexName": self.settings.NEO4J_FULLTEXT_INDEX,
            "searchTerm": search_term,
            "context": context,
            "relationshipTypes": [rel.value for rel in request.relationship_types],
            "limit": max_results,
        }

        async def run() -> SemanticSearchResult:
            return await self._execute(params, min_score, max_results)

        if self.cache is None:
            return await run()
        return await self.cache.get_or_compute(
            "semantic",
            {**params, "minScore": min_score},
            run,
            cacheable=lambda result: result.success,
        )

    async def _execute(self, params: Dict[str, Any], min_score: float, max_results: int) -> SemanticSearchResult:
        started = time.perf_counter()
        result = await self.gateway.execute_query(queries.SEMANTIC_SEARCH, params)
        if not result.success:
            logger.error("Semantic graph search failed: %s", result.error)
            return SemanticSearchResult(
                success=False,
                execution_time_ms=(time.perf_counter() - started) * 1000.0,
                error=result.error or "Semantic search failed",
            )

        raw = [(row["node"], float(row.get("score") or 0.0)) for row in result.rows if isinstance(row.get("node"), GraphNode)]
        best = max((score for _, score in raw), default=0.0)

        hits = []
        for node, score in raw:
            normalized = score / best if best > 0 else 0.0
            if normalized < min_score:
                continue
            hits.append(SemanticHit(node=node, score=normalized))

        # sorted() is stable, so equal scores keep the store's creation order.
        hits = sorted(hits, key=lambda hit: hit.score, reverse=True)[:max_results]
        logger.debug("Semantic search for %r returned %d hits", params["searchTerm"], len(hits))
        return SemanticSearchResult(
            success=True,
            items=hits,
            execution_time_ms=(time.perf_counter() - started) * 1000.0,
        )
