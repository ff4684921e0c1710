"""Parallel graph + vector search with weighted blending."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TypeVar

from opentelemetry import trace

from culturegraph.core.config import Settings, get_settings
from culturegraph.core.exceptions import validation_error
from culturegraph.knowledge.retrieval.ranker import HybridRanker, RankedItem
from culturegraph.knowledge.retrieval.semantic import SemanticGraphSearch, SemanticSearchResult
from culturegraph.knowledge.vector.search import TextSearchResponse, TextStoreGateway
from culturegraph.utils.monitoring import record_backend_failure

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


@dataclass
class HybridSearchResult:
    graph_results: SemanticSearchResult
    vector_results: TextSearchResponse
    results: List[RankedItem] = field(default_factory=list)
    combined_score: float = 0.0
    explanation: str = ""


class HybridSearchCombiner:
    """Fan out to semantic graph search and the text store, then blend.

    Each branch is optional and fails soft: an exception or timeout becomes an
    empty ``success=False`` result for that branch only.
    """

    def __init__(
        self,
        semantic: SemanticGraphSearch,
        text_store: Optional[TextStoreGateway] = None,
        ranker: Optional[HybridRanker] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.semantic = semantic
        self.text_store = text_store
        self.ranker = ranker or HybridRanker(default_weights=self.settings.hybrid_weights)

    async def hybrid_search(
        self,
        query: str,
        *,
        include_graph: bool = True,
        include_vector: bool = True,
        graph_context: str = "",
        max_results: Optional[int] = None,
        weights: Optional[Dict[str, float]] = None,
    ) -> HybridSearchResult:
        max_results = max_results or self.settings.GRAPH_MAX_RESULTS
        weights = {**self.ranker.weights, **(weights or {})}
        invalid = [name for name, value in weights.items() if not 0.0 <= value <= 1.0]
        if invalid:
            raise validation_error("Hybrid weights must lie in [0, 1]", invalid)

        graph_limit = math.ceil(max_results * weights["graph"])
        vector_limit = math.ceil(max_results * weights["vector"])

        with tracer.start_as_current_span("retrieval.hybrid_search"):
            graph_task = (
                self._graph_branch(query, graph_context, graph_limit)
                if include_graph and graph_limit > 0
                else _completed(SemanticSearchResult(success=True))
            )
            vector_task = (
                self._vector_branch(query, vector_limit)
                if include_vector and vector_limit > 0
                else _completed(TextSearchResponse(success=True))
            )
            graph_results, vector_results = await asyncio.gather(graph_task, vector_task)

        ranked = self.ranker.rank(
            graph_results.items if graph_results.success else [],
            vector_results.items if vector_results.success else [],
            weights,
            limit=max_results,
        )
        explanation = (
            f"Combined {len(ranked)} results from graph ({weights['graph'] * 100:.0f}%) "
            f"and vector ({weights['vector'] * 100:.0f}%) searches"
        )
        return HybridSearchResult(
            graph_results=graph_results,
            vector_results=vector_results,
            results=ranked,
            combined_score=self.ranker.combined_score(ranked),
            explanation=explanation,
        )

    async def _graph_branch(self, query: str, context: str, limit: int) -> SemanticSearchResult:
        try:
            return await asyncio.wait_for(
                self.semantic.search({"concept": query, "context": context or None, "max_results": limit}),
                timeout=self.settings.GRAPH_QUERY_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            record_backend_failure("neo4j")
            logger.warning("Graph branch of hybrid search timed out")
            return SemanticSearchResult(success=False, error="Graph search timed out")
        except Exception as exc:
            logger.warning("Graph branch of hybrid search failed: %s", exc)
            return SemanticSearchResult(success=False, error=str(exc) or exc.__class__.__name__)

    async def _vector_branch(self, query: str, limit: int) -> TextSearchResponse:
        if self.text_store is None:
            return TextSearchResponse(success=False, error="Text store not configured")
        try:
            return await asyncio.wait_for(
                self.text_store.search_knowledge(query, limit=limit),
                timeout=self.settings.VECTOR_QUERY_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            record_backend_failure("elasticsearch")
            logger.warning("Vector branch of hybrid search timed out")
            return TextSearchResponse(success=False, error="Vector search timed out")
        except Exception as exc:
            record_backend_failure("elasticsearch")
            logger.warning("Vector branch of hybrid search failed: %s", exc)
            return TextSearchResponse(success=False, error=str(exc) or exc.__class__.__name__)


async def _completed(value: T) -> T:
    return value
