"""Single entry point composing hybrid search, context assembly and answer rendering."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from opentelemetry import trace

from culturegraph.core.config import Settings, get_settings
from culturegraph.core.exceptions import CultureGraphError, GraphStoreUnavailableError, validation_error
from culturegraph.knowledge.graph.manager import GraphStoreGateway
from culturegraph.knowledge.graph.models import ConnectionStatus, GraphNode, GraphRelationship
from culturegraph.knowledge.retrieval.cache import QueryCache
from culturegraph.knowledge.retrieval.context import ContextAssembler, GraphRAGContext, render_answer
from culturegraph.knowledge.retrieval.hybrid import HybridSearchCombiner, HybridSearchResult
from culturegraph.knowledge.retrieval.semantic import SemanticGraphSearch
from culturegraph.knowledge.retrieval.traversal import GraphTraversalEngine
from culturegraph.knowledge.vector.search import TextStoreGateway
from culturegraph.models.entity import validate_payload
from culturegraph.models.query import GraphRAGOptions
from culturegraph.utils.monitoring import observe_query

if TYPE_CHECKING:
    from culturegraph.core.database import DatabaseManager

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

APOLOGY_ANSWER = "I apologize, but I encountered an error while processing your question."


@dataclass
class GraphRAGSource:
    type: str
    nodes: List[GraphNode] = field(default_factory=list)
    relationships: List[GraphRelationship] = field(default_factory=list)
    relevance: float = 0.0


@dataclass
class GraphRAGResponse:
    success: bool
    answer: str
    context: GraphRAGContext
    sources: List[GraphRAGSource] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)
    confidence: float = 0.0
    execution_time_ms: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class GraphRAGService:
    """Answer questions from the cultural graph, optionally enriched by the text store.

    The service owns the query cache shared by its semantic search and
    traversal components. `graph_rag_query` never raises except when the
    caller cancels it.
    """

    def __init__(
        self,
        graph: GraphStoreGateway,
        text_store: Optional[TextStoreGateway] = None,
        *,
        cache: Optional[QueryCache] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.graph = graph
        self.text_store = text_store
        self.cache = cache or QueryCache(self.settings)
        self.semantic = SemanticGraphSearch(graph, cache=self.cache, settings=self.settings)
        self.traversal = GraphTraversalEngine(graph, cache=self.cache, settings=self.settings)
        self.hybrid = HybridSearchCombiner(self.semantic, text_store, settings=self.settings)
        self.assembler = ContextAssembler(self.semantic, self.traversal, settings=self.settings)

    @classmethod
    def from_database(cls, database: "DatabaseManager", *, cache: Optional[QueryCache] = None) -> "GraphRAGService":
        return cls(
            database.graph_gateway(),
            database.text_gateway(),
            cache=cache,
            settings=database.settings,
        )

    async def health(self) -> Dict[str, ConnectionStatus]:
        text_status = ConnectionStatus(connected=False, error="Text store not configured")
        if self.text_store is None:
            graph_status = await self.graph.check_connection()
        else:
            graph_status, text_status = await asyncio.gather(
                self.graph.check_connection(),
                self.text_store.check_connection(),
            )
        return {"graph": graph_status, "text": text_status}

    async def graph_rag_query(
        self,
        question: str,
        *,
        include_vector: bool = True,
        max_depth: Optional[int] = None,
        generate_reasoning: bool = True,
    ) -> GraphRAGResponse:
        started = time.perf_counter()
        with tracer.start_as_current_span("graphrag.query"):
            try:
                options = validate_payload(
                    GraphRAGOptions,
                    {
                        "include_vector": include_vector,
                        "max_depth": max_depth,
                        "generate_reasoning": generate_reasoning,
                    },
                )
                response = await asyncio.wait_for(
                    self._answer(question, options, started),
                    timeout=self.settings.QUERY_TIMEOUT_SECONDS,
                )
            except asyncio.TimeoutError:
                message = f"Query timed out after {self.settings.QUERY_TIMEOUT_SECONDS}s"
                logger.error("GraphRAG query failed: %s", message)
                response = self._failure(question, message, started)
            except CultureGraphError as exc:
                logger.error("GraphRAG query failed: %s", exc)
                response = self._failure(question, exc.message, started)
            except Exception as exc:
                logger.exception("GraphRAG query failed")
                response = self._failure(question, str(exc) or exc.__class__.__name__, started)

        observe_query("success" if response.success else "error", response.execution_time_ms / 1000.0)
        if response.success:
            logger.info(
                "Answered %r with %d entities in %.1fms",
                question,
                len(response.context.nodes),
                response.execution_time_ms,
            )
        return response

    async def _answer(self, question: str, options: GraphRAGOptions, started: float) -> GraphRAGResponse:
        if not question or not question.strip():
            raise validation_error("question must not be blank", ["question"])

        status = await self.graph.check_connection()
        if not status.connected:
            raise GraphStoreUnavailableError(
                error_code="GRAPH_STORE_UNAVAILABLE",
                message="graph store unavailable",
                details={"error": status.error},
            )

        hybrid = await self.hybrid.hybrid_search(
            question,
            include_graph=True,
            include_vector=options.include_vector,
            max_results=self.settings.GRAPH_MAX_RESULTS,
        )
        seeds = hybrid.graph_results.items if hybrid.graph_results.success else None
        context = await self.assembler.generate_context(
            question,
            max_depth=options.max_depth,
            include_related_entities=True,
            include_insights=True,
            seed_candidates=seeds,
        )

        vector_contributed = options.include_vector and hybrid.vector_results.success
        reasoning: List[str] = []
        if options.generate_reasoning:
            reasoning = self._reasoning(question, context, vector_contributed)

        return GraphRAGResponse(
            success=True,
            answer=render_answer(question, context, hybrid),
            context=context,
            sources=self._sources(context, hybrid, vector_contributed),
            reasoning=reasoning,
            confidence=max(context.relevance_score, self.settings.CONFIDENCE_FLOOR),
            execution_time_ms=_elapsed_ms(started),
        )

    @staticmethod
    def _reasoning(question: str, context: GraphRAGContext, vector_contributed: bool) -> List[str]:
        steps = [
            f'1. Searched for entities related to: "{question}"',
            f"2. Found {len(context.nodes)} relevant cultural entities",
            f"3. Explored {len(context.relationships)} relationships",
            f"4. Generated insights from {len(context.paths)} connection paths",
        ]
        if vector_contributed:
            steps.append("5. Enhanced with vector search results")
        return steps

    def _sources(
        self,
        context: GraphRAGContext,
        hybrid: HybridSearchResult,
        vector_contributed: bool,
    ) -> List[GraphRAGSource]:
        sources = [
            GraphRAGSource(
                type="graph",
                nodes=list(context.nodes),
                relationships=list(context.relationships),
                relevance=context.relevance_score,
            )
        ]
        if vector_contributed:
            sources.append(
                GraphRAGSource(
                    type="vector",
                    nodes=[
                        GraphNode(
                            id=item.id,
                            labels=["VectorResult"],
                            properties={"content": item.content, "score": item.score, **item.metadata},
                        )
                        for item in hybrid.vector_results.items
                    ],
                    relevance=self.settings.VECTOR_SOURCE_RELEVANCE,
                )
            )
        return sources

    @staticmethod
    def _failure(question: str, error: str, started: float) -> GraphRAGResponse:
        return GraphRAGResponse(
            success=False,
            answer=APOLOGY_ANSWER,
            context=GraphRAGContext(graph_query=question),
            sources=[],
            reasoning=[f"Error: {error}"],
            confidence=0.0,
            execution_time_ms=_elapsed_ms(started),
            error=error,
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
