"""Graph retrieval, hybrid search and answer assembly."""

from .cache import QueryCache
from .context import ContextAssembler, GraphRAGContext, render_answer
from .graph_rag import GraphRAGResponse, GraphRAGService, GraphRAGSource
from .hybrid import HybridSearchCombiner, HybridSearchResult
from .ranker import HybridRanker, RankedItem
from .semantic import SemanticGraphSearch, SemanticHit, SemanticSearchResult
from .traversal import GraphTraversalEngine, TraversalResult

__all__ = [
    "ContextAssembler",
    "GraphRAGContext",
    "GraphRAGResponse",
    "GraphRAGService",
    "GraphRAGSource",
    "GraphTraversalEngine",
    "HybridRanker",
    "HybridSearchCombiner",
    "HybridSearchResult",
    "QueryCache",
    "RankedItem",
    "SemanticGraphSearch",
    "SemanticHit",
    "SemanticSearchResult",
    "TraversalResult",
    "render_answer",
]
