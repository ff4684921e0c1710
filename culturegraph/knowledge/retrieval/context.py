"""Evidence bundles and template answers built from graph context."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from culturegraph.core.config import Settings, get_settings
from culturegraph.core.exceptions import GraphQueryError
from culturegraph.knowledge.graph.models import GraphNode, GraphPath, GraphRelationship, format_relationship_type
from culturegraph.knowledge.retrieval.hybrid import HybridSearchResult
from culturegraph.knowledge.retrieval.semantic import SemanticGraphSearch, SemanticHit
from culturegraph.knowledge.retrieval.traversal import GraphTraversalEngine

logger = logging.getLogger(__name__)

NO_ENTITIES_INSIGHT = "No relevant entities found in the graph"
NOT_FOUND_ANSWER = (
    "I couldn't find specific information about that in my cultural knowledge graph. "
    "Could you please rephrase your question or be more specific?"
)


@dataclass
class GraphRAGContext:
    nodes: List[GraphNode] = field(default_factory=list)
    relationships: List[GraphRelationship] = field(default_factory=list)
    paths: List[GraphPath] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    relevance_score: float = 0.0
    graph_query: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ContextAssembler:
    """Seed search, traversal and insight derivation for one question."""

    def __init__(
        self,
        semantic: SemanticGraphSearch,
        traversal: GraphTraversalEngine,
        settings: Optional[Settings] = None,
    ) -> None:
        self.semantic = semantic
        self.traversal = traversal
        self.settings = settings or get_settings()

    async def generate_context(
        self,
        query: str,
        *,
        max_depth: Optional[int] = None,
        include_related_entities: bool = True,
        include_insights: bool = True,
        relationship_types: Optional[Sequence[str]] = None,
        seed_candidates: Optional[Sequence[SemanticHit]] = None,
    ) -> GraphRAGContext:
        """Build the context for `query`.

        `seed_candidates` lets a caller that already searched the graph skip
        the seed search; pass ``None`` to search here. Failures become an
        empty context carrying an ``Error generating context`` insight.
        """

        try:
            return await self._assemble(
                query,
                max_depth=max_depth,
                include_related_entities=include_related_entities,
                include_insights=include_insights,
                relationship_types=relationship_types,
                seed_candidates=seed_candidates,
            )
        except Exception as exc:
            logger.error("Failed to generate graph context: %s", exc)
            return GraphRAGContext(insights=[f"Error generating context: {exc}"], graph_query=query)

    async def _assemble(
        self,
        query: str,
        *,
        max_depth: Optional[int],
        include_related_entities: bool,
        include_insights: bool,
        relationship_types: Optional[Sequence[str]],
        seed_candidates: Optional[Sequence[SemanticHit]],
    ) -> GraphRAGContext:
        if seed_candidates is None:
            found = await self.semantic.search(
                {"concept": query, "max_results": self.settings.CONTEXT_SEED_CANDIDATES}
            )
            if not found.success:
                raise GraphQueryError(
                    error_code="GRAPH_QUERY_FAILED",
                    message=found.error or "Semantic search failed",
                )
            seed_candidates = found.items

        if not seed_candidates:
            return GraphRAGContext(insights=[NO_ENTITIES_INSIGHT], graph_query=query)

        seed = seed_candidates[0].node
        nodes: Dict[str, GraphNode] = {seed.id: seed}
        relationships: List[GraphRelationship] = []
        paths: List[GraphPath] = []

        if include_related_entities and seed.id:
            depth = max_depth if max_depth is not None else self.settings.GRAPH_REASONING_DEPTH
            traversal = await self.traversal.traverse(
                {
                    "start_node_id": seed.id,
                    "max_depth": depth,
                    "relationship_types": list(
                        self.settings.context_relationship_types if relationship_types is None else relationship_types
                    ),
                }
            )
            if traversal.success:
                for node in traversal.nodes:
                    nodes.setdefault(node.id, node)
                relationships = list(traversal.relationships)
                paths = list(traversal.paths)
            else:
                logger.warning("Traversal from seed %s failed: %s", seed.id, traversal.error)

        context_nodes = list(nodes.values())
        insights = derive_insights(context_nodes, relationships, paths) if include_insights else []
        return GraphRAGContext(
            nodes=context_nodes,
            relationships=relationships,
            paths=paths,
            insights=insights,
            relevance_score=self.relevance_score(len(context_nodes), len(relationships), len(paths)),
            graph_query=query,
        )

    def relevance_score(self, node_count: int, relationship_count: int, path_count: int) -> float:
        score = (
            node_count * self.settings.RELEVANCE_NODE_WEIGHT
            + relationship_count * self.settings.RELEVANCE_RELATIONSHIP_WEIGHT
            + path_count * self.settings.RELEVANCE_PATH_WEIGHT
        )
        return max(0.0, min(score, 1.0))


def derive_insights(
    nodes: Sequence[GraphNode],
    relationships: Sequence[GraphRelationship],
    paths: Sequence[GraphPath],
) -> List[str]:
    insights = [
        f"Found {len(nodes)} related cultural entities",
        f"Discovered {len(relationships)} relationships",
        f"Explored {len(paths)} connection paths",
    ]
    if len(nodes) > 1:
        regions = _distinct(nodes, "region")
        if len(regions) > 1:
            insights.append(f"Connected across regions: {', '.join(regions)}")
        categories = _distinct(nodes, "category")
        if len(categories) > 1:
            insights.append(f"Spans multiple categories: {', '.join(categories)}")
        domains = _distinct(nodes, "type")
        if len(domains) > 1:
            insights.append(f"Spans multiple cultural domains: {', '.join(domains)}")
    return insights


def render_answer(query: str, context: GraphRAGContext, hybrid: Optional[HybridSearchResult] = None) -> str:
    """Render a deterministic answer from the context; no generative model involved."""

    if not context.nodes:
        return NOT_FOUND_ANSWER

    primary = context.nodes[0]
    by_id = {node.id: node for node in context.nodes}
    answer = f"Based on my cultural knowledge graph, here's what I found about {primary.name}:\n\n"

    description = primary.properties.get("description")
    if description:
        answer += f"{description}\n\n"

    if context.relationships:
        answer += "**Cultural Connections:**\n"
        groups: Dict[str, List[str]] = {}
        for rel in context.relationships:
            other_id = rel.start_node_id if rel.end_node_id == primary.id else rel.end_node_id
            other = by_id.get(other_id)
            if other is None or not other.name:
                continue
            names = groups.setdefault(rel.type, [])
            if other.name not in names:
                names.append(other.name)
        for rel_type, names in groups.items():
            answer += f"- {format_relationship_type(rel_type)}: {', '.join(names)}\n"
        answer += "\n"

    if context.insights:
        answer += "**Additional Insights:**\n"
        for insight in context.insights:
            answer += f"- {insight}\n"

    if hybrid is not None and hybrid.vector_results.success and hybrid.vector_results.items:
        answer += "\n**Related Knowledge:**\n"
        for item in hybrid.vector_results.items[:3]:
            answer += f"- {item.metadata.get('title') or item.id}\n"

    return answer


def _distinct(nodes: Sequence[GraphNode], key: str) -> List[str]:
    values: List[str] = []
    for node in nodes:
        value = node.properties.get(key)
        if value and str(value) not in values:
            values.append(str(value))
    return values
