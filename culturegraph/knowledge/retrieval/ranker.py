"""Weighted score blending for hybrid graph/vector results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from culturegraph.knowledge.graph.models import GraphNode
from culturegraph.knowledge.retrieval.semantic import SemanticHit
from culturegraph.knowledge.vector.search import TextSearchItem

DEFAULT_WEIGHTS: Dict[str, float] = {"graph": 0.6, "vector": 0.3, "text": 0.1}


@dataclass
class RankedItem:
    """One pooled result; `score` is already multiplied by its source weight."""

    source: str
    id: str
    score: float
    original_score: float
    item: Union[GraphNode, TextSearchItem]


class HybridRanker:
    """Pool graph and vector results into one list ordered by weighted score.

    The ``text`` weight is carried for configuration compatibility; no plain
    text branch contributes results yet.
    """

    def __init__(self, default_weights: Optional[Dict[str, float]] = None) -> None:
        self.weights: Dict[str, float] = dict(default_weights or DEFAULT_WEIGHTS)

    def rank(
        self,
        graph_hits: Sequence[SemanticHit],
        vector_items: Sequence[TextSearchItem],
        weights: Optional[Dict[str, float]] = None,
        *,
        limit: Optional[int] = None,
    ) -> List[RankedItem]:
        weights = {**self.weights, **(weights or {})}
        pooled: List[RankedItem] = []

        for hit in graph_hits:
            pooled.append(
                RankedItem(
                    source="graph",
                    id=hit.node.id,
                    score=hit.score * weights.get("graph", 0.0),
                    original_score=hit.score,
                    item=hit.node,
                )
            )

        for item, score in zip(vector_items, self.vector_scores(vector_items)):
            pooled.append(
                RankedItem(
                    source="vector",
                    id=item.id,
                    score=score * weights.get("vector", 0.0),
                    original_score=score,
                    item=item,
                )
            )

        pooled.sort(key=lambda entry: entry.score, reverse=True)
        if limit is not None:
            pooled = pooled[:limit]
        return pooled

    @staticmethod
    def vector_scores(items: Sequence[TextSearchItem]) -> List[float]:
        """Normalize native scores by the batch maximum; fall back to rank position."""

        native = [item.score for item in items if item.score is not None]
        best = max(native, default=0.0)
        scores = []
        for index, item in enumerate(items):
            if item.score is not None and best > 0:
                scores.append(item.score / best)
            else:
                scores.append(max(0.0, 1.0 - 0.1 * index))
        return scores

    @staticmethod
    def combined_score(ranked: Sequence[RankedItem]) -> float:
        if not ranked:
            return 0.0
        return sum(entry.score for entry in ranked) / len(ranked)
