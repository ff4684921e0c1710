from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from culturegraph.knowledge.graph.models import Direction, NodeLabel, RelationshipType


class TraversalFilters(BaseModel):
    node_labels: List[NodeLabel] = Field(default_factory=list, description="Every visited node must carry one of these labels")


class TraversalQuery(BaseModel):
    start_node_id: str = Field(..., description="Store-native id of the seed node")
    relationship_types: List[RelationshipType] = Field(default_factory=list)
    direction: Direction = Direction.BOTH
    max_depth: Optional[int] = Field(None, ge=1, description="Capped at the configured hard cap")
    filters: TraversalFilters = Field(default_factory=TraversalFilters)

    @field_validator("start_node_id", mode="before")
    @classmethod
    def require_start_node(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("start_node_id is required")
        return str(v)


class SemanticQuery(BaseModel):
    concept: str
    context: Optional[str] = None
    relationship_types: List[RelationshipType] = Field(default_factory=list)
    max_results: Optional[int] = Field(None, ge=1)
    min_score: Optional[float] = Field(None, ge=0.0, le=1.0)

    @field_validator("concept")
    @classmethod
    def require_concept(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("concept must not be blank")
        return v.strip()


class GraphRAGOptions(BaseModel):
    include_vector: bool = True
    max_depth: Optional[int] = Field(None, ge=1)
    generate_reasoning: bool = True
