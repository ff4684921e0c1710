from .entity import CulturalEntityInput, CulturalKnowledgeInput, CulturalRelationshipInput, validate_payload
from .query import GraphRAGOptions, SemanticQuery, TraversalFilters, TraversalQuery

__all__ = [
    "CulturalEntityInput",
    "CulturalKnowledgeInput",
    "CulturalRelationshipInput",
    "GraphRAGOptions",
    "SemanticQuery",
    "TraversalFilters",
    "TraversalQuery",
    "validate_payload",
]
