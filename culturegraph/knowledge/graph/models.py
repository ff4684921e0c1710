"""Graph node, relationship, and path records shared by every retrieval component."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntityType(str, Enum):
    FESTIVAL = "festival"
    FOOD = "food"
    PERSON = "person"
    PLACE = "place"
    TRADITION = "tradition"
    CUSTOM = "custom"
    DEITY = "deity"
    LANGUAGE = "language"
    ART = "art"
    MUSIC = "music"


class RelationshipType(str, Enum):
    CELEBRATED_IN = "CELEBRATED_IN"
    WORSHIPS = "WORSHIPS"
    ORIGINATED_FROM = "ORIGINATED_FROM"
    INFLUENCED_BY = "INFLUENCED_BY"
    PART_OF = "PART_OF"
    RELATED_TO = "RELATED_TO"
    PRACTICED_BY = "PRACTICED_BY"
    ASSOCIATED_WITH = "ASSOCIATED_WITH"
    SPEAKS = "SPEAKS"
    CREATED_BY = "CREATED_BY"
    PERFORMED_DURING = "PERFORMED_DURING"
    FOLLOWS = "FOLLOWS"
    CONNECTED_TO = "CONNECTED_TO"
    VARIANT_OF = "VARIANT_OF"
    EVOLVED_INTO = "EVOLVED_INTO"


class NodeLabel(str, Enum):
    CULTURAL_ENTITY = "CulturalEntity"
    FESTIVAL = "Festival"
    PLACE = "Place"
    PERSON = "Person"
    DEITY = "Deity"


class Direction(str, Enum):
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"
    BOTH = "BOTH"


RELATIONSHIP_LABELS: Dict[str, str] = {
    "CELEBRATED_IN": "Celebrated in",
    "WORSHIPS": "Associated with deity",
    "ORIGINATED_FROM": "Originated from",
    "INFLUENCED_BY": "Influenced by",
    "PART_OF": "Part of",
    "RELATED_TO": "Related to",
    "PRACTICED_BY": "Practiced by",
    "ASSOCIATED_WITH": "Associated with",
    "SPEAKS": "Language spoken",
    "CREATED_BY": "Created by",
    "PERFORMED_DURING": "Performed during",
    "FOLLOWS": "Follows tradition",
    "CONNECTED_TO": "Connected to",
    "VARIANT_OF": "Variant of",
    "EVOLVED_INTO": "Evolved into",
}


def format_relationship_type(rel_type: str) -> str:
    return RELATIONSHIP_LABELS.get(rel_type, rel_type.lower().replace("_", " "))


@dataclass
class GraphNode:
    id: str
    labels: List[str]
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.properties.get("name")


@dataclass
class GraphRelationship:
    id: str
    type: str
    start_node_id: str
    end_node_id: str
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def strength(self) -> float:
        return float(self.properties.get("strength") or 0.0)


@dataclass
class GraphPath:
    nodes: List[GraphNode]
    relationships: List[GraphRelationship]
    length: int

    @classmethod
    def from_segments(cls, nodes: List[GraphNode], relationships: List[GraphRelationship]) -> "GraphPath":
        """Build a path keeping the first occurrence of each node id."""

        seen: set[str] = set()
        unique_nodes: List[GraphNode] = []
        for node in nodes:
            if node.id in seen:
                continue
            seen.add(node.id)
            unique_nodes.append(node)
        return cls(nodes=unique_nodes, relationships=list(relationships), length=len(relationships))


_ENTITY_FIELDS = (
    "name",
    "type",
    "description",
    "region",
    "language",
    "significance",
    "category",
    "popularity",
    "verified",
    "dateAdded",
    "lastUpdated",
)


@dataclass
class CulturalEntity:
    """Typed view over a `CulturalEntity` node's property bag.

    Well-known attributes are promoted to fields; anything else stays in
    `extra` so the schema can grow without breaking readers.
    """

    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    region: Optional[str] = None
    language: Optional[str] = None
    significance: Optional[str] = None
    category: Optional[str] = None
    popularity: Optional[int] = None
    verified: bool = False
    date_added: Optional[str] = None
    last_updated: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: GraphNode) -> "CulturalEntity":
        props = node.properties
        return cls(
            name=str(props.get("name") or ""),
            type=props.get("type"),
            description=props.get("description") or None,
            region=props.get("region") or None,
            language=props.get("language") or None,
            significance=props.get("significance") or None,
            category=props.get("category") or None,
            popularity=props.get("popularity"),
            verified=bool(props.get("verified", False)),
            date_added=props.get("dateAdded"),
            last_updated=props.get("lastUpdated"),
            extra={key: value for key, value in props.items() if key not in _ENTITY_FIELDS},
        )


@dataclass
class QueryResult:
    """Outcome of a single statement issued through the graph gateway."""

    success: bool
    rows: List[Dict[str, Any]] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: Optional[str] = None
    statement: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_results(self) -> int:
        return len(self.rows)


@dataclass
class ConnectionStatus:
    connected: bool
    version: Optional[str] = None
    error: Optional[str] = None


@dataclass
class GraphSchema:
    node_labels: List[str] = field(default_factory=list)
    relationship_types: List[str] = field(default_factory=list)
    constraints: List[Dict[str, Any]] = field(default_factory=list)
    indexes: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class GraphMetrics:
    total_nodes: int = 0
    total_relationships: int = 0
    node_types: Dict[str, int] = field(default_factory=dict)
    relationship_types: Dict[str, int] = field(default_factory=dict)
    density: float = 0.0
    average_degree: float = 0.0
