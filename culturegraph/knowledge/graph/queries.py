"""Cypher query templates for cultural graph operations."""

from __future__ import annotations

import re
from typing import Optional, Sequence

from culturegraph.knowledge.graph.models import Direction, RelationshipType

SERVER_VERSION = """
CALL dbms.components() YIELD name, versions
RETURN name, versions[0] AS version
"""

SCHEMA_STATEMENTS = [
    "CREATE CONSTRAINT cultural_entity_name IF NOT EXISTS FOR (c:CulturalEntity) REQUIRE c.name IS UNIQUE",
    "CREATE INDEX cultural_entity_type IF NOT EXISTS FOR (c:CulturalEntity) ON (c.type)",
    "CREATE INDEX cultural_entity_region IF NOT EXISTS FOR (c:CulturalEntity) ON (c.region)",
    "CREATE INDEX cultural_entity_language IF NOT EXISTS FOR (c:CulturalEntity) ON (c.language)",
    (
        "CREATE FULLTEXT INDEX cultural_search IF NOT EXISTS FOR (c:CulturalEntity) "
        "ON EACH [c.name, c.description, c.significance]"
    ),
]

LIST_LABELS = "CALL db.labels() YIELD label RETURN label"
LIST_RELATIONSHIP_TYPES = "CALL db.relationshipTypes() YIELD relationshipType RETURN relationshipType"
LIST_CONSTRAINTS = "SHOW CONSTRAINTS YIELD name, type, entityType, labelsOrTypes, properties"
LIST_INDEXES = "SHOW INDEXES YIELD name, type, entityType, labelsOrTypes, properties"

COUNT_NODES = "MATCH (n) RETURN count(n) AS nodeCount"
COUNT_RELATIONSHIPS = "MATCH ()-[r]->() RETURN count(r) AS relCount"
COUNT_NODE_LABELS = """
MATCH (n)
UNWIND labels(n) AS label
RETURN label, count(*) AS count
"""
COUNT_RELATIONSHIP_TYPES = "MATCH ()-[r]->() RETURN type(r) AS relType, count(*) AS count"

CLEAR_GRAPH = "MATCH (n) DETACH DELETE n"

UPSERT_CULTURAL_ENTITY = """
MERGE (c:CulturalEntity {name: $name})
ON CREATE SET c.dateAdded = $timestamp
SET c += {
    type: $type,
    description: $description,
    region: $region,
    language: $language,
    significance: $significance,
    category: $category,
    popularity: $popularity,
    verified: $verified,
    lastUpdated: $timestamp
}
RETURN c AS entity
"""

# The relationship type is interpolated from the closed RelationshipType
# vocabulary; see `build_relationship_upsert`.
_UPSERT_RELATIONSHIP_TEMPLATE = """
MATCH (a:CulturalEntity {{name: $fromName}})
MATCH (b:CulturalEntity {{name: $toName}})
MERGE (a)-[r:{rel_type}]->(b)
SET r += {{
    strength: $strength,
    since: $since,
    until: $until,
    context: $context,
    verified: $verified
}}
RETURN type(r) AS relType
"""

SEMANTIC_SEARCH = """
CALL db.index.fulltext.queryNodes($indexName, $searchTerm) YIELD node, score
WHERE ($context = '' OR node.region CONTAINS $context
       OR node.category CONTAINS $context
       OR node.description CONTAINS $context)
  AND (size($relationshipTypes) = 0
       OR EXISTS { MATCH (node)-[r]-() WHERE type(r) IN $relationshipTypes })
RETURN node, score
ORDER BY score DESC, node.dateAdded ASC
LIMIT $limit
"""

_TRAVERSE_TEMPLATE = """
MATCH path = (start){left}-[{rel_filter}*1..{max_depth}]-{right}(end)
WHERE elementId(start) = $startNodeId
  AND (size($nodeLabels) = 0
       OR ALL(n IN nodes(path) WHERE ANY(label IN labels(n) WHERE label IN $nodeLabels)))
RETURN path,
       nodes(path) AS pathNodes,
       relationships(path) AS pathRels,
       length(path) AS pathLength
ORDER BY pathLength ASC
LIMIT $limit
"""

_LUCENE_SPECIAL = re.compile(r'([+\-!(){}\[\]^"~*?:\\/]|&&|\|\|)')
_LUCENE_OPERATORS = re.compile(r"\b(AND|OR|NOT)\b")


def escape_fulltext(term: str) -> str:
    """Escape Lucene query syntax so free text never fails to parse.

    Boolean keywords are only operators in upper case, so they are lowered.
    """

    escaped = _LUCENE_SPECIAL.sub(r"\\\1", term)
    return _LUCENE_OPERATORS.sub(lambda match: match.group(1).lower(), escaped)


def build_relationship_upsert(rel_type: RelationshipType) -> str:
    return _UPSERT_RELATIONSHIP_TEMPLATE.format(rel_type=RelationshipType(rel_type).value)


def build_traversal(
    direction: Direction,
    max_depth: int,
    relationship_types: Optional[Sequence[RelationshipType]] = None,
) -> str:
    """Render a bounded variable-length traversal.

    Depth and relationship types cannot be Cypher parameters inside a
    pattern, so both are interpolated from already-validated values.
    """

    if max_depth < 1:
        raise ValueError("max_depth must be >= 1")
    direction = Direction(direction)
    left = "<" if direction is Direction.INCOMING else ""
    right = ">" if direction is Direction.OUTGOING else ""
    rel_filter = ""
    if relationship_types:
        rel_filter = ":" + "|".join(RelationshipType(item).value for item in relationship_types)
    return _TRAVERSE_TEMPLATE.format(left=left, right=right, rel_filter=rel_filter, max_depth=int(max_depth))
