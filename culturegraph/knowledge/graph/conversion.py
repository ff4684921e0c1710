"""Conversion of native neo4j driver values into plain graph records.

Every value leaving the gateway passes through `convert_value` exactly once,
so downstream code only ever sees `GraphNode`, `GraphRelationship`,
`GraphPath`, or plain Python scalars and containers.
"""

from __future__ import annotations

from typing import Any, Dict

from neo4j.graph import Node, Path, Relationship
from neo4j.spatial import Point
from neo4j.time import Date, DateTime, Duration, Time

from culturegraph.knowledge.graph.models import GraphNode, GraphPath, GraphRelationship

_TEMPORAL_TYPES = (Date, DateTime, Time, Duration)


def convert_node(node: Node) -> GraphNode:
    return GraphNode(
        id=str(node.element_id),
        labels=sorted(node.labels),
        properties={key: convert_value(value) for key, value in node.items()},
    )


def convert_relationship(relationship: Relationship) -> GraphRelationship:
    start = relationship.start_node
    end = relationship.end_node
    return GraphRelationship(
        id=str(relationship.element_id),
        type=relationship.type,
        start_node_id=str(start.element_id) if start is not None else "",
        end_node_id=str(end.element_id) if end is not None else "",
        properties={key: convert_value(value) for key, value in relationship.items()},
    )


def convert_path(path: Path) -> GraphPath:
    return GraphPath.from_segments(
        [convert_node(node) for node in path.nodes],
        [convert_relationship(rel) for rel in path.relationships],
    )


def convert_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Node):
        return convert_node(value)
    if isinstance(value, Relationship):
        return convert_relationship(value)
    if isinstance(value, Path):
        return convert_path(value)
    if isinstance(value, _TEMPORAL_TYPES):
        return value.iso_format()
    if isinstance(value, Point):
        return list(value)
    if isinstance(value, (list, tuple)):
        return [convert_value(item) for item in value]
    if isinstance(value, dict):
        return {key: convert_value(item) for key, item in value.items()}
    return value


def convert_record(record: Any) -> Dict[str, Any]:
    """Convert a driver `Record` (or any key/value mapping) into a plain dict."""

    return {key: convert_value(record[key]) for key in record.keys()}
