from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Tuple

from graphunit.exceptions import GraphIntegrityError, NotFoundError
from graphunit.values import render_value


def _freeze(properties: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(properties or {}))


def render_properties(properties: Mapping[str, Any]) -> str:
    if not properties:
        return ""
    inner = ", ".join(
        f"{key}: {render_value(properties[key])}" for key in sorted(properties)
    )
    return " {" + inner + "}"


@dataclass(frozen=True)
class Node:
    """
    A node as observed at one point in time. Identity is only meaningful
    within the store (or snapshot) it was read from.
    """

    id: int
    labels: FrozenSet[str]
    properties: Mapping[str, Any] = field(default_factory=lambda: _freeze(None))

    @staticmethod
    def create(
        id: int,
        labels: Iterable[str] = (),
        properties: Mapping[str, Any] | None = None,
    ) -> "Node":
        return Node(id=id, labels=frozenset(labels), properties=_freeze(properties))

    def has_label(self, label: str) -> bool:
        return label in self.labels

    def describe(self) -> str:
        labels = "".join(f":{label}" for label in sorted(self.labels))
        return f"({labels}{render_properties(self.properties)})"


@dataclass(frozen=True)
class Relationship:
    """
    Directed, typed relationship between two nodes of the same graph.
    """

    id: int
    type: str
    start: int
    end: int
    properties: Mapping[str, Any] = field(default_factory=lambda: _freeze(None))

    @staticmethod
    def create(
        id: int,
        type: str,
        start: int,
        end: int,
        properties: Mapping[str, Any] | None = None,
    ) -> "Relationship":
        return Relationship(
            id=id,
            type=type,
            start=start,
            end=end,
            properties=_freeze(properties),
        )

    def describe(self) -> str:
        return f"[:{self.type}{render_properties(self.properties)}]"


class Graph:
    """
    Immutable snapshot of a property graph.

    A snapshot never contains a relationship whose endpoints are not
    part of it.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        relationships: Iterable[Relationship] = (),
    ) -> None:
        self._nodes: Dict[int, Node] = {n.id: n for n in nodes}
        self._relationships: Dict[int, Relationship] = {}
        self._between: Dict[Tuple[int, int], List[Relationship]] = {}
        self._out_degree: Dict[int, int] = {node_id: 0 for node_id in self._nodes}
        self._in_degree: Dict[int, int] = {node_id: 0 for node_id in self._nodes}

        for rel in relationships:
            if rel.start not in self._nodes or rel.end not in self._nodes:
                raise GraphIntegrityError(
                    f"Relationship {rel.id} {rel.describe()} references a node "
                    f"outside the graph",
                    relationship_id=rel.id,
                )
            self._relationships[rel.id] = rel
            self._between.setdefault((rel.start, rel.end), []).append(rel)
            self._out_degree[rel.start] += 1
            self._in_degree[rel.end] += 1

    # -------------------- Nodes --------------------

    @property
    def nodes(self) -> Mapping[int, Node]:
        return MappingProxyType(self._nodes)

    def get_node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NotFoundError("Node", node_id) from None

    def node_count(self) -> int:
        return len(self._nodes)

    # -------------------- Relationships --------------------

    @property
    def relationships(self) -> Mapping[int, Relationship]:
        return MappingProxyType(self._relationships)

    def relationship_count(self) -> int:
        return len(self._relationships)

    def relationships_between(self, start: int, end: int) -> List[Relationship]:
        """Relationships from ``start`` to ``end`` (direction matters)."""
        return list(self._between.get((start, end), ()))

    def connected_pairs(self) -> Iterable[Tuple[int, int]]:
        return self._between.keys()

    # -------------------- Degrees --------------------

    def out_degree(self, node_id: int) -> int:
        return self._out_degree[node_id]

    def in_degree(self, node_id: int) -> int:
        return self._in_degree[node_id]

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={self.node_count()}, "
            f"relationships={self.relationship_count()})"
        )
