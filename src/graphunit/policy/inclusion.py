from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from graphunit.graph.schema import Node, Relationship

NodePredicate = Callable[[Node], bool]
RelationshipPredicate = Callable[[Relationship], bool]


def _always(_: object) -> bool:
    return True


@dataclass(frozen=True)
class InclusionPolicy:
    """
    Decides which nodes and relationships take part in a snapshot or are
    eligible for deletion.

    A missing predicate is not an error: it includes everything.
    """

    node: Optional[NodePredicate] = None
    relationship: Optional[RelationshipPredicate] = None

    def include_node(self, node: Node) -> bool:
        return (self.node or _always)(node)

    def include_relationship(self, relationship: Relationship) -> bool:
        return (self.relationship or _always)(relationship)


INCLUDE_ALL = InclusionPolicy()


def resolve(policy: Optional[InclusionPolicy]) -> InclusionPolicy:
    return INCLUDE_ALL if policy is None else policy


# ---------------------------------------------------------------------
# Ready-made predicates
# ---------------------------------------------------------------------


def include_business_nodes(prefix: Optional[str] = None) -> NodePredicate:
    """
    Include every node except internal bookkeeping nodes, i.e. nodes with
    a label starting with ``prefix`` (configured, ``_GA_`` by default).
    """
    if prefix is None:
        from graphunit.config import load_config

        prefix = load_config().policy.internal_label_prefix

    def predicate(node: Node) -> bool:
        return not any(label.startswith(prefix) for label in node.labels)

    return predicate


def nodes_with_label(label: str) -> NodePredicate:
    return lambda node: node.has_label(label)


def nodes_without_label(label: str) -> NodePredicate:
    return lambda node: not node.has_label(label)


def relationships_of_type(type: str) -> RelationshipPredicate:
    return lambda rel: rel.type == type


def relationships_not_of_type(type: str) -> RelationshipPredicate:
    return lambda rel: rel.type != type
