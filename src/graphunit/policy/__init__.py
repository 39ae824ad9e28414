"""
Inclusion policies: explicit pairs of predicates over nodes and
relationships, passed at each call site.
"""

from graphunit.policy.inclusion import (
    INCLUDE_ALL,
    InclusionPolicy,
    include_business_nodes,
    nodes_with_label,
    nodes_without_label,
    relationships_not_of_type,
    relationships_of_type,
    resolve,
)

__all__ = [
    "INCLUDE_ALL",
    "InclusionPolicy",
    "include_business_nodes",
    "nodes_with_label",
    "nodes_without_label",
    "relationships_not_of_type",
    "relationships_of_type",
    "resolve",
]
