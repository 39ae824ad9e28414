from __future__ import annotations

import logging
from typing import Dict, List, Optional

from graphunit.graph.schema import Graph, Node, Relationship
from graphunit.graph.store import GraphStore
from graphunit.policy import InclusionPolicy, resolve


def read_graph(store: GraphStore, policy: Optional[InclusionPolicy] = None) -> Graph:
    """
    Capture an immutable snapshot of the live elements of ``store``.

    A node is captured when the policy includes it. A relationship is
    captured when the policy includes it and both of its endpoints were
    captured. Only elements that exist right now are read, so nothing
    that was created and later deleted can leak into the snapshot.
    """
    policy = resolve(policy)

    with store.transaction(read_only=True):
        nodes: Dict[int, Node] = {
            node.id: node for node in store.all_nodes() if policy.include_node(node)
        }

        relationships: List[Relationship] = []
        skipped = 0
        for rel in store.all_relationships():
            if not policy.include_relationship(rel):
                continue
            if rel.start not in nodes or rel.end not in nodes:
                skipped += 1
                continue
            relationships.append(rel)

    graph = Graph(nodes.values(), relationships)

    logging.getLogger("graphunit.reader").debug(
        "snapshot nodes=%d relationships=%d dangling_skipped=%d",
        graph.node_count(),
        graph.relationship_count(),
        skipped,
    )
    return graph
