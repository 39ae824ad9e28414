from __future__ import annotations

import logging
from typing import Optional

from graphunit.graph.store import GraphStore
from graphunit.policy import InclusionPolicy, resolve


def clear_graph(store: GraphStore, policy: Optional[InclusionPolicy] = None) -> None:
    """
    Delete every included relationship, then every included node.

    Relationships go first so that included nodes become deletable. An
    included node that still has relationships the policy protects is
    kept, and a node excluded by the policy is never deleted.
    Running it twice is the same as running it once.
    """
    policy = resolve(policy)
    logger = logging.getLogger("graphunit.clear")

    with store.transaction():
        deleted_relationships = 0
        for rel in store.all_relationships():
            if policy.include_relationship(rel):
                store.delete_relationship(rel.id)
                deleted_relationships += 1

        deleted_nodes = 0
        kept_connected = 0
        for node in store.all_nodes():
            if not policy.include_node(node):
                continue
            if store.relationships_of(node.id):
                kept_connected += 1
                logger.debug(
                    "keeping node %d %s: it still has protected relationships",
                    node.id,
                    node.describe(),
                )
                continue
            store.delete_node(node.id)
            deleted_nodes += 1

    logger.info(
        "cleared relationships=%d nodes=%d kept_connected=%d",
        deleted_relationships,
        deleted_nodes,
        kept_connected,
    )
