from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Set, Tuple, TYPE_CHECKING

import networkx as nx
import numpy as np

from graphunit.exceptions import ConstraintViolation, NotFoundError
from graphunit.graph.schema import Node, Relationship
from graphunit.values import validate_value

if TYPE_CHECKING:
    from graphunit.script.engine import ScriptEngine


def _stored_value(value: Any) -> Any:
    """Arrays are stored as tuples, so callers and snapshots never share them."""
    if isinstance(value, np.ndarray) and value.ndim == 0:
        return value.item()
    if isinstance(value, (list, np.ndarray)):
        return tuple(value)
    return value


def _clean_properties(properties: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in properties.items():
        if value is None:
            continue
        validate_value(key, value)
        cleaned[key] = _stored_value(value)
    return cleaned


class GraphStore:
    """
    Live, mutable property-graph store.

    Nodes carry a set of labels and a property map, relationships carry a
    type and a property map. Parallel relationships and self-loops are
    allowed. Element ids are never reused, even after deletion.

    Mutations are expected to happen inside ``transaction()``, which
    rolls the store back if the block raises.
    """

    def __init__(self) -> None:
        self._graph = nx.MultiDiGraph()
        self._relationship_ends: Dict[int, Tuple[int, int]] = {}
        self._next_node_id = 0
        self._next_relationship_id = 0

        # Every token ever used, whether or not an element still uses it.
        self._known_labels: Set[str] = set()
        self._known_types: Set[str] = set()
        self._known_keys: Set[str] = set()

        self._lock = threading.RLock()
        self._tx_depth = 0

    # -------------------- Transactions --------------------

    @contextmanager
    def transaction(self, read_only: bool = False) -> Iterator["GraphStore"]:
        """
        Scoped unit of work. Nested transactions join the outermost one;
        only the outermost one restores the store on failure.

        A read-only transaction holds the lock but keeps no rollback copy.
        """
        with self._lock:
            outermost = self._tx_depth == 0
            saved = self._save_state() if outermost and not read_only else None
            self._tx_depth += 1
            try:
                yield self
            except BaseException:
                if saved is not None:
                    self._restore_state(saved)
                    logging.getLogger("graphunit.store").debug(
                        "transaction rolled back"
                    )
                raise
            finally:
                self._tx_depth -= 1

    def _save_state(self) -> Tuple[nx.MultiDiGraph, Dict[int, Tuple[int, int]]]:
        return copy.deepcopy(self._graph), dict(self._relationship_ends)

    def _restore_state(
        self, saved: Tuple[nx.MultiDiGraph, Dict[int, Tuple[int, int]]]
    ) -> None:
        self._graph, self._relationship_ends = saved

    # -------------------- Nodes --------------------

    def create_node(self, /, *labels: str, **properties: Any) -> Node:
        props = _clean_properties(properties)
        node_id = self._next_node_id
        self._next_node_id += 1

        self._graph.add_node(node_id, labels=set(labels), properties=props)
        self._known_labels.update(labels)
        self._known_keys.update(props)
        return self.get_node(node_id)

    def get_node(self, node_id: int) -> Node:
        data = self._node_data(node_id)
        return Node.create(node_id, data["labels"], data["properties"])

    def has_node(self, node_id: int) -> bool:
        return self._graph.has_node(node_id)

    def all_nodes(self) -> List[Node]:
        return [
            Node.create(node_id, data["labels"], data["properties"])
            for node_id, data in self._graph.nodes(data=True)
        ]

    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    def add_label(self, node_id: int, label: str) -> None:
        self._node_data(node_id)["labels"].add(label)
        self._known_labels.add(label)

    def remove_label(self, node_id: int, label: str) -> None:
        self._node_data(node_id)["labels"].discard(label)

    def delete_node(self, node_id: int) -> None:
        self._node_data(node_id)
        if self._graph.degree(node_id) > 0:
            raise ConstraintViolation(
                f"Node {node_id} still has relationships",
                element_id=node_id,
            )
        self._graph.remove_node(node_id)

    def _node_data(self, node_id: int) -> Dict[str, Any]:
        if not self._graph.has_node(node_id):
            raise NotFoundError("Node", node_id)
        return self._graph.nodes[node_id]

    # -------------------- Relationships --------------------

    def create_relationship(
        self,
        start: int,
        end: int,
        type: str,
        /,
        **properties: Any,
    ) -> Relationship:
        self._node_data(start)
        self._node_data(end)
        props = _clean_properties(properties)

        rel_id = self._next_relationship_id
        self._next_relationship_id += 1

        self._graph.add_edge(start, end, key=rel_id, type=type, properties=props)
        self._relationship_ends[rel_id] = (start, end)
        self._known_types.add(type)
        self._known_keys.update(props)
        return self.get_relationship(rel_id)

    def get_relationship(self, rel_id: int) -> Relationship:
        start, end = self._ends(rel_id)
        data = self._graph.edges[start, end, rel_id]
        return Relationship.create(rel_id, data["type"], start, end, data["properties"])

    def has_relationship(self, rel_id: int) -> bool:
        return rel_id in self._relationship_ends

    def all_relationships(self) -> List[Relationship]:
        return [
            Relationship.create(key, data["type"], u, v, data["properties"])
            for u, v, key, data in self._graph.edges(keys=True, data=True)
        ]

    def relationships_of(self, node_id: int) -> List[Relationship]:
        """Every relationship starting or ending at ``node_id``."""
        self._node_data(node_id)
        seen: Dict[int, Relationship] = {}
        for u, v, key, data in self._graph.out_edges(node_id, keys=True, data=True):
            seen[key] = Relationship.create(key, data["type"], u, v, data["properties"])
        for u, v, key, data in self._graph.in_edges(node_id, keys=True, data=True):
            seen[key] = Relationship.create(key, data["type"], u, v, data["properties"])
        return list(seen.values())

    def relationship_count(self) -> int:
        return self._graph.number_of_edges()

    def delete_relationship(self, rel_id: int) -> None:
        start, end = self._ends(rel_id)
        self._graph.remove_edge(start, end, key=rel_id)
        del self._relationship_ends[rel_id]

    def _ends(self, rel_id: int) -> Tuple[int, int]:
        try:
            return self._relationship_ends[rel_id]
        except KeyError:
            raise NotFoundError("Relationship", rel_id) from None

    # -------------------- Properties --------------------

    def set_node_property(self, node_id: int, key: str, value: Any) -> None:
        self._set_property(self._node_data(node_id)["properties"], key, value)

    def set_relationship_property(self, rel_id: int, key: str, value: Any) -> None:
        start, end = self._ends(rel_id)
        props = self._graph.edges[start, end, rel_id]["properties"]
        self._set_property(props, key, value)

    def _set_property(self, props: Dict[str, Any], key: str, value: Any) -> None:
        if value is None:
            props.pop(key, None)
            return
        validate_value(key, value)
        props[key] = _stored_value(value)
        self._known_keys.add(key)

    # -------------------- Tokens --------------------

    def all_known_labels(self) -> Set[str]:
        return set(self._known_labels)

    def all_known_relationship_types(self) -> Set[str]:
        return set(self._known_types)

    def all_known_property_keys(self) -> Set[str]:
        return set(self._known_keys)

    def labels_in_use(self) -> Set[str]:
        used: Set[str] = set()
        for _, data in self._graph.nodes(data=True):
            used.update(data["labels"])
        return used

    # -------------------- Scripts --------------------

    def execute(self, script: str, engine: "ScriptEngine | None" = None) -> None:
        """
        Run a construction script against this store, atomically.
        """
        if engine is None:
            from graphunit.script.engine import JsonScriptEngine

            engine = JsonScriptEngine()

        with self.transaction():
            engine.execute(script, self)

    # -------------------- Cloning --------------------

    def clone(self) -> "GraphStore":
        g = GraphStore()
        g._graph = copy.deepcopy(self._graph)
        g._relationship_ends = dict(self._relationship_ends)
        g._next_node_id = self._next_node_id
        g._next_relationship_id = self._next_relationship_id
        g._known_labels = set(self._known_labels)
        g._known_types = set(self._known_types)
        g._known_keys = set(self._known_keys)
        return g
