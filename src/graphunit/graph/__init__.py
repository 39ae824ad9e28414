"""
Graph subsystem for graphunit.

- ``GraphStore``: the live, mutable store under test
- ``Graph``: immutable, policy-filtered snapshot of a store
- ``read_graph`` / ``clear_graph``: policy-governed read and delete
"""

from graphunit.graph.schema import Node, Relationship, Graph
from graphunit.graph.store import GraphStore
from graphunit.graph.reader import read_graph
from graphunit.graph.clearer import clear_graph

__all__ = [
    "Node",
    "Relationship",
    "Graph",
    "GraphStore",
    "read_graph",
    "clear_graph",
]
