"""
graphunit
=========

Graph assertions for tests against a property-graph store.

Core idea:
- Describe the expected graph declaratively, then check that the store
  holds exactly that graph (``assert_same_graph``) or contains it
  (``assert_subgraph``), under an inclusion policy.

Public API:
- assert_same_graph
- assert_subgraph
- clear_graph
- GraphStore
- InclusionPolicy / INCLUDE_ALL
- ScriptBuilder
"""

from graphunit.assertions import assert_same_graph, assert_subgraph, clear_graph
from graphunit.exceptions import GraphMismatch, ScriptExecutionError
from graphunit.graph.store import GraphStore
from graphunit.policy import INCLUDE_ALL, InclusionPolicy
from graphunit.script import ScriptBuilder

__all__ = [
    "assert_same_graph",
    "assert_subgraph",
    "clear_graph",
    "GraphMismatch",
    "ScriptExecutionError",
    "GraphStore",
    "InclusionPolicy",
    "INCLUDE_ALL",
    "ScriptBuilder",
]

__version__ = "0.1.0"
