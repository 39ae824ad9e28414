from __future__ import annotations

from typing import Optional

from graphunit.graph.reader import read_graph
from graphunit.graph.schema import Graph
from graphunit.graph.store import GraphStore
from graphunit.policy import INCLUDE_ALL
from graphunit.script.engine import ScriptEngine


def reference_graph(script: str, engine: Optional[ScriptEngine] = None) -> Graph:
    """
    Materialize the graph a construction script describes.

    The script runs against a fresh, transient store which is then read
    back unfiltered; the caller's inclusion policy only applies to the
    subject side.
    """
    store = GraphStore()
    store.execute(script, engine)
    return read_graph(store, INCLUDE_ALL)
