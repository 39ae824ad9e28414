"""
Graph assertions for tests.

    assert_same_graph(store, script)   # store holds exactly that graph
    assert_subgraph(store, script)     # store contains that graph
    clear_graph(store)                 # delete everything (policy permitting)

``script`` is handed to a script engine (JSON construction documents by
default) which builds the reference graph in a fresh store.
"""

from __future__ import annotations

from typing import Optional

from graphunit.config import GraphUnitConfig, load_config
from graphunit.exceptions import GraphMismatch
from graphunit.graph.clearer import clear_graph
from graphunit.graph.reader import read_graph
from graphunit.graph.store import GraphStore
from graphunit.matching import GraphMatcher, MatchMode, MatchResult
from graphunit.policy import InclusionPolicy
from graphunit.script import ScriptEngine, reference_graph


def compare(
    store: GraphStore,
    script: str,
    mode: MatchMode,
    policy: Optional[InclusionPolicy] = None,
    *,
    engine: Optional[ScriptEngine] = None,
    config: Optional[GraphUnitConfig] = None,
) -> MatchResult:
    """
    Run the comparison without raising on mismatch. Script errors still
    propagate.
    """
    config = config or load_config()

    reference = reference_graph(script, engine)
    subject = read_graph(store, policy)

    return GraphMatcher(reference, subject, mode, config.matcher).match()


def assert_same_graph(
    store: GraphStore,
    script: str,
    policy: Optional[InclusionPolicy] = None,
    *,
    engine: Optional[ScriptEngine] = None,
    config: Optional[GraphUnitConfig] = None,
) -> None:
    """
    Assert that ``store`` (seen through ``policy``) holds exactly the graph
    described by ``script``. Raises ``GraphMismatch`` otherwise.
    """
    result = compare(store, script, MatchMode.EXACT, policy, engine=engine, config=config)
    if not result.matched:
        raise GraphMismatch(result.report)


def assert_subgraph(
    store: GraphStore,
    script: str,
    policy: Optional[InclusionPolicy] = None,
    *,
    engine: Optional[ScriptEngine] = None,
    config: Optional[GraphUnitConfig] = None,
) -> None:
    """
    Assert that ``store`` (seen through ``policy``) contains the graph
    described by ``script``. Extra nodes and relationships in the store
    are allowed; extra labels or properties on matched elements are not.
    """
    result = compare(
        store, script, MatchMode.EMBEDDED, policy, engine=engine, config=config
    )
    if not result.matched:
        raise GraphMismatch(result.report)


__all__ = [
    "assert_same_graph",
    "assert_subgraph",
    "clear_graph",
    "compare",
]
