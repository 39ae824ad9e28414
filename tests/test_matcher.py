from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Tuple

import numpy as np
import pytest

from graphunit.config import MatcherConfig
from graphunit.graph.schema import Graph, Node, Relationship
from graphunit.matching import (
    GraphMatcher,
    MatchMode,
    MatchState,
    MismatchReason,
    SignatureIndex,
    node_predicate_matches,
    signature_bucket,
    signature_of,
)


def _graph(
    nodes: Dict[int, Tuple[Iterable[str], dict]],
    relationships: Iterable[Tuple[int, str, int]] = (),
) -> Graph:
    return Graph(
        [Node.create(i, labels, props) for i, (labels, props) in nodes.items()],
        [
            Relationship.create(100 + n, type, start, end)
            for n, (start, type, end) in enumerate(relationships)
        ],
    )


def _match(reference: Graph, subject: Graph, mode: MatchMode, **config):
    return GraphMatcher(reference, subject, mode, MatcherConfig(**config)).match()


# ---------------------------------------------------------------------
# Signatures and match state
# ---------------------------------------------------------------------


def test_signature_ignores_numeric_representation():
    a = Relationship.create(1, "WORKS_FOR", 1, 2, {"since": 2014})
    b = Relationship.create(2, "WORKS_FOR", 3, 4, {"since": np.int16(2014)})
    c = Relationship.create(3, "WORKS_FOR", 3, 4, {"since": 2015})
    assert signature_of(a) == signature_of(b)
    assert signature_of(a) != signature_of(c)


def test_signature_bucket_counts_per_direction():
    graph = _graph(
        {1: ([], {}), 2: ([], {})},
        [(1, "CHILD", 2), (1, "CHILD", 2), (1, "LAST", 2), (2, "CHILD", 1)],
    )
    forward = signature_bucket(graph, 1, 2)
    assert sorted(forward.values()) == [1, 2]
    assert sum(signature_bucket(graph, 2, 1).values()) == 1

    index = SignatureIndex(graph)
    assert index.bucket(1, 2) == forward
    assert not index.has_relationships(1, 1)
    assert index.bucket(1, 1) == Counter()


def test_match_state_push_pop_restores_reservations():
    sig = ("CHILD", frozenset())
    state = MatchState()

    state.push(1, 10, [])
    state.push(2, 20, [((10, 20), sig, 2)])
    assert state.consumed((10, 20), sig) == 2
    assert state.total_consumed() == 2
    assert state.reference_of(20) == 2

    frame = state.pop()
    assert (frame.reference, frame.subject) == (2, 20)
    assert state.consumed((10, 20), sig) == 0
    assert state.total_consumed() == 0
    assert not state.is_used(20)
    assert state.mapping() == {1: 10}


def test_match_state_is_injective():
    state = MatchState()
    state.push(1, 10, [])
    with pytest.raises(ValueError):
        state.push(2, 10, [])
    with pytest.raises(ValueError):
        state.push(1, 11, [])


def test_node_predicate_is_exact_in_labels_and_properties():
    ref = Node.create(1, ["Person"], {"name": "Michal"})
    assert node_predicate_matches(ref, Node.create(2, ["Person"], {"name": "Michal"}))
    assert not node_predicate_matches(ref, Node.create(2, ["Person", "Human"], {"name": "Michal"}))
    assert not node_predicate_matches(ref, Node.create(2, ["Person"], {"name": "Michal", "age": 1}))


# ---------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------


def test_empty_graphs_are_equal():
    result = _match(Graph(), Graph(), MatchMode.EXACT)
    assert result.matched
    assert result.mapping == {}


def test_exact_cardinality_gate_runs_before_search():
    reference = _graph({1: (["A"], {})})
    subject = _graph({1: (["A"], {}), 2: (["A"], {})})

    result = _match(reference, subject, MatchMode.EXACT)

    assert not result.matched
    assert result.report.reason is MismatchReason.CARDINALITY
    assert result.report.node_delta == 1
    assert result.steps == 0

    assert _match(reference, subject, MatchMode.EMBEDDED).matched


def test_parallel_relationships_are_fungible():
    reference = _graph({1: (["A"], {}), 2: (["B"], {})}, [(1, "R", 2), (1, "R", 2)])
    subject = _graph({5: (["A"], {}), 6: (["B"], {})}, [(5, "R", 6), (5, "R", 6)])

    result = _match(reference, subject, MatchMode.EXACT)
    assert result.matched
    assert result.mapping == {1: 5, 2: 6}


def test_direction_matters():
    reference = _graph({1: (["A"], {}), 2: (["B"], {})}, [(1, "R", 2)])
    subject = _graph({1: (["A"], {}), 2: (["B"], {})}, [(2, "R", 1)])

    for mode in MatchMode:
        assert not _match(reference, subject, mode).matched


def test_self_loops_are_matched_to_self_loops():
    reference = _graph({1: (["A"], {}), 2: (["A"], {})}, [(1, "R", 1), (1, "R", 2)])
    subject = _graph({3: (["A"], {}), 4: (["A"], {})}, [(4, "R", 4), (4, "R", 3)])

    result = _match(reference, subject, MatchMode.EXACT)
    assert result.matched
    assert result.mapping == {1: 4, 2: 3}


@pytest.mark.parametrize("pruning", [True, False])
def test_search_backtracks_past_dead_end_candidates(pruning):
    reference = _graph({1: (["Red"], {}), 2: (["Blue"], {})}, [(1, "REL", 2)])
    subject = _graph(
        {10: (["Red"], {}), 11: (["Red"], {}), 12: (["Blue"], {})},
        [(11, "REL", 12)],
    )

    result = _match(reference, subject, MatchMode.EMBEDDED, degree_pruning=pruning)
    assert result.matched
    assert result.mapping == {1: 11, 2: 12}


@pytest.mark.parametrize("pruning", [True, False])
def test_exact_rejects_extra_subject_relationship_between_mapped_nodes(pruning):
    nodes = {i: (["N"], {}) for i in range(1, 5)}
    reference = _graph(nodes, [(1, "T", 2), (3, "T", 4)])
    subject = _graph(nodes, [(1, "T", 2), (2, "T", 3)])

    result = _match(reference, subject, MatchMode.EXACT, degree_pruning=pruning)
    assert not result.matched

    assert not _match(reference, subject, MatchMode.EMBEDDED, degree_pruning=pruning).matched


def test_no_relationship_reuse_reports_the_short_bucket():
    reference = _graph(
        {1: (["Year"], {}), 2: (["Month"], {})},
        [(1, "CHILD", 2), (1, "CHILD", 2), (1, "LAST", 2)],
    )
    subject = _graph(
        {1: (["Year"], {}), 2: (["Month"], {})},
        [(1, "FIRST", 2), (1, "CHILD", 2), (1, "LAST", 2)],
    )

    for mode in MatchMode:
        result = _match(reference, subject, mode)
        assert not result.matched
        report = result.report
        assert report.reason is MismatchReason.STRUCTURE
        assert report.violation.relationship == "[:CHILD]"
        assert (report.violation.required, report.violation.available) == (2, 1)
        assert "expected 2, found 1" in report.render()


def test_nodes_without_candidates_are_listed():
    reference = _graph({1: (["Person"], {"name": "Michal"})})
    subject = _graph({1: (["Person", "Human"], {"name": "Michal"})})

    result = _match(reference, subject, MatchMode.EXACT)

    report = result.report
    assert report.reason is MismatchReason.NODES
    assert report.unmatched_reference_nodes == ["(:Person {name: 'Michal'})"]
    assert report.unmatched_subject_nodes == ["(:Human:Person {name: 'Michal'})"]
    assert report.to_dict()["reason"] == "nodes"


def test_exact_reports_surplus_duplicates():
    reference = _graph({1: (["A"], {}), 2: (["A"], {})})
    subject = _graph({1: (["A"], {}), 2: (["B"], {})})

    report = _match(reference, subject, MatchMode.EXACT).report
    assert report.unmatched_reference_nodes == ["(:A)"]
    assert report.unmatched_subject_nodes == ["(:B)"]


def test_diagnostics_are_capped():
    reference = _graph({i: ([f"L{i}"], {}) for i in range(10)})
    subject = _graph({i: (["Other"], {}) for i in range(10)})

    report = _match(reference, subject, MatchMode.EMBEDDED, max_diagnostic_items=3).report
    assert len(report.unmatched_reference_nodes) == 3


def test_embedded_mapping_is_injective():
    # Two identical reference nodes cannot share one subject node.
    reference = _graph({1: (["A"], {}), 2: (["A"], {})})
    subject = _graph({1: (["A"], {}), 2: (["B"], {}), 3: (["B"], {})})

    result = _match(reference, subject, MatchMode.EMBEDDED)
    assert not result.matched
    assert result.report.reason is MismatchReason.STRUCTURE


def test_search_logging_does_not_change_the_outcome(caplog):
    reference = _graph({1: (["Red"], {}), 2: (["Blue"], {})}, [(1, "REL", 2)])
    subject = _graph(
        {10: (["Red"], {}), 11: (["Red"], {}), 12: (["Blue"], {})},
        [(11, "REL", 12)],
    )

    with caplog.at_level("DEBUG", logger="graphunit.matcher"):
        result = _match(reference, subject, MatchMode.EMBEDDED, degree_pruning=False, log_search=True)

    assert result.matched
    assert any("place ref=" in r.getMessage() for r in caplog.records)
    assert any("matched=True" in r.getMessage() for r in caplog.records)
