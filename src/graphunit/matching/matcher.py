from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from graphunit.config.settings import MatcherConfig
from graphunit.graph.schema import Graph, Node
from graphunit.matching.report import (
    BucketViolation,
    MatchMode,
    MismatchReason,
    MismatchReport,
)
from graphunit.matching.signature import NodePair, Signature, SignatureIndex
from graphunit.matching.state import MatchState, Reservation
from graphunit.values import canonical_properties
from graphunit.values.equality import CanonicalProperties

NodeKey = Tuple[FrozenSet[str], CanonicalProperties]


def node_key(node: Node) -> NodeKey:
    """Two nodes can be matched only if their keys are equal."""
    return (node.labels, canonical_properties(node.properties))


def node_predicate_matches(reference: Node, subject: Node) -> bool:
    """
    Same labels (as sets) and equal property maps. This holds in both
    modes: a subject node with an extra label or property is a different
    node, not a superset.
    """
    return node_key(reference) == node_key(subject)


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    mode: MatchMode
    mapping: Dict[int, int] = field(default_factory=dict)
    report: Optional[MismatchReport] = None
    steps: int = 0


class GraphMatcher:
    """
    Decides whether a subject graph equals (EXACT) or embeds (EMBEDDED) a
    reference graph.

    Reference nodes are placed one at a time onto compatible subject
    nodes. Placing a node claims, for every already placed neighbour, the
    relationships the reference needs from the matching subject signature
    buckets. Relationships with the same signature are interchangeable,
    so only counts are claimed, and a relationship can never be claimed
    twice. When a node cannot be placed the search backtracks.
    """

    def __init__(
        self,
        reference: Graph,
        subject: Graph,
        mode: MatchMode = MatchMode.EXACT,
        config: Optional[MatcherConfig] = None,
    ) -> None:
        self.reference = reference
        self.subject = subject
        self.mode = mode
        self.config = config or MatcherConfig()

        self._ref_index = SignatureIndex(reference)
        self._sub_index = SignatureIndex(subject)
        self._ref_neighbours = _neighbours(reference, self._ref_index)
        self._sub_neighbours = _neighbours(subject, self._sub_index)
        self._state = MatchState()

        self._steps = 0
        self._deepest = 0
        self._deepest_violation: Optional[BucketViolation] = None
        self._deepest_node: Optional[int] = None

    @property
    def exact(self) -> bool:
        return self.mode is MatchMode.EXACT

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def match(self) -> MatchResult:
        t0 = time.perf_counter()
        result = self._match()

        logging.getLogger("graphunit.matcher").info(
            "mode=%s matched=%s reference=%d/%d subject=%d/%d steps=%d in %.3fs",
            self.mode.value,
            result.matched,
            self.reference.node_count(),
            self.reference.relationship_count(),
            self.subject.node_count(),
            self.subject.relationship_count(),
            result.steps,
            time.perf_counter() - t0,
        )
        return result

    def _match(self) -> MatchResult:
        if not self._cardinality_ok():
            return self._failure(MismatchReason.CARDINALITY)

        candidates = self._candidates()

        unmatched_ref, unmatched_sub = self._unmatched_nodes(candidates)
        if unmatched_ref or unmatched_sub:
            return self._failure(
                MismatchReason.NODES,
                unmatched_reference=unmatched_ref,
                unmatched_subject=unmatched_sub,
            )

        order = self._placement_order(candidates)
        if self._search(order, candidates):
            return MatchResult(
                matched=True,
                mode=self.mode,
                mapping=self._state.mapping(),
                steps=self._steps,
            )

        unmatched = []
        if self._deepest_node is not None:
            unmatched.append(self.reference.get_node(self._deepest_node).describe())
        return self._failure(MismatchReason.STRUCTURE, unmatched_reference=unmatched)

    # ------------------------------------------------------------------
    # Fast rejection
    # ------------------------------------------------------------------

    def _cardinality_ok(self) -> bool:
        ref_nodes = self.reference.node_count()
        ref_rels = self.reference.relationship_count()
        sub_nodes = self.subject.node_count()
        sub_rels = self.subject.relationship_count()

        if self.exact:
            return ref_nodes == sub_nodes and ref_rels == sub_rels
        return ref_nodes <= sub_nodes and ref_rels <= sub_rels

    def _candidates(self) -> Dict[int, List[int]]:
        by_key: Dict[NodeKey, List[Node]] = {}
        for node in self.subject.nodes.values():
            by_key.setdefault(node_key(node), []).append(node)

        candidates: Dict[int, List[int]] = {}
        for ref in self.reference.nodes.values():
            candidates[ref.id] = [
                s.id for s in by_key.get(node_key(ref), ()) if self._degree_ok(ref.id, s.id)
            ]
        return candidates

    def _degree_ok(self, ref: int, sub: int) -> bool:
        if not self.config.degree_pruning:
            return True

        r_out, r_in = self.reference.out_degree(ref), self.reference.in_degree(ref)
        s_out, s_in = self.subject.out_degree(sub), self.subject.in_degree(sub)

        if self.exact:
            return r_out == s_out and r_in == s_in
        return r_out <= s_out and r_in <= s_in

    def _unmatched_nodes(
        self, candidates: Dict[int, List[int]]
    ) -> Tuple[List[str], List[str]]:
        limit = self.config.max_diagnostic_items

        unmatched_ref = [
            self.reference.get_node(ref).describe()
            for ref, subs in sorted(candidates.items())
            if not subs
        ][:limit]

        unmatched_sub: List[str] = []
        if self.exact:
            ref_keys = Counter(node_key(n) for n in self.reference.nodes.values())
            examples: Dict[NodeKey, Node] = {}
            sub_keys: "Counter[NodeKey]" = Counter()
            for node in self.subject.nodes.values():
                key = node_key(node)
                sub_keys[key] += 1
                examples.setdefault(key, node)

            surplus = sub_keys - ref_keys
            unmatched_sub = [
                _with_count(examples[key].describe(), count)
                for key, count in surplus.items()
            ][:limit]

            # Surplus on the reference side with candidates still available
            # (e.g. two identical reference nodes, one subject node).
            if not unmatched_ref and unmatched_sub:
                ref_examples = {node_key(n): n for n in self.reference.nodes.values()}
                unmatched_ref = [
                    _with_count(ref_examples[key].describe(), count)
                    for key, count in (ref_keys - sub_keys).items()
                ][:limit]

        return unmatched_ref, unmatched_sub

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _placement_order(self, candidates: Dict[int, List[int]]) -> List[int]:
        """
        Most constrained first, and preferably connected to a node placed
        earlier so that relationship buckets are checked as soon as
        possible.
        """
        remaining: Set[int] = set(self.reference.nodes)
        neighbours = self._ref_neighbours
        order: List[int] = []
        placed: Set[int] = set()

        while remaining:
            best = min(
                remaining,
                key=lambda n: (
                    0 if neighbours[n] & placed else 1,
                    len(candidates[n]),
                    -len(neighbours[n]),
                    n,
                ),
            )
            order.append(best)
            placed.add(best)
            remaining.discard(best)

        return order

    def _search(self, order: List[int], candidates: Dict[int, List[int]]) -> bool:
        """
        Iterative backtracking. ``cursors[d]`` is the next candidate to try
        for the reference node at depth ``d``.
        """
        state = self._state
        cursors = [0] * len(order)
        depth = 0
        logger = logging.getLogger("graphunit.matcher")

        while True:
            if depth == len(order):
                if self._complete():
                    return True
                # Only reachable if buckets were left unclaimed; try the
                # next alternative for the last placed node.
                if depth == 0:
                    return False
                depth -= 1
                state.pop()
                continue

            ref = order[depth]
            options = candidates[ref]
            placed = False

            while cursors[depth] < len(options):
                sub = options[cursors[depth]]
                cursors[depth] += 1
                if state.is_used(sub):
                    continue

                self._steps += 1
                reservations, violation = self._claim(ref, sub)
                if violation is not None:
                    self._record(depth, ref, violation)
                    if self.config.log_search:
                        logger.debug(
                            "reject ref=%d sub=%d depth=%d: %s",
                            ref,
                            sub,
                            depth,
                            violation.render(),
                        )
                    continue

                state.push(ref, sub, reservations)
                if self.config.log_search:
                    logger.debug("place ref=%d sub=%d depth=%d", ref, sub, depth)
                placed = True
                break

            if placed:
                depth += 1
                continue

            self._record(depth, ref, None)
            cursors[depth] = 0
            if depth == 0:
                return False
            depth -= 1
            state.pop()

    def _claim(
        self, ref: int, sub: int
    ) -> Tuple[List[Reservation], Optional[BucketViolation]]:
        """
        Work out which subject relationships placing ``ref`` on ``sub``
        would claim, or the first bucket that cannot supply them.
        """
        state = self._state
        reservations: List[Reservation] = []

        for ref_other in self._placed_partners(ref, sub):
            # Placing ``ref`` itself handles its self-loops.
            sub_other = sub if ref_other == ref else state.subject_of(ref_other)
            directions = [((ref, ref_other), (sub, sub_other))]
            if ref_other != ref:
                directions.append(((ref_other, ref), (sub_other, sub)))

            for ref_pair, sub_pair in directions:
                violation = self._claim_pair(ref_pair, sub_pair, reservations)
                if violation is not None:
                    return [], violation

        return reservations, None

    def _placed_partners(self, ref: int, sub: int) -> List[int]:
        """
        Reference nodes whose relationships with ``ref`` must be checked:
        ``ref`` itself and already placed neighbours. In EXACT mode this
        also includes placed nodes the subject connects to ``sub`` even
        though the reference does not connect them to ``ref``.
        """
        state = self._state
        partners: Set[int] = {ref}

        for ref_other in self._ref_neighbours[ref]:
            if state.subject_of(ref_other) is not None:
                partners.add(ref_other)

        if self.exact:
            for sub_other in self._sub_neighbours[sub]:
                ref_other = state.reference_of(sub_other)
                if ref_other is not None:
                    partners.add(ref_other)

        return sorted(partners)

    def _claim_pair(
        self,
        ref_pair: NodePair,
        sub_pair: NodePair,
        reservations: List[Reservation],
    ) -> Optional[BucketViolation]:
        required = self._ref_index.bucket(*ref_pair)
        offered = self._sub_index.bucket(*sub_pair)

        for sig, count in required.items():
            available = offered[sig] - self._state.consumed(sub_pair, sig)
            short = available < count
            if self.exact:
                short = short or available != count
            if short:
                return self._violation(ref_pair, sig, count, available)
            reservations.append((sub_pair, sig, count))

        if self.exact:
            for sig, count in offered.items():
                if sig in required:
                    continue
                available = count - self._state.consumed(sub_pair, sig)
                if available > 0:
                    return self._violation(
                        ref_pair, sig, 0, available, sub_pair=sub_pair
                    )

        return None

    def _complete(self) -> bool:
        if not self.exact:
            return True
        claimed = self._state.total_consumed()
        return (
            claimed == self.reference.relationship_count()
            and claimed == self.subject.relationship_count()
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _violation(
        self,
        ref_pair: NodePair,
        sig: Signature,
        required: int,
        available: int,
        sub_pair: Optional[NodePair] = None,
    ) -> BucketViolation:
        if sub_pair is None:
            example = self._ref_index.example(*ref_pair, sig)
        else:
            example = self._sub_index.example(*sub_pair, sig)

        return BucketViolation(
            start=self.reference.get_node(ref_pair[0]).describe(),
            end=self.reference.get_node(ref_pair[1]).describe(),
            relationship=example.describe(),
            required=required,
            available=available,
        )

    def _record(
        self, depth: int, ref: int, violation: Optional[BucketViolation]
    ) -> None:
        if depth > self._deepest or self._deepest_node is None:
            self._deepest = depth
            self._deepest_node = ref
            self._deepest_violation = violation
        elif depth == self._deepest and self._deepest_violation is None:
            self._deepest_violation = violation

    def _failure(
        self,
        reason: MismatchReason,
        unmatched_reference: Optional[List[str]] = None,
        unmatched_subject: Optional[List[str]] = None,
    ) -> MatchResult:
        report = MismatchReport(
            mode=self.mode,
            reason=reason,
            reference_nodes=self.reference.node_count(),
            reference_relationships=self.reference.relationship_count(),
            subject_nodes=self.subject.node_count(),
            subject_relationships=self.subject.relationship_count(),
            unmatched_reference_nodes=list(unmatched_reference or []),
            unmatched_subject_nodes=list(unmatched_subject or []),
            deepest_mapping=self._deepest,
            violation=self._deepest_violation,
            steps=self._steps,
        )
        return MatchResult(matched=False, mode=self.mode, report=report, steps=self._steps)


def _neighbours(graph: Graph, index: SignatureIndex) -> Dict[int, Set[int]]:
    neighbours: Dict[int, Set[int]] = {n: set() for n in graph.nodes}
    for start, end in index.pairs():
        if start != end:
            neighbours[start].add(end)
            neighbours[end].add(start)
    return neighbours


def _with_count(description: str, count: int) -> str:
    return description if count == 1 else f"{description} x{count}"
