from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Tuple

from graphunit.graph.schema import Graph, Relationship
from graphunit.values import canonical_properties
from graphunit.values.equality import CanonicalProperties

Signature = Tuple[str, CanonicalProperties]
NodePair = Tuple[int, int]

_EMPTY: "Counter[Signature]" = Counter()


def signature_of(rel: Relationship) -> Signature:
    """
    Relationships with the same type and (semantically) equal properties
    are interchangeable when matching.
    """
    return (rel.type, canonical_properties(rel.properties))


def signature_bucket(graph: Graph, start: int, end: int) -> "Counter[Signature]":
    """Count of relationships from ``start`` to ``end`` per signature."""
    return Counter(signature_of(rel) for rel in graph.relationships_between(start, end))


class SignatureIndex:
    """
    Precomputed signature buckets for every ordered node pair of a graph
    that has at least one relationship.
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self._buckets: Dict[NodePair, "Counter[Signature]"] = {}
        self._examples: Dict[Tuple[NodePair, Signature], Relationship] = {}

        for pair in graph.connected_pairs():
            bucket: "Counter[Signature]" = Counter()
            for rel in graph.relationships_between(*pair):
                sig = signature_of(rel)
                bucket[sig] += 1
                self._examples.setdefault((pair, sig), rel)
            self._buckets[pair] = bucket

    def bucket(self, start: int, end: int) -> "Counter[Signature]":
        return self._buckets.get((start, end), _EMPTY)

    def has_relationships(self, start: int, end: int) -> bool:
        return (start, end) in self._buckets

    def pairs(self) -> Iterable[NodePair]:
        return self._buckets.keys()

    def example(self, start: int, end: int, sig: Signature) -> Relationship:
        return self._examples[((start, end), sig)]
