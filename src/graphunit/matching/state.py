from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from graphunit.matching.signature import NodePair, Signature

Reservation = Tuple[NodePair, Signature, int]


@dataclass
class Frame:
    reference: int
    subject: int
    reservations: List[Reservation] = field(default_factory=list)


class MatchState:
    """
    Partial mapping built by the matcher.

    Holds the reference → subject node slots, the set of subject nodes
    already taken, and how many relationships of each subject signature
    bucket have been claimed. Every placement is a frame: ``push`` applies
    it and ``pop`` undoes exactly that frame, so backtracking never leaves
    stale reservations behind.
    """

    def __init__(self) -> None:
        self._slots: Dict[int, int] = {}
        self._inverse: Dict[int, int] = {}
        self._consumed: Dict[NodePair, "Counter[Signature]"] = {}
        self._frames: List[Frame] = []
        self._total_consumed = 0

    # -------------------- Queries --------------------

    def subject_of(self, reference: int) -> Optional[int]:
        return self._slots.get(reference)

    def reference_of(self, subject: int) -> Optional[int]:
        return self._inverse.get(subject)

    def is_used(self, subject: int) -> bool:
        return subject in self._inverse

    def consumed(self, pair: NodePair, sig: Signature) -> int:
        bucket = self._consumed.get(pair)
        return bucket[sig] if bucket else 0

    def total_consumed(self) -> int:
        return self._total_consumed

    def mapping(self) -> Dict[int, int]:
        return dict(self._slots)

    # -------------------- Mutation --------------------

    def push(self, reference: int, subject: int, reservations: List[Reservation]) -> None:
        if reference in self._slots:
            raise ValueError(f"Reference node {reference} is already mapped")
        if subject in self._inverse:
            raise ValueError(f"Subject node {subject} is already taken")

        self._slots[reference] = subject
        self._inverse[subject] = reference
        for pair, sig, count in reservations:
            self._consumed.setdefault(pair, Counter())[sig] += count
            self._total_consumed += count
        self._frames.append(Frame(reference, subject, list(reservations)))

    def pop(self) -> Frame:
        frame = self._frames.pop()
        del self._slots[frame.reference]
        del self._inverse[frame.subject]
        for pair, sig, count in frame.reservations:
            bucket = self._consumed[pair]
            bucket[sig] -= count
            if bucket[sig] == 0:
                del bucket[sig]
            if not bucket:
                del self._consumed[pair]
            self._total_consumed -= count
        return frame
