from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class MatchMode(str, Enum):
    EXACT = "exact"
    EMBEDDED = "embedded"


class MismatchReason(str, Enum):
    CARDINALITY = "cardinality"
    NODES = "nodes"
    STRUCTURE = "structure"


@dataclass(frozen=True)
class BucketViolation:
    """
    A signature bucket that could not be satisfied: between the subject
    images of ``start`` and ``end``, ``required`` relationships of the
    signature were needed and ``available`` were found.
    """

    start: str
    end: str
    relationship: str
    required: int
    available: int

    def render(self) -> str:
        return (
            f"{self.start}-{self.relationship}->{self.end}: "
            f"expected {self.required}, found {self.available}"
        )


@dataclass(frozen=True)
class MismatchReport:
    """
    Why no mapping exists between a reference and a subject graph.
    """

    mode: MatchMode
    reason: MismatchReason

    reference_nodes: int
    reference_relationships: int
    subject_nodes: int
    subject_relationships: int

    unmatched_reference_nodes: List[str] = field(default_factory=list)
    unmatched_subject_nodes: List[str] = field(default_factory=list)
    deepest_mapping: int = 0
    violation: Optional[BucketViolation] = None
    steps: int = 0

    @property
    def node_delta(self) -> int:
        return self.subject_nodes - self.reference_nodes

    @property
    def relationship_delta(self) -> int:
        return self.subject_relationships - self.reference_relationships

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        data["reason"] = self.reason.value
        data["node_delta"] = self.node_delta
        data["relationship_delta"] = self.relationship_delta
        return data

    def render(self) -> str:
        if self.mode is MatchMode.EXACT:
            headline = "Subject graph is not the same as the reference graph"
        else:
            headline = "Subject graph does not contain the reference graph"

        lines = [
            f"{headline} ({self.reason.value}).",
            f"  reference: {self.reference_nodes} nodes, "
            f"{self.reference_relationships} relationships",
            f"  subject:   {self.subject_nodes} nodes, "
            f"{self.subject_relationships} relationships",
        ]

        if self.unmatched_reference_nodes:
            lines.append("  reference nodes without a match:")
            lines.extend(f"    {n}" for n in self.unmatched_reference_nodes)

        if self.unmatched_subject_nodes:
            lines.append("  subject nodes without a match:")
            lines.extend(f"    {n}" for n in self.unmatched_subject_nodes)

        if self.reason is MismatchReason.STRUCTURE:
            lines.append(
                f"  deepest partial mapping placed {self.deepest_mapping} of "
                f"{self.reference_nodes} nodes after {self.steps} steps"
            )

        if self.violation is not None:
            lines.append(f"  first unsatisfied relationships: {self.violation.render()}")

        return "\n".join(lines)
