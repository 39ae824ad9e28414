"""
Graph matching: decides whether a subject graph equals, or embeds, a
reference graph, and explains why not when it does not.
"""

from graphunit.matching.matcher import (
    GraphMatcher,
    MatchResult,
    node_key,
    node_predicate_matches,
)
from graphunit.matching.report import (
    BucketViolation,
    MatchMode,
    MismatchReason,
    MismatchReport,
)
from graphunit.matching.signature import SignatureIndex, signature_bucket, signature_of
from graphunit.matching.state import MatchState

__all__ = [
    "BucketViolation",
    "GraphMatcher",
    "MatchMode",
    "MatchResult",
    "MatchState",
    "MismatchReason",
    "MismatchReport",
    "SignatureIndex",
    "node_key",
    "node_predicate_matches",
    "signature_bucket",
    "signature_of",
]
