from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------
# Graph matching
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class MatcherConfig:
    """
    Controls the backtracking search used by the graph assertions.

    None of these settings change whether two graphs match, only how
    fast the answer is found and how much is reported.
    """

    degree_pruning: bool = True
    max_diagnostic_items: int = 5
    log_search: bool = False


# ---------------------------------------------------------------------
# Inclusion policies
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class PolicyConfig:
    """
    Defaults for the built-in inclusion policies.
    """

    internal_label_prefix: str = "_GA_"


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class GraphUnitConfig:
    """
    Root configuration object for graphunit.

    This object is intended to be:
    - constructed explicitly (or via ``load_config``)
    - passed to the assertions that need it
    - treated as immutable
    """

    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
