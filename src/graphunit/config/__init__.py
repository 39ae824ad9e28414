"""
Configuration layer for graphunit.

Configuration in graphunit is:
- Explicit (passed, not global)
- Typed (frozen dataclasses)
- Overridable from the environment (``GRAPHUNIT_*`` via dynaconf)
"""

from graphunit.config.settings import (
    MatcherConfig,
    PolicyConfig,
    GraphUnitConfig,
)
from graphunit.config.loader import build_config, load_config

__all__ = [
    "MatcherConfig",
    "PolicyConfig",
    "GraphUnitConfig",
    "build_config",
    "load_config",
]
