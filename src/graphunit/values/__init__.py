"""
Property value semantics shared by the snapshot reader, the signature
index and the matcher.
"""

from graphunit.values.equality import (
    canonical_properties,
    canonical_value,
    equal,
    properties_equal,
    render_value,
    validate_value,
)

__all__ = [
    "canonical_properties",
    "canonical_value",
    "equal",
    "properties_equal",
    "render_value",
    "validate_value",
]
