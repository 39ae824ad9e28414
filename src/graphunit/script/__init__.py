"""
Construction scripts: the boundary between graphunit and whatever engine
builds the expected graph.
"""

from graphunit.script.engine import JsonScriptEngine, ScriptEngine
from graphunit.script.builder import ScriptBuilder
from graphunit.script.models import ConstructionScript, NodeSpec, RelationshipSpec
from graphunit.script.reference import reference_graph

__all__ = [
    "ConstructionScript",
    "JsonScriptEngine",
    "NodeSpec",
    "RelationshipSpec",
    "ScriptBuilder",
    "ScriptEngine",
    "reference_graph",
]
