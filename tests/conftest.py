from __future__ import annotations

import pytest

from graphunit.graph.store import GraphStore
from graphunit.script import ScriptBuilder


@pytest.fixture()
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture()
def colours() -> ScriptBuilder:
    """
    (blue)<-[:REL]-(red1)-[:REL]->(black1)-[:REL]->(green),
    (red2)-[:REL]->(black2)
    """
    return (
        ScriptBuilder()
        .node("blue", name="Blue")
        .node("red1", name="Red")
        .node("black1", name="Black")
        .node("green", name="Green")
        .node("red2", name="Red")
        .node("black2", name="Black")
        .relationship("red1", "REL", "blue")
        .relationship("red1", "REL", "black1")
        .relationship("black1", "REL", "green")
        .relationship("red2", "REL", "black2")
    )


@pytest.fixture()
def labelled_colours() -> ScriptBuilder:
    """Same shape as ``colours``, every node also labelled with its colour."""
    return (
        ScriptBuilder()
        .node("blue", "Blue", name="Blue")
        .node("red1", "Red", name="Red")
        .node("black1", "Black", name="Black")
        .node("green", "Green", name="Green")
        .node("red2", "Red", name="Red")
        .node("black2", "Black", name="Black")
        .relationship("red1", "REL", "blue")
        .relationship("red1", "REL", "black1")
        .relationship("black1", "REL", "green")
        .relationship("red2", "REL", "black2")
    )
