from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeSpec(BaseModel):
    """
    A node to create. ``key`` names the node so relationships can refer
    to it; anonymous nodes may omit it.
    """

    model_config = ConfigDict(extra="forbid")

    key: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)


class RelationshipSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: str
    type: str = Field(min_length=1)
    end: str
    properties: Dict[str, Any] = Field(default_factory=dict)


class ConstructionScript(BaseModel):
    """
    Declarative description of a graph: the nodes and relationships to
    create, in order.
    """

    model_config = ConfigDict(extra="forbid")

    nodes: List[NodeSpec] = Field(default_factory=list)
    relationships: List[RelationshipSpec] = Field(default_factory=list)
