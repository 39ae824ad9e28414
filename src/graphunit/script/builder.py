from __future__ import annotations

from typing import Any, Dict, List, Optional

from graphunit.script.models import ConstructionScript, NodeSpec, RelationshipSpec


class ScriptBuilder:
    """
    Fluent helper producing JSON construction scripts::

        script = (
            ScriptBuilder()
            .node("m", "Person", name="Michal")
            .node("c", "Company", name="GraphAware")
            .relationship("m", "WORKS_FOR", "c")
            .to_json()
        )
    """

    def __init__(self) -> None:
        self._nodes: List[NodeSpec] = []
        self._relationships: List[RelationshipSpec] = []

    def node(
        self, key: Optional[str], /, *labels: str, **properties: Any
    ) -> "ScriptBuilder":
        self._nodes.append(
            NodeSpec(key=key, labels=list(labels), properties=dict(properties))
        )
        return self

    def relationship(
        self,
        start: str,
        type: str,
        end: str,
        /,
        **properties: Any,
    ) -> "ScriptBuilder":
        self._relationships.append(
            RelationshipSpec(start=start, type=type, end=end, properties=dict(properties))
        )
        return self

    def build(self) -> ConstructionScript:
        return ConstructionScript(
            nodes=list(self._nodes),
            relationships=list(self._relationships),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.build().model_dump(exclude_none=True)

    def to_json(self) -> str:
        return self.build().model_dump_json(exclude_none=True)
