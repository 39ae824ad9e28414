from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict
import logging

from pydantic import ValidationError

from graphunit.exceptions import GraphUnitError, ScriptExecutionError
from graphunit.graph.store import GraphStore
from graphunit.script.models import ConstructionScript


class ScriptEngine(ABC):
    """
    Executes a construction script against a store.

    The graph assertions treat scripts as opaque strings: whatever
    language a concrete engine understands, its only observable effect
    is the graph it leaves in the store. Invalid scripts must raise
    ``ScriptExecutionError``.
    """

    @abstractmethod
    def execute(self, script: str, store: GraphStore) -> None:
        raise NotImplementedError


class JsonScriptEngine(ScriptEngine):
    """
    Engine for JSON construction documents::

        {
          "nodes": [
            {"key": "m", "labels": ["Person"], "properties": {"name": "Michal"}},
            {"key": "c", "labels": ["Company"], "properties": {"name": "GraphAware"}}
          ],
          "relationships": [
            {"start": "m", "type": "WORKS_FOR", "end": "c"}
          ]
        }

    Either everything in the document is created or nothing is.
    """

    def execute(self, script: str, store: GraphStore) -> None:
        document = self.parse(script)

        try:
            with store.transaction():
                self._apply(document, store, script)
        except ScriptExecutionError:
            raise
        except GraphUnitError as exc:
            raise ScriptExecutionError(
                f"Invalid construction script: {exc.message}", script=script
            ) from exc

        logging.getLogger("graphunit.script").debug(
            "executed script nodes=%d relationships=%d",
            len(document.nodes),
            len(document.relationships),
        )

    @staticmethod
    def parse(script: str) -> ConstructionScript:
        try:
            return ConstructionScript.model_validate_json(script)
        except ValidationError as exc:
            raise ScriptExecutionError(
                f"Invalid construction script: {exc}", script=script
            ) from exc

    @staticmethod
    def _apply(document: ConstructionScript, store: GraphStore, script: str) -> None:
        ids: Dict[str, int] = {}

        for spec in document.nodes:
            if spec.key is not None and spec.key in ids:
                raise ScriptExecutionError(
                    f"Duplicate node key '{spec.key}'", script=script
                )
            node = store.create_node(*spec.labels, **spec.properties)
            if spec.key is not None:
                ids[spec.key] = node.id

        for spec in document.relationships:
            for endpoint in (spec.start, spec.end):
                if endpoint not in ids:
                    raise ScriptExecutionError(
                        f"Relationship {spec.start}-[:{spec.type}]->{spec.end} "
                        f"refers to unknown node '{endpoint}'",
                        script=script,
                    )
            store.create_relationship(
                ids[spec.start], ids[spec.end], spec.type, **spec.properties
            )
