"""
Error taxonomy for graphunit.

Mismatches are assertion failures, not crashes: ``GraphMismatch`` derives
from ``AssertionError`` so test runners report it as a failed test.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from graphunit.matching.report import MismatchReport


class GraphUnitError(Exception):
    """Base class for every error raised by graphunit."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class ScriptExecutionError(GraphUnitError):
    """A construction script could not be executed."""

    def __init__(self, message: str, script: Optional[str] = None) -> None:
        details: Dict[str, Any] = {}
        if script is not None:
            details["script"] = script
        super().__init__(message, "SCRIPT_EXECUTION_ERROR", details)


class InvalidPropertyValue(GraphUnitError):
    """A value that cannot be stored as a property."""

    def __init__(self, key: str, value: Any) -> None:
        super().__init__(
            f"Unsupported value for property '{key}': {value!r}",
            "INVALID_PROPERTY_VALUE",
            {"key": key, "value_type": type(value).__name__},
        )


class GraphIntegrityError(GraphUnitError):
    """A graph snapshot would contain a dangling relationship."""

    def __init__(self, message: str, relationship_id: Optional[int] = None) -> None:
        details: Dict[str, Any] = {}
        if relationship_id is not None:
            details["relationship_id"] = relationship_id
        super().__init__(message, "GRAPH_INTEGRITY_ERROR", details)


class ConstraintViolation(GraphUnitError):
    """A store mutation would break the store's invariants."""

    def __init__(self, message: str, element_id: Optional[int] = None) -> None:
        details: Dict[str, Any] = {}
        if element_id is not None:
            details["element_id"] = element_id
        super().__init__(message, "CONSTRAINT_VIOLATION", details)


class NotFoundError(GraphUnitError):
    """An element id that is not (or no longer) present in the store."""

    def __init__(self, kind: str, element_id: int) -> None:
        super().__init__(
            f"{kind} {element_id} not found",
            "NOT_FOUND",
            {"kind": kind, "element_id": element_id},
        )


class GraphMismatch(GraphUnitError, AssertionError):
    """
    The subject graph is not equal to (or does not contain) the reference
    graph. ``report`` holds the structured diagnostics.
    """

    def __init__(self, report: "MismatchReport") -> None:
        self.report = report
        super().__init__(report.render(), "GRAPH_MISMATCH", report.to_dict())

    def __str__(self) -> str:
        return self.message
