"""Shared types for rule evaluator functions"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple


class _Missing:
    """Marks a ``field`` that is absent from the matched node (as opposed to null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class FunctionContext:
    """What an evaluator knows about the node it is checking."""
    document: Any
    path: Tuple[Any, ...] = ()
    rule_id: str = ""

    @property
    def property_name(self) -> str:
        """Name of the checked property (last path segment)."""
        if not self.path:
            return ""
        return str(self.path[-1])

    def subject(self) -> str:
        """Human label used to start evaluator messages."""
        if not self.path:
            return "Document"
        return f'"{self.property_name}" property'


# An evaluator returns zero or more results: {"message": str, "path": optional tuple}
FunctionResult = Dict[str, Any]
RuleFunction = Callable[[Any, Optional[Dict[str, Any]], FunctionContext], List[FunctionResult]]


def stringify_keys(node: Any) -> Any:
    """Copy ``node`` with every mapping key as a string (YAML allows int keys like 200)."""
    if isinstance(node, dict):
        return {str(key): stringify_keys(value) for key, value in node.items()}
    if isinstance(node, list):
        return [stringify_keys(item) for item in node]
    return node
