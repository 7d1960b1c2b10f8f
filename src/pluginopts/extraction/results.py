"""
Per-value outcomes used throughout extraction.

Errors are values here: a failed default or option never raises, it comes
back as Err and the caller decides what to drop.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from pluginopts.syntax.nodes import SyntaxNode


class _Missing:
    """Sentinel for "no value"; None is reserved for an explicit null."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    return value is MISSING


class ExtractionErrorKind(str, Enum):
    MISSING_PROPERTY = "MissingProperty"
    CANNOT_EVALUATE = "CannotEvaluate"
    UNRESOLVABLE_SYMBOL = "UnresolvableSymbol"
    TYPE_INFERENCE_FAILED = "TypeInferenceFailed"
    UNSUPPORTED_PATTERN = "UnsupportedPattern"
    INVALID_NODE_TYPE = "InvalidNodeType"


@dataclass(frozen=True)
class ExtractionError:
    kind: ExtractionErrorKind
    message: str
    node: Optional[SyntaxNode] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def __str__(self):
        where = f" (line {self.node.line})" if self.node is not None else ""
        return f"{self.kind.value}: {self.message}{where}"


@dataclass(frozen=True)
class Ok:
    value: Any

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: ExtractionError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok, Err]


def err(kind: ExtractionErrorKind, message: str, node: Optional[SyntaxNode] = None, **context) -> Err:
    return Err(ExtractionError(kind=kind, message=message, node=node, context=context))
