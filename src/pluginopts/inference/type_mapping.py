"""
Baseline type from the declared `type:` marker, the declared TypeScript
annotation behind it, or the runtime shape of the literal default.
"""

from typing import Any, Optional

from pluginopts.extraction.config import OPTION_TYPE_CODES, STRUCTURED_CATEGORY_MARKERS
from pluginopts.extraction.results import MISSING
from pluginopts.inference.config import (
    CATEGORY_TYPES,
    NIX_TYPE_ATTRS,
    NIX_TYPE_BOOL,
    NIX_TYPE_FLOAT,
    NIX_TYPE_INT,
    NIX_TYPE_STR,
    TS_ARRAY_MARKERS,
    TS_TYPE_BOOLEAN,
    TS_TYPE_NUMBER,
    TS_TYPE_STRING,
)
from pluginopts.inference.state import SettingEvidence
from pluginopts.syntax.nodes import (
    SyntaxNode,
    boolean_value,
    is_identifier,
    is_numeric_literal,
    numeric_value,
    string_value,
    unwrap,
)
from pluginopts.syntax.symbols import SymbolTable


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number_type(value: Any) -> str:
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return NIX_TYPE_INT
    return NIX_TYPE_FLOAT


def runtime_type(default: Any) -> str:
    """Type implied by the shape of an evaluated default."""
    if default is MISSING:
        return NIX_TYPE_STR
    if isinstance(default, bool):
        return NIX_TYPE_BOOL
    if isinstance(default, str):
        return NIX_TYPE_STR
    if _is_number(default):
        return _number_type(default)
    if isinstance(default, dict):
        return NIX_TYPE_ATTRS
    return NIX_TYPE_STR


def _structured_type(default: Any) -> str:
    if default is MISSING:
        return NIX_TYPE_ATTRS
    return runtime_type(default)


def option_type_name(type_node: SyntaxNode, symbols: SymbolTable) -> Optional[str]:
    """
    Category name for a `type:` marker.

    `OptionType.X` resolves through the enum declaration when one is
    available, and falls back to the member name X otherwise.
    """
    node = unwrap(type_node)
    if node.kind == "member_expression":
        decl = symbols.member_declaration(node)
        if decl is not None and decl.kind == "enum_member" and _is_number(decl.value):
            name = OPTION_TYPE_CODES.get(int(decl.value))
            if name is not None:
                return name
        prop = node.field("property")
        return prop.text if prop is not None else None
    if is_identifier(node):
        decl = symbols.declaration_of(node)
        if decl is not None and decl.kind == "enum_member" and _is_number(decl.value):
            return OPTION_TYPE_CODES.get(int(decl.value))
        return None
    if is_numeric_literal(node):
        value = numeric_value(node)
        return OPTION_TYPE_CODES.get(int(value))
    return None


def _literal_type_text(node: Optional[SyntaxNode]) -> Optional[str]:
    node = unwrap(node)
    if node is None:
        return None
    if string_value(node) is not None or node.kind == "template_string":
        return TS_TYPE_STRING
    if node.kind == "number":
        return TS_TYPE_NUMBER
    if boolean_value(node) is not None:
        return TS_TYPE_BOOLEAN
    return None


def declared_type_text(type_node: Optional[SyntaxNode], symbols: SymbolTable) -> Optional[str]:
    """
    Best-effort TypeScript type of a `type:` expression that is not a
    category marker: its literal kind, or the annotation/literal of the
    variable it names.
    """
    if type_node is None:
        return None
    node = unwrap(type_node)
    literal = _literal_type_text(node)
    if literal is not None:
        return literal
    if is_identifier(node):
        decl = symbols.declaration_of(node)
        if decl is None:
            return None
        if decl.type_node is not None:
            return decl.type_node.text
        return _literal_type_text(decl.initializer)
    return None


def _type_from_declared_text(text: str, default: Any) -> Optional[str]:
    if TS_TYPE_STRING in text:
        return NIX_TYPE_STR
    if TS_TYPE_NUMBER in text:
        return _number_type(default) if _is_number(default) else NIX_TYPE_INT
    if TS_TYPE_BOOLEAN in text:
        return NIX_TYPE_BOOL
    if any(marker in text for marker in TS_ARRAY_MARKERS):
        # list shape is settled by the array stage
        return NIX_TYPE_ATTRS
    return None


def declared_nix_type(evidence: SettingEvidence) -> str:
    default = evidence.default
    type_node = evidence.type_node
    if type_node is None:
        return runtime_type(default)

    name = option_type_name(type_node, evidence.symbols)
    if name is not None:
        if name == "NUMBER":
            return _number_type(default) if _is_number(default) else NIX_TYPE_FLOAT
        if name in STRUCTURED_CATEGORY_MARKERS:
            return _structured_type(default)
        if name in CATEGORY_TYPES:
            return CATEGORY_TYPES[name]
        return runtime_type(default)

    if evidence.declared_type_text:
        inferred = _type_from_declared_text(evidence.declared_type_text, default)
        if inferred is not None:
            return inferred
    return runtime_type(default)
