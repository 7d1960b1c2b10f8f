"""
Structural predicates over a setting descriptor.

These look only at the shape of the `default` expression (and the type
marker); they never evaluate anything.
"""

from typing import Optional

from pluginopts.extraction.config import (
    ARRAY_TYPE_PATTERN,
    BARE_COMPONENT_PROPERTIES,
    CUSTOM_CATEGORY,
    PROPERTY_NAMES,
    STRING_ARRAY_TYPE_PATTERN,
)
from pluginopts.extraction.navigator import (
    array_elements,
    get_property,
    member_name,
    object_members,
    property_initializer,
)
from pluginopts.extraction.resolver import (
    function_body_expression,
    resolve_identifier_initializer,
    resolve_identifier_with_fallback,
)
from pluginopts.extraction.properties import type_property
from pluginopts.syntax.nodes import (
    SyntaxNode,
    as_operand,
    as_type_text,
    is_getter,
    is_identifier,
    is_no_substitution_template,
    is_string_literal,
)
from pluginopts.syntax.symbols import SymbolTable


def default_initializer(obj: SyntaxNode) -> Optional[SyntaxNode]:
    """Raw (not unwrapped) initializer of the `default: ...` pair."""
    return property_initializer(obj, PROPERTY_NAMES["default"])


def default_member(obj: SyntaxNode) -> Optional[SyntaxNode]:
    """The `default` member in any form, including `get default() {}`."""
    return get_property(obj, PROPERTY_NAMES["default"])


def has_getter_default(obj: SyntaxNode) -> bool:
    return is_getter(default_member(obj))


# ---------------------------------------------------------------------------
# Type marker
# ---------------------------------------------------------------------------

def is_custom_type(obj: SyntaxNode) -> bool:
    type_node = type_property(obj)
    return type_node is not None and CUSTOM_CATEGORY in type_node.text


def has_component_prop(obj: SyntaxNode) -> bool:
    return get_property(obj, PROPERTY_NAMES["component"]) is not None


def is_bare_component_setting(obj: SyntaxNode) -> bool:
    """Only structural keys (type, component, description...) and no default at all."""
    for member in object_members(obj):
        if member.kind == "shorthand_property_identifier" or is_getter(member):
            continue
        name = member_name(member)
        if name and name not in BARE_COMPONENT_PROPERTIES:
            return False
    return default_member(obj) is None and has_component_prop(obj)


# ---------------------------------------------------------------------------
# Array shapes
# ---------------------------------------------------------------------------

def _is_array(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == "array"


def _all_string_literals(array: SyntaxNode) -> bool:
    return all(is_string_literal(el) for el in array_elements(array))


def _all_objects(array: SyntaxNode) -> bool:
    elements = array_elements(array)
    return bool(elements) and all(el.kind == "object" for el in elements)


def _is_array_type_text(text: Optional[str]) -> bool:
    return text is not None and ARRAY_TYPE_PATTERN.search(text) is not None


def _string_array_cast(node: SyntaxNode) -> bool:
    """`[...] as string[]` / `[...] as Array<string>`."""
    type_text = as_type_text(node)
    if type_text is None or not STRING_ARRAY_TYPE_PATTERN.search(type_text):
        return False
    return _is_array(as_operand(node))


def _is_string_array_expression(node: Optional[SyntaxNode]) -> bool:
    if node is None:
        return False
    if node.kind == "array":
        return _all_string_literals(node)
    if node.kind == "as_expression":
        return _string_array_cast(node)
    return False


def _identifier_initializer(ident: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    init = resolve_identifier_initializer(ident, symbols)
    if init is None:
        local = ident.source.variable_declaration(ident.text)
        init = local.initializer if local is not None else None
    return init


def has_string_array_default(obj: SyntaxNode, symbols: SymbolTable) -> bool:
    """
    Default is an array of string literals, a cast to string[] over an
    array literal, or an identifier bound to either.
    """
    init = default_initializer(obj)
    if init is None:
        return False
    if is_identifier(init):
        return _is_string_array_expression(_identifier_initializer(init, symbols))
    return _is_string_array_expression(init)


def has_identifier_string_array_default(obj: SyntaxNode, symbols: SymbolTable) -> bool:
    init = default_initializer(obj)
    if not is_identifier(init):
        return False
    return _is_string_array_expression(_identifier_initializer(init, symbols))


def _object_array_expression(node: Optional[SyntaxNode], allow_const: bool = False) -> bool:
    if node is None:
        return False
    if node.kind == "array":
        return _all_objects(node)
    if node.kind == "as_expression":
        type_text = as_type_text(node)
        if not (_is_array_type_text(type_text) or (allow_const and type_text == "const")):
            return False
        operand = as_operand(node)
        return _is_array(operand) and _all_objects(operand)
    return False


def has_object_array_default(obj: SyntaxNode, symbols: SymbolTable) -> bool:
    """
    Default is a non-empty array of object literals: inline, cast to an
    array type, returned by a helper arrow, or bound to an identifier.
    """
    init = default_initializer(obj)
    if init is None:
        return False
    if init.kind == "call_expression":
        body = function_body_expression(init, symbols)
        return _is_array(body) and _all_objects(body)
    if is_identifier(init):
        return _object_array_expression(resolve_identifier_with_fallback(init, symbols), allow_const=True)
    return _object_array_expression(init)


def identifier_is_object_array(ident: SyntaxNode, symbols: SymbolTable) -> bool:
    """Identifier bound to `[{...}]` or `[{...}] as const`."""
    init = resolve_identifier_with_fallback(ident, symbols)
    if init is None:
        return False
    if init.kind == "array":
        return _all_objects(init)
    if init.kind == "as_expression" and as_type_text(init) == "const":
        operand = as_operand(init)
        return _is_array(operand) and _all_objects(operand)
    return False


def has_empty_array_with_type_annotation(obj: SyntaxNode, symbols: SymbolTable) -> bool:
    """
    `[] as Thing[]`, or a helper call whose arrow body is an array that is
    empty or holds only objects and calls.
    """
    init = default_initializer(obj)
    if init is None:
        return False
    if init.kind == "as_expression":
        operand = as_operand(init)
        return (
            _is_array(operand)
            and not array_elements(operand)
            and _is_array_type_text(as_type_text(init))
        )
    if init.kind == "call_expression":
        body = function_body_expression(init, symbols)
        if not _is_array(body):
            return False
        return all(el.kind in ("object", "call_expression") for el in array_elements(body))
    return False


def is_empty_array_default(obj: SyntaxNode) -> bool:
    """`default: []`, possibly behind a cast."""
    init = default_initializer(obj)
    if init is None:
        return False
    if init.kind == "as_expression":
        init = as_operand(init)
    return _is_array(init) and not array_elements(init)


def has_string_literal_default(obj: SyntaxNode) -> bool:
    init = default_initializer(obj)
    return is_string_literal(init) or is_no_substitution_template(init)
