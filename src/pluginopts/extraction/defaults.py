"""
Static evaluation of a setting's `default` expression.

Outcomes:
  Ok(MISSING)  no default, or one that is known to be runtime-only
  Ok(value)    str, int, float, bool, None, or a shape-only [] / {}
  Err(...)     a node shape nothing here can evaluate
"""

from typing import Any, Dict

from pluginopts.extraction.config import PROPERTY_NAMES, RUNTIME_GETTER_BASES
from pluginopts.extraction.navigator import first_argument, property_assignments, property_initializer
from pluginopts.extraction.resolver import (
    resolve_call_return,
    resolve_enum_like_value,
    resolve_reference,
)
from pluginopts.extraction.results import MISSING, ExtractionErrorKind, Ok, Result, err
from pluginopts.logging_config import logger
from pluginopts.syntax.nodes import (
    SyntaxNode,
    bigint_text,
    boolean_value,
    is_bigint_literal,
    is_identifier,
    is_numeric_literal,
    is_template_with_substitutions,
    is_undefined,
    numeric_value,
    property_key_name,
    string_value,
    unwrap,
)
from pluginopts.syntax.symbols import SymbolTable


def _literal(node: SyntaxNode) -> Any:
    """Value of a plain literal node, MISSING when it is not one."""
    text = string_value(node)
    if text is not None:
        return text
    if is_template_with_substitutions(node):
        return MISSING
    if is_bigint_literal(node):
        return bigint_text(node)
    if is_numeric_literal(node):
        return numeric_value(node)
    flag = boolean_value(node)
    if flag is not None:
        return flag
    if node.kind == "null" or is_undefined(node):
        return None
    if node.kind == "array":
        return []
    if node.kind == "object":
        return {}
    return MISSING


def _shallow_object_copy(obj: SyntaxNode) -> Dict[str, Any]:
    """
    Primitive-valued pairs of an object literal argument. Nested objects and
    arrays become {} / [] placeholders; anything else is dropped.
    """
    copy: Dict[str, Any] = {}
    for pair in property_assignments(obj):
        key = pair.field("key")
        value = pair.field("value")
        if key is None or value is None:
            continue
        if key.kind not in ("property_identifier", "string"):
            continue
        flag = boolean_value(value)
        if flag is not None:
            copy[property_key_name(key)] = flag
        elif is_numeric_literal(value):
            copy[property_key_name(key)] = numeric_value(value)
        elif string_value(value) is not None:
            copy[property_key_name(key)] = string_value(value)
        elif value.kind == "object":
            copy[property_key_name(key)] = {}
        elif value.kind == "array":
            copy[property_key_name(key)] = []
    return copy


def _from_call(call: SyntaxNode, symbols: SymbolTable) -> Result:
    arg = first_argument(call)
    if arg is not None and arg.kind == "object":
        return Ok(_shallow_object_copy(arg))
    body = resolve_call_return(call, symbols)
    if body is not None and body.kind == "array":
        return Ok([])
    if body is not None and body.kind == "object":
        return Ok({})
    return Ok(MISSING)


def _from_identifier(ident: SyntaxNode, symbols: SymbolTable) -> Result:
    if is_undefined(ident):
        return Ok(None)
    resolved = resolve_reference(ident, symbols)
    if resolved is None:
        return Ok(MISSING)
    return Ok(_literal(resolved))


def _from_property_access(access: SyntaxNode, symbols: SymbolTable) -> Result:
    base = access.field("object")
    if is_identifier(base) and base.text in RUNTIME_GETTER_BASES:
        return Ok(MISSING)
    resolved = resolve_enum_like_value(access, symbols)
    if resolved.is_ok:
        return resolved
    logger.debug(f"Default {access.text!r} not resolvable: {resolved.error}")
    return Ok(MISSING)


def evaluate_default_expression(node: SyntaxNode, symbols: SymbolTable) -> Result:
    node = unwrap(node)

    if node.kind == "member_expression":
        return _from_property_access(node, symbols)
    if is_identifier(node) or node.kind == "undefined":
        return _from_identifier(node, symbols)
    if node.kind == "call_expression":
        return _from_call(node, symbols)

    value = _literal(node)
    if value is not MISSING or is_template_with_substitutions(node):
        return Ok(value)

    return err(
        ExtractionErrorKind.CANNOT_EVALUATE,
        f"Cannot evaluate default value from node kind: {node.kind}",
        node,
    )


def extract_default_value(obj: SyntaxNode, symbols: SymbolTable) -> Result:
    """Evaluate `default:` of a setting descriptor; absence is Ok(MISSING)."""
    init = property_initializer(obj, PROPERTY_NAMES["default"])
    if init is None:
        return Ok(MISSING)
    return evaluate_default_expression(init, symbols)
