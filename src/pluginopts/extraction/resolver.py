"""
Symbol/literal resolution.

Identifier resolution is a chain of strategies tried in order, each returning
the initializer node it found or None:

1. the symbol table (lexical scope, then imports and re-exports)
2. a top-level variable of the same name in the identifier's file
3. any variable declarator of that name in the file

Enum-like property accesses (`Enum.Member`, `obj.key`) have their own chain
ending in a fixed table of well-known external enums.
"""

from typing import Callable, List, Optional, Sequence

from pluginopts.extraction.config import (
    RESOLUTION_LIMITS,
    THEME_COMMIT_CONSTANT,
    THEME_HELPER,
    THEME_REPO_CONSTANT,
    THEME_URL_TEMPLATE,
    WELL_KNOWN_ENUMS,
)
from pluginopts.extraction.navigator import (
    callee_name,
    first_argument,
    get_property_assignment,
    method_call_parts,
    property_assignments,
)
from pluginopts.extraction.results import ExtractionErrorKind, Ok, Result, err
from pluginopts.syntax.nodes import (
    SyntaxNode,
    boolean_value,
    is_identifier,
    is_numeric_literal,
    is_template_with_substitutions,
    is_undefined,
    numeric_value,
    string_value,
    unwrap,
)
from pluginopts.syntax.symbols import SymbolTable

IdentifierStrategy = Callable[[SyntaxNode, SymbolTable], Optional[SyntaxNode]]


# ---------------------------------------------------------------------------
# Identifier -> initializer
# ---------------------------------------------------------------------------

def _from_symbol_table(ident: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    decl = symbols.declaration_of(ident)
    if decl is None:
        return None
    return decl.initializer


def _from_top_level_variable(ident: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    decl = ident.source.variable_declaration(ident.text)
    return decl.initializer if decl is not None else None


def _from_any_variable(ident: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    decl = ident.source.variable_declaration(ident.text, deep=True)
    return decl.initializer if decl is not None else None


SYMBOL_STRATEGIES: Sequence[IdentifierStrategy] = (_from_symbol_table,)

FALLBACK_STRATEGIES: Sequence[IdentifierStrategy] = (
    _from_symbol_table,
    _from_top_level_variable,
    _from_any_variable,
)


def resolve_identifier_initializer(
    node: SyntaxNode,
    symbols: SymbolTable,
    strategies: Sequence[IdentifierStrategy] = SYMBOL_STRATEGIES,
) -> Optional[SyntaxNode]:
    """Initializer node of the declaration `node` names, first strategy wins."""
    if not is_identifier(node):
        return None
    for strategy in strategies:
        found = strategy(node, symbols)
        if found is not None:
            return found
    return None


def resolve_identifier_with_fallback(node: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    return resolve_identifier_initializer(node, symbols, FALLBACK_STRATEGIES)


def resolve_reference(node: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    """
    Chase `a -> b -> c` identifier bindings to the first non-identifier node.

    Each hop unwraps casts and parentheses. Returns None when a hop has no
    initializer or the hop bound is reached.
    """
    current = node
    for _ in range(RESOLUTION_LIMITS["max_identifier_hops"]):
        init = unwrap(resolve_identifier_with_fallback(current, symbols))
        if init is None:
            return None
        if not is_identifier(init) or is_undefined(init):
            return init
        current = init
    return None


# ---------------------------------------------------------------------------
# Enum-like values
# ---------------------------------------------------------------------------

def _enum_member_value(access: SyntaxNode, symbols: SymbolTable, depth: int) -> Optional[Result]:
    decl = symbols.member_declaration(access)
    if decl is None or decl.kind != "enum_member":
        return None
    if decl.value is not None:
        return Ok(decl.value)
    init = unwrap(decl.initializer)
    if is_numeric_literal(init):
        return Ok(numeric_value(init))
    text = string_value(init)
    if text is not None:
        return Ok(text)
    return None


def _object_member_value(access: SyntaxNode, symbols: SymbolTable, depth: int) -> Optional[Result]:
    base = access.field("object")
    prop = access.field("property")
    if not is_identifier(base) or prop is None:
        return None
    init = resolve_identifier_initializer(base, symbols)
    if init is None:
        local = base.source.variable_declaration(base.text)
        init = local.initializer if local is not None else None
    init = unwrap(init)
    if init is None or init.kind != "object":
        return None
    pair = get_property_assignment(init, prop.text)
    if pair is None or pair.field("value") is None:
        return None
    nested = resolve_enum_like_value(pair.field("value"), symbols, depth + 1)
    return nested if nested.is_ok else None


def _well_known_enum_value(access: SyntaxNode, symbols: SymbolTable, depth: int) -> Optional[Result]:
    base = access.field("object")
    prop = access.field("property")
    if base is None or prop is None:
        return None
    table = WELL_KNOWN_ENUMS.get(base.text)
    if table is None or prop.text not in table:
        return None
    return Ok(table[prop.text])


PROPERTY_ACCESS_STRATEGIES = (
    _enum_member_value,
    _object_member_value,
    _well_known_enum_value,
)


def resolve_enum_like_value(node: SyntaxNode, symbols: SymbolTable, depth: int = 0) -> Result:
    """
    Literal value behind an option value or default expression.

    Handles literals, casts and `A.B` accesses into enums, object literals and
    the well-known enum table.
    """
    if depth > RESOLUTION_LIMITS["max_identifier_hops"]:
        return err(ExtractionErrorKind.UNRESOLVABLE_SYMBOL, "Resolution depth exceeded", node)

    if node.kind in ("as_expression", "parenthesized_expression", "type_assertion"):
        inner = unwrap(node)
        return resolve_enum_like_value(inner, symbols, depth + 1)

    text = string_value(node)
    if text is not None:
        return Ok(text)
    if is_template_with_substitutions(node):
        return err(
            ExtractionErrorKind.CANNOT_EVALUATE,
            "Template expressions with substitutions cannot be statically evaluated",
            node,
        )
    if is_numeric_literal(node):
        return Ok(numeric_value(node))
    flag = boolean_value(node)
    if flag is not None:
        return Ok(flag)

    if node.kind == "member_expression":
        for strategy in PROPERTY_ACCESS_STRATEGIES:
            found = strategy(node, symbols, depth)
            if found is not None:
                return found
        base = node.field("object")
        member = node.field("property")
        base_text = base.text if base is not None else ""
        member_text = member.text if member is not None else ""
        return err(
            ExtractionErrorKind.UNRESOLVABLE_SYMBOL,
            f"Cannot resolve property access: {base_text}.{member_text}",
            node,
            enumObject=base_text,
            memberName=member_text,
        )

    return err(
        ExtractionErrorKind.INVALID_NODE_TYPE,
        f"Cannot resolve enum value from node kind: {node.kind}",
        node,
    )


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------

def _arrow_body(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    if node is None or node.kind != "arrow_function":
        return None
    return unwrap(node.field("body"))


def resolve_call_return(call: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    """
    Expression returned by the arrow function a call invokes.

    Covers `helper()` where helper is a const arrow, and `obj.method()` where
    obj is an object literal whose method is an arrow property. Block bodies
    are not inspected.
    """
    target, method = method_call_parts(call)
    if target is not None:
        init = unwrap(resolve_identifier_initializer(target, symbols))
        if init is None or init.kind != "object":
            return None
        pair = get_property_assignment(init, method)
        return _arrow_body(pair.field("value") if pair is not None else None)

    callee = call.field("function")
    if not is_identifier(callee):
        return None
    decl = symbols.declaration_of(callee)
    if decl is not None:
        if decl.kind == "function":
            return None
        body = _arrow_body(unwrap(decl.initializer))
        if body is not None:
            return body
    local = callee.source.variable_declaration(callee.text)
    if local is not None:
        return _arrow_body(unwrap(local.initializer))
    return None


def function_body_expression(call: SyntaxNode, symbols: SymbolTable) -> Optional[SyntaxNode]:
    """Like resolve_call_return, for plain identifier callees with same-file fallback."""
    callee = call.field("function")
    if not is_identifier(callee):
        return None
    decl = symbols.declaration_of(callee)
    if decl is not None and decl.kind == "variable":
        body = _arrow_body(unwrap(decl.initializer))
        if body is not None:
            return body
    local = callee.source.variable_declaration(callee.text)
    if local is not None:
        return _arrow_body(unwrap(local.initializer))
    return None


# ---------------------------------------------------------------------------
# Theme tables
# ---------------------------------------------------------------------------

def _file_string_constant(node: SyntaxNode, name: str) -> Optional[str]:
    decl = node.source.variable_declaration(name)
    if decl is None:
        return None
    return string_value(decl.initializer)


def _theme_entry_value(value: SyntaxNode) -> Optional[str]:
    text = string_value(value)
    if text is not None and value.kind == "string":
        return text
    if value.kind != "call_expression" or callee_name(value) != THEME_HELPER:
        return None
    arg = first_argument(value)
    if arg is None or arg.kind != "string":
        return None
    repo = _file_string_constant(value, THEME_REPO_CONSTANT)
    commit = _file_string_constant(value, THEME_COMMIT_CONSTANT)
    if repo is None or commit is None:
        return None
    return THEME_URL_TEMPLATE.format(repo=repo, commit=commit, name=string_value(arg))


def evaluate_theme_values(themes: SyntaxNode, symbols: SymbolTable) -> List[str]:
    """
    Values of a themes table: `{ Name: "url", Other: shikiRepoTheme("Other") }`.

    Helper calls are expanded into raw theme URLs using the repo and commit
    constants declared next to the table.
    """
    if not is_identifier(themes):
        return []
    init = resolve_identifier_initializer(themes, symbols)
    if init is None or init.kind != "object":
        return []
    values = []
    for pair in property_assignments(init):
        value = pair.field("value")
        if value is None:
            continue
        resolved = _theme_entry_value(value)
        if resolved is not None:
            values.append(resolved)
    return values
