"""
Value-free traversal: locate calls and enumerate object literal members.
Nothing here interprets what a value means.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from pluginopts.extraction.config import (
    CHAIN_METHODS,
    PLUGIN_FUNCTION,
    PROPERTY_NAMES,
    SETTINGS_FUNCTION,
)
from pluginopts.syntax.nodes import SyntaxNode, is_identifier, property_key_name, string_value


@dataclass(frozen=True)
class PluginInfo:
    name: Optional[str] = None
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------

def call_arguments(call: SyntaxNode) -> List[SyntaxNode]:
    args = call.field("arguments")
    return args.children if args is not None else []


def first_argument(call: SyntaxNode) -> Optional[SyntaxNode]:
    args = call_arguments(call)
    return args[0] if args else None


def callee_name(call: SyntaxNode) -> Optional[str]:
    """Identifier text of a plain `f(...)` callee."""
    callee = call.field("function")
    return callee.text if is_identifier(callee) else None


def method_call_parts(call: SyntaxNode):
    """(target, method name) for `target.method(...)`, else (None, None)."""
    callee = call.field("function")
    if callee is None or callee.kind != "member_expression":
        return None, None
    prop = callee.field("property")
    return callee.field("object"), (prop.text if prop is not None else None)


def find_call_by_name(root: SyntaxNode, name: str) -> Optional[SyntaxNode]:
    for call in root.descendants("call_expression"):
        if callee_name(call) == name:
            return call
    return None


def unwrap_chained_call(call: SyntaxNode) -> SyntaxNode:
    """Step from `inner(...).withPrivateSettings()` down to `inner(...)`."""
    while True:
        target, method = method_call_parts(call)
        if method not in CHAIN_METHODS or target is None or target.kind != "call_expression":
            return call
        call = target


def find_settings_call(root: SyntaxNode) -> Optional[SyntaxNode]:
    """The definePluginSettings(...) call in a file, with chained wrappers removed."""
    for call in root.descendants("call_expression"):
        inner = unwrap_chained_call(call)
        if callee_name(inner) == SETTINGS_FUNCTION:
            return inner
    return None


def extract_plugin_info(root: SyntaxNode) -> PluginInfo:
    call = find_call_by_name(root, PLUGIN_FUNCTION)
    if call is None:
        return PluginInfo()
    arg = first_argument(call)
    if arg is None or arg.kind != "object":
        return PluginInfo()

    def literal(prop_name):
        pair = get_property_assignment(arg, prop_name)
        return string_value(pair.field("value")) if pair is not None else None

    return PluginInfo(
        name=literal(PROPERTY_NAMES["name"]),
        description=literal(PROPERTY_NAMES["description"]),
    )


# ---------------------------------------------------------------------------
# Object literals
# ---------------------------------------------------------------------------

def member_name(member: SyntaxNode) -> Optional[str]:
    if member.kind == "pair":
        key = member.field("key")
        return property_key_name(key) if key is not None else None
    if member.kind == "method_definition":
        name = member.field("name")
        return property_key_name(name) if name is not None else None
    if member.kind == "shorthand_property_identifier":
        return member.text
    return None


def object_members(obj: SyntaxNode) -> List[SyntaxNode]:
    """Pairs, methods/accessors and shorthands of an object literal, in order."""
    return [m for m in obj.children if m.kind in ("pair", "method_definition", "shorthand_property_identifier")]


def get_property(obj: SyntaxNode, name: str) -> Optional[SyntaxNode]:
    """Any member named `name`: a pair, a method or accessor, or a shorthand."""
    for member in object_members(obj):
        if member_name(member) == name:
            return member
    return None


def get_property_assignment(obj: SyntaxNode, name: str) -> Optional[SyntaxNode]:
    """Only a `name: value` pair."""
    for member in property_assignments(obj):
        if member_name(member) == name:
            return member
    return None


def property_initializer(obj: SyntaxNode, name: str) -> Optional[SyntaxNode]:
    pair = get_property_assignment(obj, name)
    return pair.field("value") if pair is not None else None


def property_assignments(obj: SyntaxNode) -> Iterator[SyntaxNode]:
    for member in obj.children:
        if member.kind == "pair":
            yield member


def array_elements(array: SyntaxNode) -> List[SyntaxNode]:
    return array.children
