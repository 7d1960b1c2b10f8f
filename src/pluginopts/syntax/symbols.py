"""
Declaration lookup over parsed sources.

Answers "which declaration does this identifier refer to", following
lexical scopes inside a file and import/re-export aliases across files.
"""

import threading
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

from pluginopts.logging_config import logger
from pluginopts.syntax.config import (
    BLOCK_SCOPE_KINDS,
    FUNCTION_KINDS,
    RESOLUTION_CONFIG,
    validate_resolution_config,
)
from pluginopts.syntax.nodes import (
    SyntaxNode,
    is_numeric_literal,
    numeric_value,
    string_value,
    unwrap,
)
from pluginopts.syntax.source import Declaration, SourceFile

if TYPE_CHECKING:
    from pluginopts.syntax.project import Project


def _constant_enum_value(node: Optional[SyntaxNode]) -> Optional[Union[int, float, str]]:
    node = unwrap(node)
    if node is None:
        return None
    if is_numeric_literal(node):
        return numeric_value(node)
    text = string_value(node)
    if text is not None:
        return text
    if node.kind == "unary_expression" and node.has_token("-"):
        operand = unwrap(node.field("argument"))
        if is_numeric_literal(operand):
            return -numeric_value(operand)
    return None


class SymbolTable:
    """Read-only view over a Project used by every resolver."""

    def __init__(self, project: "Project", config: dict = None):
        config = config or RESOLUTION_CONFIG
        validate_resolution_config(config)
        self.project = project
        self.max_hops = config["max_alias_hops"]
        self._enum_cache: Dict[Tuple[SourceFile, int], Dict[str, Declaration]] = {}
        self._enum_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Identifier lookup
    # ------------------------------------------------------------------

    def declaration_of(self, identifier: SyntaxNode) -> Optional[Declaration]:
        """
        Declaration an identifier refers to, or None.

        Imports are followed to the exporting file; namespace imports come back
        as a `namespace` declaration carrying the target module.
        """
        decl = self.lexical_declaration(identifier, identifier.text)
        if decl is not None and decl.kind == "import":
            return self._follow_import(decl, 0)
        return decl

    def lexical_declaration(self, node: SyntaxNode, name: str) -> Optional[Declaration]:
        for scope in node.ancestors():
            if scope.kind in FUNCTION_KINDS:
                param = self._parameter(scope, name)
                if param is not None:
                    return param
            if scope.kind in BLOCK_SCOPE_KINDS:
                decl = node.source.block_declarations(scope).get(name)
                if decl is not None:
                    return decl
        return None

    @staticmethod
    def _parameter(function: SyntaxNode, name: str) -> Optional[Declaration]:
        single = function.field("parameter")
        if single is not None and single.kind == "identifier" and single.text == name:
            return Declaration(kind="parameter", name=name, node=single)
        params = function.field("parameters")
        if params is None:
            return None
        for param in params.children:
            pattern = param.field("pattern")
            if pattern is None and param.kind == "identifier":
                pattern = param
            if pattern is not None and pattern.kind == "identifier" and pattern.text == name:
                return Declaration(kind="parameter", name=name, node=param,
                                   initializer=param.field("value"))
        return None

    # ------------------------------------------------------------------
    # Cross-file lookup
    # ------------------------------------------------------------------

    def _follow_import(self, decl: Declaration, hops: int) -> Optional[Declaration]:
        target = self.project.resolve_module(decl.specifier, decl.source.path)
        if decl.imported == "*":
            if target is None:
                return None
            return Declaration(kind="namespace", name=decl.name, node=decl.node, module=target)
        if target is not None:
            return self.exported_declaration(target, decl.imported, hops + 1)
        return self.ambient_declaration(decl.imported)

    def exported_declaration(self, source: SourceFile, name: str, hops: int = 0) -> Optional[Declaration]:
        """Declaration behind `name` as exported by `source`."""
        if hops > self.max_hops:
            logger.debug(f"Export chain for '{name}' exceeded {self.max_hops} hops at {source.path}")
            return None

        binding = source.exports.get(name)
        if binding is not None:
            if binding.specifier is not None:
                target = self.project.resolve_module(binding.specifier, source.path)
                if target is None:
                    return self.ambient_declaration(binding.imported)
                if binding.imported == "*":
                    return Declaration(kind="namespace", name=name, node=source.root, module=target)
                return self.exported_declaration(target, binding.imported, hops + 1)

            if binding.local is not None:
                decl = source.top_level().get(binding.local)
                if decl is not None:
                    if decl.kind == "import":
                        return self._follow_import(decl, hops + 1)
                    return decl

            if binding.node is not None:
                return Declaration(kind="default", name=name, node=binding.node,
                                   initializer=binding.node)
            return None

        for specifier in source.star_exports:
            target = self.project.resolve_module(specifier, source.path)
            if target is None:
                continue
            decl = self.exported_declaration(target, name, hops + 1)
            if decl is not None:
                return decl
        return None

    def ambient_declaration(self, name: Optional[str]) -> Optional[Declaration]:
        """Exported declaration from the project's preloaded ambient files."""
        if not name or name in ("*", "default"):
            return None
        for source in self.project.ambient_sources():
            decl = self.exported_declaration(source, name, 1)
            if decl is not None:
                return decl
        return None

    # ------------------------------------------------------------------
    # Property access: Enum.Member and namespace.export
    # ------------------------------------------------------------------

    def member_declaration(self, access: SyntaxNode) -> Optional[Declaration]:
        if access.kind != "member_expression":
            return None
        obj = access.field("object")
        prop = access.field("property")
        if obj is None or prop is None or obj.kind != "identifier":
            return None
        base = self.declaration_of(obj)
        if base is None:
            return None
        if base.kind == "enum":
            return self.enum_members(base).get(prop.text)
        if base.kind == "namespace" and base.module is not None:
            return self.exported_declaration(base.module, prop.text, 1)
        return None

    def enum_members(self, enum_decl: Declaration) -> Dict[str, Declaration]:
        """Members of an enum with their constant values, auto-increment applied."""
        key = (enum_decl.source, enum_decl.node.raw.start_byte)
        with self._enum_lock:
            cached = self._enum_cache.get(key)
        if cached is not None:
            return cached

        members: Dict[str, Declaration] = {}
        body = enum_decl.node.field("body")
        next_value: Optional[Union[int, float]] = 0
        for member in body.children if body is not None else []:
            if member.kind == "enum_assignment":
                name_node = member.field("name")
                initializer = member.field("value")
                value = _constant_enum_value(initializer)
            else:
                name_node = member
                initializer = None
                value = next_value
            if name_node is None:
                continue
            name = string_value(name_node) or name_node.text
            members[name] = Declaration(kind="enum_member", name=name, node=member,
                                        initializer=initializer, value=value)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                next_value = value + 1
            else:
                next_value = None

        with self._enum_lock:
            self._enum_cache[key] = members
        return members
