from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from pluginopts.logging_config import logger
from pluginopts.syntax.config import grammar_for_path
from pluginopts.syntax.nodes import SyntaxNode, string_value
from pluginopts.syntax.parser import parse_bytes


@dataclass(frozen=True)
class Declaration:
    """
    A named binding found in a source file.

    kind is one of: variable, function, class, enum, enum_member, parameter,
    import, namespace, default.
    """
    kind: str
    name: str
    node: SyntaxNode
    initializer: Optional[SyntaxNode] = None
    type_node: Optional[SyntaxNode] = None
    # enum members only: the constant value, None when not computable
    value: Optional[Union[int, float, str]] = None
    # imports only
    specifier: Optional[str] = None
    imported: Optional[str] = None
    # namespace imports only
    module: Optional["SourceFile"] = None

    @property
    def source(self) -> "SourceFile":
        return self.node.source


@dataclass(frozen=True)
class ExportBinding:
    local: Optional[str] = None
    node: Optional[SyntaxNode] = None
    specifier: Optional[str] = None
    imported: Optional[str] = None


_DECLARATION_STATEMENTS = {
    "function_declaration": "function",
    "generator_function_declaration": "function",
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "enum_declaration": "enum",
}


def _type_annotation_target(annotation: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    if annotation is None:
        return None
    children = annotation.children
    return children[0] if children else None


def _variable_declarations(statement: SyntaxNode) -> List[Declaration]:
    found = []
    for declarator in statement.children:
        if declarator.kind != "variable_declarator":
            continue
        name = declarator.field("name")
        if name is None or name.kind != "identifier":
            # destructuring patterns are not tracked
            continue
        found.append(Declaration(
            kind="variable",
            name=name.text,
            node=declarator,
            initializer=declarator.field("value"),
            type_node=_type_annotation_target(declarator.field("type")),
        ))
    return found


def statement_declarations(statement: SyntaxNode) -> List[Declaration]:
    """Declarations introduced by one statement of a block."""
    if statement.kind == "export_statement":
        inner = statement.field("declaration")
        return statement_declarations(inner) if inner is not None else []
    if statement.kind in ("lexical_declaration", "variable_declaration"):
        return _variable_declarations(statement)
    kind = _DECLARATION_STATEMENTS.get(statement.kind)
    if kind is not None:
        name = statement.field("name")
        if name is not None:
            return [Declaration(kind=kind, name=name.text, node=statement)]
    if statement.kind == "import_statement":
        return _import_declarations(statement)
    return []


def _import_declarations(statement: SyntaxNode) -> List[Declaration]:
    source_node = statement.field("source")
    specifier = string_value(source_node)
    if specifier is None:
        return []
    clause = statement.first_child("import_clause")
    if clause is None:
        return []

    found = []
    for part in clause.children:
        if part.kind == "identifier":
            found.append(Declaration(kind="import", name=part.text, node=part,
                                     specifier=specifier, imported="default"))
        elif part.kind == "namespace_import":
            ident = part.first_child("identifier")
            if ident is not None:
                found.append(Declaration(kind="import", name=ident.text, node=ident,
                                         specifier=specifier, imported="*"))
        elif part.kind == "named_imports":
            for spec in part.children:
                if spec.kind != "import_specifier":
                    continue
                name = spec.field("name")
                alias = spec.field("alias")
                if name is None:
                    continue
                local = alias if alias is not None else name
                found.append(Declaration(kind="import", name=local.text, node=spec,
                                         specifier=specifier, imported=string_value(name) or name.text))
    return found


class SourceFile:
    """A parsed TypeScript/TSX file plus its module-level import/export index."""

    def __init__(self, path: str, text: str):
        self.path = path
        self.data = text.encode("utf-8")
        self.grammar = grammar_for_path(path)
        self.tree = parse_bytes(self.data, self.grammar)
        self.root = SyntaxNode(self.tree.root_node, self)
        self.exports: Dict[str, ExportBinding] = {}
        self.star_exports: List[str] = []
        self._block_cache: Dict[Tuple[int, int], Dict[str, Declaration]] = {}
        if self.tree.root_node.has_error:
            logger.debug(f"{path}: syntax errors present, continuing with partial tree")
        self._index_exports()

    def __repr__(self):
        return f"<SourceFile {self.path}>"

    def block_declarations(self, block: SyntaxNode) -> Dict[str, Declaration]:
        """Name -> declaration for statements directly inside a block (cached)."""
        key = (block.raw.start_byte, block.raw.end_byte)
        cached = self._block_cache.get(key)
        if cached is not None:
            return cached
        table: Dict[str, Declaration] = {}
        for statement in block.children:
            for decl in statement_declarations(statement):
                table.setdefault(decl.name, decl)
        self._block_cache[key] = table
        return table

    def top_level(self) -> Dict[str, Declaration]:
        return self.block_declarations(self.root)

    def variable_declaration(self, name: str, deep: bool = False) -> Optional[Declaration]:
        """
        Find a variable declaration by name in this file.

        Top-level statements only, unless deep is set, in which case the first
        declarator with that name anywhere in the file is returned.
        """
        decl = self.top_level().get(name)
        if decl is not None and decl.kind == "variable":
            return decl
        if not deep:
            return None
        for declarator in self.root.descendants("variable_declarator"):
            ident = declarator.field("name")
            if ident is not None and ident.text == name:
                return Declaration(
                    kind="variable",
                    name=name,
                    node=declarator,
                    initializer=declarator.field("value"),
                    type_node=_type_annotation_target(declarator.field("type")),
                )
        return None

    def _index_exports(self) -> None:
        for statement in self.root.children:
            if statement.kind != "export_statement":
                continue
            source_spec = string_value(statement.field("source"))
            declaration = statement.field("declaration")
            is_default = statement.has_token("default")

            if is_default:
                value = statement.field("value")
                if declaration is not None:
                    decls = statement_declarations(statement)
                    local = decls[0].name if decls else None
                    self.exports["default"] = ExportBinding(local=local, node=declaration)
                elif value is not None:
                    local = value.text if value.kind == "identifier" else None
                    self.exports["default"] = ExportBinding(local=local, node=value)
                continue

            if declaration is not None:
                for decl in statement_declarations(statement):
                    self.exports[decl.name] = ExportBinding(local=decl.name)
                continue

            clause = statement.first_child("export_clause")
            if clause is not None:
                for spec in clause.children:
                    if spec.kind != "export_specifier":
                        continue
                    name = spec.field("name")
                    alias = spec.field("alias")
                    if name is None:
                        continue
                    exported = (alias or name).text
                    if source_spec is not None:
                        self.exports[exported] = ExportBinding(specifier=source_spec, imported=name.text)
                    else:
                        self.exports[exported] = ExportBinding(local=name.text)
                continue

            namespace = statement.first_child("namespace_export")
            if namespace is not None and source_spec is not None:
                ident = namespace.children[0] if namespace.children else None
                if ident is not None:
                    self.exports[ident.text] = ExportBinding(specifier=source_spec, imported="*")
                continue

            if source_spec is not None:
                self.star_exports.append(source_spec)
