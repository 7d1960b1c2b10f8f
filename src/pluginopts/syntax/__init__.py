"""
Syntax model for TypeScript/TSX plugin sources.

Wraps tree-sitter parse trees and adds a symbol table that follows
lexical scopes, imports and re-exports.
"""

from .nodes import SyntaxNode, unwrap
from .project import Project
from .source import Declaration, SourceFile
from .symbols import SymbolTable

__all__ = [
    "SyntaxNode",
    "unwrap",
    "Project",
    "Declaration",
    "SourceFile",
    "SymbolTable",
]
