"""
Thin wrapper around tree-sitter nodes.

A tree-sitter node does not know which file it came from, and the symbol
table needs that to follow imports. SyntaxNode pairs the raw node with its
SourceFile and exposes the handful of navigation calls the extractors use.
"""

import re
from typing import Iterator, List, Optional, Union

from pluginopts.syntax.config import TRANSPARENT_WRAPPER_KINDS


class SyntaxNode:
    __slots__ = ("raw", "source")

    def __init__(self, raw, source):
        self.raw = raw
        self.source = source

    def _wrap(self, raw) -> Optional["SyntaxNode"]:
        if raw is None:
            return None
        return SyntaxNode(raw, self.source)

    @property
    def kind(self) -> str:
        return self.raw.type

    @property
    def text(self) -> str:
        return self.source.data[self.raw.start_byte:self.raw.end_byte].decode("utf-8")

    @property
    def line(self) -> int:
        return self.raw.start_point[0] + 1

    @property
    def parent(self) -> Optional["SyntaxNode"]:
        return self._wrap(self.raw.parent)

    @property
    def children(self) -> List["SyntaxNode"]:
        """Named children, comments excluded."""
        return [SyntaxNode(c, self.source) for c in self.raw.named_children if c.type != "comment"]

    @property
    def tokens(self) -> List["SyntaxNode"]:
        """All children including anonymous tokens such as `as` or `get`."""
        return [SyntaxNode(c, self.source) for c in self.raw.children]

    def field(self, name: str) -> Optional["SyntaxNode"]:
        return self._wrap(self.raw.child_by_field_name(name))

    def has_token(self, token: str) -> bool:
        return any(not c.is_named and c.type == token for c in self.raw.children)

    def first_child(self, kind: str) -> Optional["SyntaxNode"]:
        for child in self.children:
            if child.kind == kind:
                return child
        return None

    def ancestors(self) -> Iterator["SyntaxNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def descendants(self, kind: Optional[str] = None) -> Iterator["SyntaxNode"]:
        """Lazy preorder walk over named descendants, optionally filtered by kind."""
        stack = list(reversed(self.raw.named_children))
        while stack:
            raw = stack.pop()
            if raw.type == "comment":
                continue
            if kind is None or raw.type == kind:
                yield SyntaxNode(raw, self.source)
            stack.extend(reversed(raw.named_children))

    def __eq__(self, other):
        if not isinstance(other, SyntaxNode):
            return NotImplemented
        return (
            self.source is other.source
            and self.raw.start_byte == other.raw.start_byte
            and self.raw.end_byte == other.raw.end_byte
            and self.raw.type == other.raw.type
        )

    def __hash__(self):
        return hash((id(self.source), self.raw.start_byte, self.raw.end_byte, self.raw.type))

    def __repr__(self):
        snippet = self.text
        if len(snippet) > 40:
            snippet = snippet[:37] + "..."
        return f"<SyntaxNode {self.kind} line {self.line}: {snippet!r}>"


# ---------------------------------------------------------------------------
# Expression helpers
# ---------------------------------------------------------------------------

def unwrap(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Strip `as`/`satisfies` casts, `!`, parentheses and `<T>x` assertions, repeatedly."""
    while node is not None and node.kind in TRANSPARENT_WRAPPER_KINDS:
        inner = node.children
        if not inner:
            break
        if node.kind == "type_assertion":
            node = inner[-1]
        else:
            node = inner[0]
    return node


def as_type_text(node: SyntaxNode) -> Optional[str]:
    """Text of the target type of an `as` expression (`const` for `as const`)."""
    if node.kind != "as_expression":
        return None
    tokens = node.tokens
    for index, token in enumerate(tokens):
        if token.kind == "as" and index + 1 < len(tokens):
            return tokens[index + 1].text
    return None


def as_operand(node: SyntaxNode) -> Optional[SyntaxNode]:
    if node.kind != "as_expression":
        return None
    children = node.children
    return children[0] if children else None


def is_identifier(node: Optional[SyntaxNode], name: Optional[str] = None) -> bool:
    if node is None or node.kind != "identifier":
        return False
    return name is None or node.text == name


def is_undefined(node: Optional[SyntaxNode]) -> bool:
    return node is not None and (node.kind == "undefined" or is_identifier(node, "undefined"))


def is_getter(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == "method_definition" and node.has_token("get")


# ---------------------------------------------------------------------------
# Literal helpers
# ---------------------------------------------------------------------------

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


REPLACEMENT_CHARACTER = "\ufffd"

_MAX_CODE_POINT = 0x10FFFF


def _code_point(digits: str) -> str:
    value = int(digits, 16)
    if value > _MAX_CODE_POINT:
        return REPLACEMENT_CHARACTER
    return chr(value)


def _decode_escape(match) -> str:
    body = match.group(1)
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("u{"):
        return _code_point(body[2:-1])
    if body[0] in "ux" and len(body) > 1:
        return _code_point(body[1:])
    if body in ("\n", "\r", "\r\n", "\u2028", "\u2029"):
        # line continuation
        return ""
    return body


def decode_js_string(body: str) -> str:
    decoded = _ESCAPE_RE.sub(_decode_escape, body)
    # \uD83D\uDE00 style pairs arrive as two lone surrogates; unpaired ones
    # become U+FFFD so the text stays encodable
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def is_string_literal(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == "string"


def is_no_substitution_template(node: Optional[SyntaxNode]) -> bool:
    return (
        node is not None
        and node.kind == "template_string"
        and node.first_child("template_substitution") is None
    )


def is_template_with_substitutions(node: Optional[SyntaxNode]) -> bool:
    return (
        node is not None
        and node.kind == "template_string"
        and node.first_child("template_substitution") is not None
    )


def string_value(node: Optional[SyntaxNode]) -> Optional[str]:
    """Value of a quoted string or a template literal without substitutions."""
    if is_string_literal(node) or is_no_substitution_template(node):
        return decode_js_string(node.text[1:-1])
    return None


def is_numeric_literal(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == "number" and not node.text.endswith("n")


def is_bigint_literal(node: Optional[SyntaxNode]) -> bool:
    return node is not None and node.kind == "number" and node.text.endswith("n")


def parse_number(text: str) -> Union[int, float]:
    """Parse a JS numeric literal; integral values come back as int."""
    cleaned = text.replace("_", "").lower()
    if cleaned.startswith(("0x", "0o", "0b")):
        return int(cleaned, 0)
    if len(cleaned) > 1 and cleaned.startswith("0") and cleaned.isdigit() and not set(cleaned) & set("89"):
        # legacy octal
        return int(cleaned, 8)
    value = float(cleaned)
    if value.is_integer() and abs(value) < 2 ** 63:
        return int(value)
    return value


def numeric_value(node: SyntaxNode) -> Union[int, float]:
    return parse_number(node.text)


def bigint_text(node: SyntaxNode) -> str:
    return node.text[:-1].replace("_", "")


def boolean_value(node: Optional[SyntaxNode]) -> Optional[bool]:
    if node is None:
        return None
    if node.kind == "true":
        return True
    if node.kind == "false":
        return False
    return None


def property_key_name(key: SyntaxNode) -> str:
    """Name of an object key: string keys lose their quotes."""
    value = string_value(key)
    if value is not None:
        return value
    return key.text
