"""
Small Nix value serializer.

Output is meant to stay readable in diffs: one list item or attribute per
line, attribute keys sorted with `enable` first, and `[ ]` / `{ }` for
empty collections.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from pluginopts.extraction.results import MISSING
from pluginopts.nix.config import ENABLE_SETTING_NAME, INDENT, validate_indent
from pluginopts.nix.escape import escape_block, escape_double_quoted, identifier

NIX_NULL = "null"
EMPTY_LIST = "[ ]"
EMPTY_ATTR_SET = "{ }"

_EXPONENT_PADDING = re.compile(r"e([+-])0*(\d)")


@dataclass(frozen=True)
class NixRaw:
    """Pre-rendered Nix text, emitted verbatim."""
    value: str


def format_number(value) -> str:
    """Numbers as JavaScript prints them: integral values without a fraction."""
    if isinstance(value, int):
        return str(value)
    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e21:
        return str(int(value))
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(repr(value)), "f")
    return _EXPONENT_PADDING.sub(r"e\1\2", repr(value))


class NixRenderer:
    def __init__(self, indent: str = INDENT):
        validate_indent(indent)
        self.indent_unit = indent

    def _indent(self, level: int) -> str:
        return self.indent_unit * level

    def string(self, text: str, multiline: bool = False) -> str:
        if multiline or "\n" in text:
            return f"''{escape_block(text)}''"
        return f'"{escape_double_quoted(text)}"'

    def number(self, value) -> str:
        return format_number(value)

    def boolean(self, value: bool) -> str:
        return "true" if value else "false"

    def raw(self, value: str) -> NixRaw:
        return NixRaw(value)

    def identifier(self, name: str) -> str:
        return identifier(name)

    def list(self, items: List[Any], level: int = 0) -> str:
        if not items:
            return EMPTY_LIST
        lines = ["["]
        item_indent = self._indent(level + 1)
        for item in items:
            lines.append(f"{item_indent}{self.value(item, level + 1)}")
        lines.append(f"{self._indent(level)}]")
        return "\n".join(lines)

    def attr_set(self, attrs: Dict[str, Any], level: int = 0) -> str:
        """MISSING values are dropped; None renders as null."""
        present = {k: v for k, v in attrs.items() if v is not MISSING}
        keys = sorted(present)
        if ENABLE_SETTING_NAME in present:
            keys.remove(ENABLE_SETTING_NAME)
            keys.insert(0, ENABLE_SETTING_NAME)
        if not keys:
            return EMPTY_ATTR_SET

        lines = ["{"]
        prop_indent = self._indent(level + 1)
        for key in keys:
            rendered = self.value(present[key], level + 1)
            lines.append(f"{prop_indent}{self.identifier(key)} = {rendered};")
        lines.append(f"{self._indent(level)}}}")
        return "\n".join(lines)

    def value(self, value: Any, level: int = 0) -> str:
        if isinstance(value, NixRaw):
            return value.value
        if isinstance(value, (list, tuple)):
            return self.list(list(value), level)
        if isinstance(value, str):
            return self.string(value)
        if isinstance(value, bool):
            return self.boolean(value)
        if isinstance(value, (int, float)):
            return self.number(value)
        if isinstance(value, dict):
            return self.attr_set(value, level)
        return NIX_NULL
