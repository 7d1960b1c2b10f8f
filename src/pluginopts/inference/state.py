from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pluginopts.extraction.options import EMPTY_OPTIONS, OptionList
from pluginopts.extraction.properties import SettingProperties
from pluginopts.extraction.results import MISSING
from pluginopts.syntax.nodes import SyntaxNode
from pluginopts.syntax.symbols import SymbolTable


@dataclass(frozen=True)
class SettingEvidence:
    """
    Everything known about one setting descriptor before inference.

    Built once per object literal and never modified; stages read the
    descriptor node through it when they need structural checks.
    """
    node: SyntaxNode
    symbols: SymbolTable
    properties: SettingProperties
    default: Any = MISSING
    options: OptionList = EMPTY_OPTIONS
    declared_type_text: Optional[str] = None

    @property
    def type_node(self) -> Optional[SyntaxNode]:
        return self.properties.type_node


@dataclass(frozen=True)
class InferenceState:
    nix_type: str
    enum_values: Optional[Tuple[Any, ...]] = None
    default: Any = MISSING
    has_string_array: bool = False
    has_identifier_string_array: bool = False
    is_component_or_custom: bool = False
