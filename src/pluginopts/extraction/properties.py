from dataclasses import dataclass
from typing import Optional

from pluginopts.extraction.config import PROPERTY_NAMES
from pluginopts.extraction.navigator import property_initializer
from pluginopts.syntax.nodes import SyntaxNode, boolean_value, string_value


@dataclass(frozen=True)
class SettingProperties:
    """Literal metadata read off one setting descriptor."""
    type_node: Optional[SyntaxNode] = None
    description: Optional[str] = None
    placeholder: Optional[str] = None
    restart_needed: bool = False
    hidden: Optional[bool] = None


def string_property(obj: SyntaxNode, name: str) -> Optional[str]:
    """Value of `name: "literal"`; anything non-literal reads as absent."""
    return string_value(property_initializer(obj, name))


def boolean_property(obj: SyntaxNode, name: str) -> Optional[bool]:
    return boolean_value(property_initializer(obj, name))


def type_property(obj: SyntaxNode) -> Optional[SyntaxNode]:
    return property_initializer(obj, PROPERTY_NAMES["type"])


def extract_setting_properties(obj: SyntaxNode) -> SettingProperties:
    description = string_property(obj, PROPERTY_NAMES["description"])
    if description is None:
        description = string_property(obj, PROPERTY_NAMES["name"])
    restart = boolean_property(obj, PROPERTY_NAMES["restart_needed"])
    return SettingProperties(
        type_node=type_property(obj),
        description=description,
        placeholder=string_property(obj, PROPERTY_NAMES["placeholder"]),
        restart_needed=bool(restart),
        hidden=boolean_property(obj, PROPERTY_NAMES["hidden"]),
    )
