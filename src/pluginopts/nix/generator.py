"""
Renders extracted plugin settings as a NixOS/Home Manager option module.

Leaf settings become `mkOption { ... }` (or `mkEnableOption` for a setting
named `enable`); plugins and nested groups become attribute sets that
always carry an `enable` toggle.
"""

from typing import Any, Dict, Mapping, Optional, Union

from pluginopts.extraction.options import label_key
from pluginopts.extraction.results import MISSING
from pluginopts.inference.config import NIX_TYPE_ENUM, NIX_TYPE_FLOAT, NIX_TYPE_INT
from pluginopts.nix.config import (
    CATEGORY_LABELS,
    ENABLE_OPTION_FUNCTION,
    ENABLE_SETTING_NAME,
    ENUM_MAPPING_PREFIX,
    INTEGER_STRING_PATTERN,
    MODULE_HEADER_LINES,
    MODULE_INDENT_LEVEL,
    OPTION_CONFIG_INDENT_LEVEL,
    OPTION_FUNCTION,
)
from pluginopts.nix.renderer import NixRaw, NixRenderer
from pluginopts.settings.models import PluginSettings, Setting, SettingGroup

renderer = NixRenderer()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def category_label(category: Optional[str]) -> str:
    if category is None:
        return ""
    return CATEGORY_LABELS[category]


def _enum_value(value: Any) -> str:
    if isinstance(value, str):
        return renderer.string(value)
    if isinstance(value, bool):
        return renderer.boolean(value)
    if _is_number(value):
        return renderer.number(value)
    return renderer.string(str(value))


def enum_type_expression(values) -> NixRaw:
    rendered = " ".join(_enum_value(v) for v in values or ())
    return renderer.raw(f"{NIX_TYPE_ENUM} [ {rendered} ]")


def enum_mapping_note(values, labels: Optional[Mapping[str, str]]) -> Optional[str]:
    """`0 = Playing, 1 = Streaming` for numeric enum values that have labels."""
    if not labels:
        return None
    mappings = []
    for value in values:
        if not _is_number(value):
            continue
        label = labels.get(label_key(value))
        if label:
            mappings.append(f"{renderer.number(value)} = {label}")
    return ", ".join(mappings) or None


def _default_value(setting: Setting) -> Any:
    """Rendered default, or MISSING to leave `default` out."""
    value = setting.default
    if value is MISSING or value is None:
        return value
    if setting.nix_type == NIX_TYPE_FLOAT and isinstance(value, int) and not isinstance(value, bool):
        return renderer.raw(f"{value}.0")
    if setting.nix_type == NIX_TYPE_INT and isinstance(value, str) and INTEGER_STRING_PATTERN.match(value):
        return renderer.raw(value)
    if isinstance(value, (str, bool, int, float, list, tuple, dict)):
        return value
    return MISSING


def _description(setting: Setting) -> Optional[str]:
    description = setting.description
    if description is None:
        return None
    values = setting.enum_values
    integer_enum = (
        setting.nix_type == NIX_TYPE_ENUM
        and values is not None
        and all(_is_number(v) for v in values)
    )
    if integer_enum:
        note = enum_mapping_note(values, setting.enum_labels)
        if note:
            description = f"{description}\n\n{ENUM_MAPPING_PREFIX}{note}"
    return description


def build_option_config(setting: Setting) -> Dict[str, Any]:
    """Attributes of the mkOption call for one leaf setting."""
    config: Dict[str, Any] = {}

    if setting.nix_type == NIX_TYPE_ENUM or "enum" in setting.nix_type:
        config["type"] = enum_type_expression(setting.enum_values)
    else:
        config["type"] = renderer.raw(setting.nix_type)

    config["default"] = _default_value(setting)

    description = _description(setting)
    if description is not None:
        config["description"] = renderer.raw(renderer.string(description, multiline=True))

    example = setting.example
    if example is not None and (setting.description is None or example not in setting.description):
        config["example"] = example

    return config


def _enable_option(description: str) -> NixRaw:
    text = renderer.string(description, multiline=True) if description else '""'
    return renderer.raw(f"{ENABLE_OPTION_FUNCTION} {text}")


def generate_setting(setting: Setting, category: Optional[str] = None) -> NixRaw:
    if setting.name == ENABLE_SETTING_NAME:
        return _enable_option((setting.description or "") + category_label(category))
    body = renderer.attr_set(build_option_config(setting), OPTION_CONFIG_INDENT_LEVEL)
    return renderer.raw(f"{OPTION_FUNCTION} {body}")


def generate_plugin(
    plugin: Union[PluginSettings, SettingGroup],
    category: Optional[str] = None,
) -> Dict[str, Any]:
    """Attribute set for a plugin or a nested group, with a synthesized enable."""
    children = plugin.settings if isinstance(plugin, PluginSettings) else plugin.children
    attrs: Dict[str, Any] = {}
    for child in children.values():
        if isinstance(child, SettingGroup):
            attrs[renderer.identifier(child.name)] = generate_plugin(child, category)
        else:
            attrs[renderer.identifier(child.name)] = generate_setting(child, category)

    if ENABLE_SETTING_NAME not in children:
        description = (plugin.description or "") + category_label(category)
        attrs = {ENABLE_SETTING_NAME: _enable_option(description), **attrs}
    return attrs


def generate_module(plugins: Mapping[str, PluginSettings], category: Optional[str] = None) -> str:
    """Complete .nix file for a set of plugins keyed by plugin name."""
    module: Dict[str, Any] = {}
    for name, plugin in plugins.items():
        if plugin is None:
            continue
        module[renderer.identifier(name)] = generate_plugin(plugin, category)
    body = renderer.attr_set(module, MODULE_INDENT_LEVEL)
    return "\n".join([*MODULE_HEADER_LINES, body])
