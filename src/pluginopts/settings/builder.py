"""
Settings Tree Builder.

Walks the object literal passed to definePluginSettings and produces a
name-keyed tree of Setting and SettingGroup. An entry whose own properties
include `type` or `description` is a leaf; an entry without them that holds
further object literals is a group.
"""

from typing import Dict, Iterable, Optional, Union

from pluginopts.extraction.config import PROPERTY_NAMES, RESTART_REQUIRED_SUFFIX
from pluginopts.extraction.navigator import (
    first_argument,
    member_name,
    property_assignments,
)
from pluginopts.extraction.properties import boolean_property
from pluginopts.inference import collect_evidence, infer_setting
from pluginopts.logging_config import logger
from pluginopts.settings.models import Setting, SettingGroup
from pluginopts.syntax.nodes import SyntaxNode
from pluginopts.syntax.symbols import SymbolTable

SettingsTree = Dict[str, Union[Setting, SettingGroup]]

_LEAF_MARKERS = (PROPERTY_NAMES["type"], PROPERTY_NAMES["description"])


def _is_hidden(obj: SyntaxNode) -> bool:
    return boolean_property(obj, PROPERTY_NAMES["hidden"]) is True


def _is_group(obj: SyntaxNode) -> bool:
    pairs = list(property_assignments(obj))
    has_marker = any(member_name(pair) in _LEAF_MARKERS for pair in pairs)
    has_nested = any(
        pair.field("value") is not None and pair.field("value").kind == "object"
        for pair in pairs
    )
    return has_nested and not has_marker


def build_setting(name: str, obj: SyntaxNode, symbols: SymbolTable) -> Optional[Setting]:
    """Infer one leaf. Returns None when the descriptor is statically hidden."""
    evidence, errors = collect_evidence(obj, symbols)
    props = evidence.properties
    if props.hidden:
        return None

    for error in errors:
        logger.debug(f"Setting {name!r}: {error}")

    result = infer_setting(evidence)

    description = props.description
    if description and props.restart_needed:
        description = f"{description} {RESTART_REQUIRED_SUFFIX}"

    return Setting(
        name=name,
        nix_type=result.nix_type,
        description=description,
        default=result.default,
        enum_values=result.enum_values or None,
        enum_labels=dict(evidence.options.labels) or None,
        example=props.placeholder,
        hidden=props.hidden,
        restart_needed=props.restart_needed,
        errors=tuple(errors),
    )


def build_settings_from_pairs(
    pairs: Iterable[SyntaxNode],
    symbols: SymbolTable,
    skip_hidden_check: bool = False,
) -> SettingsTree:
    settings: SettingsTree = {}
    for pair in pairs:
        key = member_name(pair)
        value = pair.field("value")
        if not key or value is None or value.kind != "object":
            continue

        # the call entry point leaves hidden filtering of groups to the leaves
        if not skip_hidden_check and _is_hidden(value):
            continue

        if _is_group(value):
            children = build_settings_from_pairs(property_assignments(value), symbols)
            settings[key] = SettingGroup(name=key, children=children)
            continue

        setting = build_setting(key, value, symbols)
        if setting is not None:
            settings[key] = setting
    return settings


def build_settings_from_object(obj: SyntaxNode, symbols: SymbolTable) -> SettingsTree:
    return build_settings_from_pairs(property_assignments(obj), symbols)


def build_settings_from_call(call: Optional[SyntaxNode], symbols: SymbolTable) -> SettingsTree:
    """
    Settings tree of a definePluginSettings(...) call. The call must already
    have chained wrappers such as .withPrivateSettings() removed, otherwise
    the first argument is not the settings object.
    """
    if call is None:
        return {}
    arg = first_argument(call)
    if arg is None or arg.kind != "object":
        return {}
    return build_settings_from_pairs(property_assignments(arg), symbols, skip_hidden_check=True)
