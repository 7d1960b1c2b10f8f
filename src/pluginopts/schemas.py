from pydantic import BaseModel, Field, ValidationError
from typing import Any, Dict, List, Optional, Union

from pluginopts.exceptions import ResultValidationError
from pluginopts.extraction.results import MISSING
from pluginopts.settings.models import PluginSettings, Setting, SettingGroup


class PluginSetting(BaseModel):
    """
    One extracted leaf setting. `default` is only in model_fields_set when
    a default was resolved; None means an explicit null.
    """
    name: str
    type: str
    description: Optional[str] = None
    default: Any = None
    enum_values: Optional[List[Union[bool, int, float, str]]] = None
    enum_labels: Optional[Dict[str, str]] = None
    example: Optional[str] = None
    hidden: Optional[bool] = None
    restart_needed: bool = False

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set


class PluginConfig(BaseModel):
    """A plugin, or a nested settings group inside one."""
    name: str
    description: Optional[str] = None
    directory_name: Optional[str] = None
    settings: Dict[str, Union[PluginSetting, "PluginConfig"]] = Field(default_factory=dict)


PluginConfig.model_rebuild()


class ParsedPluginsResult(BaseModel):
    """
    Plugins parsed from one source checkout, split by the directory they
    came from.
    """
    vencord_plugins: Dict[str, PluginConfig] = Field(default_factory=dict)
    equicord_plugins: Dict[str, PluginConfig] = Field(default_factory=dict)


class GenerationSummary(BaseModel):
    plugins_dir: str
    shared_count: int
    vencord_only_count: int
    equicord_only_count: int
    files: List[str] = Field(default_factory=list)


def setting_to_model(setting: Setting) -> PluginSetting:
    fields: Dict[str, Any] = {
        "name": setting.name,
        "type": setting.nix_type,
        "description": setting.description,
        "enum_values": list(setting.enum_values) if setting.enum_values else None,
        "enum_labels": setting.enum_labels,
        "example": setting.example,
        "hidden": setting.hidden,
        "restart_needed": setting.restart_needed,
    }
    if setting.default is not MISSING:
        fields["default"] = setting.default
    return PluginSetting(**fields)


def _children_to_models(children) -> Dict[str, Union[PluginSetting, PluginConfig]]:
    converted = {}
    for key, child in children.items():
        if isinstance(child, SettingGroup):
            converted[key] = PluginConfig(
                name=child.name,
                description=child.description,
                settings=_children_to_models(child.children),
            )
        else:
            converted[key] = setting_to_model(child)
    return converted


def plugin_to_model(plugin: PluginSettings) -> PluginConfig:
    return PluginConfig(
        name=plugin.name,
        description=plugin.description,
        directory_name=plugin.directory_name,
        settings=_children_to_models(plugin.settings),
    )


def validate_parsed_results(
    vencord_plugins: Dict[str, PluginSettings],
    equicord_plugins: Dict[str, PluginSettings],
) -> ParsedPluginsResult:
    """Run the aggregate through the schema; a mismatch aborts generation."""
    try:
        return ParsedPluginsResult(
            vencord_plugins={k: plugin_to_model(v) for k, v in vencord_plugins.items()},
            equicord_plugins={k: plugin_to_model(v) for k, v in equicord_plugins.items()},
        )
    except ValidationError as e:
        raise ResultValidationError(f"Parsed plugin data failed validation: {e}", errors=e.errors()) from e
