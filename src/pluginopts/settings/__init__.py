"""Settings Tree Builder: setting descriptors in, Setting/SettingGroup trees out."""

from .builder import build_setting, build_settings_from_call, build_settings_from_object
from .models import PluginSettings, Setting, SettingGroup
from .plugin import extract_plugin, plugin_name_from_directory

__all__ = [
    "PluginSettings",
    "Setting",
    "SettingGroup",
    "build_setting",
    "build_settings_from_call",
    "build_settings_from_object",
    "extract_plugin",
    "plugin_name_from_directory",
]
