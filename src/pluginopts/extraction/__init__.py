"""
Static extraction of plugin settings descriptors.

Every extractor returns Ok/Err values; nothing here raises on a setting it
cannot evaluate.
"""

from .defaults import extract_default_value
from .navigator import PluginInfo, extract_plugin_info, find_settings_call
from .options import OptionList, extract_select_default, extract_select_options
from .properties import SettingProperties, extract_setting_properties
from .results import MISSING, Err, ExtractionError, ExtractionErrorKind, Ok, is_missing

__all__ = [
    "MISSING",
    "Err",
    "ExtractionError",
    "ExtractionErrorKind",
    "Ok",
    "OptionList",
    "PluginInfo",
    "SettingProperties",
    "extract_default_value",
    "extract_plugin_info",
    "extract_select_default",
    "extract_select_options",
    "extract_setting_properties",
    "find_settings_call",
    "is_missing",
]
