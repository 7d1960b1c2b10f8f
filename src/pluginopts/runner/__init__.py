"""
This facade exposes the public API for the runner module.
Other parts of the application should only import from here, not from
internal modules.
"""
from .categorize import CategorizedPlugins, categorize_plugins
from .facade import GenerateParams, generate_plugin_options, write_outputs
from .parser import ParsedPlugins, parse_plugins, parse_single_plugin

__all__ = [
    "CategorizedPlugins",
    "GenerateParams",
    "ParsedPlugins",
    "categorize_plugins",
    "generate_plugin_options",
    "parse_plugins",
    "parse_single_plugin",
    "write_outputs",
]
