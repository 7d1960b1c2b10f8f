"""
Nix code generation for extracted plugin settings.
"""

from .escape import camel_case, escape_block, escape_double_quoted, identifier
from .generator import build_option_config, generate_module, generate_plugin, generate_setting
from .parse_rules import generate_parse_rules_module
from .renderer import NixRaw, NixRenderer

__all__ = [
    "NixRaw",
    "NixRenderer",
    "build_option_config",
    "camel_case",
    "escape_block",
    "escape_double_quoted",
    "generate_module",
    "generate_parse_rules_module",
    "generate_plugin",
    "generate_setting",
    "identifier",
]
