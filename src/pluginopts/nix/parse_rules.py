from typing import Iterable, Mapping

from pluginopts.nix.config import MODULE_HEADER_LINES, MODULE_INDENT_LEVEL, PARSE_RULES_UPPER_NAMES
from pluginopts.nix.renderer import NixRenderer
from pluginopts.settings.models import PluginSettings


def lower_plugin_titles(groups: Iterable[Mapping[str, PluginSettings]]) -> list:
    """Sorted unique plugin names that start with a lower-case letter."""
    names = set()
    for plugins in groups:
        for plugin in plugins.values():
            if plugin.name[:1].islower():
                names.add(plugin.name)
    return sorted(names)


def generate_parse_rules_module(*groups: Mapping[str, PluginSettings]) -> str:
    """
    Rules the config parser uses to map Nix attribute names back to plugin
    and setting names.
    """
    rules = {
        "upperNames": list(PARSE_RULES_UPPER_NAMES),
        "lowerPluginTitles": lower_plugin_titles(groups),
    }
    body = NixRenderer().attr_set(rules, MODULE_INDENT_LEVEL)
    return "\n".join([*MODULE_HEADER_LINES, body])
