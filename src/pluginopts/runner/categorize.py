from dataclasses import dataclass, field
from typing import Dict, Optional

from pluginopts.runner.parser import ParsedPlugins
from pluginopts.settings import PluginSettings


@dataclass
class CategorizedPlugins:
    shared: Dict[str, PluginSettings] = field(default_factory=dict)
    vencord_only: Dict[str, PluginSettings] = field(default_factory=dict)
    equicord_only: Dict[str, PluginSettings] = field(default_factory=dict)


def categorize_plugins(vencord: ParsedPlugins, equicord: Optional[ParsedPlugins] = None) -> CategorizedPlugins:
    """
    Split plugins into shared, Vencord-only and Equicord-only.

    A Vencord plugin is shared when Equicord's copy of src/plugins has a
    plugin of the same name, or failing that the same directory name
    ignoring case. Shared entries take Equicord's configuration.
    """
    equicord_shared = equicord.vencord_plugins if equicord is not None else {}
    equicord_own = equicord.equicord_plugins if equicord is not None else {}

    by_directory = {
        plugin.directory_name.lower(): name
        for name, plugin in equicord_shared.items()
        if plugin.directory_name is not None
    }

    result = CategorizedPlugins(equicord_only=dict(equicord_own))
    for name, plugin in vencord.vencord_plugins.items():
        match = equicord_shared.get(name)
        if match is None and plugin.directory_name is not None:
            renamed = by_directory.get(plugin.directory_name.lower())
            if renamed is not None:
                match = equicord_shared[renamed]
        if match is not None:
            result.shared[name] = match
        else:
            result.vencord_only[name] = plugin
    return result
