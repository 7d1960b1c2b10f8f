import re
from typing import Optional

from pluginopts.extraction.navigator import extract_plugin_info, find_settings_call
from pluginopts.logging_config import logger
from pluginopts.settings.builder import build_settings_from_call
from pluginopts.settings.models import PluginSettings
from pluginopts.syntax.source import SourceFile
from pluginopts.syntax.symbols import SymbolTable

_DIRECTORY_SEPARATOR = re.compile(r"[-_]")


def plugin_name_from_directory(directory_name: str) -> str:
    """`fake-nitro_plus` -> `FakeNitroPlus`."""
    parts = _DIRECTORY_SEPARATOR.split(directory_name)
    return "".join(part[:1].upper() + part[1:] for part in parts)


def extract_plugin(
    entry: SourceFile,
    symbols: SymbolTable,
    directory_name: Optional[str] = None,
    settings_file: Optional[SourceFile] = None,
) -> Optional[PluginSettings]:
    """
    Plugin metadata and settings tree from the plugin's entry file.

    When the entry file has no definePluginSettings call, settings_file
    (usually a sibling settings.ts) is searched instead. Returns None when
    no name can be found for the plugin.
    """
    info = extract_plugin_info(entry.root)
    name = info.name
    if name is None and directory_name:
        name = plugin_name_from_directory(directory_name)
    if not name:
        logger.debug(f"No plugin name in {entry.path}")
        return None

    call = find_settings_call(entry.root)
    if call is None and settings_file is not None:
        call = find_settings_call(settings_file.root)

    settings = build_settings_from_call(call, symbols)
    logger.debug(f"Extracted {len(settings)} settings for plugin {name}")
    return PluginSettings(
        name=name,
        description=info.description,
        directory_name=directory_name,
        settings=settings,
    )
