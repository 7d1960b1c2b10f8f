import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from pluginopts.exceptions import SourceRootError
from pluginopts.logging_config import logger
from pluginopts.runner.config import (
    DIRECTORIES,
    PARSING_CONFIG,
    SETTINGS_FILE,
    validate_parsing_config,
)
from pluginopts.runner.discovery import (
    ambient_files,
    find_plugin_directories,
    find_plugin_source_file,
)
from pluginopts.settings import PluginSettings, extract_plugin
from pluginopts.syntax import Project


@dataclass
class ParsedPlugins:
    """Plugins of one checkout, keyed by plugin name, per plugins directory."""
    vencord_plugins: Dict[str, PluginSettings] = field(default_factory=dict)
    equicord_plugins: Dict[str, PluginSettings] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.vencord_plugins) + len(self.equicord_plugins)


def create_project(source_root: Path) -> Project:
    return Project(root=source_root, ambient_files=ambient_files(source_root))


def parse_single_plugin(directory_name: str, plugin_path: Path, project: Project) -> Optional[PluginSettings]:
    """Settings of one plugin directory; None when it has no usable entry file."""
    entry_path = find_plugin_source_file(plugin_path)
    if entry_path is None:
        return None
    try:
        entry = project.get_source(entry_path)
        settings_file = None
        if entry_path.name != SETTINGS_FILE:
            settings_file = project.find_source(plugin_path / SETTINGS_FILE)
        return extract_plugin(entry, project.symbols, directory_name=directory_name, settings_file=settings_file)
    except Exception as e:
        logger.warning(f"Skipping plugin {directory_name}: {e}")
        return None


def parse_plugins_from_directory(
    plugins_path: Path,
    project: Project,
    config: Optional[dict] = None,
) -> Dict[str, PluginSettings]:
    """
    Parse every plugin directory under plugins_path with a bounded worker
    pool. Result order follows directory order regardless of completion.
    """
    config = config or PARSING_CONFIG
    validate_parsing_config(config)

    directories = find_plugin_directories(plugins_path)
    interactive = sys.stderr.isatty()
    if not interactive:
        logger.info(f"Found {len(directories)} plugin directories in {plugins_path.name}")
    if not directories:
        return {}

    processed = 0
    counter_lock = threading.Lock()

    def parse(directory_name: str) -> Optional[PluginSettings]:
        nonlocal processed
        result = parse_single_plugin(directory_name, plugins_path / directory_name, project)
        with counter_lock:
            processed += 1
            done = processed
        if not interactive and done % config["progress_interval"] == 0:
            logger.info(f"Processed {done}/{len(directories)} plugins...")
        return result

    results: Dict[int, Optional[PluginSettings]] = {}
    workers = min(config["max_workers"], len(directories))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(parse, name): idx for idx, name in enumerate(directories)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    plugins: Dict[str, PluginSettings] = {}
    for idx in sorted(results):
        plugin = results[idx]
        if plugin is not None:
            plugins[plugin.name] = plugin
    return plugins


def parse_plugins(
    source_root,
    vencord_plugins_dir: Optional[str] = None,
    equicord_plugins_dir: Optional[str] = None,
) -> ParsedPlugins:
    """
    Parse both plugin directories of a checkout. A missing directory yields
    no plugins; both missing is an error.

    Raises:
        SourceRootError: if neither plugins directory exists.
    """
    source_root = Path(source_root).resolve()
    vencord_path = source_root / (vencord_plugins_dir or DIRECTORIES["vencord_plugins"])
    equicord_path = source_root / (equicord_plugins_dir or DIRECTORIES["equicord_plugins"])

    has_vencord = vencord_path.is_dir()
    has_equicord = equicord_path.is_dir()
    if not has_vencord and not has_equicord:
        raise SourceRootError(
            "No plugins directories found. Expected one of:\n"
            f"  - {vencord_path}\n"
            f"  - {equicord_path}"
        )

    project = create_project(source_root)
    parsed = ParsedPlugins()
    if has_vencord:
        parsed.vencord_plugins = parse_plugins_from_directory(vencord_path, project)
    if has_equicord:
        parsed.equicord_plugins = parse_plugins_from_directory(equicord_path, project)
    return parsed
