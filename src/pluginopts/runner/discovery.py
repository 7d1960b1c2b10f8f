from pathlib import Path
from typing import List, Optional

from pluginopts.runner.config import (
    AMBIENT_DIRECTORIES,
    AMBIENT_FILES,
    AMBIENT_PATTERN,
    PLUGIN_ENTRY_FILES,
    PLUGIN_SOURCE_FILES,
)


def find_plugin_directories(plugins_path: Path) -> List[str]:
    """Names of direct subdirectories that contain an index.ts(x), sorted."""
    if not plugins_path.is_dir():
        return []
    found = []
    for child in sorted(plugins_path.iterdir()):
        if child.is_dir() and any((child / name).is_file() for name in PLUGIN_ENTRY_FILES):
            found.append(child.name)
    return found


def find_plugin_source_file(plugin_path: Path) -> Optional[Path]:
    for name in PLUGIN_SOURCE_FILES:
        candidate = plugin_path / name
        if candidate.is_file():
            return candidate
    return None


def ambient_files(source_root: Path) -> List[Path]:
    """Existing helper files loaded into every project for symbol resolution."""
    files = [source_root / rel for rel in AMBIENT_FILES if (source_root / rel).is_file()]
    for rel in AMBIENT_DIRECTORIES:
        directory = source_root / rel
        if directory.is_dir():
            files.extend(sorted(p for p in directory.glob(AMBIENT_PATTERN) if p.is_file()))
    return files
