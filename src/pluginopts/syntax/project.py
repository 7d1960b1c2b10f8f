import json
import os
import posixpath
import re
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from pluginopts.exceptions import ParserError
from pluginopts.logging_config import logger
from pluginopts.syntax.config import INDEX_BASENAMES, MODULE_EXTENSIONS, TSCONFIG_NAME
from pluginopts.syntax.source import SourceFile
from pluginopts.syntax.symbols import SymbolTable

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def _strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments outside of string literals."""
    out = []
    i = 0
    in_string = False
    while i < len(text):
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < len(text):
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = len(text) if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = len(text) if end == -1 else end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def load_path_aliases(root: Path) -> Tuple[Optional[Path], List[Tuple[str, List[str]]]]:
    """
    Read compilerOptions.baseUrl/paths from the root tsconfig.json.

    Returns (base directory, [(pattern, [targets])]). A missing or unreadable
    tsconfig yields no aliases.
    """
    tsconfig = root / TSCONFIG_NAME
    if not tsconfig.is_file():
        return None, []
    try:
        raw = tsconfig.read_text(encoding="utf-8")
        data = json.loads(_TRAILING_COMMA_RE.sub(r"\1", _strip_json_comments(raw)))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable {tsconfig}: {e}")
        return None, []

    options = data.get("compilerOptions") or {}
    base = root / options.get("baseUrl", ".")
    paths = options.get("paths") or {}
    aliases = [(pattern, list(targets)) for pattern, targets in paths.items() if isinstance(targets, list)]
    return base, aliases


class Project:
    """
    The set of sources a resolution may touch.

    Files are parsed on first use. In-memory sources (added with add_source)
    take precedence over the filesystem, which lets tests build small
    projects without touching disk.
    """

    def __init__(self, root: Optional[Path] = None, ambient_files: Iterable[Path] = ()):
        self.root = Path(root).resolve() if root is not None else None
        self._files: Dict[str, SourceFile] = {}
        self._virtual: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._ambient: List[str] = []
        if self.root is not None:
            self.base_url, self.path_aliases = load_path_aliases(self.root)
        else:
            self.base_url, self.path_aliases = None, []
        self.symbols = SymbolTable(self)
        for path in ambient_files:
            self.add_ambient(path)

    # ------------------------------------------------------------------
    # Source management
    # ------------------------------------------------------------------

    @staticmethod
    def _key(path) -> str:
        return posixpath.normpath(str(path).replace(os.sep, "/"))

    def add_source(self, path: str, text: str) -> SourceFile:
        """Register an in-memory source file and return it parsed."""
        key = self._key(path)
        source = SourceFile(key, text)
        with self._lock:
            self._virtual[key] = text
            self._files[key] = source
        return source

    def add_ambient(self, path) -> Optional[SourceFile]:
        """Preload a file whose exports are used when an import cannot be resolved by path."""
        source = self.find_source(path)
        if source is None:
            logger.debug(f"Ambient file not found, skipping: {path}")
            return None
        with self._lock:
            if source.path not in self._ambient:
                self._ambient.append(source.path)
        return source

    def ambient_sources(self) -> List[SourceFile]:
        with self._lock:
            keys = list(self._ambient)
            return [self._files[k] for k in keys if k in self._files]

    def _exists(self, key: str) -> bool:
        with self._lock:
            if key in self._files or key in self._virtual:
                return True
        return os.path.isfile(key)

    def find_source(self, path) -> Optional[SourceFile]:
        """Parsed source at path, or None when it does not exist."""
        key = self._key(path)
        if not self._exists(key):
            return None
        return self.get_source(key)

    def get_source(self, path) -> SourceFile:
        """
        Parsed source at path.

        Raises:
            ParserError: if the file cannot be read.
        """
        key = self._key(path)
        with self._lock:
            cached = self._files.get(key)
        if cached is not None:
            return cached

        try:
            text = Path(key).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParserError(key, str(e))

        source = SourceFile(key, text)
        with self._lock:
            # another worker may have parsed it meanwhile
            return self._files.setdefault(key, source)

    # ------------------------------------------------------------------
    # Module resolution
    # ------------------------------------------------------------------

    def _candidates(self, base: str) -> List[str]:
        candidates = []
        if base.endswith(MODULE_EXTENSIONS):
            candidates.append(base)
        candidates.extend(base + ext for ext in MODULE_EXTENSIONS)
        candidates.extend(posixpath.join(base, name) for name in INDEX_BASENAMES)
        return candidates

    def _alias_bases(self, specifier: str) -> List[str]:
        if self.base_url is None:
            return []
        bases = []
        for pattern, targets in self.path_aliases:
            if pattern.endswith("*"):
                prefix = pattern[:-1]
                if not specifier.startswith(prefix):
                    continue
                rest = specifier[len(prefix):]
                bases.extend(str(self.base_url / t.replace("*", rest)) for t in targets)
            elif pattern == specifier:
                bases.extend(str(self.base_url / t) for t in targets)
        return bases

    def resolve_module(self, specifier: Optional[str], from_path: str) -> Optional[SourceFile]:
        """SourceFile an import specifier points at, or None for packages and misses."""
        if not specifier:
            return None
        if specifier.startswith("."):
            bases = [posixpath.join(posixpath.dirname(from_path), specifier)]
        else:
            bases = self._alias_bases(specifier)

        for base in bases:
            for candidate in self._candidates(self._key(base)):
                if self._exists(candidate):
                    try:
                        return self.get_source(candidate)
                    except ParserError as e:
                        logger.warning(str(e))
                        return None
        return None
