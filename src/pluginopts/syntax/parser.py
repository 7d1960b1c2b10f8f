import threading
from typing import Dict

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser, Tree

from pluginopts.logging_config import logger

_LANGUAGE_LOADERS = {
    "typescript": tstypescript.language_typescript,
    "tsx": tstypescript.language_tsx,
}

# Global cache for loaded languages to avoid repeated loading
_language_cache: Dict[str, Language] = {}
_language_lock = threading.Lock()

# Parser instances are not safe to share between worker threads
_thread_parsers = threading.local()


def get_language(grammar: str) -> Language:
    """
    Returns the tree-sitter language for a grammar name ("typescript" or "tsx").

    Caches the loaded language object for efficiency.
    """
    with _language_lock:
        lang = _language_cache.get(grammar)
        if lang is None:
            lang = Language(_LANGUAGE_LOADERS[grammar]())
            _language_cache[grammar] = lang
            logger.debug(f"Loaded tree-sitter grammar '{grammar}'")
        return lang


def get_parser(grammar: str) -> Parser:
    parsers = getattr(_thread_parsers, "parsers", None)
    if parsers is None:
        parsers = {}
        _thread_parsers.parsers = parsers
    parser = parsers.get(grammar)
    if parser is None:
        parser = Parser()
        parser.language = get_language(grammar)
        parsers[grammar] = parser
    return parser


def parse_bytes(data: bytes, grammar: str) -> Tree:
    return get_parser(grammar).parse(data)
