"""
Escaping and identifier rules for generated Nix.

Double-quoted strings escape backslashes, quotes and `${`; block strings
('' ... '') escape their own delimiter, `$` and backslash-newline pairs.
"""

import re

_INTERPOLATION_START = "${"


def escape_double_quoted(text: str) -> str:
    """
    Escape for "..." strings. `${` is handled as one unit so a lone `$`
    stays as is.
    """
    out = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == "\\":
            out.append("\\\\")
        elif char == "$" and text.startswith(_INTERPOLATION_START, i):
            out.append("\\${")
            i += 2
            continue
        elif char == '"':
            out.append('\\"')
        else:
            out.append(char)
        i += 1
    return "".join(out)


def escape_block(text: str) -> str:
    """Escape for '' ... '' strings."""
    escaped = text.replace("''", "'''")
    escaped = escaped.replace("$", "''$")
    escaped = escaped.replace("\\\n", "''\\\n")
    # a trailing quote would merge with the closing delimiter
    if escaped.endswith("'"):
        escaped += " "
    return escaped


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

_LOWER_UPPER = re.compile(r"([a-z\d])([A-Z])")
_UPPER_UPPER = re.compile(r"([A-Z])([A-Z][a-z])")
_WORD_SEPARATORS = re.compile(r"[^A-Za-z\d]+")


def split_words(text: str) -> list:
    """
    Word boundaries for case conversion: lower->upper, an upper run before
    a capitalized word, and any run of non-alphanumerics.
    """
    marked = _LOWER_UPPER.sub("\\1\0\\2", text.strip())
    marked = _UPPER_UPPER.sub("\\1\0\\2", marked)
    marked = _WORD_SEPARATORS.sub("\0", marked)
    marked = marked.strip("\0")
    if not marked:
        return []
    return marked.split("\0")


def camel_case(text: str) -> str:
    """
    `show_me-your NAME` -> `showMeYourName`. A later word that starts with
    a digit keeps an underscore in front of it: `foo 2bar` -> `foo_2bar`.
    """
    words = split_words(text)
    parts = []
    for index, word in enumerate(words):
        if index == 0:
            parts.append(word.lower())
            continue
        head = word[0]
        head = "_" + head if head.isdigit() else head.upper()
        parts.append(head + word[1:].lower())
    return "".join(parts)


_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")
_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_'-]")
_EDGE_UNDERSCORES = re.compile(r"^_+|_+$")
_UNDERSCORE_RUNS = re.compile(r"_+")
_VALID_START = re.compile(r"^[A-Za-z_]")


def identifier(name: str) -> str:
    """Attribute name for `name`, always a valid Nix identifier."""
    leading_underscore = name.startswith("_")
    trailing_underscore = name.endswith("_")

    sanitized = _PARENTHETICAL.sub("", name)
    sanitized = _INVALID_IDENTIFIER_CHARS.sub("_", sanitized)
    sanitized = _EDGE_UNDERSCORES.sub("", sanitized)
    sanitized = _UNDERSCORE_RUNS.sub("_", sanitized)

    needs_prefix = (
        not sanitized
        or sanitized.startswith("-")
        or not _VALID_START.match(sanitized)
    )

    sanitized = camel_case(sanitized)

    if leading_underscore and not trailing_underscore and sanitized and _VALID_START.match(sanitized):
        return "_" + sanitized

    if needs_prefix or not sanitized or not _VALID_START.match(sanitized):
        sanitized = "_" + sanitized
    return sanitized
