from pluginopts.exceptions import ConfigError

# Grammar used for each source extension; TSX files cannot contain <T>x assertions
GRAMMARS = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

DEFAULT_GRAMMAR = "typescript"

# Probed in order when an import specifier has no extension
MODULE_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".mts")
INDEX_BASENAMES = ("index.ts", "index.tsx")

TSCONFIG_NAME = "tsconfig.json"

RESOLUTION_CONFIG = {
    "max_alias_hops": 8,  # import -> re-export -> export * chains
}

# Nodes that introduce a block scope holding declarations as direct children
BLOCK_SCOPE_KINDS = frozenset({
    "program",
    "statement_block",
    "class_body",
    "switch_case",
    "switch_default",
})

# Nodes whose parameters are visible inside their body
FUNCTION_KINDS = frozenset({
    "arrow_function",
    "function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "generator_function_declaration",
    "method_definition",
})

# Expression wrappers that do not change the runtime value
TRANSPARENT_WRAPPER_KINDS = frozenset({
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "parenthesized_expression",
    "type_assertion",
})


def validate_resolution_config(config: dict) -> None:
    """Raise ConfigError if hop bounds are not usable."""
    hops = config.get("max_alias_hops")
    if not isinstance(hops, int) or hops < 1:
        raise ConfigError(f"max_alias_hops must be a positive integer, got {hops!r}")


def grammar_for_path(path: str) -> str:
    for ext, grammar in GRAMMARS.items():
        if path.endswith(ext):
            return grammar
    return DEFAULT_GRAMMAR
