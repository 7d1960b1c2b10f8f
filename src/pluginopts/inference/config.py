# Target type tags, rendered verbatim into generated modules
NIX_TYPE_STR = "types.str"
NIX_TYPE_BOOL = "types.bool"
NIX_TYPE_INT = "types.int"
NIX_TYPE_FLOAT = "types.float"
NIX_TYPE_ATTRS = "types.attrs"
NIX_TYPE_ENUM = "types.enum"
NIX_TYPE_NULL_OR_STR = "types.nullOr types.str"
NIX_TYPE_LIST_OF_STR = "types.listOf types.str"
NIX_TYPE_LIST_OF_ATTRS = "types.listOf types.attrs"

NULLABLE_MARKER = "nullOr"

# Declared category -> type tag; NUMBER and the structured categories
# also depend on the default and are handled in type_mapping
CATEGORY_TYPES = {
    "BOOLEAN": NIX_TYPE_BOOL,
    "STRING": NIX_TYPE_STR,
    "BIGINT": NIX_TYPE_INT,
    "SELECT": NIX_TYPE_ENUM,
    "SLIDER": NIX_TYPE_FLOAT,
}

# Substrings looked for in a declared TypeScript type annotation
TS_TYPE_STRING = "string"
TS_TYPE_NUMBER = "number"
TS_TYPE_BOOLEAN = "boolean"
TS_ARRAY_MARKERS = ("[]", "Array<")
