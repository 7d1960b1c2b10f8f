import re

from pluginopts.exceptions import ConfigError

INDENT = "  "

# mkOption { ... } bodies sit two levels deep inside the module attrset
OPTION_CONFIG_INDENT_LEVEL = 2
MODULE_INDENT_LEVEL = 0

ENABLE_SETTING_NAME = "enable"
ENABLE_OPTION_FUNCTION = "mkEnableOption"
OPTION_FUNCTION = "mkOption"

MODULE_HEADER_LINES = (
    "# This file is auto-generated by pluginopts",
    "# DO NOT EDIT this file directly; instead update the generator",
    "",
    "{ lib, ... }:",
    "let",
    "  inherit (lib) types mkEnableOption mkOption;",
    "in",
)

# Category -> suffix appended to enable descriptions
CATEGORY_LABELS = {
    "shared": " (Shared between Vencord and Equicord)",
    "vencord": " (Vencord-only)",
    "equicord": " (Equicord-only)",
}

# Static entries of parse-rules.nix
PARSE_RULES_UPPER_NAMES = ("owner", "webhook")

# Strings rendered unquoted under types.int
INTEGER_STRING_PATTERN = re.compile(r"^[0-9]+$")

ENUM_MAPPING_PREFIX = "Values: "


def validate_indent(indent: str) -> None:
    if not indent or indent.strip():
        raise ConfigError(f"Indent must be non-empty whitespace, got {indent!r}")
