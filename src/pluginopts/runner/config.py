from pluginopts.exceptions import ConfigError

DEFAULT_OUTPUT = "plugins-generated.nix"

DIRECTORIES = {
    "output": "plugins",
    "vencord_plugins": "src/plugins",
    "equicord_plugins": "src/equicordplugins",
}

FILENAMES = {
    "package_json": "package.json",
    "shared": "shared.nix",
    "vencord": "vencord.nix",
    "equicord": "equicord.nix",
    "parse_rules": "parse-rules.nix",
}

# Entry file preference inside one plugin directory
PLUGIN_SOURCE_FILES = ("index.tsx", "index.ts", "settings.ts")
# A directory is a plugin when it holds one of these
PLUGIN_ENTRY_FILES = ("index.ts", "index.tsx")
SETTINGS_FILE = "settings.ts"

# Loaded up front so enum and theme references resolve without following
# every import of the checkout
AMBIENT_FILES = (
    "src/utils/types.ts",
    "src/plugins/shikiCodeblocks.desktop/api/themes.ts",
)
AMBIENT_DIRECTORIES = (
    "packages/discord-types/enums",
)
AMBIENT_PATTERN = "**/*.ts"

PARSING_CONFIG = {
    "max_workers": 5,
    "progress_interval": 10,
}


def validate_parsing_config(config: dict) -> None:
    for key in ("max_workers", "progress_interval"):
        value = config.get(key)
        if not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{key} must be a positive integer, got {value!r}")
    if not PLUGIN_SOURCE_FILES or not PLUGIN_ENTRY_FILES:
        raise ConfigError("Plugin file patterns must not be empty")
