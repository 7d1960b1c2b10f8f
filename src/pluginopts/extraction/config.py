import re


# Call names that anchor extraction
SETTINGS_FUNCTION = "definePluginSettings"
PLUGIN_FUNCTION = "definePlugin"

# Methods that wrap a settings call without changing its settings,
# e.g. definePluginSettings({...}).withPrivateSettings<T>()
CHAIN_METHODS = ("withPrivateSettings",)

# Property names read from a setting descriptor
PROPERTY_NAMES = {
    "type": "type",
    "description": "description",
    "name": "name",
    "default": "default",
    "options": "options",
    "hidden": "hidden",
    "restart_needed": "restartNeeded",
    "placeholder": "placeholder",
    "component": "component",
    "value": "value",
    "label": "label",
}

# OptionType enum codes as declared by the plugin API
OPTION_TYPE_CODES = {
    0: "STRING",
    1: "NUMBER",
    2: "BIGINT",
    3: "BOOLEAN",
    4: "SELECT",
    5: "SLIDER",
    6: "COMPONENT",
    7: "CUSTOM",
}

STRUCTURED_CATEGORY_MARKERS = ("COMPONENT", "CUSTOM")
CUSTOM_CATEGORY = "CUSTOM"

# Externally declared enums that are not part of the analyzed sources.
# Only names listed here are resolved without a declaration.
WELL_KNOWN_ENUMS = {
    "ActivityType": {
        "PLAYING": 0,
        "STREAMING": 1,
        "LISTENING": 2,
        "WATCHING": 3,
        "CUSTOM": 4,
        "COMPETING": 5,
    },
}

# A COMPONENT setting built only from these keys gets {} as its default
BARE_COMPONENT_PROPERTIES = frozenset({
    "type",
    "component",
    "description",
    "name",
    "restartNeeded",
    "hidden",
    "placeholder",
})

RESTART_REQUIRED_SUFFIX = "(restart required)"

STRING_ARRAY_TYPE_PATTERN = re.compile(r"string\[\]|\bArray<string>\b")
ARRAY_TYPE_PATTERN = re.compile(r"\[\]$|\bArray<.+>\b")

# Default-value base identifiers whose members are only known at runtime
RUNTIME_GETTER_BASES = ("get",)

# Theme option lists built from a shiki themes table
THEME_URL_TEMPLATE = "https://raw.githubusercontent.com/{repo}/{commit}/packages/tm-themes/themes/{name}.json"
THEME_HELPER = "shikiRepoTheme"
THEME_REPO_CONSTANT = "SHIKI_REPO"
THEME_COMMIT_CONSTANT = "SHIKI_REPO_COMMIT"

RESOLUTION_LIMITS = {
    "max_identifier_hops": 8,  # const a = b; const b = c; ...
}
