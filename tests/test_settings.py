"""Tests for the settings tree builder and plugin extraction."""

import pytest

pytestmark = pytest.mark.fast

from pluginopts.extraction import MISSING
from pluginopts.settings import Setting, SettingGroup, extract_plugin, plugin_name_from_directory

HEADER = 'import { OptionType } from "@utils/types";\n'


def _settings(settings_of, body):
    return settings_of(f"{HEADER}export const settings = definePluginSettings({{ {body} }});")


# ============================================================================
# SCENARIOS
# ============================================================================

def test_boolean_with_default(settings_of):
    """
    `{type: BOOLEAN, default: true}` is a bool defaulting to true.
    """
    s = _settings(settings_of, 'flag: { type: OptionType.BOOLEAN, description: "Flag", default: true }')["flag"]
    assert (s.nix_type, s.default) == ("types.bool", True)


def test_string_without_default_is_nullable(settings_of):
    """
    `{type: STRING}` with no default is a nullable string defaulting to null.
    """
    s = _settings(settings_of, 'token: { type: OptionType.STRING, description: "Token" }')["token"]
    assert (s.nix_type, s.default) == ("types.nullOr types.str", None)


def test_select_without_default_takes_first_option(settings_of):
    """
    A select with no flagged option is an enum defaulting to its first value.
    """
    s = _settings(
        settings_of,
        'mode: { type: OptionType.SELECT, description: "Mode", options: [{ value: "a" }, { value: "b" }] }',
    )["mode"]
    assert s.nix_type == "types.enum"
    assert s.enum_values == ("a", "b")
    assert s.default == "a"


def test_bare_component_is_empty_attrs(settings_of):
    """
    A COMPONENT with only structural properties is attrs defaulting to {}.
    """
    s = _settings(settings_of, "panel: { type: OptionType.COMPONENT, component: () => null }")["panel"]
    assert (s.nix_type, s.default) == ("types.attrs", {})


def test_every_setting_has_a_type(settings_of):
    """
    Every leaf gets a type tag, whatever its shape.
    """
    settings = _settings(settings_of, """
        a: { type: OptionType.CUSTOM, default: runtime() },
        b: { description: "b", default: somewhere.value },
        c: { type: OptionType.SELECT, description: "c", options: make() },
        d: { type: OptionType.NUMBER, description: "d" },
    """)
    assert all(s.nix_type.startswith("types.") for s in settings.values())


# ============================================================================
# TREE SHAPE
# ============================================================================

def test_nested_group(settings_of):
    """
    An entry without type/description that holds objects is a group.
    """
    settings = _settings(settings_of, """
        appearance: {
            theme: { type: OptionType.STRING, description: "Theme", default: "dark" },
            compact: { type: OptionType.BOOLEAN, description: "Compact", default: false },
        },
    """)
    group = settings["appearance"]
    assert isinstance(group, SettingGroup)
    assert list(group.children) == ["theme", "compact"]
    assert group.children["theme"].default == "dark"


def test_hidden_settings_are_dropped(settings_of):
    """
    `hidden: true` leaves the setting out of the tree.
    """
    settings = _settings(settings_of, """
        visible: { type: OptionType.BOOLEAN, description: "v", default: true },
        secret: { type: OptionType.STRING, description: "s", hidden: true },
    """)
    assert list(settings) == ["visible"]


def test_non_object_entries_are_skipped(settings_of):
    """
    Spreads and non-object values are not settings.
    """
    settings = _settings(settings_of, """
        ...shared,
        other: someValue,
        real: { type: OptionType.BOOLEAN, description: "r" },
    """)
    assert list(settings) == ["real"]


def test_restart_needed_suffix_and_placeholder(settings_of):
    """
    restartNeeded appends the suffix; placeholder becomes the example.
    """
    s = _settings(settings_of, """
        url: {
            type: OptionType.STRING,
            description: "Server URL",
            placeholder: "https://example.com",
            restartNeeded: true,
            default: "",
        },
    """)["url"]
    assert s.description == "Server URL (restart required)"
    assert s.example == "https://example.com"
    assert s.restart_needed is True


def test_description_falls_back_to_name(settings_of):
    """
    Settings with `name:` but no description use the name as description.
    """
    s = _settings(settings_of, 'x: { type: OptionType.BOOLEAN, name: "Do X" }')["x"]
    assert s.description == "Do X"


def test_select_labels_are_kept(settings_of):
    """
    Option labels are carried on the setting by value.
    """
    s = _settings(settings_of, """
        status: {
            type: OptionType.SELECT,
            description: "Status",
            options: [
                { label: "Playing", value: ActivityType.PLAYING },
                { label: "Listening", value: ActivityType.LISTENING, default: true },
            ],
        },
    """)["status"]
    assert s.enum_values == (0, 2)
    assert s.enum_labels == {"0": "Playing", "2": "Listening"}
    assert s.default == 2


def test_errors_are_recorded_on_the_setting(settings_of):
    """
    Values that cannot be evaluated are kept as errors, not raised.
    """
    s = _settings(settings_of, 'n: { type: OptionType.NUMBER, description: "n", default: 60 * 1000 }')["n"]
    assert s.default is MISSING
    assert [e.kind.value for e in s.errors] == ["CannotEvaluate"]


def test_invalid_string_escape_does_not_block_siblings(settings_of):
    """
    A regex-range default with unpaired surrogates still extracts, and so
    does the setting after it.
    """
    settings = _settings(settings_of, r"""
        re: { type: OptionType.STRING, description: "Pattern", default: "[\uD800-\uDBFF]" },
        ok: { type: OptionType.BOOLEAN, description: "Ok", default: true },
    """)
    assert settings["re"].default == "[\ufffd-\ufffd]"
    assert (settings["ok"].nix_type, settings["ok"].default) == ("types.bool", True)


def test_private_settings_chain(settings_of):
    """
    `.withPrivateSettings<T>()` does not hide the settings object.
    """
    settings = settings_of(
        HEADER
        + 'const settings = definePluginSettings({ a: { type: OptionType.BOOLEAN, description: "a" } })'
        + ".withPrivateSettings<{ cache: string }>();"
    )
    assert isinstance(settings["a"], Setting)


# ============================================================================
# PLUGINS
# ============================================================================

@pytest.mark.parametrize("directory,name", [
    ("fakeNitro", "FakeNitro"),
    ("fake-nitro", "FakeNitro"),
    ("better_folders-plus", "BetterFoldersPlus"),
])
def test_plugin_name_from_directory(directory, name):
    """
    Directory names split on - and _ and capitalize each part.
    """
    assert plugin_name_from_directory(directory) == name


def test_extract_plugin_metadata(project):
    """
    Name and description come from definePlugin; settings from the call.
    """
    entry = project.add_source("src/plugins/demo/index.ts", HEADER + """
        const settings = definePluginSettings({
            enabled: { type: OptionType.BOOLEAN, description: "On", default: true },
        });
        export default definePlugin({
            name: "Demo",
            description: "A demo plugin",
            settings,
        });
    """)
    plugin = extract_plugin(entry, project.symbols, directory_name="demo")
    assert plugin.name == "Demo"
    assert plugin.description == "A demo plugin"
    assert plugin.directory_name == "demo"
    assert list(plugin.settings) == ["enabled"]


def test_extract_plugin_uses_settings_file(project):
    """
    When the entry file has no settings call, the sibling settings file is used.
    """
    entry = project.add_source("src/plugins/demo/index.tsx", """
        import { settings } from "./settings";
        export default definePlugin({ name: "Demo", description: "d", settings });
    """)
    settings_file = project.add_source("src/plugins/demo/settings.ts", HEADER + """
        export const settings = definePluginSettings({
            size: { type: OptionType.NUMBER, description: "Size", default: 4 },
        });
    """)
    plugin = extract_plugin(entry, project.symbols, directory_name="demo", settings_file=settings_file)
    assert plugin.settings["size"].nix_type == "types.int"


def test_extract_plugin_name_from_directory(project):
    """
    A plugin without a literal name is named after its directory.
    """
    entry = project.add_source("src/plugins/no-name/index.ts", "export default definePlugin({ description: 'x' });")
    plugin = extract_plugin(entry, project.symbols, directory_name="no-name")
    assert plugin.name == "NoName"
    assert plugin.settings == {}


def test_extract_plugin_without_name_is_none(project):
    """
    With no literal name and no directory there is no plugin.
    """
    entry = project.add_source("src/plugins/x/index.ts", "export default definePlugin({ name: getName() });")
    assert extract_plugin(entry, project.symbols) is None
