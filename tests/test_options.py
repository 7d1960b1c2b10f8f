"""Unit tests for select option extraction."""

import pytest

pytestmark = pytest.mark.fast

from pluginopts.extraction import MISSING, extract_select_options
from pluginopts.extraction.options import extract_select_default, label_key


def _setting(descriptor, options, prelude=""):
    return descriptor(f"{prelude}\ndefinePluginSettings({{ s: {{ options: {options} }} }});", "s")


def _options(descriptor, project, options, prelude=""):
    obj = _setting(descriptor, options, prelude)
    result = extract_select_options(obj, project.symbols)
    assert result.is_ok
    return result.value


# ============================================================================
# ARRAY LITERALS
# ============================================================================

def test_object_options_with_labels(descriptor, project):
    """
    `{ value, label }` objects give values in order and labels keyed by value.
    """
    found = _options(descriptor, project, '[{ label: "One", value: 1 }, { label: "Two", value: 2 }]')
    assert found.values == (1, 2)
    assert found.labels == {"1": "One", "2": "Two"}


def test_enum_member_option_values(descriptor, project):
    """
    Option values that reference enum members resolve to constants.
    """
    prelude = "enum Mode { Off, On, Auto }"
    found = _options(descriptor, project, "[{ value: Mode.On }, { value: Mode.Auto }]", prelude)
    assert found.values == (1, 2)


def test_spread_of_local_option_array(descriptor, project):
    """
    `...OTHER` spreads in the objects of a local array.
    """
    prelude = 'const EXTRA = [{ value: "c", label: "C" }];'
    found = _options(descriptor, project, '[{ value: "a" }, ...EXTRA]', prelude)
    assert found.values == ("a", "c")
    assert found.labels == {"c": "C"}


def test_bare_literals_are_options(descriptor, project):
    """
    An array of plain strings is a list of option values.
    """
    found = _options(descriptor, project, '["x", "y"]')
    assert found.values == ("x", "y")


def test_no_options_property(descriptor, project):
    """
    A descriptor without `options` has an empty option list.
    """
    obj = descriptor('definePluginSettings({ s: { description: "x" } });', "s")
    result = extract_select_options(obj, project.symbols)
    assert result.is_ok
    assert result.value.values == ()


def test_unresolvable_values_are_error(descriptor, project):
    """
    When no option value can be resolved the whole list is an error.
    """
    obj = _setting(descriptor, "[{ value: Missing.A }, { value: Missing.B }]")
    result = extract_select_options(obj, project.symbols)
    assert not result.is_ok
    assert "Missing.A" in result.error.message


# ============================================================================
# CALL PATTERNS
# ============================================================================

def test_array_from_identifier(descriptor, project):
    """
    `Array.from(NAMES)` takes the values of a local array.
    """
    found = _options(descriptor, project, "Array.from(NAMES)", 'const NAMES = ["a", "b"];')
    assert found.values == ("a", "b")


def test_mapped_array_literal(descriptor, project):
    """
    `[...].map(x => ...)` uses the mapped array's elements.
    """
    found = _options(descriptor, project, '["low", "high"].map(v => ({ label: v, value: v }))')
    assert found.values == ("low", "high")


def test_object_keys_map(descriptor, project):
    """
    `Object.keys(OBJ).map(...)` uses the object's keys.
    """
    prelude = "const Sizes = { small: 16, large: 32 };"
    found = _options(descriptor, project, "Object.keys(Sizes).map(k => ({ label: k, value: k }))", prelude)
    assert found.values == ("small", "large")


def test_object_values_map(descriptor, project):
    """
    `Object.values(OBJ).map(...)` uses the object's values.
    """
    prelude = "const Sizes = { small: 16, large: 32 };"
    found = _options(descriptor, project, "Object.values(Sizes).map(v => ({ label: String(v), value: v }))", prelude)
    assert found.values == (16, 32)


def test_theme_table_map(descriptor, project):
    """
    Theme tables built with shikiRepoTheme expand to raw theme URLs.
    """
    prelude = """
        const SHIKI_REPO = "shikijs/textmate-grammars-themes";
        const SHIKI_REPO_COMMIT = "abc123";
        const themes = { DarkPlus: shikiRepoTheme("dark-plus"), Custom: "https://example.com/t.json" };
        const themeNames = Object.keys(themes);
    """
    found = _options(descriptor, project, "themeNames.map(name => ({ label: name, value: themes[name] }))", prelude)
    assert found.values == (
        "https://raw.githubusercontent.com/shikijs/textmate-grammars-themes/abc123/packages/tm-themes/themes/dark-plus.json",
        "https://example.com/t.json",
    )


def test_unsupported_call_is_empty(descriptor, project):
    """
    Call shapes nothing recognizes yield no options rather than an error.
    """
    found = _options(descriptor, project, "loadOptions()")
    assert found.values == ()


# ============================================================================
# DEFAULT OPTION
# ============================================================================

def test_default_flag_selects_option(descriptor, project):
    """
    The option with `default: true` is the select default.
    """
    obj = _setting(descriptor, '[{ value: "a" }, { value: "b", default: true }]')
    assert extract_select_default(obj, project.symbols) == "b"


def test_default_from_spread_array(descriptor, project):
    """
    A default flag inside a spread array is found.
    """
    prelude = 'const MORE = [{ value: "z", default: true }];'
    obj = _setting(descriptor, '[{ value: "a" }, ...MORE]', prelude)
    assert extract_select_default(obj, project.symbols) == "z"


def test_default_from_map_comparison(descriptor, project):
    """
    `.map(x => ({ ..., default: x === VALUE }))` defaults to VALUE.
    """
    obj = _setting(descriptor, '["a", "b"].map(x => ({ label: x, value: x, default: x === "b" }))')
    assert extract_select_default(obj, project.symbols) == "b"


def test_no_default_flag_is_missing(descriptor, project):
    """
    Without a flagged option there is no select default.
    """
    obj = _setting(descriptor, '[{ value: "a" }, { value: "b" }]')
    assert extract_select_default(obj, project.symbols) is MISSING


@pytest.mark.parametrize("value,key", [
    (True, "true"),
    (False, "false"),
    (2.0, "2"),
    (2.5, "2.5"),
    ("x", "x"),
])
def test_label_key(value, key):
    """
    Labels are keyed by the value's string form, JS style.
    """
    assert label_key(value) == key
