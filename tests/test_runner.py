"""
End-to-end tests for parsing checkouts, categorizing plugins and writing
the generated modules.
"""

import pytest

pytestmark = pytest.mark.fast

from pluginopts.exceptions import ConfigError, SourceRootError
from pluginopts.runner import (
    GenerateParams,
    categorize_plugins,
    generate_plugin_options,
    parse_plugins,
    parse_single_plugin,
)
from pluginopts.runner import parser as runner_parser
from pluginopts.runner.config import validate_parsing_config
from pluginopts.runner.discovery import find_plugin_directories, find_plugin_source_file
from pluginopts.runner.parser import create_project


# ============================================================================
# DISCOVERY
# ============================================================================

def test_find_plugin_directories(vencord_checkout):
    """
    Only directories holding an index file are plugins, in sorted order.
    """
    found = find_plugin_directories(vencord_checkout / "src" / "plugins")
    assert found == ["fake-nitro", "messageLogger", "noSettings"]


def test_find_plugin_directories_missing(temp_dir):
    """
    A missing plugins directory has no plugins.
    """
    assert find_plugin_directories(temp_dir / "nope") == []


def test_source_file_preference(temp_dir):
    """
    index.tsx wins over index.ts, which wins over settings.ts.
    """
    plugin = temp_dir / "plugin"
    plugin.mkdir()
    (plugin / "settings.ts").write_text("")
    assert find_plugin_source_file(plugin).name == "settings.ts"
    (plugin / "index.ts").write_text("")
    assert find_plugin_source_file(plugin).name == "index.ts"
    (plugin / "index.tsx").write_text("")
    assert find_plugin_source_file(plugin).name == "index.tsx"


def test_validate_parsing_config():
    """
    Worker counts must be positive integers.
    """
    with pytest.raises(ConfigError):
        validate_parsing_config({"max_workers": 0, "progress_interval": 10})


# ============================================================================
# PARSING
# ============================================================================

def test_parse_vencord_checkout(vencord_checkout):
    """
    Every plugin directory is parsed; nameless plugins use the directory.
    """
    parsed = parse_plugins(vencord_checkout)
    assert set(parsed.vencord_plugins) == {"MessageLogger", "FakeNitro", "NoSettings"}
    assert parsed.equicord_plugins == {}

    logger_plugin = parsed.vencord_plugins["MessageLogger"]
    delete_style = logger_plugin.settings["deleteStyle"]
    assert delete_style.nix_type == "types.enum"
    assert delete_style.enum_values == ("text", "overlay")
    assert delete_style.default == "text"
    assert logger_plugin.settings["ignoreUsers"].default == ""

    fake_nitro = parsed.vencord_plugins["FakeNitro"]
    assert fake_nitro.directory_name == "fake-nitro"
    assert (fake_nitro.settings["emojiSize"].nix_type, fake_nitro.settings["emojiSize"].default) == ("types.float", 48)
    assert (fake_nitro.settings["stickerSize"].nix_type, fake_nitro.settings["stickerSize"].default) == ("types.int", 160)

    assert parsed.vencord_plugins["NoSettings"].settings == {}


def test_parse_settings_from_sibling_file(equicord_checkout):
    """
    A plugin whose index imports its settings reads them from settings.ts.
    """
    project = create_project(equicord_checkout)
    plugin_path = equicord_checkout / "src" / "equicordplugins" / "betterFolders"
    plugin = parse_single_plugin("betterFolders", plugin_path, project)
    assert plugin.name == "BetterFolders"
    sidebar = plugin.settings["sidebar"]
    assert sidebar.description.endswith(" (restart required)")
    assert sidebar.default is True
    assert plugin.settings["closeAllFolders"].default is False


def test_failing_plugin_is_skipped(vencord_checkout, monkeypatch):
    """
    A plugin whose extraction raises is logged and skipped; the rest of
    the batch still parses.
    """
    real_extract = runner_parser.extract_plugin

    def extract(entry, symbols, directory_name=None, settings_file=None):
        if directory_name == "messageLogger":
            raise RuntimeError("unexpected node")
        return real_extract(entry, symbols, directory_name=directory_name, settings_file=settings_file)

    monkeypatch.setattr(runner_parser, "extract_plugin", extract)
    parsed = parse_plugins(vencord_checkout)
    assert set(parsed.vencord_plugins) == {"FakeNitro", "NoSettings"}


def test_parse_without_plugin_directories(temp_dir):
    """
    A checkout without either plugins directory is an error.
    """
    with pytest.raises(SourceRootError, match="No plugins directories found"):
        parse_plugins(temp_dir)


# ============================================================================
# CATEGORIZATION
# ============================================================================

def test_categorize_plugins(vencord_checkout, equicord_checkout):
    """
    Plugins in both checkouts are shared and use Equicord's settings.
    """
    categorized = categorize_plugins(parse_plugins(vencord_checkout), parse_plugins(equicord_checkout))
    assert set(categorized.shared) == {"MessageLogger", "FakeNitro"}
    assert set(categorized.vencord_only) == {"NoSettings"}
    assert set(categorized.equicord_only) == {"BetterFolders", "vcNarrator"}

    assert categorized.shared["MessageLogger"].settings["deleteStyle"].default == "overlay"
    assert "ignoreUsers" not in categorized.shared["MessageLogger"].settings


def test_categorize_vencord_only(vencord_checkout):
    """
    Without Equicord every plugin is Vencord-only.
    """
    categorized = categorize_plugins(parse_plugins(vencord_checkout))
    assert categorized.shared == {}
    assert set(categorized.vencord_only) == {"MessageLogger", "FakeNitro", "NoSettings"}


# ============================================================================
# GENERATION
# ============================================================================

def test_generate_plugin_options(vencord_checkout, equicord_checkout, temp_dir):
    """
    Generation writes the three modules and the parse rules beside the
    output path.
    """
    params = GenerateParams(
        vencord_path=str(vencord_checkout),
        equicord_path=str(equicord_checkout),
        output_path=str(temp_dir / "out" / "plugins-generated.nix"),
    )
    summary = generate_plugin_options(params)

    plugins_dir = temp_dir / "out" / "plugins"
    assert summary.plugins_dir == str(plugins_dir.resolve())
    assert (summary.shared_count, summary.vencord_only_count, summary.equicord_only_count) == (2, 1, 2)
    for name in ("shared.nix", "vencord.nix", "equicord.nix", "parse-rules.nix"):
        assert (plugins_dir / name).is_file()

    shared = (plugins_dir / "shared.nix").read_text()
    assert "messageLogger = {" in shared
    assert "type = types.enum [ \"text\" \"overlay\" ];" in shared
    assert "default = \"overlay\";" in shared
    assert "(Shared between Vencord and Equicord)" in shared

    equicord = (plugins_dir / "equicord.nix").read_text()
    assert "betterFolders = {" in equicord
    assert "vcNarrator = {" in equicord
    assert "default = 1.0;" in equicord
    assert 'default = "{{USER}} joined";' in equicord

    parse_rules = (plugins_dir / "parse-rules.nix").read_text()
    assert '"vcNarrator"' in parse_rules
    assert not parse_rules.endswith("\n")


def test_generate_missing_checkout(temp_dir):
    """
    A path without package.json is rejected before parsing.
    """
    params = GenerateParams(vencord_path=str(temp_dir / "missing"))
    with pytest.raises(SourceRootError, match="Vencord source path does not exist"):
        generate_plugin_options(params)


def test_generate_missing_plugins_directory(vencord_checkout):
    """
    A checkout without the configured plugins directory is rejected.
    """
    params = GenerateParams(vencord_path=str(vencord_checkout), vencord_plugins_dir="src/userplugins")
    with pytest.raises(SourceRootError, match="Vencord plugins directory not found"):
        generate_plugin_options(params)
