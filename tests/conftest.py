"""
Pytest configuration for the pluginopts test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- In-memory TypeScript projects for extraction and inference tests
- Temporary directories and on-disk Vencord/Equicord fixture checkouts
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from pluginopts.extraction.navigator import find_settings_call, first_argument, get_property_assignment
from pluginopts.logging_config import setup_logging
from pluginopts.settings import build_settings_from_call
from pluginopts.syntax import Project

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PLUGIN_PATH = "src/plugins/example/index.ts"

OPTION_TYPE_SOURCE = """
export enum OptionType {
    STRING,
    NUMBER,
    BIGINT,
    BOOLEAN,
    SELECT,
    SLIDER,
    COMPONENT,
    CUSTOM,
}
"""


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet operation."""
    os.environ.setdefault("PLUGINOPTS_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="pluginopts_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def vencord_checkout(temp_dir):
    """
    Copy of the Vencord fixture checkout.

    Returns:
        Path to the checkout root.
    """
    root = temp_dir / "vencord"
    shutil.copytree(FIXTURES_DIR / "vencord", root)
    return root


@pytest.fixture
def equicord_checkout(temp_dir):
    """
    Copy of the Equicord fixture checkout (src/plugins and src/equicordplugins).

    Returns:
        Path to the checkout root.
    """
    root = temp_dir / "equicord"
    shutil.copytree(FIXTURES_DIR / "equicord", root)
    return root


# ============================================================================
# IN-MEMORY PROJECT FIXTURES
# ============================================================================

@pytest.fixture
def project():
    """
    Empty in-memory project with the OptionType enum at src/utils/types.ts,
    registered as an ambient file so `@utils/types` imports resolve.
    """
    proj = Project()
    proj.add_source("src/utils/types.ts", OPTION_TYPE_SOURCE)
    proj.add_ambient("src/utils/types.ts")
    return proj


@pytest.fixture
def settings_of(project):
    """
    Build the settings tree of a plugin source.

    Usage:
        def test_something(settings_of):
            settings = settings_of('definePluginSettings({ ... })')
    """
    def build(code, path=PLUGIN_PATH):
        source = project.add_source(path, code)
        return build_settings_from_call(find_settings_call(source.root), project.symbols)

    return build


@pytest.fixture
def descriptor(project):
    """
    Object literal of one named setting inside definePluginSettings({...}).

    Usage:
        def test_something(descriptor):
            obj = descriptor('definePluginSettings({ a: { ... } })', "a")
    """
    def find(code, name, path=PLUGIN_PATH):
        source = project.add_source(path, code)
        call = find_settings_call(source.root)
        assert call is not None, "no definePluginSettings call in test source"
        pair = get_property_assignment(first_argument(call), name)
        assert pair is not None, f"no setting named {name}"
        return pair.field("value")

    return find
