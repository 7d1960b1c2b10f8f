import json
import typer
from pathlib import Path
from typing import Iterator, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pluginopts.exceptions import PluginOptsError
from pluginopts.extraction.results import MISSING
from pluginopts.logging_config import logger, setup_logging
from pluginopts.runner import GenerateParams, generate_plugin_options
from pluginopts.runner.config import DEFAULT_OUTPUT, DIRECTORIES, SETTINGS_FILE
from pluginopts.schemas import plugin_to_model
from pluginopts.settings import PluginSettings, Setting, SettingGroup, extract_plugin
from pluginopts.syntax import Project

app = typer.Typer(help="Generate Nix module options from Vencord/Equicord plugin settings.")
console = Console()


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


@app.command()
def generate(
    vencord_path_arg: Optional[Path] = typer.Argument(
        None, metavar="VENCORD_PATH", help="Path to the Vencord source checkout."
    ),
    vencord: Optional[Path] = typer.Option(
        None, "--vencord", help="Path to the Vencord source checkout (overrides the positional argument)."
    ),
    equicord: Optional[Path] = typer.Option(
        None, "--equicord", "-e", help="Path to the Equicord source checkout."
    ),
    output: Path = typer.Option(
        Path(DEFAULT_OUTPUT), "--output", "-o", help="Output file; modules are written to a plugins/ directory beside it."
    ),
    vencord_plugins: str = typer.Option(
        DIRECTORIES["vencord_plugins"], "--vencord-plugins", help="Vencord plugins directory, relative to the checkout."
    ),
    equicord_plugins: str = typer.Option(
        DIRECTORIES["equicord_plugins"], "--equicord-plugins", help="Equicord plugins directory, relative to the checkout."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """
    Parse plugin settings and write shared/vencord/equicord Nix modules.
    """
    if verbose:
        setup_logging(level="DEBUG", force=True)

    vencord_path = vencord or vencord_path_arg
    if vencord_path is None:
        _fail("Missing Vencord source path. Provide --vencord or the positional argument.")

    params = GenerateParams(
        vencord_path=str(vencord_path),
        equicord_path=str(equicord) if equicord else None,
        vencord_plugins_dir=vencord_plugins,
        equicord_plugins_dir=equicord_plugins,
        output_path=str(output),
        verbose=verbose,
    )

    try:
        summary = generate_plugin_options(params)
    except PluginOptsError as e:
        logger.debug(f"Generation failed: {e}")
        _fail(str(e))

    counts = {
        "shared.nix": summary.shared_count,
        "vencord.nix": summary.vencord_only_count,
        "equicord.nix": summary.equicord_only_count,
    }
    console.print(f"[green]✓[/green] Generated plugin options in {escape(summary.plugins_dir)}")
    for path in summary.files:
        name = Path(path).name
        suffix = f" ({counts[name]} plugins)" if name in counts else ""
        console.print(f"  - {escape(name)}{suffix}")


def _flatten(children, prefix: str = "") -> Iterator[Tuple[str, Setting]]:
    for key, child in children.items():
        path = f"{prefix}{key}"
        if isinstance(child, SettingGroup):
            yield from _flatten(child.children, f"{path}.")
        else:
            yield path, child


def _format_default(value) -> str:
    if value is MISSING:
        return "-"
    return json.dumps(value)


def _inspect_file(file: Path) -> PluginSettings:
    project = Project(root=file.parent)
    entry = project.get_source(file)
    settings_file = None
    if file.name != SETTINGS_FILE:
        settings_file = project.find_source(file.parent / SETTINGS_FILE)
    plugin = extract_plugin(entry, project.symbols, directory_name=file.parent.name, settings_file=settings_file)
    if plugin is None:
        raise PluginOptsError(f"No plugin found in {file}")
    return plugin


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="Plugin source file (index.ts, index.tsx or settings.ts).", exists=True, dir_okay=False),
    json_output: bool = typer.Option(False, "--json", help="Output the extracted settings as JSON."),
):
    """
    Show the settings inferred for a single plugin file.
    """
    try:
        plugin = _inspect_file(file)
    except PluginOptsError as e:
        _fail(str(e))

    if json_output:
        typer.echo(json.dumps(plugin_to_model(plugin).model_dump(exclude_unset=True), indent=2))
        return

    table = Table(title=f"Settings for {escape(plugin.name)}")
    table.add_column("Setting", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Default", style="magenta")
    table.add_column("Description")
    for path, setting in _flatten(plugin.settings):
        table.add_row(
            escape(path),
            escape(setting.nix_type),
            escape(_format_default(setting.default)),
            escape(setting.description or ""),
        )
    console.print(table)


if __name__ == "__main__":
    app()
