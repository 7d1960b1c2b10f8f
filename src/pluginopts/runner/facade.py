from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pluginopts.exceptions import GenerationError, SourceRootError
from pluginopts.logging_config import logger
from pluginopts.nix import generate_module, generate_parse_rules_module
from pluginopts.runner.categorize import CategorizedPlugins, categorize_plugins
from pluginopts.runner.config import DEFAULT_OUTPUT, DIRECTORIES, FILENAMES
from pluginopts.runner.parser import ParsedPlugins, parse_plugins
from pluginopts.schemas import GenerationSummary, validate_parsed_results


@dataclass
class GenerateParams:
    vencord_path: str
    equicord_path: Optional[str] = None
    vencord_plugins_dir: str = DIRECTORIES["vencord_plugins"]
    equicord_plugins_dir: str = DIRECTORIES["equicord_plugins"]
    output_path: str = DEFAULT_OUTPUT
    verbose: bool = False


def _check_source_root(label: str, root: Path, plugins_dir: str) -> None:
    if not (root / FILENAMES["package_json"]).is_file():
        raise SourceRootError(f"{label} source path does not exist or is not a directory: {root}")
    plugins_path = root / plugins_dir
    if not plugins_path.is_dir():
        raise SourceRootError(f"{label} plugins directory not found: {plugins_path}")


def _parse_source(label: str, root: Path, params: GenerateParams) -> ParsedPlugins:
    logger.info(f"Parsing {label} plugins from: {root}")
    parsed = parse_plugins(
        root,
        vencord_plugins_dir=params.vencord_plugins_dir,
        equicord_plugins_dir=params.equicord_plugins_dir,
    )
    logger.info(f"Parsed {parsed.total} plugins from {label}")
    return parsed


def write_outputs(categorized: CategorizedPlugins, output_path: str) -> GenerationSummary:
    """
    Write the three category modules and parse-rules.nix into a `plugins`
    directory next to output_path.

    Raises:
        GenerationError: if a file cannot be written.
    """
    plugins_dir = Path(output_path).resolve().parent / DIRECTORIES["output"]
    outputs = {
        FILENAMES["shared"]: generate_module(categorized.shared, "shared"),
        FILENAMES["vencord"]: generate_module(categorized.vencord_only, "vencord"),
        FILENAMES["equicord"]: generate_module(categorized.equicord_only, "equicord"),
        FILENAMES["parse_rules"]: generate_parse_rules_module(
            categorized.shared, categorized.vencord_only, categorized.equicord_only
        ),
    }

    written = []
    try:
        plugins_dir.mkdir(parents=True, exist_ok=True)
        for filename, content in outputs.items():
            path = plugins_dir / filename
            path.write_text(content, encoding="utf-8")
            written.append(str(path))
            logger.debug(f"Wrote {path}")
    except OSError as e:
        raise GenerationError(f"Failed to write generated modules to {plugins_dir}: {e}") from e

    return GenerationSummary(
        plugins_dir=str(plugins_dir),
        shared_count=len(categorized.shared),
        vencord_only_count=len(categorized.vencord_only),
        equicord_only_count=len(categorized.equicord_only),
        files=written,
    )


def generate_plugin_options(params: GenerateParams) -> GenerationSummary:
    """
    Parse one or two checkouts, categorize their plugins and write the
    generated Nix modules.

    Raises:
        SourceRootError: if a checkout or its plugins directory is missing.
        ResultValidationError: if the parsed data does not fit the schema.
        GenerationError: if output files cannot be written.
    """
    vencord_root = Path(params.vencord_path).resolve()
    _check_source_root("Vencord", vencord_root, params.vencord_plugins_dir)

    equicord_root = None
    if params.equicord_path:
        equicord_root = Path(params.equicord_path).resolve()
        _check_source_root("Equicord", equicord_root, params.equicord_plugins_dir)

    vencord = _parse_source("Vencord", vencord_root, params)
    equicord = _parse_source("Equicord", equicord_root, params) if equicord_root else None

    validate_parsed_results(vencord.vencord_plugins, vencord.equicord_plugins)
    if equicord is not None:
        validate_parsed_results(equicord.vencord_plugins, equicord.equicord_plugins)

    categorized = categorize_plugins(vencord, equicord)
    logger.info(
        f"Categorized: {len(categorized.shared)} generic (shared), "
        f"{len(categorized.vencord_only)} Vencord-only, "
        f"{len(categorized.equicord_only)} Equicord-only"
    )
    return write_outputs(categorized, params.output_path)
