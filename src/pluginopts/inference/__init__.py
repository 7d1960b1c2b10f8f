"""
Type inference for one setting descriptor.

collect_evidence() reads everything the stages need off the object
literal; infer_setting() threads an InferenceState through
INFERENCE_STAGES and then normalizes the default.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pluginopts.extraction.defaults import extract_default_value
from pluginopts.extraction.options import EMPTY_OPTIONS, extract_select_options
from pluginopts.extraction.properties import extract_setting_properties
from pluginopts.extraction.results import MISSING, ExtractionError
from pluginopts.inference.resolution import resolve_default
from pluginopts.inference.stages import INFERENCE_STAGES
from pluginopts.inference.state import InferenceState, SettingEvidence
from pluginopts.inference.type_mapping import declared_type_text
from pluginopts.logging_config import logger
from pluginopts.syntax.nodes import SyntaxNode
from pluginopts.syntax.symbols import SymbolTable


@dataclass(frozen=True)
class InferenceResult:
    nix_type: str
    default: Any
    enum_values: Optional[Tuple[Any, ...]]


def collect_evidence(obj: SyntaxNode, symbols: SymbolTable) -> Tuple[SettingEvidence, List[ExtractionError]]:
    """Evidence for one descriptor plus the per-value errors met on the way."""
    errors: List[ExtractionError] = []
    properties = extract_setting_properties(obj)

    default_result = extract_default_value(obj, symbols)
    if default_result.is_ok:
        default = default_result.value
    else:
        errors.append(default_result.error)
        default = MISSING

    options_result = extract_select_options(obj, symbols)
    if options_result.is_ok:
        options = options_result.value
    else:
        errors.append(options_result.error)
        options = EMPTY_OPTIONS

    evidence = SettingEvidence(
        node=obj,
        symbols=symbols,
        properties=properties,
        default=default,
        options=options,
        declared_type_text=declared_type_text(properties.type_node, symbols),
    )
    return evidence, errors


def run_stages(evidence: SettingEvidence) -> InferenceState:
    state = InferenceState(nix_type="")
    for name, stage in INFERENCE_STAGES:
        state = stage(evidence, state)
        logger.trace(f"stage {name}: {state.nix_type} default={state.default!r}")
    return state


def infer_setting(evidence: SettingEvidence) -> InferenceResult:
    state = run_stages(evidence)
    nix_type, default = resolve_default(evidence, state.nix_type, state.default, state.enum_values)
    return InferenceResult(nix_type=nix_type, default=default, enum_values=state.enum_values)


__all__ = [
    "InferenceResult",
    "InferenceState",
    "SettingEvidence",
    "INFERENCE_STAGES",
    "collect_evidence",
    "infer_setting",
    "resolve_default",
    "run_stages",
]
