"""
Ordered inference stages.

Each stage is a pure function (evidence, state) -> state. Order matters:
structured-type coercion must see the baseline before array refinement
decides between `listOf str` and attrs, and the final fallback must run
last so nothing later overrides it.
"""

from dataclasses import replace
from typing import Callable, List, Tuple

from pluginopts.extraction import checks
from pluginopts.extraction.config import STRUCTURED_CATEGORY_MARKERS
from pluginopts.extraction.results import MISSING
from pluginopts.inference.config import (
    NIX_TYPE_ATTRS,
    NIX_TYPE_BOOL,
    NIX_TYPE_ENUM,
    NIX_TYPE_LIST_OF_ATTRS,
    NIX_TYPE_LIST_OF_STR,
    NIX_TYPE_NULL_OR_STR,
    NIX_TYPE_STR,
)
from pluginopts.inference.state import InferenceState, SettingEvidence
from pluginopts.inference.type_mapping import declared_nix_type
from pluginopts.syntax.nodes import is_identifier

Stage = Callable[[SettingEvidence, InferenceState], InferenceState]

BOOLEAN_ENUM_LENGTH = 2


def _is_boolean_enum(values: Tuple) -> bool:
    return (
        len(values) == BOOLEAN_ENUM_LENGTH
        and all(isinstance(v, bool) for v in values)
        and len(set(values)) == BOOLEAN_ENUM_LENGTH
    )


def _identifier_default(evidence: SettingEvidence) -> bool:
    return is_identifier(checks.default_initializer(evidence.node))


def infer_initial_type(evidence: SettingEvidence, state: InferenceState) -> InferenceState:
    """Baseline type, option values and the array/category flags later stages read."""
    obj = evidence.node
    nix_type = declared_nix_type(evidence)
    values = tuple(evidence.options.values)
    enum_values = values or None

    if values and _is_boolean_enum(values):
        nix_type = NIX_TYPE_BOOL
        enum_values = None
    elif values:
        nix_type = NIX_TYPE_ENUM
    elif nix_type == NIX_TYPE_ENUM:
        # a select with no readable options cannot be an enum
        nix_type = declared_nix_type(replace(evidence, properties=replace(evidence.properties, type_node=None)))

    type_text = evidence.type_node.text if evidence.type_node is not None else ""
    return replace(
        state,
        nix_type=nix_type,
        enum_values=enum_values,
        default=evidence.default,
        has_string_array=checks.has_string_array_default(obj, evidence.symbols),
        has_identifier_string_array=(
            evidence.default is MISSING
            and checks.has_identifier_string_array_default(obj, evidence.symbols)
        ),
        is_component_or_custom=any(marker in type_text for marker in STRUCTURED_CATEGORY_MARKERS),
    )


def coerce_structured_types(evidence: SettingEvidence, state: InferenceState) -> InferenceState:
    """
    Decide when a COMPONENT/CUSTOM (or unmarked) setting is really an
    object. String literal defaults keep such settings as strings; getter
    defaults become nullable strings.
    """
    obj = evidence.node
    symbols = evidence.symbols
    default = state.default
    nix_type = state.nix_type
    structured = state.is_component_or_custom
    has_string_literal = checks.has_string_literal_default(obj)
    identifier_default = _identifier_default(evidence)

    if (
        nix_type == NIX_TYPE_STR
        and structured
        and not has_string_literal
        and not isinstance(default, str)
        and (default is MISSING or isinstance(default, dict))
    ):
        nix_type = NIX_TYPE_ATTRS

    if nix_type == NIX_TYPE_STR and default is MISSING and not has_string_literal:
        if identifier_default and checks.has_object_array_default(obj, symbols):
            nix_type = NIX_TYPE_ATTRS
        elif structured and not (state.has_string_array or state.has_identifier_string_array):
            nix_type = NIX_TYPE_ATTRS

    if identifier_default:
        if checks.identifier_is_object_array(checks.default_initializer(obj), symbols):
            nix_type = NIX_TYPE_ATTRS
        if nix_type != NIX_TYPE_ATTRS and checks.has_object_array_default(obj, symbols):
            nix_type = NIX_TYPE_ATTRS
        if nix_type != NIX_TYPE_ATTRS and checks.is_custom_type(obj):
            nix_type = NIX_TYPE_ATTRS

    if nix_type == NIX_TYPE_ATTRS:
        if checks.has_getter_default(obj):
            nix_type = NIX_TYPE_NULL_OR_STR
            if default is MISSING:
                default = None
        elif structured and has_string_literal:
            nix_type = NIX_TYPE_STR

    return replace(state, nix_type=nix_type, default=default)


def refine_array_types(evidence: SettingEvidence, state: InferenceState) -> InferenceState:
    """Upgrade str/attrs to `listOf str` or `listOf attrs` when the default is an array."""
    obj = evidence.node
    symbols = evidence.symbols
    nix_type = state.nix_type
    default = state.default
    scalar_like = (NIX_TYPE_STR, NIX_TYPE_ATTRS)

    has_string_array = state.has_string_array or state.has_identifier_string_array
    has_object_array = checks.has_object_array_default(obj, symbols)

    if nix_type in scalar_like and has_string_array:
        nix_type = NIX_TYPE_LIST_OF_STR
        if default is MISSING:
            default = []

    # identifier defaults stay attrs; their contents are not visible here
    if nix_type in scalar_like and has_object_array and not _identifier_default(evidence):
        nix_type = NIX_TYPE_LIST_OF_ATTRS
        if default is MISSING:
            default = []

    if (
        nix_type in scalar_like
        and not has_string_array
        and not has_object_array
        and checks.is_empty_array_default(obj)
    ):
        nix_type = NIX_TYPE_LIST_OF_STR
        if default is MISSING:
            default = []

    if checks.has_empty_array_with_type_annotation(obj, symbols) and checks.is_custom_type(obj):
        nix_type = NIX_TYPE_LIST_OF_ATTRS
        if default is MISSING:
            default = []

    return replace(state, nix_type=nix_type, default=default)


def apply_final_fallbacks(evidence: SettingEvidence, state: InferenceState) -> InferenceState:
    """CUSTOM settings bound to an identifier end up as attrs."""
    if state.nix_type in (NIX_TYPE_ATTRS, NIX_TYPE_LIST_OF_ATTRS):
        return state
    if _identifier_default(evidence) and checks.is_custom_type(evidence.node):
        return replace(state, nix_type=NIX_TYPE_ATTRS)
    return state


INFERENCE_STAGES: List[Tuple[str, Stage]] = [
    ("initial", infer_initial_type),
    ("structured_coercion", coerce_structured_types),
    ("arrays", refine_array_types),
    ("fallbacks", apply_final_fallbacks),
]
