"""
Final default for a setting once its type is settled.

Every rule below is keyed on the type the stages produced, not on the type
rewritten by an earlier rule, so the rules do not cascade into each other.
"""

from typing import Any, Optional, Tuple

from pluginopts.extraction import checks
from pluginopts.extraction.options import extract_select_default
from pluginopts.extraction.results import MISSING
from pluginopts.inference.config import (
    NIX_TYPE_ATTRS,
    NIX_TYPE_BOOL,
    NIX_TYPE_ENUM,
    NIX_TYPE_NULL_OR_STR,
    NIX_TYPE_STR,
    NULLABLE_MARKER,
)
from pluginopts.inference.state import SettingEvidence
from pluginopts.syntax.nodes import is_getter, is_identifier


def _object_like_identifier_default(evidence: SettingEvidence) -> bool:
    obj = evidence.node
    if not is_identifier(checks.default_initializer(obj)):
        return False
    return checks.is_custom_type(obj) or checks.has_object_array_default(obj, evidence.symbols)


def _absent_structured_default(evidence: SettingEvidence) -> Any:
    obj = evidence.node
    if checks.is_bare_component_setting(obj):
        return {}
    member = checks.default_member(obj)
    if is_getter(member):
        return None
    return {}


def resolve_default(
    evidence: SettingEvidence,
    nix_type: str,
    default: Any,
    enum_values: Optional[Tuple[Any, ...]],
) -> Tuple[str, Any]:
    """
    Returns (type, default). The literal default from evidence decides the
    nullable rule; `default` is whatever the stages carried forward.
    """
    literal = evidence.default
    resolved_type = nix_type

    if nix_type in (NIX_TYPE_ENUM, NIX_TYPE_BOOL) and literal is MISSING:
        default = extract_select_default(evidence.node, evidence.symbols)
        if default is MISSING and nix_type == NIX_TYPE_ENUM and enum_values:
            default = enum_values[0]

    if nix_type == NIX_TYPE_STR and default is MISSING:
        if _object_like_identifier_default(evidence):
            resolved_type = NIX_TYPE_ATTRS
            default = {}
        else:
            resolved_type = NIX_TYPE_NULL_OR_STR
            default = None

    nullable = NULLABLE_MARKER in nix_type or NULLABLE_MARKER in resolved_type
    if nullable and literal is MISSING:
        default = None
        if NULLABLE_MARKER in nix_type and NULLABLE_MARKER not in resolved_type:
            resolved_type = nix_type

    if nix_type == NIX_TYPE_BOOL and default is MISSING:
        default = False

    if nix_type == NIX_TYPE_ATTRS and default is MISSING:
        default = _absent_structured_default(evidence)

    if nix_type == NIX_TYPE_NULL_OR_STR and default is None and _object_like_identifier_default(evidence):
        resolved_type = NIX_TYPE_ATTRS
        default = {}

    return resolved_type, default
