"""
Option lists for select-style settings.

Recognized `options:` shapes:

    [{ value: "a", label: "A" }, ...OTHER_OPTIONS]
    Array.from([...]) / Array.from(IDENT)
    [...].map(x => ...)
    Object.keys(OBJ).map(...) / Object.values(OBJ).map(...)
    Object.keys(themes).map(n => ({ value: themes[n] }))

Anything else yields an empty option list, which is not an error.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pluginopts.extraction.config import PROPERTY_NAMES
from pluginopts.extraction.navigator import (
    array_elements,
    first_argument,
    get_property,
    get_property_assignment,
    member_name,
    method_call_parts,
    property_assignments,
    property_initializer,
)
from pluginopts.extraction.resolver import (
    evaluate_theme_values,
    resolve_enum_like_value,
    resolve_identifier_initializer,
)
from pluginopts.extraction.results import MISSING, ExtractionErrorKind, Ok, Result, err
from pluginopts.syntax.nodes import SyntaxNode, is_identifier, string_value, unwrap
from pluginopts.syntax.symbols import SymbolTable


@dataclass(frozen=True)
class OptionList:
    values: Tuple[Any, ...] = ()
    labels: Dict[str, str] = field(default_factory=dict)


EMPTY_OPTIONS = OptionList()


def label_key(value: Any) -> str:
    """Key under which a label is stored for an option value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _options_initializer(obj: SyntaxNode) -> Optional[SyntaxNode]:
    member = get_property(obj, PROPERTY_NAMES["options"])
    if member is None or member.kind != "pair":
        return None
    return unwrap(member.field("value"))


def _resolve_all(elements: List[SyntaxNode], symbols: SymbolTable) -> Tuple[list, list]:
    values, errors = [], []
    for element in elements:
        resolved = resolve_enum_like_value(element, symbols)
        if resolved.is_ok:
            values.append(resolved.value)
        else:
            errors.append(resolved.error.message)
    return values, errors


def _object_keys(obj: SyntaxNode) -> List[str]:
    return [member_name(pair) or "" for pair in property_assignments(obj)]


def _object_target(call: SyntaxNode, method: str, symbols: SymbolTable) -> Optional[SyntaxNode]:
    """Object literal passed to `X.<method>(ident)`, with casts removed."""
    target, name = method_call_parts(call)
    if name != method:
        return None
    arg = first_argument(call)
    if not is_identifier(arg):
        return None
    init = unwrap(resolve_identifier_initializer(arg, symbols))
    if init is None or init.kind != "object":
        return None
    return init


# ---------------------------------------------------------------------------
# Option patterns
# ---------------------------------------------------------------------------

def _from_array_from(call: SyntaxNode, symbols: SymbolTable) -> Result:
    target, method = method_call_parts(call)
    if not (is_identifier(target, "Array") and method == "from"):
        return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Expected Array.from() pattern", call)
    arg = first_argument(call)
    if arg is None:
        return err(ExtractionErrorKind.MISSING_PROPERTY, "Array.from() requires at least one argument", call)
    array = arg if arg.kind == "array" else None
    if array is None and is_identifier(arg):
        init = resolve_identifier_initializer(arg, symbols)
        if init is not None and init.kind == "array":
            array = init
    if array is None:
        return err(
            ExtractionErrorKind.UNSUPPORTED_PATTERN,
            "Array.from() pattern not supported for this argument type",
            call,
        )
    values, _ = _resolve_all(array_elements(array), symbols)
    return Ok(OptionList(values=tuple(values)))


def _from_mapped_array(target: SyntaxNode, symbols: SymbolTable) -> Result:
    if target.kind != "array":
        return err(ExtractionErrorKind.INVALID_NODE_TYPE, "Expected array literal", target)
    values, errors = _resolve_all(array_elements(target), symbols)
    if errors and not values:
        return err(
            ExtractionErrorKind.CANNOT_EVALUATE,
            f"Failed to extract options: {'; '.join(errors)}",
            target,
        )
    return Ok(OptionList(values=tuple(values)))


def _from_object_keys(target: SyntaxNode, symbols: SymbolTable) -> Result:
    obj = _object_target(target, "keys", symbols)
    if obj is None:
        return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Expected Object.keys() pattern", target)
    return Ok(OptionList(values=tuple(_object_keys(obj))))


def _from_object_values(target: SyntaxNode, symbols: SymbolTable) -> Result:
    obj = _object_target(target, "values", symbols)
    if obj is None:
        return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Expected Object.values() pattern", target)
    values = []
    for pair in property_assignments(obj):
        value = pair.field("value")
        if value is None:
            continue
        resolved = resolve_enum_like_value(value, symbols)
        if resolved.is_ok:
            values.append(resolved.value)
    return Ok(OptionList(values=tuple(values)))


def _themes_from_keys_call(call: Optional[SyntaxNode], symbols: SymbolTable) -> Optional[OptionList]:
    if call is None or call.kind != "call_expression":
        return None
    _, method = method_call_parts(call)
    arg = first_argument(call)
    if method != "keys" or not is_identifier(arg):
        return None
    urls = evaluate_theme_values(arg, symbols)
    if urls:
        return OptionList(values=tuple(urls))
    init = resolve_identifier_initializer(arg, symbols)
    if init is not None and init.kind == "object":
        keys = _object_keys(init)
        if keys:
            return OptionList(values=tuple(keys))
    return None


def _from_theme_map(target: SyntaxNode, call: SyntaxNode, symbols: SymbolTable) -> Result:
    """`names.map(n => ({ value: themes[n] }))` where names = Object.keys(themes)."""
    if not is_identifier(target):
        return err(ExtractionErrorKind.INVALID_NODE_TYPE, "Expected identifier for theme pattern", target)

    callback = first_argument(call)
    if callback is not None and callback.kind == "arrow_function":
        body = unwrap(callback.field("body"))
        if body is not None and body.kind == "object":
            value = property_initializer(body, PROPERTY_NAMES["value"])
            if value is not None and value.kind == "subscript_expression":
                themes = value.field("object")
                if is_identifier(themes):
                    urls = evaluate_theme_values(themes, symbols)
                    if urls:
                        return Ok(OptionList(values=tuple(urls)))

    init = resolve_identifier_initializer(target, symbols)
    if init is not None:
        found = _themes_from_keys_call(init, symbols)
        if found is None and init.kind == "as_expression":
            found = _themes_from_keys_call(unwrap(init), symbols)
        if found is not None:
            return Ok(found)

    return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Theme pattern not recognized", target)


def _from_call(call: SyntaxNode, symbols: SymbolTable) -> Result:
    target, method = method_call_parts(call)
    if method == "from":
        from_result = _from_array_from(call, symbols)
        if from_result.is_ok:
            return from_result
    if target is None:
        return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Expected a method call such as .map()", call)
    if method != "map":
        return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, f"Expected .map() call, got .{method}()", call)

    attempts = [lambda: _from_mapped_array(target, symbols)]
    if target.kind == "call_expression":
        attempts.append(lambda: _from_object_keys(target, symbols))
        attempts.append(lambda: _from_object_values(target, symbols))
    attempts.append(lambda: _from_theme_map(target, call, symbols))

    for attempt in attempts:
        result = attempt()
        if result.is_ok:
            return result
    return err(ExtractionErrorKind.UNSUPPORTED_PATTERN, "Unsupported map() pattern", call)


# ---------------------------------------------------------------------------
# Array literal options
# ---------------------------------------------------------------------------

def _value_and_label(obj: SyntaxNode, symbols: SymbolTable) -> Result:
    pair = get_property_assignment(obj, PROPERTY_NAMES["value"])
    if pair is None:
        return err(ExtractionErrorKind.MISSING_PROPERTY, "Missing 'value' property in object literal", obj)
    init = pair.field("value")
    if init is None:
        return err(ExtractionErrorKind.MISSING_PROPERTY, "'value' property has no initializer", pair)
    resolved = resolve_enum_like_value(init, symbols)
    if not resolved.is_ok:
        return resolved
    label_node = property_initializer(obj, PROPERTY_NAMES["label"])
    label = string_value(label_node) if label_node is not None and label_node.kind == "string" else None
    return Ok((resolved.value, label))


def _from_array_literal(array: SyntaxNode, symbols: SymbolTable) -> Result:
    if array.kind != "array":
        return err(
            ExtractionErrorKind.INVALID_NODE_TYPE,
            f"Expected array literal, got {array.kind}",
            array,
        )

    values: list = []
    labels: Dict[str, str] = {}
    errors: List[str] = []
    elements = array_elements(array)
    has_objects = any(el.kind == "object" for el in elements)

    def take(obj):
        result = _value_and_label(obj, symbols)
        if not result.is_ok:
            errors.append(result.error.message)
            return
        value, label = result.value
        values.append(value)
        if label is not None:
            labels[label_key(value)] = label

    for element in elements:
        if element.kind in ("string", "number"):
            if not has_objects:
                resolved = resolve_enum_like_value(element, symbols)
                if resolved.is_ok:
                    values.append(resolved.value)
                else:
                    errors.append(resolved.error.message)
        elif element.kind == "object":
            take(element)
        elif element.kind == "spread_element":
            spread = element.children[0] if element.children else None
            if not is_identifier(spread):
                continue
            init = unwrap(resolve_identifier_initializer(spread, symbols))
            if init is None or init.kind != "array":
                continue
            for inner in array_elements(init):
                if inner.kind == "object":
                    take(inner)

    if errors and not values:
        return err(
            ExtractionErrorKind.CANNOT_EVALUATE,
            f"Failed to extract options from array: {'; '.join(errors)}",
            array,
        )
    return Ok(OptionList(values=tuple(values), labels=labels))


def extract_select_options(obj: SyntaxNode, symbols: SymbolTable) -> Result:
    """Ok(OptionList) for a setting descriptor; no `options` pair means no options."""
    init = _options_initializer(obj)
    if init is None:
        return Ok(EMPTY_OPTIONS)
    if init.kind == "call_expression":
        result = _from_call(init, symbols)
        return result if result.is_ok else Ok(EMPTY_OPTIONS)
    return _from_array_literal(init, symbols)


# ---------------------------------------------------------------------------
# Default option
# ---------------------------------------------------------------------------

def _comparison_right_side(call: SyntaxNode, symbols: SymbolTable) -> Any:
    """`.map(x => ({ ..., default: x === VALUE }))` yields VALUE."""
    callback = first_argument(call)
    if callback is None or callback.kind != "arrow_function":
        return MISSING
    body = unwrap(callback.field("body"))
    if body is None or body.kind != "object":
        return MISSING
    member = get_property(body, PROPERTY_NAMES["default"])
    if member is None or member.kind != "pair":
        return MISSING
    init = member.field("value")
    if init is None or init.kind != "binary_expression":
        return MISSING
    right = init.field("right")
    if right is None:
        return MISSING
    resolved = resolve_enum_like_value(right, symbols)
    return resolved.value if resolved.is_ok else MISSING


def _default_from_call(call: SyntaxNode, symbols: SymbolTable) -> Any:
    target, method = method_call_parts(call)
    if target is None or method != "map":
        return MISSING

    if target.kind == "array":
        value = _comparison_right_side(call, symbols)
        if value is not MISSING:
            return value
        elements = array_elements(target)
        if elements:
            resolved = resolve_enum_like_value(elements[0], symbols)
            if resolved.is_ok:
                return resolved.value
        return MISSING

    if is_identifier(target):
        return _comparison_right_side(call, symbols)

    if target.kind == "call_expression":
        obj = _object_target(target, "keys", symbols)
        if obj is not None:
            keys = _object_keys(obj)
            if keys:
                return keys[0]
    return MISSING


def _default_in_elements(elements: List[SyntaxNode], symbols: SymbolTable) -> Any:
    for element in elements:
        if element.kind == "object":
            flag = property_initializer(element, PROPERTY_NAMES["default"])
            if flag is None or flag.kind != "true":
                continue
            value = property_initializer(element, PROPERTY_NAMES["value"])
            if value is None:
                continue
            resolved = resolve_enum_like_value(value, symbols)
            if resolved.is_ok:
                return resolved.value
        elif element.kind == "spread_element":
            spread = element.children[0] if element.children else None
            if not is_identifier(spread):
                continue
            init = unwrap(resolve_identifier_initializer(spread, symbols))
            if init is not None and init.kind == "array":
                found = _default_in_elements(array_elements(init), symbols)
                if found is not MISSING:
                    return found
    return MISSING


def extract_select_default(obj: SyntaxNode, symbols: SymbolTable) -> Any:
    """The option marked as default, or MISSING."""
    init = _options_initializer(obj)
    if init is None:
        return MISSING
    if init.kind == "call_expression":
        found = _default_from_call(init, symbols)
        if found is not MISSING:
            return found
    if init.kind == "array":
        return _default_in_elements(array_elements(init), symbols)
    return MISSING
