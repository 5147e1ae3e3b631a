"""Static normalization of ``.attrs(...)`` properties into attribute values.

This is a heuristic, not an evaluator: anything beyond literals, template
chunks, signed numbers and bare identifiers collapses to ``UNKNOWN``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from styledresolve.ast import (
    Identifier,
    Literal,
    Node,
    Property,
    Scalar,
    SpreadElement,
    TemplateLiteral,
    UnaryExpression,
)
from styledresolve.values import UNDEFINED, UNKNOWN, Attribute, AttributeValue

ARITHMETIC_UNARY_OPERATORS = frozenset({"+", "-"})

_DECIMAL = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\Z")
_PREFIXED = re.compile(r"0([xXoObB])([0-9a-zA-Z]+)\Z")
_RADIX = {"x": 16, "o": 8, "b": 2}
_MAX_SAFE_INTEGER = 2**53 - 1


def js_string(value: Scalar) -> str:
    """String conversion with JavaScript's spelling for scalars."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def js_to_number(text: str) -> int | float:
    """Numeric coercion of a string, following JavaScript's unary plus."""
    text = text.strip()
    if not text:
        return 0
    prefixed = _PREFIXED.match(text)
    if prefixed:
        try:
            return int(prefixed.group(2), _RADIX[prefixed.group(1).lower()])
        except ValueError:
            return math.nan
    if not _DECIMAL.match(text):
        return math.nan
    number = float(text)
    if number.is_integer() and abs(number) <= _MAX_SAFE_INTEGER:
        return int(number)
    return number


def _literal_text(node: Literal) -> str:
    if node.bigint is not None:
        return node.bigint
    if node.regex is not None:
        return node.raw or node.regex
    return js_string(node.value)


def property_key(prop: Property) -> str | None:
    """Identifier name, else literal value; ``None`` when neither applies."""
    key = prop.key
    if isinstance(key, Identifier) and key.name:
        return key.name
    if isinstance(key, Literal) and key.has_scalar and key.value is not None:
        return js_string(key.value)
    return None


def classify_value(node: Node) -> AttributeValue:
    """Reduce a property's value expression to an attribute value."""
    if isinstance(node, TemplateLiteral):
        # An empty leading chunk is still static text
        if node.quasis and node.quasis[0].raw is not None:
            return node.quasis[0].raw
        return UNKNOWN

    if isinstance(node, UnaryExpression) and node.operator in ARITHMETIC_UNARY_OPERATORS:
        if isinstance(node.argument, Literal):
            return js_to_number(node.operator + _literal_text(node.argument))
        return UNKNOWN

    if isinstance(node, Identifier):
        return UNDEFINED if node.name == "undefined" else UNKNOWN

    if isinstance(node, Literal) and node.has_scalar:
        return node.value

    return UNKNOWN


def normalize_properties(
    properties: Iterable[Property | SpreadElement],
) -> tuple[Attribute, ...]:
    """Convert object-literal properties into ordered attributes, dropping spreads."""
    attrs: list[Attribute] = []
    for prop in properties:
        if not isinstance(prop, Property):
            continue
        key = property_key(prop)
        if key is None:
            continue
        attrs.append(Attribute(key, classify_value(prop.value)))
    return tuple(attrs)
