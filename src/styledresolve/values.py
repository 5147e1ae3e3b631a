"""Attribute values and the sentinels for values that are not plain scalars."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum


class Sentinel(Enum):
    # Present but not statically known. Truthy, so rules treat it as "set".
    UNKNOWN = "__UNKNOWN_IDENTIFIER__"
    # The identifier `undefined`. Falsy, like JavaScript's undefined.
    UNDEFINED = "undefined"

    def __bool__(self) -> bool:
        return self is not Sentinel.UNDEFINED

    def __repr__(self) -> str:
        return self.name


UNKNOWN = Sentinel.UNKNOWN
UNDEFINED = Sentinel.UNDEFINED

AttributeValue = str | int | float | bool | None | Sentinel


@dataclass(frozen=True, slots=True)
class Attribute:
    """One statically attached key/value pair."""

    key: str
    value: AttributeValue


def value_kind(value: AttributeValue) -> str:
    """Classify a value as ``literal``, ``undefined`` or ``unknown``."""
    if value is UNKNOWN:
        return "unknown"
    if value is UNDEFINED:
        return "undefined"
    return "literal"


def format_value(value: AttributeValue) -> str:
    """Render a value the way it would read in JavaScript source."""
    if value is UNKNOWN:
        return "?"
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def value_to_json(value: AttributeValue) -> object:
    """JSON-safe form: sentinels become None, NaN and infinities strings."""
    if isinstance(value, Sentinel):
        return None
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return format_value(value)
    return value
