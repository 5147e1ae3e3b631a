"""Recognizers for the syntactic shapes of styled-component definitions.

Every function here is pure. A shape that does not match yields ``None``
(or ``False``); nothing in this module raises on unexpected input.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from styledresolve.ast import (
    ArrowFunctionExpression,
    BlockStatement,
    CallExpression,
    FunctionExpression,
    Identifier,
    Literal,
    MemberExpression,
    Node,
    ObjectExpression,
    Property,
    ReturnStatement,
    SpreadElement,
    VariableDeclarator,
)

STYLED = "styled"


class AttrsKind(Enum):
    FUNCTION = "func"
    ARROW = "arrow"
    OBJECT = "object"


# ---------------------------------------------------------------------------
# Basic shapes
# ---------------------------------------------------------------------------


def is_call_expression(node: Node | None) -> bool:
    return isinstance(node, CallExpression)


def is_styled_identifier(node: Node | None) -> bool:
    """True for the bare ``styled`` factory identifier."""
    return isinstance(node, Identifier) and node.name == STYLED


def _static_property_name(node: MemberExpression) -> str | None:
    if node.computed or not isinstance(node.property, Identifier):
        return None
    return node.property.name or None


def string_literal_value(node: Node | None) -> str | None:
    """Value of a non-empty string literal."""
    if isinstance(node, Literal) and isinstance(node.value, str) and node.value:
        return node.value
    return None


# ---------------------------------------------------------------------------
# styled factory forms
# ---------------------------------------------------------------------------


def styled_member_tag(node: Node | None) -> str | None:
    """``styled.div`` -> ``"div"``."""
    if not isinstance(node, MemberExpression) or not is_styled_identifier(node.object):
        return None
    return _static_property_name(node)


def styled_call_argument(node: Node | None) -> Node | None:
    """``styled(x)`` -> ``x``."""
    if not isinstance(node, CallExpression) or not is_styled_identifier(node.callee):
        return None
    if not node.arguments:
        return None
    return node.arguments[0]


def element_proxy_tag(node: Node | None) -> str | None:
    """``lib.div`` passed to styled, as in ``styled(animated.div)`` -> ``"div"``."""
    if not isinstance(node, MemberExpression):
        return None
    return _static_property_name(node)


# ---------------------------------------------------------------------------
# .attrs(...) chains
# ---------------------------------------------------------------------------


def attrs_call_base(node: Node | None) -> Node | None:
    """``X.attrs(...)`` -> ``X``."""
    if not isinstance(node, CallExpression):
        return None
    callee = node.callee
    if not isinstance(callee, MemberExpression):
        return None
    if _static_property_name(callee) != "attrs":
        return None
    return callee.object


def attrs_argument_kind(node: Node | None) -> AttrsKind | None:
    """Shape of the first argument of an attrs call."""
    if not isinstance(node, CallExpression) or not node.arguments:
        return None
    arg = node.arguments[0]
    if isinstance(arg, FunctionExpression):
        return AttrsKind.FUNCTION
    if isinstance(arg, ArrowFunctionExpression):
        return AttrsKind.ARROW
    if isinstance(arg, ObjectExpression):
        return AttrsKind.OBJECT
    return None


def first_return(block: BlockStatement) -> ReturnStatement | None:
    """First top-level return statement of a function body."""
    for statement in block.body:
        if isinstance(statement, ReturnStatement):
            return statement
    return None


def attrs_properties(node: CallExpression) -> tuple[Property | SpreadElement, ...]:
    """Object-literal properties an attrs call statically attaches.

    Handles ``attrs({...})``, ``attrs(() => ({...}))`` and
    ``attrs(function () { return {...} })``. Any other argument yields no
    properties.
    """
    if not node.arguments:
        return ()
    arg = node.arguments[0]
    if isinstance(arg, ObjectExpression):
        return arg.properties
    if isinstance(arg, ArrowFunctionExpression):
        if isinstance(arg.body, ObjectExpression):
            return arg.body.properties
        return ()
    if isinstance(arg, FunctionExpression):
        statement = first_return(arg.body)
        if statement is not None and isinstance(statement.argument, ObjectExpression):
            return statement.argument.properties
    return ()


# ---------------------------------------------------------------------------
# Binding sites
# ---------------------------------------------------------------------------


def binding_name(node: Node, ancestors: Sequence[Node]) -> str | None:
    """Name a definition is bound to, from its nearest ancestors.

    ``const A = <node>`` gives ``"A"``; ``const A = {B: <node>}`` gives
    ``"A.B"``. Anything else is not a definition site.
    """
    if not ancestors:
        return None
    parent = ancestors[-1]

    if isinstance(parent, VariableDeclarator):
        if parent.init is node and isinstance(parent.id, Identifier) and parent.id.name:
            return parent.id.name
        return None

    if isinstance(parent, Property) and len(ancestors) >= 3:
        if parent.value is not node or parent.computed:
            return None
        if not isinstance(parent.key, Identifier) or not parent.key.name:
            return None
        container, declarator = ancestors[-2], ancestors[-3]
        if not isinstance(container, ObjectExpression):
            return None
        if not isinstance(declarator, VariableDeclarator) or declarator.init is not container:
            return None
        if not isinstance(declarator.id, Identifier) or not declarator.id.name:
            return None
        return f"{declarator.id.name}.{parent.key.name}"

    return None
