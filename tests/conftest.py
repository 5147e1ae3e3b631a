"""Shared test fixtures and tree builders."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from styledresolve.ast import (
    ArrowFunctionExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    FunctionExpression,
    Identifier,
    Literal,
    MemberExpression,
    Node,
    ObjectExpression,
    Program,
    Property,
    ReturnStatement,
    Scalar,
    SpreadElement,
    TaggedTemplateExpression,
    TemplateElement,
    TemplateLiteral,
    UnaryExpression,
    VariableDeclaration,
    VariableDeclarator,
)
from styledresolve.location import Position, Span
from styledresolve.resolver import ResolveContext
from styledresolve.walker import resolve_program

# Convenience span for hand-built nodes
S = Span(Position(1, 1, 0), Position(1, 2, 1))


def ident(name: str) -> Identifier:
    return Identifier(name)


def lit(value: Scalar) -> Literal:
    return Literal(value, repr(value))


def member(obj: Node | str, prop: str, *, computed: bool = False) -> MemberExpression:
    if isinstance(obj, str):
        obj = ident(obj)
    return MemberExpression(obj, ident(prop), computed)


def call(callee: Node, *args: Node) -> CallExpression:
    return CallExpression(callee, args)


def tpl(*chunks: str | None) -> TemplateLiteral:
    if not chunks:
        chunks = ("",)
    quasis = tuple(
        TemplateElement(c, c, i == len(chunks) - 1) for i, c in enumerate(chunks)
    )
    return TemplateLiteral(quasis, tuple(ident(f"e{i}") for i in range(len(chunks) - 1)))


def tagged(tag: Node, quasi: TemplateLiteral | None = None) -> TaggedTemplateExpression:
    return TaggedTemplateExpression(tag, quasi or tpl(), S)


def prop(key: str | Node, value: Node) -> Property:
    if isinstance(key, str):
        key = ident(key)
    return Property(key, value)


def obj(*props: Property | SpreadElement, **kwargs: Node) -> ObjectExpression:
    return ObjectExpression(props + tuple(prop(k, v) for k, v in kwargs.items()))


def spread(arg: Node) -> SpreadElement:
    return SpreadElement(arg)


def arrow(body: Node) -> ArrowFunctionExpression:
    return ArrowFunctionExpression((), body, not isinstance(body, BlockStatement))


def func(*statements: Node) -> FunctionExpression:
    return FunctionExpression(None, (), BlockStatement(statements))


def ret(arg: Node | None) -> ReturnStatement:
    return ReturnStatement(arg)


def neg(value: Scalar, operator: str = "-") -> UnaryExpression:
    return UnaryExpression(operator, lit(value))


def const(name: str, init: Node) -> VariableDeclaration:
    return VariableDeclaration((VariableDeclarator(ident(name), init),), "const")


def program(*statements: Node) -> Program:
    return Program(statements, "module")


def stmt(expr: Node) -> ExpressionStatement:
    return ExpressionStatement(expr)


STYLED = Identifier("styled")


def styled_tag(tag: str) -> MemberExpression:
    """styled.<tag>"""
    return member(STYLED, tag)


def styled_of(arg: Node) -> CallExpression:
    """styled(<arg>)"""
    return call(STYLED, arg)


def attrs(base: Node, *args: Node) -> CallExpression:
    """<base>.attrs(<args>)"""
    return call(MemberExpression(base, ident("attrs")), *args)


def resolve(*statements: Node, components: Mapping[str, str] | None = None) -> ResolveContext:
    return resolve_program(program(*statements), "test.json", components)


@pytest.fixture
def ctx() -> ResolveContext:
    """A fresh per-file context."""
    return ResolveContext(filename="test.json")


def deep_concat_source(depth: int) -> str:
    """ESTree JSON for ``const Box = styled.div.attrs({ label: 'a' + 'a' + ... })```.

    The label is a left-nested ``BinaryExpression`` chain *depth* levels
    deep, spliced in as text so no encoder has to recurse over it.
    """
    leaf = '{"type": "Literal", "value": "a", "raw": "\'a\'"}'
    head = '{"type": "BinaryExpression", "operator": "+", "left": '
    tail = ', "right": ' + leaf + "}"
    label = head * depth + leaf + tail * depth
    return (
        '{"type": "Program", "body": [{"type": "VariableDeclaration", "kind": "const",'
        ' "declarations": [{"type": "VariableDeclarator",'
        ' "id": {"type": "Identifier", "name": "Box"},'
        ' "init": {"type": "TaggedTemplateExpression",'
        ' "tag": {"type": "CallExpression", "arguments": [{"type": "ObjectExpression",'
        ' "properties": [{"type": "Property", "kind": "init",'
        ' "key": {"type": "Identifier", "name": "label"}, "value": ' + label + "}]}],"
        ' "callee": {"type": "MemberExpression",'
        ' "object": {"type": "MemberExpression",'
        ' "object": {"type": "Identifier", "name": "styled"},'
        ' "property": {"type": "Identifier", "name": "div"}},'
        ' "property": {"type": "Identifier", "name": "attrs"}}},'
        ' "quasi": {"type": "TemplateLiteral", "expressions": [],'
        ' "quasis": [{"type": "TemplateElement", "value": {"raw": "", "cooked": ""},'
        ' "tail": true}]}}}]}]}'
    )
