"""--debug syntax tree dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from styledresolve.ast import (
    CallExpression,
    Identifier,
    Literal,
    MemberExpression,
    Node,
    Opaque,
    Program,
    Property,
    TemplateElement,
    UnaryExpression,
    VariableDeclaration,
)
from styledresolve.walker import iter_children


def dump_tree(program: Program, *, file: TextIO | None = None) -> None:
    """Print a human-readable tree to *file* (default: stderr)."""
    out = file or sys.stderr
    stack: list[tuple[Node, int]] = [(program, 0)]
    while stack:
        node, depth = stack.pop()
        _dump_node(node, depth, out)
        for child in reversed(list(iter_children(node))):
            stack.append((child, depth + 1))


def _indent(depth: int) -> str:
    return "  " * depth


def _label(node: Node) -> str:
    if isinstance(node, Identifier):
        return f"Identifier {node.name}"
    if isinstance(node, Literal):
        if node.regex is not None:
            return f"Literal {node.regex}"
        if node.bigint is not None:
            return f"Literal {node.bigint}n"
        return f"Literal {node.value!r}"
    if isinstance(node, TemplateElement):
        return f"TemplateElement {node.raw!r}"
    if isinstance(node, MemberExpression):
        return "MemberExpression [computed]" if node.computed else "MemberExpression"
    if isinstance(node, CallExpression):
        return f"CallExpression ({len(node.arguments)} args)"
    if isinstance(node, UnaryExpression):
        return f"UnaryExpression {node.operator}"
    if isinstance(node, Property):
        return "Property [computed]" if node.computed else "Property"
    if isinstance(node, VariableDeclaration):
        return f"VariableDeclaration {node.kind}"
    if isinstance(node, Opaque):
        return f"{node.type} (opaque)"
    return type(node).__name__


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    line = f"{_indent(depth)}{_label(node)}"
    if node.span is not None:
        line += f" @{node.span.start.line}:{node.span.start.column}"
    f.write(line + "\n")
