"""Single-pass, depth-first traversal that feeds nodes to the resolver."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import fields

from styledresolve.ast import NODE_TYPES, CallExpression, Node, Program, TaggedTemplateExpression
from styledresolve.resolver import ResolveContext, handle_call_expression, handle_tagged_template

logger = logging.getLogger(__name__)


def iter_children(node: Node) -> Iterator[Node]:
    """Direct child nodes in field (ESTree source) order."""
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, tuple):
            for item in value:
                if isinstance(item, NODE_TYPES):
                    yield item
        elif isinstance(value, NODE_TYPES):
            yield value


def walk(program: Program, ctx: ResolveContext) -> ResolveContext:
    """Visit every node in pre-order, resolving definitions as they are entered."""
    stack: list[tuple[Node, tuple[Node, ...]]] = [(program, ())]
    visited = 0
    while stack:
        node, ancestors = stack.pop()
        visited += 1
        if isinstance(node, CallExpression):
            handle_call_expression(node, ancestors, ctx)
        elif isinstance(node, TaggedTemplateExpression):
            handle_tagged_template(node, ancestors, ctx)
        path = ancestors + (node,)
        children = list(iter_children(node))
        for child in reversed(children):
            stack.append((child, path))
    logger.debug(
        "walked %d nodes in %s: %d component(s), %d diagnostic(s)",
        visited,
        ctx.filename,
        len(ctx.registry),
        len(ctx.diagnostics),
    )
    return ctx


def resolve_program(
    program: Program,
    filename: str = "input.json",
    components: Mapping[str, str] | None = None,
) -> ResolveContext:
    """Resolve one file's tree with a fresh context."""
    ctx = ResolveContext(filename=filename, components=dict(components or {}))
    return walk(program, ctx)
