"""Styled-component resolution: the two node handlers and their shared context."""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, TypeVar

from styledresolve.ast import (
    CallExpression,
    Identifier,
    Literal,
    MemberExpression,
    Node,
    TaggedTemplateExpression,
)
from styledresolve.attrs import normalize_properties
from styledresolve.errors import Diagnostic, interpolate
from styledresolve.patterns import (
    attrs_argument_kind,
    attrs_call_base,
    attrs_properties,
    binding_name,
    element_proxy_tag,
    string_literal_value,
    styled_call_argument,
    styled_member_tag,
)
from styledresolve.registry import ComponentDefinition, Registry
from styledresolve.values import Attribute

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Unable to parse styled component: {{ message }}"


@dataclass
class ResolveContext:
    """State for one file: the registry, the custom-component map and diagnostics."""

    filename: str = "input.json"
    components: dict[str, str] = field(default_factory=dict)
    registry: Registry = field(default_factory=Registry)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, node: Node, message: str, data: dict[str, Any] | None = None) -> None:
        data = data or {}
        self.diagnostics.append(Diagnostic(interpolate(message, data), node.span, data))

    def reset(self) -> None:
        self.registry.clear()
        self.diagnostics.clear()


def components_from_settings(settings: Mapping[str, Any] | None) -> dict[str, str]:
    """Custom-component map from ESLint-style ``settings['jsx-a11y']['components']``."""
    if not settings:
        return {}
    section = settings.get("jsx-a11y")
    if not isinstance(section, Mapping):
        return {}
    components = section.get("components")
    if not isinstance(components, Mapping):
        return {}
    return {
        str(name): tag
        for name, tag in components.items()
        if isinstance(tag, str) and tag
    }


# ---------------------------------------------------------------------------
# Guarded scope
# ---------------------------------------------------------------------------

_N = TypeVar("_N", CallExpression, TaggedTemplateExpression)
Handler = Callable[[_N, Sequence[Node], ResolveContext], None]


def guarded(handler: Handler[_N]) -> Handler[_N]:
    """Turn any exception raised by *handler* into a diagnostic on the node."""

    @wraps(handler)
    def _run(node: _N, ancestors: Sequence[Node], ctx: ResolveContext) -> None:
        try:
            handler(node, ancestors, ctx)
        except Exception as exc:
            logger.warning("failed to resolve styled component in %s: %s", ctx.filename, exc)
            ctx.report(
                node,
                PARSE_FAILURE_MESSAGE,
                {"message": str(exc), "stack": traceback.format_exc()},
            )

    return _run


# ---------------------------------------------------------------------------
# Base resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Resolved:
    """Tag and attributes a styled expression stands for."""

    tag: str
    attrs: tuple[Attribute, ...] = ()


def _inherit(name: str, ctx: ResolveContext) -> Resolved | None:
    # Registry gives tag and attrs; the custom map overrides the tag only.
    tag = ""
    attrs: tuple[Attribute, ...] = ()
    ancestor = ctx.registry.get(name)
    if ancestor is not None:
        tag = ancestor.tag
        attrs = ancestor.attrs
    mapped = ctx.components.get(name)
    if mapped:
        tag = mapped
    if not tag:
        logger.debug("no registered component or custom mapping for %s", name)
        return None
    return Resolved(tag, attrs)


def _resolve_styled_argument(arg: Node, ctx: ResolveContext) -> Resolved | None:
    """Resolve the ``x`` of ``styled(x)``."""
    if isinstance(arg, MemberExpression):
        tag = element_proxy_tag(arg)
        return Resolved(tag) if tag else None
    if isinstance(arg, Literal):
        tag = string_literal_value(arg)
        return Resolved(tag) if tag else None
    if isinstance(arg, Identifier):
        return _inherit(arg.name, ctx)
    return None


def resolve_styled_expression(node: Node, ctx: ResolveContext) -> Resolved | None:
    """Resolve ``styled.div``, ``styled(x)`` or ``<either>.attrs(...)`` chains."""
    tag = styled_member_tag(node)
    if tag is not None:
        return Resolved(tag)

    arg = styled_call_argument(node)
    if arg is not None:
        return _resolve_styled_argument(arg, ctx)

    base_node = attrs_call_base(node)
    if base_node is not None and isinstance(node, CallExpression):
        base = resolve_styled_expression(base_node, ctx)
        if base is None:
            return None
        if attrs_argument_kind(node) is None:
            logger.debug("attrs argument is not statically readable; no attributes added")
        own = normalize_properties(attrs_properties(node))
        return Resolved(base.tag, base.attrs + own)

    return None


def _define(name: str, resolved: Resolved, node: Node, ctx: ResolveContext) -> None:
    ctx.registry.define(ComponentDefinition(name, resolved.tag, resolved.attrs, node.span))
    logger.debug(
        "registered %s as <%s> with %d attribute(s)", name, resolved.tag, len(resolved.attrs)
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


@guarded
def handle_call_expression(
    node: CallExpression,
    ancestors: Sequence[Node],
    ctx: ResolveContext,
) -> None:
    """``const A = styled.div(...)`` or ``const A = styled(x)(...)``."""
    name = binding_name(node, ancestors)
    if name is None:
        return
    resolved = resolve_styled_expression(node.callee, ctx)
    if resolved is None:
        return
    _define(name, resolved, node, ctx)


@guarded
def handle_tagged_template(
    node: TaggedTemplateExpression,
    ancestors: Sequence[Node],
    ctx: ResolveContext,
) -> None:
    """``const A = styled.div`...```, ``styled(x)`...``` and attrs chains."""
    name = binding_name(node, ancestors)
    if name is None:
        return
    resolved = resolve_styled_expression(node.tag, ctx)
    if resolved is None:
        logger.debug("skipping %s: no tag could be determined", name)
        return
    _define(name, resolved, node, ctx)
