"""Syntax tree node types for the ESTree subset the resolver discriminates.

Node kinds the resolver never inspects load as :class:`Opaque` so that the
walker can still reach definitions nested inside them.
"""

from __future__ import annotations

from dataclasses import dataclass

from styledresolve.location import Span

Scalar = str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Identifier:
    """A bare name reference or binding."""

    name: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Literal:
    """A literal; regex and bigint literals have no scalar value."""

    value: Scalar
    raw: str | None = None
    regex: str | None = None
    bigint: str | None = None
    span: Span | None = None

    @property
    def has_scalar(self) -> bool:
        return self.regex is None and self.bigint is None


@dataclass(frozen=True, slots=True)
class TemplateElement:
    """One static chunk of a template literal."""

    raw: str | None
    cooked: str | None = None
    tail: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TemplateLiteral:
    """Backtick string: static chunks interleaved with expressions."""

    quasis: tuple[TemplateElement, ...]
    expressions: tuple[Node, ...] = ()
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class TaggedTemplateExpression:
    """tag`...`"""

    tag: Node
    quasi: TemplateLiteral
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class MemberExpression:
    """object.property or object[property]."""

    object: Node
    property: Node
    computed: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class CallExpression:
    """callee(arguments...)"""

    callee: Node
    arguments: tuple[Node, ...] = ()
    optional: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class UnaryExpression:
    """Prefix operator applied to a single operand."""

    operator: str
    argument: Node
    prefix: bool = True
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Property:
    """key: value entry of an object literal."""

    key: Node
    value: Node
    kind: str = "init"
    computed: bool = False
    shorthand: bool = False
    method: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class SpreadElement:
    """...argument"""

    argument: Node
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ObjectExpression:
    """Object literal."""

    properties: tuple[Property | SpreadElement, ...] = ()
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class BlockStatement:
    """{ statements... }"""

    body: tuple[Node, ...] = ()
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    """return argument;"""

    argument: Node | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ArrowFunctionExpression:
    """(params) => body, where body is an expression or a block."""

    params: tuple[Node, ...]
    body: Node
    expression: bool = False
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class FunctionExpression:
    """function name(params) { body }"""

    id: Identifier | None
    params: tuple[Node, ...]
    body: BlockStatement
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    """An expression in statement position."""

    expression: Node
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class VariableDeclarator:
    """id = init inside a declaration."""

    id: Node
    init: Node | None = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class VariableDeclaration:
    """const/let/var with one or more declarators."""

    declarations: tuple[VariableDeclarator, ...]
    kind: str = "const"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Program:
    """Root node."""

    body: tuple[Node, ...]
    source_type: str = "script"
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Opaque:
    """Any ESTree node kind not modelled above, keeping its nested nodes."""

    type: str
    children: tuple[Node, ...] = ()
    span: Span | None = None


Node = (
    Identifier
    | Literal
    | TemplateElement
    | TemplateLiteral
    | TaggedTemplateExpression
    | MemberExpression
    | CallExpression
    | UnaryExpression
    | Property
    | SpreadElement
    | ObjectExpression
    | BlockStatement
    | ReturnStatement
    | ArrowFunctionExpression
    | FunctionExpression
    | ExpressionStatement
    | VariableDeclarator
    | VariableDeclaration
    | Program
    | Opaque
)

NODE_TYPES: tuple[type, ...] = (
    Identifier,
    Literal,
    TemplateElement,
    TemplateLiteral,
    TaggedTemplateExpression,
    MemberExpression,
    CallExpression,
    UnaryExpression,
    Property,
    SpreadElement,
    ObjectExpression,
    BlockStatement,
    ReturnStatement,
    ArrowFunctionExpression,
    FunctionExpression,
    ExpressionStatement,
    VariableDeclarator,
    VariableDeclaration,
    Program,
    Opaque,
)
