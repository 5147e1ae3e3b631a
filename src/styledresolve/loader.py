"""ESTree JSON loader — converts a serialized syntax tree into typed nodes.

The tree is produced by an external JavaScript parser (espree, acorn,
typescript-estree, ...) and serialized with ``JSON.stringify``. Node kinds
the resolver does not discriminate load as :class:`Opaque`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

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
    Opaque,
    Program,
    Property,
    ReturnStatement,
    SpreadElement,
    TaggedTemplateExpression,
    TemplateElement,
    TemplateLiteral,
    UnaryExpression,
    VariableDeclaration,
    VariableDeclarator,
)
from styledresolve.errors import LoadError
from styledresolve.location import Position, Span

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Keys that never hold child nodes
_SKIP_KEYS = frozenset({"type", "loc", "range", "start", "end", "parent", "comments", "tokens"})

# Keys each built node reads its children from; unknown types read every key
_CHILD_KEYS: dict[str, frozenset[str]] = {
    "Program": frozenset({"body"}),
    "VariableDeclaration": frozenset({"declarations"}),
    "VariableDeclarator": frozenset({"id", "init"}),
    "ExpressionStatement": frozenset({"expression"}),
    "Identifier": frozenset(),
    "Literal": frozenset(),
    "TemplateLiteral": frozenset({"quasis", "expressions"}),
    "TemplateElement": frozenset(),
    "TaggedTemplateExpression": frozenset({"tag", "quasi"}),
    "MemberExpression": frozenset({"object", "property"}),
    "CallExpression": frozenset({"callee", "arguments"}),
    "UnaryExpression": frozenset({"argument"}),
    "ObjectExpression": frozenset({"properties"}),
    "Property": frozenset({"key", "value"}),
    "SpreadElement": frozenset({"argument"}),
    "ArrowFunctionExpression": frozenset({"params", "body"}),
    "FunctionExpression": frozenset({"id", "params", "body"}),
    "BlockStatement": frozenset({"body"}),
    "ReturnStatement": frozenset({"argument"}),
}


class Loader:
    """Builds typed nodes from decoded ESTree objects."""

    def __init__(self, source: str, filename: str) -> None:
        self._source = source
        self._filename = filename
        self._built: dict[int, Node] = {}
        self._builders: dict[str, Callable[[dict[str, Any], str], Node]] = {
            "Program": self._program,
            "VariableDeclaration": self._variable_declaration,
            "VariableDeclarator": self._variable_declarator,
            "ExpressionStatement": self._expression_statement,
            "Identifier": self._identifier,
            "Literal": self._literal,
            "TemplateLiteral": self._template_literal,
            "TemplateElement": self._template_element,
            "TaggedTemplateExpression": self._tagged_template,
            "MemberExpression": self._member,
            "CallExpression": self._call,
            "UnaryExpression": self._unary,
            "ObjectExpression": self._object,
            "Property": self._property,
            "SpreadElement": self._spread,
            "ArrowFunctionExpression": self._arrow,
            "FunctionExpression": self._function,
            "BlockStatement": self._block,
            "ReturnStatement": self._return,
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def load(self) -> Program:
        try:
            data = json.loads(self._source)
        except json.JSONDecodeError as exc:
            start = Position(exc.lineno, exc.colno, exc.pos)
            end = Position(exc.lineno, exc.colno + 1, exc.pos + 1)
            raise LoadError(f"invalid JSON: {exc.msg}", Span(start, end), self._source) from None
        except RecursionError:
            raise self._error("tree too deeply nested", "$") from None

        # Babel wraps the program in a File node
        path = "$"
        if isinstance(data, dict) and data.get("type") == "File":
            data = data.get("program")
            path = "$.program"

        if not isinstance(data, dict) or data.get("type") != "Program":
            raise self._error("root node must be a Program", path)

        program = self._build(data, path)
        if not isinstance(program, Program):
            raise self._error("root node must be a Program", path)
        logger.debug("loaded %s with %d top-level statement(s)", self._filename, len(program.body))
        return program

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, path: str) -> LoadError:
        return LoadError(message, None, self._source, path)

    def _build(self, root: dict[str, Any], path: str) -> Node:
        """Build bottom-up from an explicit stack; nesting depth is unbounded."""
        pending: list[tuple[dict[str, Any], str, bool]] = [(root, path, False)]
        while pending:
            data, data_path, expanded = pending.pop()
            if expanded:
                self._built[id(data)] = self._node(data, data_path)
                continue
            pending.append((data, data_path, True))
            children = list(self._child_items(data, data_path))
            for child, child_path in reversed(children):
                pending.append((child, child_path, False))
        return self._built[id(root)]

    @staticmethod
    def _child_items(data: dict[str, Any], path: str) -> Iterator[tuple[dict[str, Any], str]]:
        keys = _CHILD_KEYS.get(data["type"])
        for key, value in data.items():
            if key in _SKIP_KEYS or (keys is not None and key not in keys):
                continue
            if isinstance(value, dict) and isinstance(value.get("type"), str):
                yield value, f"{path}.{key}"
            elif isinstance(value, list):
                for i, item in enumerate(value):
                    if isinstance(item, dict) and isinstance(item.get("type"), str):
                        yield item, f"{path}.{key}[{i}]"

    def _node(self, data: Any, path: str) -> Node:
        if not isinstance(data, dict):
            raise self._error("expected a node object", path)
        built = self._built.get(id(data))
        if built is not None:
            return built
        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise self._error("node has no type", path)
        builder = self._builders.get(node_type)
        if builder is None:
            return self._opaque(node_type, data, path)
        return builder(data, path)

    def _child(self, data: dict[str, Any], key: str, path: str) -> Node:
        if data.get(key) is None:
            raise self._error(f"{data['type']} is missing '{key}'", path)
        return self._node(data[key], f"{path}.{key}")

    def _optional_child(self, data: dict[str, Any], key: str, path: str) -> Node | None:
        if data.get(key) is None:
            return None
        return self._node(data[key], f"{path}.{key}")

    def _children(self, data: dict[str, Any], key: str, path: str) -> tuple[Node, ...]:
        items = data.get(key)
        if items is None:
            return ()
        if not isinstance(items, list):
            raise self._error(f"{data['type']}.{key} must be a list", f"{path}.{key}")
        # Array holes serialize as null
        return tuple(
            self._node(item, f"{path}.{key}[{i}]") for i, item in enumerate(items) if item is not None
        )

    def _expect(self, node: Node | None, cls: type[_T], path: str) -> _T:
        if not isinstance(node, cls):
            found = type(node).__name__ if node is not None else "nothing"
            raise self._error(f"expected {cls.__name__}, found {found}", path)
        return node

    def _string(self, data: dict[str, Any], key: str, path: str) -> str:
        value = data.get(key)
        if not isinstance(value, str):
            raise self._error(f"{data['type']}.{key} must be a string", f"{path}.{key}")
        return value

    @staticmethod
    def _flag(data: dict[str, Any], key: str, default: bool = False) -> bool:
        value = data.get(key)
        return value if isinstance(value, bool) else default

    @staticmethod
    def _span(data: dict[str, Any]) -> Span | None:
        loc = data.get("loc")
        if not isinstance(loc, dict):
            return None
        start, end = loc.get("start"), loc.get("end")
        if not isinstance(start, dict) or not isinstance(end, dict):
            return None
        start_offset = end_offset = 0
        rng = data.get("range")
        if isinstance(rng, list) and len(rng) == 2:
            start_offset, end_offset = rng
        elif isinstance(data.get("start"), int) and isinstance(data.get("end"), int):
            start_offset, end_offset = data["start"], data["end"]
        try:
            # ESTree columns are 0-based
            return Span(
                Position(int(start["line"]), int(start["column"]) + 1, int(start_offset)),
                Position(int(end["line"]), int(end["column"]) + 1, int(end_offset)),
            )
        except (KeyError, TypeError, ValueError):
            return None

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def _program(self, data: dict[str, Any], path: str) -> Program:
        source_type = data.get("sourceType")
        return Program(
            self._children(data, "body", path),
            source_type if isinstance(source_type, str) else "script",
            self._span(data),
        )

    def _variable_declaration(self, data: dict[str, Any], path: str) -> VariableDeclaration:
        declarations = tuple(
            self._expect(node, VariableDeclarator, f"{path}.declarations[{i}]")
            for i, node in enumerate(self._children(data, "declarations", path))
        )
        kind = data.get("kind")
        return VariableDeclaration(
            declarations, kind if isinstance(kind, str) else "var", self._span(data)
        )

    def _variable_declarator(self, data: dict[str, Any], path: str) -> VariableDeclarator:
        return VariableDeclarator(
            self._child(data, "id", path),
            self._optional_child(data, "init", path),
            self._span(data),
        )

    def _expression_statement(self, data: dict[str, Any], path: str) -> ExpressionStatement:
        return ExpressionStatement(self._child(data, "expression", path), self._span(data))

    def _identifier(self, data: dict[str, Any], path: str) -> Identifier:
        return Identifier(self._string(data, "name", path), self._span(data))

    def _literal(self, data: dict[str, Any], path: str) -> Literal:
        raw = data.get("raw") if isinstance(data.get("raw"), str) else None
        regex = data.get("regex")
        if isinstance(regex, dict):
            pattern = regex.get("pattern", "")
            flags = regex.get("flags", "")
            return Literal(None, raw, f"/{pattern}/{flags}", None, self._span(data))
        bigint = data.get("bigint")
        if isinstance(bigint, str):
            return Literal(None, raw, None, bigint, self._span(data))
        value = data.get("value")
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise self._error("Literal value must be a scalar", f"{path}.value")
        return Literal(value, raw, None, None, self._span(data))

    def _template_element(self, data: dict[str, Any], path: str) -> TemplateElement:
        value = data.get("value")
        if not isinstance(value, dict):
            raise self._error("TemplateElement is missing 'value'", path)
        raw = value.get("raw")
        cooked = value.get("cooked")
        return TemplateElement(
            raw if isinstance(raw, str) else None,
            cooked if isinstance(cooked, str) else None,
            self._flag(data, "tail"),
            self._span(data),
        )

    def _template_literal(self, data: dict[str, Any], path: str) -> TemplateLiteral:
        quasis = tuple(
            self._expect(node, TemplateElement, f"{path}.quasis[{i}]")
            for i, node in enumerate(self._children(data, "quasis", path))
        )
        return TemplateLiteral(
            quasis, self._children(data, "expressions", path), self._span(data)
        )

    def _tagged_template(self, data: dict[str, Any], path: str) -> TaggedTemplateExpression:
        quasi = self._expect(self._child(data, "quasi", path), TemplateLiteral, f"{path}.quasi")
        return TaggedTemplateExpression(self._child(data, "tag", path), quasi, self._span(data))

    def _member(self, data: dict[str, Any], path: str) -> MemberExpression:
        return MemberExpression(
            self._child(data, "object", path),
            self._child(data, "property", path),
            self._flag(data, "computed"),
            self._span(data),
        )

    def _call(self, data: dict[str, Any], path: str) -> CallExpression:
        return CallExpression(
            self._child(data, "callee", path),
            self._children(data, "arguments", path),
            self._flag(data, "optional"),
            self._span(data),
        )

    def _unary(self, data: dict[str, Any], path: str) -> UnaryExpression:
        return UnaryExpression(
            self._string(data, "operator", path),
            self._child(data, "argument", path),
            self._flag(data, "prefix", True),
            self._span(data),
        )

    def _object(self, data: dict[str, Any], path: str) -> ObjectExpression:
        properties: list[Property | SpreadElement] = []
        for i, node in enumerate(self._children(data, "properties", path)):
            if not isinstance(node, (Property, SpreadElement)):
                raise self._error(
                    f"expected Property or SpreadElement, found {type(node).__name__}",
                    f"{path}.properties[{i}]",
                )
            properties.append(node)
        return ObjectExpression(tuple(properties), self._span(data))

    def _property(self, data: dict[str, Any], path: str) -> Property:
        kind = data.get("kind")
        return Property(
            self._child(data, "key", path),
            self._child(data, "value", path),
            kind if isinstance(kind, str) else "init",
            self._flag(data, "computed"),
            self._flag(data, "shorthand"),
            self._flag(data, "method"),
            self._span(data),
        )

    def _spread(self, data: dict[str, Any], path: str) -> SpreadElement:
        return SpreadElement(self._child(data, "argument", path), self._span(data))

    def _arrow(self, data: dict[str, Any], path: str) -> ArrowFunctionExpression:
        return ArrowFunctionExpression(
            self._children(data, "params", path),
            self._child(data, "body", path),
            self._flag(data, "expression"),
            self._span(data),
        )

    def _function(self, data: dict[str, Any], path: str) -> FunctionExpression:
        fn_id = self._optional_child(data, "id", path)
        if fn_id is not None:
            fn_id = self._expect(fn_id, Identifier, f"{path}.id")
        body = self._expect(self._child(data, "body", path), BlockStatement, f"{path}.body")
        return FunctionExpression(fn_id, self._children(data, "params", path), body, self._span(data))

    def _block(self, data: dict[str, Any], path: str) -> BlockStatement:
        return BlockStatement(self._children(data, "body", path), self._span(data))

    def _return(self, data: dict[str, Any], path: str) -> ReturnStatement:
        return ReturnStatement(self._optional_child(data, "argument", path), self._span(data))

    def _opaque(self, node_type: str, data: dict[str, Any], path: str) -> Opaque:
        children = tuple(
            self._node(child, child_path) for child, child_path in self._child_items(data, path)
        )
        return Opaque(node_type, children, self._span(data))


def load_program(source: str, filename: str = "input.json") -> Program:
    """Decode ESTree JSON text into a typed :class:`Program`."""
    return Loader(source, filename).load()
