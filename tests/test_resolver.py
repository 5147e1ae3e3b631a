"""Resolver tests — both definition forms, chains, and failure containment."""

from __future__ import annotations

import logging

import pytest

from styledresolve import resolver
from styledresolve.ast import BlockStatement, VariableDeclarator
from styledresolve.registry import ComponentDefinition
from styledresolve.resolver import (
    ResolveContext,
    components_from_settings,
    handle_call_expression,
    handle_tagged_template,
)
from styledresolve.values import UNDEFINED, UNKNOWN, Attribute
from tests.conftest import (
    STYLED,
    arrow,
    attrs,
    call,
    const,
    func,
    ident,
    lit,
    member,
    neg,
    obj,
    prop,
    resolve,
    ret,
    spread,
    stmt,
    styled_of,
    styled_tag,
    tagged,
    tpl,
)

# ---------------------------------------------------------------------------
# Tagged templates: member form
# ---------------------------------------------------------------------------


class TestMemberTagged:
    def test_styled_tag(self) -> None:
        ctx = resolve(const("Box", tagged(styled_tag("div"))))
        assert ctx.registry["Box"] == ComponentDefinition("Box", "div", ())

    def test_span_recorded(self) -> None:
        node = tagged(styled_tag("div"))
        ctx = resolve(const("Box", node))
        assert ctx.registry["Box"].span == node.span

    def test_not_styled(self) -> None:
        ctx = resolve(const("Style", tagged(member("css", "div"))))
        assert len(ctx.registry) == 0

    def test_plain_template_tag(self) -> None:
        ctx = resolve(const("Query", tagged(ident("gql"))))
        assert len(ctx.registry) == 0

    def test_not_bound(self) -> None:
        ctx = resolve(stmt(tagged(styled_tag("div"))))
        assert len(ctx.registry) == 0

    def test_object_member(self) -> None:
        ctx = resolve(
            const("Components", obj(Header=tagged(styled_tag("header")), Body=tagged(styled_tag("main"))))
        )
        assert ctx.registry.names() == ["Components.Header", "Components.Body"]
        assert ctx.registry["Components.Body"].tag == "main"


# ---------------------------------------------------------------------------
# Tagged templates: call form
# ---------------------------------------------------------------------------


class TestCallTagged:
    def test_string_argument(self) -> None:
        ctx = resolve(const("Link", tagged(styled_of(lit("a")))))
        assert ctx.registry["Link"] == ComponentDefinition("Link", "a", ())

    def test_empty_string_argument(self) -> None:
        ctx = resolve(const("Nothing", tagged(styled_of(lit("")))))
        assert "Nothing" not in ctx.registry

    def test_element_proxy_argument(self) -> None:
        ctx = resolve(const("Fade", tagged(styled_of(member("animated", "div")))))
        assert ctx.registry["Fade"].tag == "div"

    def test_inherits_registered_component(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("button"), obj(type=lit("button"))))),
            const("Primary", tagged(styled_of(ident("Base")))),
        )
        primary = ctx.registry["Primary"]
        assert primary.tag == "button"
        assert primary.attrs == (Attribute("type", "button"),)

    def test_custom_component(self) -> None:
        ctx = resolve(
            const("Fancy", tagged(styled_of(ident("Link")))),
            components={"Link": "a"},
        )
        assert ctx.registry["Fancy"] == ComponentDefinition("Fancy", "a", ())

    def test_custom_map_overrides_registry_tag(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("div"), obj(role=lit("img"))))),
            const("Derived", tagged(styled_of(ident("Base")))),
            components={"Base": "span"},
        )
        derived = ctx.registry["Derived"]
        assert derived.tag == "span"
        assert derived.attrs == (Attribute("role", "img"),)

    def test_unknown_component_not_recorded(self) -> None:
        ctx = resolve(const("Wrapped", tagged(styled_of(ident("ThirdParty")))))
        assert "Wrapped" not in ctx.registry

    def test_unsupported_argument(self) -> None:
        ctx = resolve(const("X", tagged(styled_of(call(ident("load"))))))
        assert len(ctx.registry) == 0


# ---------------------------------------------------------------------------
# attrs chains
# ---------------------------------------------------------------------------


class TestAttrsChains:
    def test_member_attrs_object(self) -> None:
        ctx = resolve(const("Img", tagged(attrs(styled_tag("img"), obj(alt=lit("logo"))))))
        assert ctx.registry["Img"] == ComponentDefinition("Img", "img", (Attribute("alt", "logo"),))

    def test_member_attrs_arrow_unknown_value(self) -> None:
        ctx = resolve(const("Img", tagged(attrs(styled_tag("img"), arrow(obj(alt=ident("count")))))))
        assert ctx.registry["Img"] == ComponentDefinition("Img", "img", (Attribute("alt", UNKNOWN),))

    def test_function_attrs(self) -> None:
        fn = func(ret(obj(tabIndex=neg(1))))
        ctx = resolve(const("Item", tagged(attrs(styled_tag("li"), fn))))
        assert ctx.registry["Item"].attrs == (Attribute("tabIndex", -1),)

    def test_string_base_attrs(self) -> None:
        ctx = resolve(
            const("Input", tagged(attrs(styled_of(lit("input")), obj(type=lit("text")))))
        )
        assert ctx.registry["Input"] == ComponentDefinition(
            "Input", "input", (Attribute("type", "text"),)
        )

    def test_component_base_attrs_appended(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("img"), obj(alt=lit("a"))))),
            const("Derived", tagged(attrs(styled_of(ident("Base")), obj(alt=lit("b"), role=lit("x"))))),
        )
        derived = ctx.registry["Derived"]
        assert derived.attrs == (
            Attribute("alt", "a"),
            Attribute("alt", "b"),
            Attribute("role", "x"),
        )
        assert derived.attribute("alt") == "b"

    def test_base_attrs_untouched(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("img"), obj(alt=lit("a"))))),
            const("Derived", tagged(attrs(styled_of(ident("Base")), obj(role=lit("x"))))),
        )
        assert ctx.registry["Base"].attrs == (Attribute("alt", "a"),)

    def test_unresolvable_base_not_recorded(self) -> None:
        ctx = resolve(const("X", tagged(attrs(styled_of(ident("Missing")), obj(alt=lit("a"))))))
        assert "X" not in ctx.registry

    def test_unreadable_argument_keeps_inherited(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("img"), obj(alt=lit("a"))))),
            const("Derived", tagged(attrs(styled_of(ident("Base")), ident("makeAttrs")))),
        )
        assert ctx.registry["Derived"].attrs == (Attribute("alt", "a"),)

    def test_block_arrow_yields_no_attrs(self) -> None:
        body = BlockStatement((ret(obj(alt=lit("a"))),))
        ctx = resolve(const("Img", tagged(attrs(styled_tag("img"), arrow(body)))))
        assert ctx.registry["Img"] == ComponentDefinition("Img", "img", ())

    def test_missing_argument_yields_no_attrs(self) -> None:
        ctx = resolve(const("Img", tagged(attrs(styled_tag("img")))))
        assert ctx.registry["Img"].attrs == ()

    def test_repeated_attrs_accumulate(self) -> None:
        chain = attrs(attrs(styled_tag("input"), obj(type=lit("checkbox"))), obj(checked=lit(True)))
        ctx = resolve(const("Check", tagged(chain)))
        assert ctx.registry["Check"].attrs == (
            Attribute("type", "checkbox"),
            Attribute("checked", True),
        )

    def test_spread_and_undefined(self) -> None:
        ctx = resolve(
            const(
                "Img",
                tagged(attrs(styled_tag("img"), obj(spread(ident("p")), prop("alt", ident("undefined"))))),
            )
        )
        assert ctx.registry["Img"].attrs == (Attribute("alt", UNDEFINED),)

    def test_template_value(self) -> None:
        ctx = resolve(const("Img", tagged(attrs(styled_tag("img"), obj(alt=tpl("literal"))))))
        assert ctx.registry["Img"].attribute("alt") == "literal"

    def test_attrs_on_non_styled_base(self) -> None:
        ctx = resolve(const("X", tagged(attrs(member("lib", "div"), obj(alt=lit("a"))))))
        assert len(ctx.registry) == 0


# ---------------------------------------------------------------------------
# Call expressions (object styles)
# ---------------------------------------------------------------------------


class TestCallForm:
    def test_styled_tag_call(self) -> None:
        ctx = resolve(const("Box", call(styled_tag("div"), obj(color=lit("red")))))
        assert ctx.registry["Box"] == ComponentDefinition("Box", "div", ())

    def test_styled_string_call(self) -> None:
        ctx = resolve(const("Box", call(styled_of(lit("section")), obj())))
        assert ctx.registry["Box"].tag == "section"

    def test_styled_component_call(self) -> None:
        ctx = resolve(
            const("Base", tagged(attrs(styled_tag("a"), obj(href=lit("#"))))),
            const("Derived", call(styled_of(ident("Base")), obj())),
        )
        assert ctx.registry["Derived"] == ComponentDefinition("Derived", "a", (Attribute("href", "#"),))

    def test_custom_component_call(self) -> None:
        ctx = resolve(
            const("Derived", call(styled_of(ident("Card")), obj())),
            components={"Card": "article"},
        )
        assert ctx.registry["Derived"].tag == "article"

    def test_unknown_component_call(self) -> None:
        ctx = resolve(const("Derived", call(styled_of(ident("Card")), obj())))
        assert "Derived" not in ctx.registry

    def test_object_member_call(self) -> None:
        ctx = resolve(const("UI", obj(Box=call(styled_tag("div"), obj()))))
        assert ctx.registry["UI.Box"].tag == "div"

    def test_attrs_chain_call(self) -> None:
        ctx = resolve(const("Img", call(attrs(styled_tag("img"), obj(alt=lit(""))), obj())))
        assert ctx.registry["Img"].attrs == (Attribute("alt", ""),)

    def test_bare_styled_call_is_not_definition(self) -> None:
        ctx = resolve(const("Factory", styled_of(lit("div"))))
        assert len(ctx.registry) == 0

    def test_unrelated_call(self) -> None:
        ctx = resolve(const("el", call(member("document", "createElement"), lit("div"))))
        assert len(ctx.registry) == 0


# ---------------------------------------------------------------------------
# Ordering, overwrite, idempotence
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_forward_reference_does_not_inherit(self) -> None:
        ctx = resolve(
            const("Derived", tagged(styled_of(ident("Base")))),
            const("Base", tagged(styled_tag("div"))),
        )
        assert "Derived" not in ctx.registry
        assert "Base" in ctx.registry

    def test_forward_reference_falls_back_to_custom_map(self) -> None:
        ctx = resolve(
            const("Derived", tagged(styled_of(ident("Base")))),
            const("Base", tagged(attrs(styled_tag("div"), obj(role=lit("x"))))),
            components={"Base": "section"},
        )
        assert ctx.registry["Derived"] == ComponentDefinition("Derived", "section", ())

    def test_redefinition_overwrites(self) -> None:
        ctx = resolve(
            const("Box", tagged(styled_tag("div"))),
            const("Box", tagged(styled_tag("span"))),
        )
        assert len(ctx.registry) == 1
        assert ctx.registry["Box"].tag == "span"

    def test_idempotent(self) -> None:
        node = tagged(attrs(styled_tag("img"), obj(alt=ident("x"))))
        ancestors = [VariableDeclarator(ident("Img"), node)]
        first = ResolveContext()
        handle_tagged_template(node, ancestors, first)
        second = ResolveContext()
        handle_tagged_template(node, ancestors, second)
        handle_tagged_template(node, ancestors, second)
        assert first.registry["Img"] == second.registry["Img"]

    def test_end_to_end_chain(self) -> None:
        ctx = resolve(
            const("Base", tagged(styled_tag("div"))),
            const("Derived", tagged(attrs(styled_of(ident("Base")), obj(color=lit("red"))))),
        )
        assert ctx.registry["Base"] == ComponentDefinition("Base", "div", ())
        assert ctx.registry["Derived"] == ComponentDefinition(
            "Derived", "div", (Attribute("color", "red"),)
        )


# ---------------------------------------------------------------------------
# Guarded scope
# ---------------------------------------------------------------------------


class TestFailureContainment:
    @pytest.fixture
    def broken_normalizer(self, monkeypatch):
        def _boom(properties):
            raise RuntimeError("cannot read properties")

        monkeypatch.setattr(resolver, "normalize_properties", _boom)

    def test_tagged_template_error_reported(self, broken_normalizer, caplog) -> None:
        node = tagged(attrs(styled_tag("img"), obj(alt=lit("x"))))
        with caplog.at_level(logging.WARNING, logger="styledresolve.resolver"):
            ctx = resolve(const("Img", node), const("Box", tagged(styled_tag("div"))))
        assert "Img" not in ctx.registry
        assert "Box" in ctx.registry
        assert len(ctx.diagnostics) == 1
        diag = ctx.diagnostics[0]
        assert diag.message == "Unable to parse styled component: cannot read properties"
        assert diag.data["message"] == "cannot read properties"
        assert "RuntimeError" in diag.data["stack"]
        assert diag.span == node.span
        assert "cannot read properties" in caplog.text

    def test_call_expression_error_reported(self, broken_normalizer, ctx) -> None:
        node = call(attrs(styled_tag("img"), obj(alt=lit("x"))), obj())
        handle_call_expression(node, [VariableDeclarator(ident("Img"), node)], ctx)
        assert len(ctx.diagnostics) == 1
        assert ctx.diagnostics[0].message.startswith("Unable to parse styled component:")

    def test_clean_run_has_no_diagnostics(self) -> None:
        ctx = resolve(const("Box", tagged(styled_tag("div"))))
        assert ctx.diagnostics == []


# ---------------------------------------------------------------------------
# Context and settings
# ---------------------------------------------------------------------------


class TestContext:
    def test_report_interpolates(self, ctx) -> None:
        ctx.report(STYLED, "bad {{ what }}", {"what": "thing"})
        assert ctx.diagnostics[0].message == "bad thing"

    def test_reset(self) -> None:
        ctx = resolve(const("Box", tagged(styled_tag("div"))))
        ctx.report(STYLED, "x")
        ctx.reset()
        assert len(ctx.registry) == 0
        assert ctx.diagnostics == []

    def test_components_from_settings(self) -> None:
        settings = {"jsx-a11y": {"components": {"Link": "a", "Bad": 3, "Empty": ""}}}
        assert components_from_settings(settings) == {"Link": "a"}

    def test_components_from_missing_settings(self) -> None:
        assert components_from_settings(None) == {}
        assert components_from_settings({}) == {}
        assert components_from_settings({"jsx-a11y": []}) == {}
        assert components_from_settings({"jsx-a11y": {"components": None}}) == {}
