"""Tests for the HTML API renderer."""

from __future__ import annotations

import pytest

from docsite.api.links import TypeIndex
from docsite.api.render_html import HtmlRenderer, render_package_html
from docsite.models import TsTypeDef
from tests._fixtures import doc_nodes as f


@pytest.fixture
def sibling():
    return f.package("client-http", [f.class_node("HttpClient")], specifier="@probitas/client-http")


@pytest.fixture
def package():
    return f.package(
        "app",
        [
            f.interface_node("Options", properties=[f.prop("timeout", f.keyword("number"), optional=True)]),
            f.function_node(
                "connect",
                [
                    f.param("client", f.type_ref("HttpClient")),
                    f.param("options", f.type_ref("Options"), optional=True),
                    f.param("signal", f.type_ref("Promise", f.keyword("string"))),
                    f.param("extra", f.type_ref("Mystery")),
                ],
                f.keyword("void"),
                doc="Connect using {@link Options}.",
                tags=[f.tag("param", "client", "Transport client"), f.tag("example", doc="connect(client)")],
            ),
            f.function_node("_internalHelper"),
            f.function_node("hidden", tags=[f.tag("internal")]),
        ],
    )


@pytest.fixture
def renderer(package, sibling):
    return HtmlRenderer.for_package(package, TypeIndex.build([package, sibling]))


def _type(payload: dict) -> TsTypeDef:
    parsed = TsTypeDef.from_dict(payload)
    assert parsed is not None
    return parsed


def test_function_block_has_anchor_and_inline_links(renderer, package) -> None:
    connect = next(node for node in package.exports if node.name == "connect")
    html = renderer.render_node(connect)

    assert '<div class="api-item api-function" id="connect">' in html
    assert '<a href="#connect" class="anchor-link">#</a>' in html
    assert '<a href="#Options" class="type-link type-link-local">Options</a>' in html
    assert (
        '<a href="/api/client-http#HttpClient" class="type-link type-link-cross-package">HttpClient</a>' in html
    )
    assert "Promise&lt;string&gt;" in html
    assert 'type-link">Promise' not in html
    assert ">Mystery</code>" in html


def test_description_links_and_examples(renderer, package) -> None:
    connect = next(node for node in package.exports if node.name == "connect")
    html = renderer.render_node(connect)

    assert '<a href="#Options" class="type-link">Options</a>' in html
    assert "Transport client" in html
    assert '<code class="language-typescript">connect(client)' in html


def test_type_html_escapes_and_handles_missing(renderer) -> None:
    assert str(renderer.type_html(None)) == '<span class="type-unknown">unknown</span>'

    literal = renderer.type_html(_type(f.union(f.string_literal("<b>"), f.keyword("null"))))
    assert "<b>" not in str(literal)
    assert "&lt;b&gt;" in str(literal)

    fn = renderer.type_html(_type(f.fn_type([f.param("a", f.type_ref("Options"))], f.keyword("void"))))
    assert "=&gt; void" in str(fn)
    assert 'href="#Options"' in str(fn)

    both = renderer.type_html(_type(f.intersection(f.type_ref("A"), f.type_ref("B"))))
    assert str(both) == '<code class="type-code">A &amp; B</code>'


def test_type_html_bounds_depth(renderer) -> None:
    payload: dict = f.type_ref("Options")
    for _ in range(200):
        payload = {"kind": "array", "array": payload, "repr": "Deep"}
    html = str(renderer.type_html(_type(payload)))
    assert "Deep" in html
    assert "Options" not in html


def test_overloads_render_in_disclosure() -> None:
    package = f.package(
        "parser",
        [
            f.function_node("parse", [f.param("input", f.keyword("string"))], f.keyword("number")),
            f.function_node("parse", [f.param("input", f.array(f.keyword("string")))], f.array(f.keyword("number"))),
        ],
    )

    html = render_package_html(package)

    assert html.count('id="parse"') == 1
    assert '<span class="overload-count">(2 overloads)</span>' in html
    assert '<details class="api-overloads">' in html
    assert '<span class="overload-index">#1</span>' in html
    assert '<span class="overload-index">#2</span>' in html
    assert "function parse(input: string[]): number[]" in html


def test_single_function_has_no_disclosure() -> None:
    html = render_package_html(f.package("math", [f.function_node("add")]))
    assert "api-overloads" not in html
    assert "overload-count" not in html


def test_render_package_sections_toc_and_visibility(package, sibling) -> None:
    html = render_package_html(package, all_packages=[package, sibling])

    assert "<h1>@probitas/app</h1>" in html
    assert '<h2 id="category-interfaces">Interfaces</h2>' in html
    assert html.index("category-interfaces") < html.index("category-functions")
    assert '<nav class="scrollable-nav api-toc">' in html
    assert '<li><a href="#connect">connect</a></li>' in html
    assert "_internalHelper" not in html
    assert "hidden" not in html


def test_render_package_without_exports() -> None:
    html = render_package_html(f.package("empty", [f.function_node("_private")], module_doc="Nothing *here*."))
    assert "This package has no public exports." in html
    assert "<em>here</em>" in html
    assert "api-kind-section" not in html


def test_class_block_filters_private_members(renderer) -> None:
    node = f.node(
        f.class_node(
            "Pool",
            constructors=[[f.param("size", f.keyword("number"))]],
            properties=[
                f.prop("size", f.keyword("number"), readonly=True, is_static=True),
                f.prop("hiddenState", f.keyword("string"), accessibility="private"),
            ],
            methods=[
                f.method("acquire", [], f.type_ref("Options")),
                f.method("_drain", [], f.keyword("void")),
            ],
        )
    )
    html = renderer.render_node(node)

    assert '<div class="api-item api-class" id="Pool">' in html
    assert "new Pool(size: number)" in html
    assert '<span class="member-badge member-static">static</span>' in html
    assert '<span class="member-badge member-readonly">readonly</span>' in html
    assert "hiddenState" not in html
    assert "acquire(): Options" in html
    assert "_drain" not in html


def test_type_alias_related_links_order(renderer) -> None:
    node = f.node(
        f.type_alias_node(
            "Factory",
            f.fn_type([f.param("options", f.type_ref("Options"))], f.type_ref("HttpClient")),
        )
    )
    html = renderer.render_node(node)

    assert "<h5>Links</h5>" in html
    local = html.index('type-link-local">Options')
    cross = html.index('type-link-cross-package">HttpClient')
    assert local < cross
    assert '<span class="related-type-package">@probitas/client-http</span>' in html


def test_variable_without_linkable_refs_has_no_links(renderer) -> None:
    node = f.node(f.variable_node("ready", f.type_ref("Promise", f.keyword("void"))))
    html = renderer.render_node(node)
    assert "const ready: Promise&lt;void&gt;" in html
    assert "<h5>Links</h5>" not in html


def test_enum_block(renderer) -> None:
    html = renderer.render_node(f.node(f.enum_node("Level", ["Debug"])))
    assert '<div class="api-item api-enum" id="Level">' in html
    assert '<code class="enum-member-name">Debug</code>' in html


def test_unsupported_or_incomplete_nodes_render_nothing(renderer) -> None:
    assert renderer.render_node(f.node({"name": "ns", "kind": "namespace"})) == ""
    assert renderer.render_node(f.node({"name": "Broken", "kind": "class"})) == ""
    assert renderer.render_node(f.node({"name": "fn", "kind": "function"})) == ""
