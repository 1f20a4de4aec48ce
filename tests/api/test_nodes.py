"""Tests for docsite.api.nodes."""

from __future__ import annotations

from docsite.api.nodes import (
    deduplicate_by_name,
    get_description_summary,
    get_examples,
    get_param_docs,
    get_return_doc,
    group_by_kind,
    group_by_name,
    is_public,
    is_public_member,
    public_exports,
    sort_key,
)
from docsite.models import PropertyDef
from tests._fixtures import doc_nodes as f


def test_is_public_hides_underscored_internal_and_module_docs() -> None:
    assert is_public(f.node(f.function_node("visible")))
    assert not is_public(f.node(f.function_node("_hidden")))
    assert not is_public(f.node(f.function_node("secret", tags=[f.tag("internal")])))
    assert not is_public(f.node(f.function_node("private", tags=[f.tag("private")])))
    assert not is_public(f.node(f.module_doc_node("Module docs")))


def test_public_exports_keeps_order() -> None:
    nodes = [f.node(f.function_node(name)) for name in ("b", "_a", "c")]
    assert [node.name for node in public_exports(nodes)] == ["b", "c"]


def test_is_public_member() -> None:
    assert is_public_member(PropertyDef.from_dict(f.prop("open")))
    assert is_public_member(PropertyDef.from_dict(f.prop("guarded", accessibility="protected")))
    assert not is_public_member(PropertyDef.from_dict(f.prop("secret", accessibility="private")))
    assert not is_public_member(PropertyDef.from_dict(f.prop("_cache")))


def test_deduplicate_by_name_keeps_first_per_kind_and_name() -> None:
    first = f.node(f.function_node("parse", [f.param("input", f.keyword("string"))]))
    second = f.node(f.function_node("parse", [f.param("input", f.keyword("number"))]))
    same_name_other_kind = f.node(f.interface_node("parse"))
    result = deduplicate_by_name([first, second, same_name_other_kind])

    assert result == [first, same_name_other_kind]
    assert len(result) == len({(node.kind, node.name) for node in [first, second, same_name_other_kind]})


def test_group_by_kind_sorts_case_insensitively() -> None:
    nodes = [f.node(f.function_node(name)) for name in ("beta", "Alpha", "alpha", "Gamma")]
    nodes.append(f.node(f.interface_node("Zed")))
    grouped = group_by_kind(nodes)

    assert [node.name for node in grouped["function"]] == ["alpha", "Alpha", "beta", "Gamma"]
    assert [node.name for node in grouped["interface"]] == ["Zed"]
    assert sum(len(bucket) for bucket in grouped.values()) == len(nodes)


def test_group_by_name_collects_overloads() -> None:
    nodes = [
        f.node(f.function_node("get")),
        f.node(f.function_node("get")),
        f.node(f.function_node("post")),
    ]
    grouped = group_by_name(nodes)
    assert [len(grouped[("function", "get")]), len(grouped[("function", "post")])] == [2, 1]
    assert [node for bucket in grouped.values() for node in bucket] == nodes


def test_sort_key_orders_lowercase_before_uppercase_on_ties() -> None:
    assert sorted(["b", "B", "a", "A"], key=sort_key) == ["a", "A", "b", "B"]


def test_jsdoc_helpers() -> None:
    node = f.node(
        f.function_node(
            "send",
            doc="Send a request. Retries on failure.\nMore details.",
            tags=[
                f.tag("param", "url", "Target URL"),
                f.tag("param", "body"),
                f.tag("returns", doc="The response"),
                f.tag("example", doc="send('/x')"),
                f.tag("example", doc="send('/y')"),
            ],
        )
    )
    assert get_description_summary(node) == "Send a request."
    assert get_param_docs(node) == {"url": "Target URL"}
    assert get_return_doc(node) == "The response"
    assert get_examples(node) == ["send('/x')", "send('/y')"]


def test_description_summary_falls_back_to_first_line() -> None:
    node = f.node(f.function_node("x", doc="No sentence end\nsecond line"))
    assert get_description_summary(node) == "No sentence end"
    assert get_description_summary(f.node(f.function_node("y"))) is None


def test_return_doc_accepts_return_tag() -> None:
    node = f.node(f.function_node("x", tags=[f.tag("return", doc="Value")]))
    assert get_return_doc(node) == "Value"
    assert get_return_doc(f.node(f.function_node("y"))) is None
