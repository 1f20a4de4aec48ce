"""Tests for docsite.api.references."""

from __future__ import annotations

from docsite.api.references import (
    extract_class_refs,
    extract_function_refs,
    extract_interface_refs,
    extract_method_refs,
    extract_param_refs,
    extract_property_refs,
    extract_type_alias_refs,
    extract_type_refs,
    extract_variable_refs,
)
from docsite.models import MethodDef, ParamDef, PropertyDef, TsTypeDef
from tests._fixtures import doc_nodes as f


def _type(payload: dict) -> TsTypeDef:
    parsed = TsTypeDef.from_dict(payload)
    assert parsed is not None
    return parsed


def test_extract_type_refs_absent_input_is_empty() -> None:
    assert extract_type_refs(None) == set()
    assert extract_param_refs(None) == set()
    assert extract_property_refs([]) == set()
    assert extract_function_refs(None) == set()
    assert extract_class_refs(None) == set()
    assert extract_interface_refs(None) == set()
    assert extract_type_alias_refs(None) == set()
    assert extract_variable_refs(None) == set()


def test_keywords_and_literals_are_not_references() -> None:
    payload = f.union(f.keyword("string"), f.string_literal("x"), f.number_literal(1))
    assert extract_type_refs(_type(payload)) == set()


def test_extract_type_refs_walks_nested_structures() -> None:
    payload = f.union(
        f.type_ref("Promise", f.array(f.type_ref("User"))),
        f.intersection(f.type_ref("A"), f.tuple_of(f.type_ref("B"), f.keyword("number"))),
        f.type_operator("keyof", f.type_ref("Config")),
        f.fn_type([f.param("event", f.type_ref("Event"))], f.type_ref("Result")),
        f.type_literal(
            [f.prop("meta", f.type_ref("Meta"))],
            methods=[f.method("run", [f.param("ctx", f.type_ref("Context"))], f.type_ref("Outcome"), nested=False)],
        ),
    )
    assert extract_type_refs(_type(payload)) == {
        "Promise",
        "User",
        "A",
        "B",
        "Config",
        "Event",
        "Result",
        "Meta",
        "Context",
        "Outcome",
    }


def test_extract_param_property_and_method_refs() -> None:
    params = [ParamDef.from_dict(f.param("a", f.type_ref("Input"))), ParamDef.from_dict(f.param("b"))]
    assert extract_param_refs(params) == {"Input"}

    properties = [PropertyDef.from_dict(f.prop("client", f.type_ref("HttpClient"))), PropertyDef.from_dict(f.prop("x"))]
    assert extract_property_refs(properties) == {"HttpClient"}

    methods = [MethodDef.from_dict(f.method("send", [f.param("req", f.type_ref("Request"))], f.type_ref("Response")))]
    assert extract_method_refs(methods) == {"Request", "Response"}


def test_extract_function_refs_includes_type_param_constraints() -> None:
    node = f.node(
        f.function_node(
            "wrap",
            [f.param("value", f.type_ref("T"))],
            f.type_ref("Wrapped", f.type_ref("T")),
            type_params=[f.type_param("T", f.type_ref("Base"), f.type_ref("Default"))],
        )
    )
    assert extract_function_refs(node.function_def) == {"T", "Wrapped", "Base", "Default"}


def test_extract_class_refs_covers_heritage_and_members() -> None:
    node = f.node(
        f.class_node(
            "Client",
            extends="BaseClient",
            super_type_params=[f.type_ref("Options")],
            implements=[f.type_ref("Closeable")],
            constructors=[[f.param("transport", f.type_ref("Transport"))]],
            properties=[f.prop("state", f.type_ref("State"))],
            methods=[f.method("fetch", [], f.type_ref("Promise", f.type_ref("Reply")))],
        )
    )
    assert extract_class_refs(node.class_def) == {
        "BaseClient",
        "Options",
        "Closeable",
        "Transport",
        "State",
        "Promise",
        "Reply",
    }


def test_extract_interface_refs_covers_signatures() -> None:
    node = f.node(
        f.interface_node(
            "Handler",
            extends=[f.type_ref("Base")],
            properties=[f.prop("name", f.keyword("string"))],
            call_signatures=[
                {"params": [f.param("req", f.type_ref("Request"))], "returnType": f.type_ref("Response"), "typeParams": []}
            ],
            index_signatures=[
                {"readonly": False, "params": [f.param("key", f.keyword("string"))], "tsType": f.type_ref("Value")}
            ],
        )
    )
    assert extract_interface_refs(node.interface_def) == {"Base", "Request", "Response", "Value"}


def test_extract_alias_and_variable_refs() -> None:
    alias = f.node(f.type_alias_node("Handler", f.fn_type([f.param("ctx", f.type_ref("Context"))], f.keyword("void"))))
    assert extract_type_alias_refs(alias.type_alias_def) == {"Context"}

    variable = f.node(f.variable_node("client", f.type_ref("HttpClient")))
    assert extract_variable_refs(variable.variable_def) == {"HttpClient"}


def test_extract_type_refs_stops_at_depth_limit() -> None:
    payload: dict = f.type_ref("Leaf")
    for _ in range(200):
        payload = f.array(payload)
    assert extract_type_refs(_type(payload)) == set()
