"""Signature formatting for API documentation.

Converts type expressions and definition payloads into source-like strings
used both in fenced markdown blocks and in highlighted HTML signatures.
Formatting never raises: missing data degrades to ``"unknown"`` or an omitted
clause.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models import (
    ClassDef,
    FunctionDef,
    InterfaceDef,
    LiteralDef,
    MethodDef,
    ParamDef,
    TsTypeDef,
    TsTypeParamDef,
    TypeAliasDef,
    TypeLiteralDef,
    VariableDef,
)

MAX_TYPE_DEPTH = 64
UNKNOWN = "unknown"


def format_type(type_def: Optional[TsTypeDef] = None) -> str:
    """Format a type expression as a readable string."""
    return _format(type_def, 0)


def format_params(params: Optional[Sequence[ParamDef]] = None) -> str:
    """Format a parameter list as ``name[?]: Type`` entries."""
    if not params:
        return ""
    return ", ".join(_format_param(param, 0) for param in params)


def format_type_params(type_params: Optional[Sequence[TsTypeParamDef]] = None) -> str:
    """Format generic type parameters, e.g. ``<T extends object = {}>``."""
    if not type_params:
        return ""
    return f"<{', '.join(_format_type_param(param, 0) for param in type_params)}>"


def param_display_name(param: ParamDef) -> str:
    return param.name or "_"


def format_function_signature(name: str, definition: FunctionDef) -> str:
    async_prefix = "async " if definition.is_async else ""
    generator_prefix = "*" if definition.is_generator else ""
    type_params = format_type_params(definition.type_params)
    params = format_params(definition.params)
    return_type = format_type(definition.return_type)
    return f"{async_prefix}function {generator_prefix}{name}{type_params}({params}): {return_type}"


def format_method_signature(method: MethodDef) -> str:
    static_prefix = "static " if method.is_static else ""
    abstract_prefix = "abstract " if method.is_abstract else ""
    optional = "?" if method.optional else ""
    type_params = format_type_params(method.type_params)
    params = format_params(method.params)
    return_type = format_type(method.return_type)
    return f"{static_prefix}{abstract_prefix}{method.name}{optional}{type_params}({params}): {return_type}"


def format_class_signature(name: str, definition: ClassDef) -> str:
    """Format ``[abstract ]class Name<T> extends Base<T> implements X``."""
    abstract_prefix = "abstract " if definition.is_abstract else ""
    type_params = format_type_params(definition.type_params)

    extends_clause = ""
    if definition.extends:
        extends_clause = f" extends {definition.extends}"
        if definition.super_type_params:
            extends_clause += f"<{_join(definition.super_type_params, ', ')}>"

    implements_clause = ""
    if definition.implements:
        implements_clause = f" implements {_join(definition.implements, ', ')}"

    return f"{abstract_prefix}class {name}{type_params}{extends_clause}{implements_clause}"


def format_interface_signature(name: str, definition: InterfaceDef) -> str:
    type_params = format_type_params(definition.type_params)
    extends_clause = f" extends {_join(definition.extends, ', ')}" if definition.extends else ""
    return f"interface {name}{type_params}{extends_clause}"


def format_type_alias_signature(name: str, definition: TypeAliasDef) -> str:
    type_params = format_type_params(definition.type_params)
    return f"type {name}{type_params} = {format_type(definition.ts_type)}"


def format_constructor_signature(class_name: str, params: Optional[Sequence[ParamDef]]) -> str:
    return f"new {class_name}({format_params(params)})"


def format_variable_signature(name: str, definition: Optional[VariableDef]) -> str:
    kind = definition.kind if definition and definition.kind else "const"
    ts_type = definition.ts_type if definition else None
    return f"{kind} {name}: {format_type(ts_type)}"


def _format(type_def: Optional[TsTypeDef], depth: int) -> str:
    if type_def is None:
        return UNKNOWN
    if depth > MAX_TYPE_DEPTH:
        return type_def.repr or UNKNOWN

    kind = type_def.kind
    nested = depth + 1

    if kind == "keyword":
        return type_def.keyword or type_def.repr or UNKNOWN

    if kind == "typeRef":
        ref = type_def.type_ref
        if ref is None:
            return type_def.repr or UNKNOWN
        if ref.type_params:
            args = ", ".join(_format(arg, nested) for arg in ref.type_params)
            return f"{ref.type_name}<{args}>"
        return ref.type_name

    if kind == "array":
        if type_def.array is None:
            return type_def.repr or UNKNOWN
        return f"{_format(type_def.array, nested)}[]"

    if kind == "union":
        if type_def.union is None:
            return type_def.repr or UNKNOWN
        return " | ".join(_format(member, nested) for member in type_def.union)

    if kind == "intersection":
        if type_def.intersection is None:
            return type_def.repr or UNKNOWN
        return " & ".join(_format(member, nested) for member in type_def.intersection)

    if kind == "literal":
        literal = _format_literal(type_def.literal)
        return literal if literal is not None else (type_def.repr or UNKNOWN)

    if kind == "tuple":
        members = type_def.tuple or []
        return f"[{', '.join(_format(member, nested) for member in members)}]"

    if kind == "fnOrConstructor":
        fn = type_def.fn_or_constructor
        if fn is None:
            return type_def.repr or UNKNOWN
        prefix = "new " if fn.constructor else ""
        params = ", ".join(_format_param(param, nested) for param in fn.params)
        return f"{prefix}({params}) => {_format(fn.return_type, nested)}"

    if kind == "typeOperator":
        operator = type_def.type_operator
        if operator is None:
            return type_def.repr or UNKNOWN
        return f"{operator.operator} {_format(operator.ts_type, nested)}"

    if kind == "typeLiteral":
        if type_def.type_literal is None:
            return type_def.repr or UNKNOWN
        return _format_type_literal(type_def.type_literal, nested)

    return type_def.repr or UNKNOWN


def _format_literal(literal: Optional[LiteralDef]) -> Optional[str]:
    if literal is None:
        return None
    if literal.kind == "string" and literal.string is not None:
        return f'"{literal.string}"'
    if literal.kind == "number" and literal.number is not None:
        number = literal.number
        if isinstance(number, float) and number.is_integer():
            number = int(number)
        return str(number)
    if literal.kind == "boolean" and literal.boolean is not None:
        return "true" if literal.boolean else "false"
    return None


def _format_type_literal(literal: TypeLiteralDef, depth: int) -> str:
    members = []
    for prop in literal.properties:
        optional = "?" if prop.optional else ""
        members.append(f"{prop.name}{optional}: {_format(prop.ts_type, depth)}")
    for method in literal.methods:
        optional = "?" if method.optional else ""
        params = ", ".join(_format_param(param, depth) for param in method.params)
        members.append(f"{method.name}{optional}({params}): {_format(method.return_type, depth)}")
    for signature in literal.call_signatures:
        params = ", ".join(_format_param(param, depth) for param in signature.params)
        members.append(f"({params}): {_format(signature.return_type, depth)}")
    for index in literal.index_signatures:
        readonly = "readonly " if index.readonly else ""
        params = ", ".join(_format_param(param, depth) for param in index.params)
        members.append(f"{readonly}[{params}]: {_format(index.ts_type, depth)}")
    if not members:
        return "{}"
    return f"{{ {'; '.join(members)} }}"


def _format_param(param: ParamDef, depth: int) -> str:
    optional = "?" if param.optional else ""
    return f"{param_display_name(param)}{optional}: {_format(param.ts_type, depth)}"


def _format_type_param(param: TsTypeParamDef, depth: int) -> str:
    result = param.name
    if param.constraint is not None:
        result += f" extends {_format(param.constraint, depth)}"
    if param.default is not None:
        result += f" = {_format(param.default, depth)}"
    return result


def _join(types: Iterable[TsTypeDef], separator: str) -> str:
    return separator.join(format_type(item) for item in types)


__all__ = [
    "MAX_TYPE_DEPTH",
    "format_class_signature",
    "format_constructor_signature",
    "format_function_signature",
    "format_interface_signature",
    "format_method_signature",
    "format_params",
    "format_type",
    "format_type_alias_signature",
    "format_type_params",
    "format_variable_signature",
    "param_display_name",
]
