"""Type reference extraction for cross-reference links.

Each helper walks a definition and returns the set of ``typeRef`` names found
anywhere inside it. Absent input yields an empty set.
"""

from __future__ import annotations

from typing import Optional, Sequence, Set

from ..models import (
    CallSignatureDef,
    ClassDef,
    FunctionDef,
    IndexSignatureDef,
    InterfaceDef,
    MethodDef,
    ParamDef,
    PropertyDef,
    TsTypeDef,
    TsTypeParamDef,
    TypeAliasDef,
    VariableDef,
)
from .formatters import MAX_TYPE_DEPTH


def extract_type_refs(type_def: Optional[TsTypeDef]) -> Set[str]:
    """Return every type name referenced in ``type_def``, recursively."""
    refs: Set[str] = set()
    if type_def is not None:
        _walk(type_def, refs, 0)
    return refs


def extract_type_param_refs(type_params: Optional[Sequence[TsTypeParamDef]]) -> Set[str]:
    """Return refs found in type-parameter constraints and defaults."""
    refs: Set[str] = set()
    for param in type_params or ():
        _walk_type_param(param, refs, 0)
    return refs


def extract_param_refs(params: Optional[Sequence[ParamDef]]) -> Set[str]:
    refs: Set[str] = set()
    for param in params or ():
        _walk_param(param, refs, 0)
    return refs


def extract_property_refs(properties: Optional[Sequence[PropertyDef]]) -> Set[str]:
    refs: Set[str] = set()
    for prop in properties or ():
        _walk_optional(prop.ts_type, refs, 0)
    return refs


def extract_method_refs(methods: Optional[Sequence[MethodDef]]) -> Set[str]:
    refs: Set[str] = set()
    for method in methods or ():
        _walk_method(method, refs, 0)
    return refs


def extract_function_refs(definition: Optional[FunctionDef]) -> Set[str]:
    refs: Set[str] = set()
    if definition is None:
        return refs
    refs |= extract_type_param_refs(definition.type_params)
    refs |= extract_param_refs(definition.params)
    refs |= extract_type_refs(definition.return_type)
    return refs


def extract_class_refs(definition: Optional[ClassDef]) -> Set[str]:
    """Collect refs from type params, heritage clauses and every member."""
    refs: Set[str] = set()
    if definition is None:
        return refs
    refs |= extract_type_param_refs(definition.type_params)
    if definition.extends:
        refs.add(definition.extends)
    for super_arg in definition.super_type_params:
        refs |= extract_type_refs(super_arg)
    for implemented in definition.implements:
        refs |= extract_type_refs(implemented)
    for constructor in definition.constructors:
        refs |= extract_param_refs(constructor.params)
    refs |= extract_property_refs(definition.properties)
    refs |= extract_method_refs(definition.methods)
    for index in definition.index_signatures:
        _walk_index_signature(index, refs, 0)
    return refs


def extract_interface_refs(definition: Optional[InterfaceDef]) -> Set[str]:
    refs: Set[str] = set()
    if definition is None:
        return refs
    refs |= extract_type_param_refs(definition.type_params)
    for parent in definition.extends:
        refs |= extract_type_refs(parent)
    refs |= extract_property_refs(definition.properties)
    refs |= extract_method_refs(definition.methods)
    for signature in definition.call_signatures:
        _walk_call_signature(signature, refs, 0)
    for index in definition.index_signatures:
        _walk_index_signature(index, refs, 0)
    return refs


def extract_type_alias_refs(definition: Optional[TypeAliasDef]) -> Set[str]:
    refs: Set[str] = set()
    if definition is None:
        return refs
    refs |= extract_type_param_refs(definition.type_params)
    refs |= extract_type_refs(definition.ts_type)
    return refs


def extract_variable_refs(definition: Optional[VariableDef]) -> Set[str]:
    if definition is None:
        return set()
    return extract_type_refs(definition.ts_type)


def _walk(type_def: TsTypeDef, refs: Set[str], depth: int) -> None:
    if depth > MAX_TYPE_DEPTH:
        return
    nested = depth + 1
    kind = type_def.kind

    if kind == "typeRef":
        ref = type_def.type_ref
        if ref is not None and ref.type_name:
            refs.add(ref.type_name)
            for arg in ref.type_params or ():
                _walk(arg, refs, nested)
    elif kind == "array":
        _walk_optional(type_def.array, refs, nested)
    elif kind == "union":
        for member in type_def.union or ():
            _walk(member, refs, nested)
    elif kind == "intersection":
        for member in type_def.intersection or ():
            _walk(member, refs, nested)
    elif kind == "tuple":
        for member in type_def.tuple or ():
            _walk(member, refs, nested)
    elif kind == "fnOrConstructor":
        fn = type_def.fn_or_constructor
        if fn is not None:
            for param in fn.type_params:
                _walk_type_param(param, refs, nested)
            for param in fn.params:
                _walk_param(param, refs, nested)
            _walk_optional(fn.return_type, refs, nested)
    elif kind == "typeOperator":
        if type_def.type_operator is not None:
            _walk_optional(type_def.type_operator.ts_type, refs, nested)
    elif kind == "typeLiteral":
        literal = type_def.type_literal
        if literal is not None:
            for prop in literal.properties:
                _walk_optional(prop.ts_type, refs, nested)
            for method in literal.methods:
                _walk_method(method, refs, nested)
            for signature in literal.call_signatures:
                _walk_call_signature(signature, refs, nested)
            for index in literal.index_signatures:
                _walk_index_signature(index, refs, nested)


def _walk_optional(type_def: Optional[TsTypeDef], refs: Set[str], depth: int) -> None:
    if type_def is not None:
        _walk(type_def, refs, depth)


def _walk_param(param: ParamDef, refs: Set[str], depth: int) -> None:
    _walk_optional(param.ts_type, refs, depth)


def _walk_type_param(param: TsTypeParamDef, refs: Set[str], depth: int) -> None:
    _walk_optional(param.constraint, refs, depth)
    _walk_optional(param.default, refs, depth)


def _walk_method(method: MethodDef, refs: Set[str], depth: int) -> None:
    for param in method.type_params:
        _walk_type_param(param, refs, depth)
    for param in method.params:
        _walk_param(param, refs, depth)
    _walk_optional(method.return_type, refs, depth)


def _walk_call_signature(signature: CallSignatureDef, refs: Set[str], depth: int) -> None:
    for param in signature.type_params:
        _walk_type_param(param, refs, depth)
    for param in signature.params:
        _walk_param(param, refs, depth)
    _walk_optional(signature.return_type, refs, depth)


def _walk_index_signature(index: IndexSignatureDef, refs: Set[str], depth: int) -> None:
    for param in index.params:
        _walk_param(param, refs, depth)
    _walk_optional(index.ts_type, refs, depth)


__all__ = [
    "extract_class_refs",
    "extract_function_refs",
    "extract_interface_refs",
    "extract_method_refs",
    "extract_param_refs",
    "extract_property_refs",
    "extract_type_alias_refs",
    "extract_type_param_refs",
    "extract_type_refs",
    "extract_variable_refs",
]
