"""Core data models for extracted API documentation.

The shapes mirror the JSON written by the extraction step (``deno doc --json``
wrapped into one document per package). Every model exposes a ``from_dict``
constructor that accepts the camelCase payload and tolerates missing keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Closed set of node kinds emitted by the extractor.
NODE_KINDS = (
    "moduleDoc",
    "function",
    "class",
    "interface",
    "typeAlias",
    "enum",
    "variable",
    "namespace",
    "import",
)


@dataclass
class JsDocTag:
    """A single JSDoc tag such as ``@param`` or ``@example``."""

    kind: str
    name: Optional[str] = None
    doc: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JsDocTag":
        return cls(
            kind=str(data.get("kind", "")),
            name=_as_str(data.get("name")),
            doc=_as_str(data.get("doc")),
        )


@dataclass
class JsDoc:
    """Free-text documentation plus its tags."""

    doc: Optional[str] = None
    tags: List[JsDocTag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["JsDoc"]:
        if not isinstance(data, Mapping):
            return None
        return cls(
            doc=_as_str(data.get("doc")),
            tags=[JsDocTag.from_dict(tag) for tag in _as_dicts(data.get("tags"))],
        )


@dataclass
class TypeRefDef:
    type_name: str
    type_params: Optional[List["TsTypeDef"]] = None


@dataclass
class LiteralDef:
    kind: str
    string: Optional[str] = None
    number: Optional[float] = None
    boolean: Optional[bool] = None


@dataclass
class FnOrConstructorDef:
    constructor: bool = False
    type_params: List["TsTypeParamDef"] = field(default_factory=list)
    params: List["ParamDef"] = field(default_factory=list)
    return_type: Optional["TsTypeDef"] = None


@dataclass
class TypeOperatorDef:
    operator: str
    ts_type: Optional["TsTypeDef"] = None


@dataclass
class TypeLiteralDef:
    methods: List["MethodDef"] = field(default_factory=list)
    properties: List["PropertyDef"] = field(default_factory=list)
    call_signatures: List["CallSignatureDef"] = field(default_factory=list)
    index_signatures: List["IndexSignatureDef"] = field(default_factory=list)


@dataclass
class TsTypeDef:
    """Recursive description of a type appearing in a signature.

    ``kind`` selects which payload field is populated. ``repr`` is the
    extractor's plain-text rendering and serves as the fallback for shapes the
    formatters do not understand.
    """

    kind: str
    repr: str = ""
    keyword: Optional[str] = None
    type_ref: Optional[TypeRefDef] = None
    array: Optional["TsTypeDef"] = None
    union: Optional[List["TsTypeDef"]] = None
    intersection: Optional[List["TsTypeDef"]] = None
    literal: Optional[LiteralDef] = None
    tuple: Optional[List["TsTypeDef"]] = None
    fn_or_constructor: Optional[FnOrConstructorDef] = None
    type_operator: Optional[TypeOperatorDef] = None
    type_literal: Optional[TypeLiteralDef] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["TsTypeDef"]:
        if not isinstance(data, Mapping):
            return None
        type_def = cls(kind=str(data.get("kind", "")), repr=_as_str(data.get("repr")) or "")

        type_def.keyword = _as_str(data.get("keyword"))

        ref = data.get("typeRef")
        if isinstance(ref, Mapping) and ref.get("typeName"):
            raw_params = ref.get("typeParams")
            type_def.type_ref = TypeRefDef(
                type_name=str(ref["typeName"]),
                type_params=_type_list(raw_params) if isinstance(raw_params, list) else None,
            )

        type_def.array = TsTypeDef.from_dict(data.get("array"))
        if isinstance(data.get("union"), list):
            type_def.union = _type_list(data["union"])
        if isinstance(data.get("intersection"), list):
            type_def.intersection = _type_list(data["intersection"])
        if isinstance(data.get("tuple"), list):
            type_def.tuple = _type_list(data["tuple"])

        literal = data.get("literal")
        if isinstance(literal, Mapping):
            number = literal.get("number")
            boolean = literal.get("boolean")
            type_def.literal = LiteralDef(
                kind=str(literal.get("kind", "")),
                string=_as_str(literal.get("string")),
                number=number if isinstance(number, (int, float)) and not isinstance(number, bool) else None,
                boolean=boolean if isinstance(boolean, bool) else None,
            )

        fn = data.get("fnOrConstructor")
        if isinstance(fn, Mapping):
            type_def.fn_or_constructor = FnOrConstructorDef(
                constructor=bool(fn.get("constructor", False)),
                type_params=_type_params(fn.get("typeParams")),
                params=_params(fn.get("params")),
                return_type=TsTypeDef.from_dict(fn.get("returnType")),
            )

        operator = data.get("typeOperator")
        if isinstance(operator, Mapping):
            type_def.type_operator = TypeOperatorDef(
                operator=str(operator.get("operator", "")),
                ts_type=TsTypeDef.from_dict(operator.get("tsType")),
            )

        type_literal = data.get("typeLiteral")
        if isinstance(type_literal, Mapping):
            type_def.type_literal = TypeLiteralDef(
                methods=[MethodDef.from_dict(m) for m in _as_dicts(type_literal.get("methods"))],
                properties=[PropertyDef.from_dict(p) for p in _as_dicts(type_literal.get("properties"))],
                call_signatures=[
                    CallSignatureDef.from_dict(s) for s in _as_dicts(type_literal.get("callSignatures"))
                ],
                index_signatures=[
                    IndexSignatureDef.from_dict(s) for s in _as_dicts(type_literal.get("indexSignatures"))
                ],
            )
        return type_def


@dataclass
class TsTypeParamDef:
    """A generic type parameter with optional constraint and default."""

    name: str
    constraint: Optional[TsTypeDef] = None
    default: Optional[TsTypeDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TsTypeParamDef":
        return cls(
            name=str(data.get("name", "")),
            constraint=TsTypeDef.from_dict(data.get("constraint")),
            default=TsTypeDef.from_dict(data.get("default")),
        )


@dataclass
class ParamDef:
    """A function or method parameter.

    ``name`` is absent for destructured parameters; ``left``/``right``,
    ``elements`` and ``props`` keep the destructuring shape for display.
    """

    kind: str = "identifier"
    name: Optional[str] = None
    optional: bool = False
    ts_type: Optional[TsTypeDef] = None
    left: Optional["ParamDef"] = None
    right: Optional[str] = None
    elements: List["ParamDef"] = field(default_factory=list)
    props: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParamDef":
        left = data.get("left")
        return cls(
            kind=str(data.get("kind", "identifier")),
            name=_as_str(data.get("name")),
            optional=bool(data.get("optional", False)),
            ts_type=TsTypeDef.from_dict(data.get("tsType")),
            left=ParamDef.from_dict(left) if isinstance(left, Mapping) else None,
            right=_as_str(data.get("right")),
            elements=_params(data.get("elements")),
            props=[dict(item) for item in _as_dicts(data.get("props"))],
        )


@dataclass
class PropertyDef:
    name: str
    js_doc: Optional[JsDoc] = None
    ts_type: Optional[TsTypeDef] = None
    readonly: bool = False
    accessibility: Optional[str] = None
    optional: bool = False
    is_abstract: bool = False
    is_static: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PropertyDef":
        return cls(
            name=str(data.get("name", "")),
            js_doc=JsDoc.from_dict(data.get("jsDoc")),
            ts_type=TsTypeDef.from_dict(data.get("tsType")),
            readonly=bool(data.get("readonly", False)),
            accessibility=_as_str(data.get("accessibility")),
            optional=bool(data.get("optional", False)),
            is_abstract=bool(data.get("isAbstract", False)),
            is_static=bool(data.get("isStatic", False)),
        )


@dataclass
class MethodDef:
    name: str
    js_doc: Optional[JsDoc] = None
    accessibility: Optional[str] = None
    optional: bool = False
    is_abstract: bool = False
    is_static: bool = False
    type_params: List[TsTypeParamDef] = field(default_factory=list)
    params: List[ParamDef] = field(default_factory=list)
    return_type: Optional[TsTypeDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MethodDef":
        # deno doc nests the signature under functionDef for class methods.
        signature = data.get("functionDef") if isinstance(data.get("functionDef"), Mapping) else data
        return cls(
            name=str(data.get("name", "")),
            js_doc=JsDoc.from_dict(data.get("jsDoc")),
            accessibility=_as_str(data.get("accessibility")),
            optional=bool(data.get("optional", False)),
            is_abstract=bool(data.get("isAbstract", False)),
            is_static=bool(data.get("isStatic", False)),
            type_params=_type_params(signature.get("typeParams")),
            params=_params(signature.get("params")),
            return_type=TsTypeDef.from_dict(signature.get("returnType")),
        )


@dataclass
class CallSignatureDef:
    js_doc: Optional[JsDoc] = None
    type_params: List[TsTypeParamDef] = field(default_factory=list)
    params: List[ParamDef] = field(default_factory=list)
    return_type: Optional[TsTypeDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CallSignatureDef":
        return cls(
            js_doc=JsDoc.from_dict(data.get("jsDoc")),
            type_params=_type_params(data.get("typeParams")),
            params=_params(data.get("params")),
            return_type=TsTypeDef.from_dict(data.get("tsType") or data.get("returnType")),
        )


@dataclass
class IndexSignatureDef:
    readonly: bool = False
    params: List[ParamDef] = field(default_factory=list)
    ts_type: Optional[TsTypeDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndexSignatureDef":
        return cls(
            readonly=bool(data.get("readonly", False)),
            params=_params(data.get("params")),
            ts_type=TsTypeDef.from_dict(data.get("tsType")),
        )


@dataclass
class FunctionDef:
    params: List[ParamDef] = field(default_factory=list)
    return_type: Optional[TsTypeDef] = None
    has_body: bool = False
    is_async: bool = False
    is_generator: bool = False
    type_params: List[TsTypeParamDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FunctionDef":
        return cls(
            params=_params(data.get("params")),
            return_type=TsTypeDef.from_dict(data.get("returnType")),
            has_body=bool(data.get("hasBody", False)),
            is_async=bool(data.get("isAsync", False)),
            is_generator=bool(data.get("isGenerator", False)),
            type_params=_type_params(data.get("typeParams")),
        )


@dataclass
class ConstructorDef:
    name: str = "constructor"
    params: List[ParamDef] = field(default_factory=list)
    js_doc: Optional[JsDoc] = None
    accessibility: Optional[str] = None
    has_body: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConstructorDef":
        return cls(
            name=str(data.get("name", "constructor")),
            params=_params(data.get("params")),
            js_doc=JsDoc.from_dict(data.get("jsDoc")),
            accessibility=_as_str(data.get("accessibility")),
            has_body=bool(data.get("hasBody", False)),
        )


@dataclass
class ClassDef:
    is_abstract: bool = False
    constructors: List[ConstructorDef] = field(default_factory=list)
    properties: List[PropertyDef] = field(default_factory=list)
    index_signatures: List[IndexSignatureDef] = field(default_factory=list)
    methods: List[MethodDef] = field(default_factory=list)
    extends: Optional[str] = None
    implements: List[TsTypeDef] = field(default_factory=list)
    type_params: List[TsTypeParamDef] = field(default_factory=list)
    super_type_params: List[TsTypeDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassDef":
        return cls(
            is_abstract=bool(data.get("isAbstract", False)),
            constructors=[ConstructorDef.from_dict(c) for c in _as_dicts(data.get("constructors"))],
            properties=[PropertyDef.from_dict(p) for p in _as_dicts(data.get("properties"))],
            index_signatures=[
                IndexSignatureDef.from_dict(s) for s in _as_dicts(data.get("indexSignatures"))
            ],
            methods=[MethodDef.from_dict(m) for m in _as_dicts(data.get("methods"))],
            extends=_as_str(data.get("extends")),
            implements=_type_list(data.get("implements")),
            type_params=_type_params(data.get("typeParams")),
            super_type_params=_type_list(data.get("superTypeParams")),
        )


@dataclass
class InterfaceDef:
    extends: List[TsTypeDef] = field(default_factory=list)
    methods: List[MethodDef] = field(default_factory=list)
    properties: List[PropertyDef] = field(default_factory=list)
    call_signatures: List[CallSignatureDef] = field(default_factory=list)
    index_signatures: List[IndexSignatureDef] = field(default_factory=list)
    type_params: List[TsTypeParamDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InterfaceDef":
        return cls(
            extends=_type_list(data.get("extends")),
            methods=[MethodDef.from_dict(m) for m in _as_dicts(data.get("methods"))],
            properties=[PropertyDef.from_dict(p) for p in _as_dicts(data.get("properties"))],
            call_signatures=[
                CallSignatureDef.from_dict(s) for s in _as_dicts(data.get("callSignatures"))
            ],
            index_signatures=[
                IndexSignatureDef.from_dict(s) for s in _as_dicts(data.get("indexSignatures"))
            ],
            type_params=_type_params(data.get("typeParams")),
        )


@dataclass
class TypeAliasDef:
    ts_type: Optional[TsTypeDef] = None
    type_params: List[TsTypeParamDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TypeAliasDef":
        return cls(
            ts_type=TsTypeDef.from_dict(data.get("tsType")),
            type_params=_type_params(data.get("typeParams")),
        )


@dataclass
class EnumMemberDef:
    name: str
    js_doc: Optional[JsDoc] = None
    init: Optional[TsTypeDef] = None


@dataclass
class EnumDef:
    members: List[EnumMemberDef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnumDef":
        return cls(
            members=[
                EnumMemberDef(
                    name=str(member.get("name", "")),
                    js_doc=JsDoc.from_dict(member.get("jsDoc")),
                    init=TsTypeDef.from_dict(member.get("init")),
                )
                for member in _as_dicts(data.get("members"))
            ]
        )


@dataclass
class VariableDef:
    kind: str = "const"
    ts_type: Optional[TsTypeDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VariableDef":
        return cls(
            kind=_as_str(data.get("kind")) or "const",
            ts_type=TsTypeDef.from_dict(data.get("tsType")),
        )


@dataclass
class NamespaceDef:
    elements: List["DocNode"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NamespaceDef":
        return cls(elements=[DocNode.from_dict(e) for e in _as_dicts(data.get("elements"))])


@dataclass
class Location:
    filename: str
    line: int = 0
    col: int = 0
    byte_index: int = 0


@dataclass
class DocNode:
    """One exported declaration of a package.

    Overloaded functions appear as several nodes sharing ``kind`` and ``name``.
    """

    name: str
    kind: str
    declaration_kind: str = "export"
    js_doc: Optional[JsDoc] = None
    location: Optional[Location] = None
    is_default: bool = False
    function_def: Optional[FunctionDef] = None
    class_def: Optional[ClassDef] = None
    interface_def: Optional[InterfaceDef] = None
    type_alias_def: Optional[TypeAliasDef] = None
    enum_def: Optional[EnumDef] = None
    variable_def: Optional[VariableDef] = None
    namespace_def: Optional[NamespaceDef] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocNode":
        node = cls(
            name=str(data.get("name", "")),
            kind=str(data.get("kind", "")),
            declaration_kind=_as_str(data.get("declarationKind")) or "export",
            js_doc=JsDoc.from_dict(data.get("jsDoc")),
            is_default=bool(data.get("isDefault", False)),
        )
        location = data.get("location")
        if isinstance(location, Mapping):
            node.location = Location(
                filename=str(location.get("filename", "")),
                line=_as_int(location.get("line")),
                col=_as_int(location.get("col")),
                byte_index=_as_int(location.get("byteIndex")),
            )
        for key, attr, model in _PAYLOADS:
            payload = data.get(key)
            if isinstance(payload, Mapping):
                setattr(node, attr, model.from_dict(payload))
        return node


_PAYLOADS = (
    ("functionDef", "function_def", FunctionDef),
    ("classDef", "class_def", ClassDef),
    ("interfaceDef", "interface_def", InterfaceDef),
    ("typeAliasDef", "type_alias_def", TypeAliasDef),
    ("enumDef", "enum_def", EnumDef),
    ("variableDef", "variable_def", VariableDef),
    ("namespaceDef", "namespace_def", NamespaceDef),
)


@dataclass
class PackageDocument:
    """Full export listing for one documented package."""

    name: str
    specifier: str
    version: str
    exports: List[DocNode] = field(default_factory=list)
    module_doc: Optional[str] = None
    generated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackageDocument":
        return cls(
            name=str(data.get("name", "")),
            specifier=str(data.get("specifier", "")),
            version=str(data.get("version", "")),
            exports=[DocNode.from_dict(node) for node in _as_dicts(data.get("exports"))],
            module_doc=_as_str(data.get("moduleDoc")),
            generated_at=_as_str(data.get("generatedAt")),
        )


@dataclass
class ExportCounts:
    classes: int = 0
    interfaces: int = 0
    functions: int = 0
    types: int = 0
    variables: int = 0
    enums: int = 0


@dataclass
class PackageInfo:
    """Index entry describing one package."""

    name: str
    specifier: str
    version: str
    export_count: int = 0
    counts: ExportCounts = field(default_factory=ExportCounts)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackageInfo":
        counts = data.get("counts") if isinstance(data.get("counts"), Mapping) else {}
        return cls(
            name=str(data.get("name", "")),
            specifier=str(data.get("specifier", "")),
            version=str(data.get("version", "")),
            export_count=_as_int(data.get("exportCount")),
            counts=ExportCounts(
                classes=_as_int(counts.get("classes")),
                interfaces=_as_int(counts.get("interfaces")),
                functions=_as_int(counts.get("functions")),
                types=_as_int(counts.get("types")),
                variables=_as_int(counts.get("variables")),
                enums=_as_int(counts.get("enums")),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "specifier": self.specifier,
            "version": self.version,
            "exportCount": self.export_count,
            "counts": {
                "classes": self.counts.classes,
                "interfaces": self.counts.interfaces,
                "functions": self.counts.functions,
                "types": self.counts.types,
                "variables": self.counts.variables,
                "enums": self.counts.enums,
            },
        }


@dataclass
class PackageIndex:
    """Enumeration of every known package."""

    packages: List[PackageInfo] = field(default_factory=list)
    generated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackageIndex":
        return cls(
            packages=[PackageInfo.from_dict(item) for item in _as_dicts(data.get("packages"))],
            generated_at=_as_str(data.get("generatedAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"packages": [info.to_dict() for info in self.packages]}
        if self.generated_at:
            payload["generatedAt"] = self.generated_at
        return payload


def _type_list(value: Any) -> List[TsTypeDef]:
    result: List[TsTypeDef] = []
    for item in _as_dicts(value):
        parsed = TsTypeDef.from_dict(item)
        if parsed is not None:
            result.append(parsed)
    return result


def _type_params(value: Any) -> List[TsTypeParamDef]:
    return [TsTypeParamDef.from_dict(item) for item in _as_dicts(value)]


def _params(value: Any) -> List[ParamDef]:
    return [ParamDef.from_dict(item) for item in _as_dicts(value)]


def _as_dicts(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0
