"""Markdown rendering of a package's API documentation.

The output is meant for LLMs and other programmatic consumers: one flat
document per package with fenced signatures, followed by a "Related Links"
section listing every type referenced anywhere in the rendered signatures.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..models import (
    ClassDef,
    DocNode,
    EnumDef,
    FunctionDef,
    InterfaceDef,
    MethodDef,
    PackageDocument,
    ParamDef,
    PropertyDef,
    TypeAliasDef,
)
from .formatters import (
    format_class_signature,
    format_constructor_signature,
    format_function_signature,
    format_interface_signature,
    format_method_signature,
    format_params,
    format_type,
    format_type_alias_signature,
    format_variable_signature,
    param_display_name,
)
from .links import LinkKind, LinkResolver, TypeIndex, TypeReferenceCollector
from .nodes import (
    KIND_SECTIONS,
    Documented,
    deduplicate_by_name,
    get_description,
    get_examples,
    get_param_docs,
    get_return_doc,
    group_by_name,
    is_public,
    is_public_member,
)
from .references import extract_method_refs, extract_property_refs

logger = get_logger("api.markdown")

CODE_LANGUAGE = "typescript"

LINK_GROUP_TITLES = (
    (LinkKind.LOCAL, "This Package"),
    (LinkKind.CROSS_PACKAGE, "Other Packages"),
    (LinkKind.BUILTIN, "Built-in Types"),
)


def generate_api_markdown(
    package: PackageDocument,
    *,
    all_packages: Sequence[PackageDocument] = (),
    base_url: str = "",
    type_index: Optional[TypeIndex] = None,
) -> str:
    """Render ``package`` as a single markdown document.

    ``all_packages`` supplies sibling packages for cross-package links; a
    precomputed ``type_index`` takes precedence when given.
    """
    index = type_index if type_index is not None else TypeIndex.build(all_packages)
    resolver = LinkResolver.for_package(package, index, base_url=base_url)
    return _PackageMarkdown(package, TypeReferenceCollector(resolver)).render()


def _fence(code: str) -> List[str]:
    return [f"```{CODE_LANGUAGE}", code, "```"]


def _with_doc(text: str, doc: Optional[str]) -> str:
    return f"{text} — {doc}" if doc else text


class _PackageMarkdown:
    """Builds the markdown for one package while collecting type references."""

    def __init__(self, package: PackageDocument, collector: TypeReferenceCollector) -> None:
        self.package = package
        self.collector = collector
        self.lines: List[str] = []
        self._renderers: Dict[str, Callable[[DocNode], bool]] = {
            "class": self._class,
            "interface": self._interface,
            "function": self._function,
            "typeAlias": self._type_alias,
            "variable": self._variable,
            "enum": self._enum,
        }

    def render(self) -> str:
        package = self.package
        self.lines.extend([f"# {package.specifier or package.name}", "", f"> Version: {package.version}", ""])
        if package.module_doc:
            self.lines.extend([package.module_doc, ""])

        public = [node for node in package.exports if is_public(node)]
        self._overloads = group_by_name(public)
        exports = deduplicate_by_name(public)

        for kind, title in KIND_SECTIONS:
            nodes = [node for node in exports if node.kind == kind]
            if not nodes:
                continue
            self.lines.extend([f"## {title}", ""])
            for node in nodes:
                if self._renderers[kind](node):
                    self.lines.extend(["---", ""])

        self._related_links()

        if package.generated_at:
            self.lines.extend([f"*Generated: {package.generated_at}*", ""])

        return "\n".join(self.lines)

    # -- kinds -----------------------------------------------------------

    def _function(self, node: DocNode) -> bool:
        if node.function_def is None:
            logger.debug("Skipping function %s without a definition", node.name)
            return False
        overloads = [
            overload
            for overload in self._overloads.get((node.kind, node.name), [node])
            if overload.function_def is not None
        ]
        if len(overloads) > 1:
            self._function_overloads(node.name, overloads)
            return True

        self._header(node.name)
        self._signature(format_function_signature(node.name, node.function_def))
        self._collect_function(node.function_def)
        self._description(node)
        self._function_details(node, node.function_def)
        self._examples(node)
        return True

    def _function_overloads(self, name: str, overloads: List[DocNode]) -> None:
        self.lines.extend([f"### `{name}` ({len(overloads)} overloads)", ""])
        for number, overload in enumerate(overloads, start=1):
            definition = overload.function_def
            assert definition is not None
            self.lines.extend([f"**Overload {number}:**", ""])
            self._signature(format_function_signature(name, definition))
            self._collect_function(definition)
            self._description(overload)
            self._function_details(overload, definition)
        examples = [example for overload in overloads for example in get_examples(overload)]
        self._example_blocks(examples)

    def _function_details(self, node: DocNode, definition: FunctionDef) -> None:
        self._parameters(definition.params, get_param_docs(node))
        return_doc = get_return_doc(node)
        if definition.return_type is not None or return_doc:
            self.lines.append(f"**Returns:** `{format_type(definition.return_type)}`")
            if return_doc:
                self.lines.extend(["", return_doc])
            self.lines.append("")

    def _class(self, node: DocNode) -> bool:
        definition = node.class_def
        if definition is None:
            logger.debug("Skipping class %s without a definition", node.name)
            return False
        self._header(node.name)
        self._signature(format_class_signature(node.name, definition))
        self._collect_class_heritage(definition)
        self._description(node)

        if definition.constructors:
            self.lines.extend(["**Constructor:**", ""])
            for constructor in definition.constructors:
                self._signature(format_constructor_signature(node.name, constructor.params))
                self.collector.extract_from_params(constructor.params)

        properties = [prop for prop in definition.properties if is_public_member(prop)]
        self._properties(properties, with_static=True)
        self._methods([method for method in definition.methods if is_public_member(method)])
        self._examples(node)
        return True

    def _interface(self, node: DocNode) -> bool:
        definition = node.interface_def
        if definition is None:
            logger.debug("Skipping interface %s without a definition", node.name)
            return False
        self._header(node.name)
        self._signature(format_interface_signature(node.name, definition))
        self.collector.extract_from_type_params(definition.type_params)
        for parent in definition.extends:
            self.collector.extract_from(parent)
        self._description(node)
        self._properties(definition.properties, with_static=False)
        self._methods(definition.methods)
        self._call_signatures(definition)
        self._examples(node)
        return True

    def _type_alias(self, node: DocNode) -> bool:
        definition: Optional[TypeAliasDef] = node.type_alias_def
        if definition is None:
            logger.debug("Skipping type alias %s without a definition", node.name)
            return False
        self._header(node.name)
        self._signature(format_type_alias_signature(node.name, definition))
        self.collector.extract_from_type_params(definition.type_params)
        self.collector.extract_from(definition.ts_type)
        self._description(node)
        return True

    def _variable(self, node: DocNode) -> bool:
        definition = node.variable_def
        self._header(node.name)
        self._signature(format_variable_signature(node.name, definition))
        if definition is not None:
            self.collector.extract_from(definition.ts_type)
        self._description(node)
        return True

    def _enum(self, node: DocNode) -> bool:
        definition: Optional[EnumDef] = node.enum_def
        self._header(node.name)
        self._signature(f"enum {node.name}")
        self._description(node)
        members = definition.members if definition else []
        if members:
            self.lines.extend(["**Members:**", ""])
            for member in members:
                init = f" = `{format_type(member.init)}`" if member.init is not None else ""
                self.lines.append(_with_doc(f"- `{member.name}`{init}", get_description(member)))
            self.lines.append("")
        return True

    # -- building blocks -------------------------------------------------

    def _header(self, name: str) -> None:
        self.lines.extend([f"### `{name}`", ""])

    def _signature(self, code: str) -> None:
        self.lines.extend(_fence(code))
        self.lines.append("")

    def _description(self, item: Documented) -> None:
        description = get_description(item)
        if description:
            self.lines.extend([description, ""])

    def _parameters(self, params: Sequence[ParamDef], docs: Dict[str, str]) -> None:
        if not params:
            return
        self.lines.extend(["**Parameters:**", ""])
        for param in params:
            name = param_display_name(param)
            optional = " (optional)" if param.optional else ""
            entry = f"- `{name}`: `{format_type(param.ts_type)}`{optional}"
            self.lines.append(_with_doc(entry, docs.get(name)))
        self.lines.append("")

    def _properties(self, properties: Sequence[PropertyDef], *, with_static: bool) -> None:
        if not properties:
            return
        self.collector.update(extract_property_refs(properties))
        self.lines.extend(["**Properties:**", ""])
        for prop in properties:
            modifiers = []
            if with_static and prop.is_static:
                modifiers.append("static")
            if prop.readonly:
                modifiers.append("readonly")
            prefix = f"[{', '.join(modifiers)}] " if modifiers else ""
            optional = "?" if prop.optional else ""
            entry = f"- {prefix}`{prop.name}{optional}`: `{format_type(prop.ts_type)}`"
            self.lines.append(_with_doc(entry, get_description(prop)))
        self.lines.append("")

    def _methods(self, methods: Sequence[MethodDef]) -> None:
        if not methods:
            return
        self.collector.update(extract_method_refs(methods))
        self.lines.extend(["**Methods:**", ""])
        for method in methods:
            self.lines.extend(_fence(format_method_signature(method)))
            description = get_description(method)
            if description:
                self.lines.extend(["", description])
            self.lines.append("")

    def _call_signatures(self, definition: InterfaceDef) -> None:
        if not definition.call_signatures and not definition.index_signatures:
            return
        self.lines.extend(["**Signatures:**", ""])
        for signature in definition.call_signatures:
            self.collector.extract_from_type_params(signature.type_params)
            self.collector.extract_from_params(signature.params)
            self.collector.extract_from(signature.return_type)
            self._signature(f"({format_params(signature.params)}): {format_type(signature.return_type)}")
        for index in definition.index_signatures:
            self.collector.extract_from_params(index.params)
            self.collector.extract_from(index.ts_type)
            readonly = "readonly " if index.readonly else ""
            self._signature(f"{readonly}[{format_params(index.params)}]: {format_type(index.ts_type)}")

    def _examples(self, item: Documented) -> None:
        self._example_blocks(get_examples(item))

    def _example_blocks(self, examples: Iterable[str]) -> None:
        examples = list(examples)
        if not examples:
            return
        self.lines.extend(["**Example:**", ""])
        for example in examples:
            trimmed = example.strip()
            if trimmed.startswith("```"):
                self.lines.append(trimmed)
            else:
                self.lines.extend(_fence(trimmed))
            self.lines.append("")

    def _collect_function(self, definition: FunctionDef) -> None:
        self.collector.extract_from_type_params(definition.type_params)
        self.collector.extract_from_params(definition.params)
        self.collector.extract_from(definition.return_type)

    def _collect_class_heritage(self, definition: ClassDef) -> None:
        self.collector.extract_from_type_params(definition.type_params)
        if definition.extends:
            self.collector.add(definition.extends)
        for argument in definition.super_type_params:
            self.collector.extract_from(argument)
        for implemented in definition.implements:
            self.collector.extract_from(implemented)

    def _related_links(self) -> None:
        groups = self.collector.grouped_links()
        if not any(groups.values()):
            return
        self.lines.extend(["## Related Links", ""])
        for kind, title in LINK_GROUP_TITLES:
            links = groups[kind]
            if not links:
                continue
            self.lines.extend([f"### {title}", ""])
            for link in links:
                entry = f"- [`{link.name}`]({link.href})"
                if kind is LinkKind.CROSS_PACKAGE:
                    entry += f" ({link.specifier or link.package})"
                self.lines.append(entry)
            self.lines.append("")


__all__ = ["generate_api_markdown"]
