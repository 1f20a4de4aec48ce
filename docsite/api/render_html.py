"""HTML rendering of API documentation.

Produces fragments meant to be embedded into a page layout: one block per
exported symbol, with type names inside parameter, property and return types
rendered as in-page or cross-package links.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape

from ..logging import get_logger
from ..markup import MarkdownRenderer
from ..models import DocNode, PackageDocument, ParamDef, TsTypeDef
from .formatters import (
    MAX_TYPE_DEPTH,
    UNKNOWN,
    format_class_signature,
    format_constructor_signature,
    format_function_signature,
    format_interface_signature,
    format_method_signature,
    format_type,
    format_type_alias_signature,
    format_variable_signature,
    param_display_name,
)
from .links import LinkKind, LinkResolver, TypeIndex, TypeLink
from .nodes import (
    KIND_SECTIONS,
    deduplicate_by_name,
    get_description,
    get_examples,
    get_param_docs,
    get_return_doc,
    group_by_kind,
    group_by_name,
    is_public_member,
    public_exports,
)
from .references import extract_type_param_refs, extract_type_refs

logger = get_logger("api.html")

TEMPLATES_DIR = Path(__file__).with_name("templates")

_NODE_TEMPLATES = {
    "function": "function.html.j2",
    "class": "class.html.j2",
    "interface": "interface.html.j2",
    "typeAlias": "type_alias.html.j2",
    "variable": "variable.html.j2",
    "enum": "enum.html.j2",
}

# Kinds whose template needs the matching payload to be present.
_REQUIRED_PAYLOADS = {
    "function": "function_def",
    "class": "class_def",
    "interface": "interface_def",
    "typeAlias": "type_alias_def",
}

_INLINE_KINDS = (LinkKind.LOCAL, LinkKind.CROSS_PACKAGE)


class HtmlRenderer:
    """Renders doc nodes to HTML using the link rules of ``resolver``."""

    def __init__(
        self,
        resolver: LinkResolver,
        *,
        markdown: MarkdownRenderer | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.resolver = resolver
        self.markdown = markdown or MarkdownRenderer()
        self._env = self._create_env(templates_dir or TEMPLATES_DIR)

    @classmethod
    def for_package(
        cls,
        package: PackageDocument,
        type_index: TypeIndex,
        *,
        base_url: str = "",
        markdown: MarkdownRenderer | None = None,
    ) -> "HtmlRenderer":
        resolver = LinkResolver.for_package(package, type_index, base_url=base_url, inline_local=True)
        return cls(resolver, markdown=markdown)

    # -- public API ------------------------------------------------------

    def render_node(self, node: DocNode, overloads: Optional[Sequence[DocNode]] = None) -> str:
        """Render one exported symbol; unsupported kinds render nothing."""
        template_name = _NODE_TEMPLATES.get(node.kind)
        if template_name is None:
            return ""
        payload_attr = _REQUIRED_PAYLOADS.get(node.kind)
        if payload_attr and getattr(node, payload_attr) is None:
            logger.debug("Skipping %s %s without a definition", node.kind, node.name)
            return ""

        context: Dict[str, object] = {"node": node}
        if node.kind == "function":
            context["overloads"] = self._overloads(overloads)
        elif node.kind == "class":
            definition = node.class_def
            assert definition is not None
            context["properties"] = [prop for prop in definition.properties if is_public_member(prop)]
            context["methods"] = [method for method in definition.methods if is_public_member(method)]
        elif node.kind == "typeAlias":
            definition = node.type_alias_def
            assert definition is not None
            refs = extract_type_refs(definition.ts_type) | extract_type_param_refs(definition.type_params)
            context["links"] = self.related_links(refs)
        elif node.kind == "variable":
            ts_type = node.variable_def.ts_type if node.variable_def else None
            context["links"] = self.related_links(extract_type_refs(ts_type))

        return self._env.get_template(template_name).render(**context)

    def render_toc(self, nodes: Iterable[DocNode]) -> str:
        """Render the "On this page" navigation for ``nodes``."""
        grouped = group_by_kind(nodes)
        groups = [(title, grouped[kind]) for kind, title in KIND_SECTIONS if grouped.get(kind)]
        return self._env.get_template("toc.html.j2").render(groups=groups)

    def render_package(self, package: PackageDocument) -> str:
        """Render the table of contents and every public export of ``package``."""
        public = public_exports(package.exports)
        unique = deduplicate_by_name(public)
        grouped = group_by_kind(unique)
        overload_map = group_by_name(public)

        sections = []
        for kind, title in KIND_SECTIONS:
            nodes = grouped.get(kind)
            if not nodes:
                continue
            blocks = [self.render_node(node, overload_map.get((node.kind, node.name))) for node in nodes]
            sections.append(
                {
                    "kind": kind,
                    "title": title,
                    "blocks": [Markup(block) for block in blocks if block],
                }
            )

        return self._env.get_template("package.html.j2").render(
            package=package,
            module_doc=self.markdown_html(package.module_doc),
            sections=sections,
            toc=Markup(self.render_toc(unique)),
            has_exports=bool(unique),
        )

    def related_links(self, refs: Iterable[str]) -> List[TypeLink]:
        """Linkable references only: local first, then cross-package."""
        return [link for link in self.resolver.resolve_all(refs) if link.kind in _INLINE_KINDS]

    # -- template helpers ------------------------------------------------

    def type_html(self, type_def: Optional[TsTypeDef]) -> Markup:
        if type_def is None:
            return Markup('<span class="type-unknown">unknown</span>')
        return Markup('<code class="type-code">{}</code>').format(Markup(self._type(type_def, 0)))

    def type_name_html(self, name: str) -> Markup:
        link = self.resolver.classify(name)
        if link.kind not in _INLINE_KINDS:
            return escape(name)
        css = "type-link-local" if link.kind is LinkKind.LOCAL else "type-link-cross-package"
        return Markup('<a href="{}" class="type-link {}">{}</a>').format(link.href, css, name)

    def markdown_html(self, text: Optional[str]) -> Markup:
        if not text:
            return Markup("")
        return Markup(self.markdown.render_api(text, self.resolver))

    def example_html(self, example: str) -> Markup:
        trimmed = example.strip()
        if "```" not in trimmed:
            trimmed = f"```typescript\n{trimmed}\n```"
        return self.markdown_html(trimmed)

    # -- internals -------------------------------------------------------

    def _overloads(self, overloads: Optional[Sequence[DocNode]]) -> List[DocNode]:
        usable = [node for node in overloads or () if node.function_def is not None]
        return usable if len(usable) > 1 else []

    def _type(self, type_def: Optional[TsTypeDef], depth: int) -> str:
        if type_def is None:
            return UNKNOWN
        fallback = str(escape(type_def.repr or UNKNOWN))
        if depth > MAX_TYPE_DEPTH:
            return fallback

        kind = type_def.kind
        nested = depth + 1

        if kind == "keyword":
            return str(escape(type_def.keyword or type_def.repr or UNKNOWN))
        if kind == "typeRef":
            ref = type_def.type_ref
            if ref is None:
                return fallback
            name = str(self.type_name_html(ref.type_name))
            if ref.type_params:
                return f"{name}&lt;{self._join(ref.type_params, ', ', nested)}&gt;"
            return name
        if kind == "array" and type_def.array is not None:
            return f"{self._type(type_def.array, nested)}[]"
        if kind == "union" and type_def.union is not None:
            return self._join(type_def.union, " | ", nested)
        if kind == "intersection" and type_def.intersection is not None:
            return self._join(type_def.intersection, " &amp; ", nested)
        if kind == "tuple":
            return f"[{self._join(type_def.tuple or [], ', ', nested)}]"
        if kind == "fnOrConstructor" and type_def.fn_or_constructor is not None:
            fn = type_def.fn_or_constructor
            prefix = "new " if fn.constructor else ""
            return f"{prefix}({self._params(fn.params, nested)}) =&gt; {self._type(fn.return_type, nested)}"
        if kind == "typeOperator" and type_def.type_operator is not None:
            operator = type_def.type_operator
            return f"{escape(operator.operator)} {self._type(operator.ts_type, nested)}"
        if kind == "typeLiteral" and type_def.type_literal is not None:
            members = []
            for prop in type_def.type_literal.properties:
                optional = "?" if prop.optional else ""
                members.append(f"{escape(prop.name)}{optional}: {self._type(prop.ts_type, nested)}")
            for method in type_def.type_literal.methods:
                optional = "?" if method.optional else ""
                members.append(
                    f"{escape(method.name)}{optional}({self._params(method.params, nested)}): "
                    f"{self._type(method.return_type, nested)}"
                )
            for signature in type_def.type_literal.call_signatures:
                members.append(
                    f"({self._params(signature.params, nested)}): {self._type(signature.return_type, nested)}"
                )
            for index in type_def.type_literal.index_signatures:
                readonly = "readonly " if index.readonly else ""
                members.append(
                    f"{readonly}[{self._params(index.params, nested)}]: {self._type(index.ts_type, nested)}"
                )
            return f"{{ {'; '.join(members)} }}" if members else "{}"
        # Literals carry no references.
        if kind == "literal":
            return str(escape(format_type(type_def)))
        return fallback

    def _join(self, types: Iterable[TsTypeDef], separator: str, depth: int) -> str:
        return separator.join(self._type(item, depth) for item in types)

    def _params(self, params: Sequence[ParamDef], depth: int) -> str:
        parts = []
        for param in params:
            optional = "?" if param.optional else ""
            parts.append(f"{escape(param_display_name(param))}{optional}: {self._type(param.ts_type, depth)}")
        return ", ".join(parts)

    def _create_env(self, templates_dir: Path) -> Environment:
        env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["type_html"] = self.type_html
        env.filters["markdown"] = self.markdown_html
        env.filters["example"] = self.example_html
        env.globals.update(
            format_class_signature=format_class_signature,
            format_constructor_signature=format_constructor_signature,
            format_function_signature=format_function_signature,
            format_interface_signature=format_interface_signature,
            format_method_signature=format_method_signature,
            format_type_alias_signature=format_type_alias_signature,
            format_variable_signature=format_variable_signature,
            param_name=param_display_name,
            get_description=get_description,
            get_examples=get_examples,
            get_param_docs=get_param_docs,
            get_return_doc=get_return_doc,
        )
        return env


def render_package_html(
    package: PackageDocument,
    *,
    all_packages: Sequence[PackageDocument] = (),
    base_url: str = "",
    type_index: Optional[TypeIndex] = None,
    markdown: MarkdownRenderer | None = None,
) -> str:
    """Convenience wrapper mirroring :func:`generate_api_markdown`."""
    index = type_index if type_index is not None else TypeIndex.build(all_packages)
    return HtmlRenderer.for_package(package, index, base_url=base_url, markdown=markdown).render_package(package)


__all__ = ["HtmlRenderer", "TEMPLATES_DIR", "render_package_html"]
