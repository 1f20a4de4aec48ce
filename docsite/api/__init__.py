"""API documentation rendering: formatting, cross-linking and output generation."""

from .links import LinkKind, LinkResolver, TypeIndex, TypeLink, TypeReferenceCollector
from .render_html import HtmlRenderer, render_package_html
from .render_markdown import generate_api_markdown

__all__ = [
    "HtmlRenderer",
    "LinkKind",
    "LinkResolver",
    "TypeIndex",
    "TypeLink",
    "TypeReferenceCollector",
    "generate_api_markdown",
    "render_package_html",
]
