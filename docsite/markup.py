"""Markdown rendering utilities.

Wraps Python-Markdown with the conventions the site relies on: headings get
stable slug ids, internal links gain the configured base path, tables are
wrapped for horizontal scrolling and JSDoc ``{@link}`` tags become links.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING
from xml.etree import ElementTree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markupsafe import escape

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .api.links import LinkResolver

_INLINE_CODE = re.compile(r"`([^`]+)`")
_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_JSDOC_LINK = re.compile(r"\{@(link|linkcode)\s+([^\s}]+)(?:\s+([^}]+))?\}")
_H1 = re.compile(r"^(<h1[^>]*>.*?</h1>)", re.DOTALL)
_H2_LINE = re.compile(r"^##\s+(.+)$", re.MULTILINE)
_TITLE_LINE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_INTERNAL_MD_LINK = re.compile(r"\[([^\]]*)\]\((/[^)\"'\s]*)(\s+\"[^\"]*\")?\)")


def slugify(text: str, separator: str = "-") -> str:
    """Generate a heading id the same way for rendered HTML and TOC entries."""
    slug = text.lower()
    slug = _INLINE_CODE.sub(r"\1", slug)
    slug = _MD_LINK.sub(r"\1", slug)
    slug = re.sub(r"[^\w\s-]", "", slug)
    return re.sub(r"\s+", separator, slug)


@dataclass
class TocEntry:
    id: str
    label: str
    level: int


class _BasePathTreeprocessor(Treeprocessor):
    def __init__(self, md: markdown.Markdown, base_path: str) -> None:
        super().__init__(md)
        self.base_path = base_path

    def run(self, root: ElementTree.Element) -> None:
        for anchor in root.iter("a"):
            href = anchor.get("href", "")
            if href.startswith("/") and not href.startswith("//"):
                anchor.set("href", f"{self.base_path}{href}")


class BasePathExtension(Extension):
    """Prefix root-relative links with the site's base path."""

    def __init__(self, **kwargs: object) -> None:
        self.config = {"base_path": ["", "Path prepended to links starting with '/'"]}
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802 - Markdown API
        base_path = self.getConfig("base_path")
        if base_path:
            md.treeprocessors.register(_BasePathTreeprocessor(md, base_path), "docsite_base_path", 5)


class MarkdownRenderer:
    """Renders markdown text to HTML fragments."""

    def __init__(self, *, base_path: str = "") -> None:
        self.base_path = base_path.rstrip("/")
        self._md = markdown.Markdown(
            extensions=[
                "fenced_code",
                "tables",
                "toc",
                BasePathExtension(base_path=self.base_path),
            ],
            extension_configs={"toc": {"slugify": slugify}},
            output_format="html",
        )

    def render(self, content: str, header_extra: str = "") -> str:
        """Convert markdown to HTML, wrapping the first h1 in a header element."""
        self._md.reset()
        html = self._md.convert(content)
        html = html.replace("<table>", '<div class="table-wrapper"><table>')
        html = html.replace("</table>", "</table></div>")
        return _H1.sub(
            lambda match: f'<header class="content-header">{match.group(1)}{header_extra}</header>',
            html,
            count=1,
        )

    def render_api(self, content: str, resolver: Optional["LinkResolver"] = None) -> str:
        """Render API prose, turning ``{@link}`` tags into type links first."""
        return self.render(process_jsdoc_links(content, resolver))


def process_jsdoc_links(content: str, resolver: Optional["LinkResolver"] = None) -> str:
    """Replace ``{@link Name}``/``{@linkcode Name}`` with HTML links.

    Targets are classified with the same rules as signature links; names that
    cannot be resolved keep only their display text.
    """
    def _replace(match: re.Match[str]) -> str:
        tag, name, description = match.group(1), match.group(2), match.group(3)
        display = escape((description or "").strip() or name)
        text = f"<code>{display}</code>" if tag == "linkcode" else str(display)
        if resolver is None:
            return text
        link = resolver.classify(re.split(r"[.#]", name, maxsplit=1)[0])
        if link.href is None:
            return text
        return f'<a href="{escape(link.href)}" class="type-link">{text}</a>'

    return _JSDOC_LINK.sub(_replace, content)


def extract_title(content: str) -> Optional[str]:
    match = _TITLE_LINE.search(content)
    return match.group(1).strip() if match else None


def extract_toc(content: str) -> List[TocEntry]:
    """Return level-2 headings with the ids the renderer assigns them."""
    entries: List[TocEntry] = []
    in_code = False
    for line in content.splitlines():
        if line.strip().startswith("```"):
            in_code = not in_code
            continue
        if in_code:
            continue
        match = _H2_LINE.match(line)
        if not match:
            continue
        raw = match.group(1).strip()
        label = _MD_LINK.sub(r"\1", _INLINE_CODE.sub(r"\1", raw))
        entries.append(TocEntry(id=slugify(raw), label=label, level=2))
    return entries


def rewrite_markdown_links(content: str, base_path: str = "") -> str:
    """Point internal markdown links at served ``.md`` files under ``base_path``.

    ``[text](/docs/)`` becomes ``[text](/base/docs/index.md)``; protocol
    relative links are left alone.
    """

    def _replace(match: re.Match[str]) -> str:
        text, href, title = match.group(1), match.group(2), match.group(3) or ""
        if href.startswith("//"):
            return f"[{text}]({href}{title})"
        path, _, fragment = href.partition("#")
        if path.endswith("/"):
            path = f"{path}index.md"
        target = f"{path}#{fragment}" if fragment else path
        return f"[{text}]({base_path.rstrip('/')}{target}{title})"

    return _INTERNAL_MD_LINK.sub(_replace, content)


__all__ = [
    "BasePathExtension",
    "MarkdownRenderer",
    "TocEntry",
    "extract_title",
    "extract_toc",
    "process_jsdoc_links",
    "rewrite_markdown_links",
    "slugify",
]
