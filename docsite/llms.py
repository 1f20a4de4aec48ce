"""``llms.txt`` generation (https://llmstxt.org/)."""

from __future__ import annotations

from typing import List, Optional

from .config import DocPageConfig, DocSiteConfig
from .stores.package_store import PackageStore


def page_markdown_path(path: str) -> str:
    """URL of the markdown rendition of a page served at ``path``.

    ``/docs/`` maps to ``/docs.md`` and the site root to ``/index.md``.
    """
    stripped = path.strip("/")
    return f"/{stripped}.md" if stripped else "/index.md"


def package_description(module_doc: Optional[str], package_name: str) -> str:
    """First non-empty line of the module doc, else a generic label."""
    if module_doc:
        first_line = module_doc.strip().split("\n", 1)[0].strip()
        if first_line:
            return first_line
    return f"{package_name} package"


def generate_llms_txt(config: DocSiteConfig, store: PackageStore) -> str:
    site = config.site
    base = site.base_path
    lines: List[str] = [f"# {site.name}", ""]
    if site.description:
        lines.extend([f"> {site.description}", ""])

    if config.docs:
        lines.extend(["## Documentation", ""])
        lines.extend(_doc_entry(page, base) for page in config.docs)
        lines.append("")

    groups = store.package_groups(config.api.group_prefixes, config.api.default_group)
    if groups:
        lines.extend(["## API Reference", ""])
        for group in groups:
            lines.extend([f"### {group.name}", ""])
            for info in group.packages:
                document = store.load_package(info.name)
                description = package_description(document.module_doc if document else None, info.name)
                lines.append(f"- [`{info.specifier}`]({base}/api/{info.name}.md): {description}")
            lines.append("")

    links = [(label, url) for label, url in (("GitHub", site.github), ("Registry", site.registry)) if url]
    if links:
        lines.extend(["## Links", ""])
        lines.extend(f"- [{label}]({url})" for label, url in links)
        lines.append("")

    return "\n".join(lines)


def _doc_entry(page: DocPageConfig, base_path: str) -> str:
    entry = f"- [{page.title}]({base_path}{page_markdown_path(page.path)})"
    return f"{entry}: {page.description}" if page.description else entry


__all__ = ["generate_llms_txt", "package_description", "page_markdown_path"]
