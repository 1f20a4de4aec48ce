"""Full site build: API pages, narrative docs and the LLM index."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from .api.render_html import HtmlRenderer
from .api.render_markdown import generate_api_markdown
from .config import DocPageConfig, DocSiteConfig
from .llms import generate_llms_txt, page_markdown_path
from .logging import get_logger
from .markup import MarkdownRenderer, extract_title, extract_toc, rewrite_markdown_links
from .stores.package_store import PackageStore

LLMS_FILENAME = "llms.txt"


@dataclass
class BuildResult:
    """Files written by a build, relative to ``output_dir``."""

    output_dir: Path
    api_pages: List[Path] = field(default_factory=list)
    doc_pages: List[Path] = field(default_factory=list)
    llms_txt: Optional[Path] = None

    @property
    def files(self) -> List[Path]:
        written = [*self.api_pages, *self.doc_pages]
        if self.llms_txt is not None:
            written.append(self.llms_txt)
        return written


class SiteBuilder:
    """Renders every configured output into an output directory."""

    def __init__(
        self,
        config: DocSiteConfig,
        *,
        store: PackageStore | None = None,
        markdown: MarkdownRenderer | None = None,
    ) -> None:
        self.config = config
        self.store = store or PackageStore(config.data_dir, exclude=config.api.exclude_packages)
        self.markdown = markdown or MarkdownRenderer(base_path=config.site.base_path)
        self.logger = get_logger("site")
        self._env = Environment(
            loader=FileSystemLoader(str(Path(__file__).with_name("templates"))),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def build(self, output_dir: Path | None = None) -> BuildResult:
        out = output_dir or self.config.resolved_output_dir
        self.logger.info("Building site into %s", out)
        result = BuildResult(output_dir=out)
        result.api_pages.extend(self.build_api(out))
        result.doc_pages.extend(self.build_docs(out))
        result.llms_txt = self._write(out / LLMS_FILENAME, generate_llms_txt(self.config, self.store))
        self.logger.info(
            "Wrote %d API files, %d doc files and %s",
            len(result.api_pages),
            len(result.doc_pages),
            LLMS_FILENAME,
        )
        return result

    def build_api(self, out: Path) -> List[Path]:
        packages = self.store.load_all()
        type_index = self.store.type_index()
        base_url = self.config.site.base_url
        written: List[Path] = []
        for package in packages:
            self.logger.debug("Rendering API pages for %s", package.name)
            markdown_text = generate_api_markdown(package, base_url=base_url, type_index=type_index)
            written.append(self._write(out / "api" / f"{package.name}.md", markdown_text))
            renderer = HtmlRenderer.for_package(package, type_index, base_url=base_url, markdown=self.markdown)
            written.append(self._write(out / "api" / f"{package.name}.html", renderer.render_package(package)))
        return written

    def build_docs(self, out: Path) -> List[Path]:
        written: List[Path] = []
        for page in self.config.docs:
            source = page.file if page.file.is_absolute() else self.config.root / page.file
            if not source.exists():
                self.logger.warning("Doc page source missing for %s: %s", page.path, source)
                continue
            content = source.read_text(encoding="utf-8")
            written.append(self._write(out / page.path.strip("/") / "index.html", self.render_doc_page(page, content)))
            markdown_text = rewrite_markdown_links(content, self.config.site.base_path)
            # Served both as /docs.md and /docs/index.md.
            targets = {page_markdown_path(page.path).lstrip("/"), f"{page.path.strip('/')}/index.md".lstrip("/")}
            for target in sorted(targets):
                written.append(self._write(out / target, markdown_text))
        return written

    def render_doc_page(self, page: DocPageConfig, content: str) -> str:
        title = page.title or extract_title(content) or page.path
        self.logger.debug("Rendering doc page %s (%s)", page.path, title)
        html = self.markdown.render(content)
        return self._env.get_template("doc_page.html.j2").render(
            title=title,
            description=page.description,
            markdown_href=f"{self.config.site.base_path}{page_markdown_path(page.path)}",
            content=Markup(html),
            toc=extract_toc(content),
        )

    def _write(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


__all__ = ["BuildResult", "LLMS_FILENAME", "SiteBuilder"]
