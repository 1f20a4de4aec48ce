"""End-to-end tests for SiteBuilder."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import load_config
from docsite.site import LLMS_FILENAME, SiteBuilder
from tests._fixtures import doc_nodes as f


@pytest.fixture
def project(tmp_path: Path, data_builder) -> Path:
    data_builder.add(
        f.package_payload(
            "client-http",
            [f.class_node("HttpClient", constructors=[[f.param("url", f.keyword("string"))]])],
            module_doc="HTTP client.",
        )
    )
    data_builder.add(
        f.package_payload(
            "app",
            [f.function_node("useClient", [f.param("client", f.type_ref("HttpClient"))], f.keyword("void"))],
        )
    )
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "overview.md").write_text(
        "# Overview\n\n## Install\n\nSee [the API](/api/app) and [setup](/docs/#install).\n", encoding="utf-8"
    )
    (tmp_path / ".docsite.yml").write_text(
        """
site:
  name: Probitas
  base_url: https://example.test/documents
  base_path: /documents
docs:
  - path: /docs/
    file: docs/overview.md
    title: Overview
  - path: /missing/
    file: docs/missing.md
    title: Missing
""",
        encoding="utf-8",
    )
    return tmp_path


def test_build_writes_api_docs_and_llms(project: Path) -> None:
    config = load_config(project)
    result = SiteBuilder(config).build()

    out = project / "dist"
    assert result.output_dir == out
    assert {path.relative_to(out).as_posix() for path in result.files} == {
        "api/client-http.md",
        "api/client-http.html",
        "api/app.md",
        "api/app.html",
        "docs/index.html",
        "docs.md",
        "docs/index.md",
        LLMS_FILENAME,
    }

    app_md = (out / "api" / "app.md").read_text(encoding="utf-8")
    assert "- [`HttpClient`](https://example.test/documents/api/client-http#HttpClient) (@probitas/client-http)" in app_md

    app_html = (out / "api" / "app.html").read_text(encoding="utf-8")
    assert 'href="https://example.test/documents/api/client-http#HttpClient"' in app_html

    client_html = (out / "api" / "client-http.html").read_text(encoding="utf-8")
    assert '<div class="api-item api-class" id="HttpClient">' in client_html
    assert "HTTP client." in client_html


def test_build_renders_doc_pages(project: Path) -> None:
    out = project / "site"
    SiteBuilder(load_config(project)).build(out)

    page = (out / "docs" / "index.html").read_text(encoding="utf-8")
    assert '<h2 id="install">Install</h2>' in page
    assert 'href="/documents/api/app"' in page
    assert '<li class="toc-level-2"><a href="#install">Install</a></li>' in page
    assert 'href="/documents/docs.md"' in page

    markdown = (out / "docs.md").read_text(encoding="utf-8")
    assert "[setup](/documents/docs/index.md#install)" in markdown
    assert markdown == (out / "docs" / "index.md").read_text(encoding="utf-8")
    assert not (out / "missing").exists()


def test_build_llms_txt_lists_packages(project: Path) -> None:
    out = project / "site"
    SiteBuilder(load_config(project)).build(out)

    llms = (out / LLMS_FILENAME).read_text(encoding="utf-8")
    assert llms.startswith("# Probitas\n")
    assert "- [Overview](/documents/docs.md)" in llms
    assert "- [`@probitas/app`](/documents/api/app.md): app package" in llms
    assert "- [`@probitas/client-http`](/documents/api/client-http.md): HTTP client." in llms


def test_build_without_data_still_writes_llms(tmp_path: Path) -> None:
    result = SiteBuilder(load_config(tmp_path)).build(tmp_path / "out")
    assert result.api_pages == []
    assert result.doc_pages == []
    assert result.llms_txt == tmp_path / "out" / LLMS_FILENAME
