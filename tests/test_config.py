"""Tests for docsite.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import ApiConfig, ConfigError, DocSiteConfig, SiteConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DocSiteConfig)
    assert config.root == tmp_path.resolve()
    assert config.site == SiteConfig()
    assert config.api.data_dir == Path("data/api")
    assert config.api.group_prefixes == {"Clients": "client"}
    assert config.api.default_group == "Core"
    assert config.docs == []
    assert config.data_dir == tmp_path.resolve() / "data" / "api"
    assert config.resolved_output_dir == tmp_path.resolve() / "dist"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".docsite.yml"
    config_file.write_text(
        """
site:
  name: Probitas
  description: Scenario-based testing
  base_url: "https://example.test/documents/"
  base_path: /documents/
  github: https://github.com/example/probitas
  registry: https://jsr.io/@probitas
api:
  data_dir: api-data
  exclude_packages: [cli]
  group_prefixes:
    Clients: client
    Runners: runner
  default_group: Core
docs:
  - path: /docs/
    file: docs/overview.md
    title: Overview
    description: Introduction
  - path: /guide/
    file: docs/guide.md
output_dir: public
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.site.name == "Probitas"
    assert config.site.description == "Scenario-based testing"
    assert config.site.base_url == "https://example.test/documents"
    assert config.site.base_path == "/documents"
    assert config.site.github == "https://github.com/example/probitas"
    assert config.site.registry == "https://jsr.io/@probitas"

    assert config.api.exclude_packages == ["cli"]
    assert config.api.group_prefixes == {"Clients": "client", "Runners": "runner"}
    assert config.data_dir == tmp_path.resolve() / "api-data"

    assert [page.path for page in config.docs] == ["/docs/", "/guide/"]
    assert config.docs[0].file == Path("docs/overview.md")
    assert config.docs[0].description == "Introduction"
    assert config.docs[1].title == "guide"
    assert config.resolved_output_dir == tmp_path.resolve() / "public"


def test_load_config_accepts_single_excluded_package(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("api:\n  exclude_packages: cli\n", encoding="utf-8")
    assert load_config(tmp_path).api.exclude_packages == ["cli"]


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config.api == ApiConfig()


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("site: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_requires_doc_path_and_file(tmp_path: Path) -> None:
    (tmp_path / ".docsite.yml").write_text("docs:\n  - title: Missing\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="'path' and 'file'"):
        load_config(tmp_path)
