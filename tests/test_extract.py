"""Tests for ingesting deno doc output."""

from __future__ import annotations

import json
from pathlib import Path
import subprocess

import pytest

from docsite.extract import (
    DenoDocExtractor,
    ExtractionError,
    PackageWriter,
    build_package_document,
    build_package_payload,
    count_exports,
    filter_exports,
    ingest_package,
    package_info,
    parse_doc_output,
)
from docsite.stores.package_store import PackageStore
from tests._fixtures import doc_nodes as f


def _raw_nodes():
    return [
        f.module_doc_node("HTTP client for scenarios.\nMore text."),
        {"name": "dep", "kind": "import"},
        f.class_node("HttpClient"),
        f.interface_node("Options"),
        f.function_node("request"),
        f.function_node("request"),
        f.function_node("_private"),
        f.enum_node("Method", ["Get"]),
    ]


def test_parse_doc_output_accepts_both_shapes() -> None:
    nodes = [f.function_node("a")]
    assert parse_doc_output(json.dumps(nodes)) == nodes
    assert parse_doc_output(json.dumps({"version": 1, "nodes": nodes})) == nodes


@pytest.mark.parametrize("text", ["{broken", '{"version": 1}', '"text"'])
def test_parse_doc_output_rejects_bad_input(text: str) -> None:
    with pytest.raises(ExtractionError):
        parse_doc_output(text)


def test_filter_and_count_exports() -> None:
    exports = filter_exports(_raw_nodes())
    assert [node["name"] for node in exports] == ["HttpClient", "Options", "request", "request", "Method"]

    counts = count_exports(exports)
    assert (counts.classes, counts.interfaces, counts.functions, counts.enums) == (1, 1, 2, 1)
    assert counts.types == counts.variables == 0


def test_build_package_payload_and_document() -> None:
    payload = build_package_payload("client-http", "@probitas/client-http", "1.2.0", _raw_nodes(), generated_at="T")
    assert payload["moduleDoc"] == "HTTP client for scenarios.\nMore text."
    assert payload["generatedAt"] == "T"
    assert len(payload["exports"]) == 5

    document = build_package_document("client-http", "@probitas/client-http", "1.2.0", _raw_nodes())
    assert document.module_doc.startswith("HTTP client")
    assert document.generated_at is not None
    assert document.generated_at.endswith("Z")

    info = package_info(payload)
    assert info.export_count == 5
    assert info.counts.functions == 2


def test_extractor_runs_deno_doc_through_runner() -> None:
    calls = []

    def runner(args):
        calls.append(list(args))
        return json.dumps({"version": 1, "nodes": [f.function_node("a")]})

    nodes = DenoDocExtractor(runner=runner).run("jsr:@probitas/core@1.0.0")

    assert calls == [["deno", "doc", "--json", "jsr:@probitas/core@1.0.0"]]
    assert [node["name"] for node in nodes] == ["a"]


def test_default_runner_maps_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(*args, **kwargs):
        raise FileNotFoundError("deno")

    monkeypatch.setattr(subprocess, "run", missing)
    with pytest.raises(ExtractionError, match="Install Deno"):
        DenoDocExtractor().run("jsr:@x/y@1")

    def failing(args, **kwargs):
        raise subprocess.CalledProcessError(1, args, stderr="boom\n")

    monkeypatch.setattr(subprocess, "run", failing)
    with pytest.raises(ExtractionError, match="exit code 1: boom"):
        DenoDocExtractor().run("jsr:@x/y@1")


def test_default_runner_disables_color(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_run(args, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(args, 0, stdout="[]", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert DenoDocExtractor().run("jsr:@x/y@1") == []
    assert seen["env"]["NO_COLOR"] == "1"
    assert seen["check"] is True


def test_writer_updates_index_in_place(tmp_path: Path) -> None:
    writer = PackageWriter(tmp_path)
    for name in ("core", "client-http"):
        payload = build_package_payload(name, f"@probitas/{name}", "1.0.0", [f.function_node("x")])
        writer.write_package(payload)
        writer.update_index(package_info(payload))

    updated = build_package_payload("core", "@probitas/core", "2.0.0", [])
    index = writer.update_index(package_info(updated))

    assert [(info.name, info.version) for info in index.packages] == [("core", "2.0.0"), ("client-http", "1.0.0")]
    on_disk = json.loads((tmp_path / "index.json").read_text(encoding="utf-8"))
    assert on_disk["packages"][0]["exportCount"] == 0
    assert on_disk["packages"][1]["counts"]["functions"] == 1


def test_writer_rejects_corrupt_index(tmp_path: Path) -> None:
    (tmp_path / "index.json").write_text("{oops", encoding="utf-8")
    payload = build_package_payload("core", "@probitas/core", "1.0.0", [])
    with pytest.raises(ExtractionError, match="Invalid JSON"):
        PackageWriter(tmp_path).update_index(package_info(payload))


def test_ingest_package_round_trips_through_store(tmp_path: Path) -> None:
    modules = []

    class StubExtractor:
        def run(self, specifier):
            modules.append(specifier)
            return _raw_nodes()

    info = ingest_package(tmp_path, "client-http", "@probitas/client-http", "1.2.0", extractor=StubExtractor())

    assert modules == ["jsr:@probitas/client-http@1.2.0"]
    assert info.export_count == 5
    store = PackageStore(tmp_path)
    assert [item.name for item in store.packages()] == ["client-http"]
    document = store.require_package("client-http")
    assert document.module_doc is not None
    assert "_private" not in [node.name for node in document.exports]
