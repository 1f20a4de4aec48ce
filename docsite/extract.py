"""Ingest ``deno doc --json`` output into the on-disk API data layout."""

from __future__ import annotations

from datetime import UTC, datetime
import json
import os
from pathlib import Path
import subprocess
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .logging import get_logger
from .models import ExportCounts, PackageDocument, PackageIndex, PackageInfo
from .stores.package_store import INDEX_FILENAME

# Node kinds that never become exports.
_SKIPPED_KINDS = frozenset({"moduleDoc", "import"})

_COUNT_FIELDS = {
    "class": "classes",
    "interface": "interfaces",
    "function": "functions",
    "typeAlias": "types",
    "variable": "variables",
    "enum": "enums",
}

Runner = Callable[[Sequence[str]], str]


class ExtractionError(RuntimeError):
    """Raised when ``deno doc`` fails or produces unusable output."""


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class DenoDocExtractor:
    """Runs ``deno doc --json`` for a module specifier."""

    def __init__(self, *, executable: str = "deno", runner: Runner | None = None) -> None:
        self.executable = executable
        self._runner = runner or self._default_runner
        self.logger = get_logger("extract")

    def run(self, specifier: str) -> List[Dict[str, Any]]:
        self.logger.info("Running deno doc for %s", specifier)
        output = self._runner([self.executable, "doc", "--json", specifier])
        return parse_doc_output(output)

    @staticmethod
    def _default_runner(args: Sequence[str]) -> str:
        env = {**os.environ, "NO_COLOR": "1"}
        try:
            completed = subprocess.run(
                list(args),
                check=True,
                capture_output=True,
                text=True,
                env=env,
            )
        except FileNotFoundError as exc:
            raise ExtractionError(f"Unable to locate '{args[0]}'. Install Deno to extract API data.") from exc
        except subprocess.CalledProcessError as exc:
            raise ExtractionError(
                f"deno doc failed with exit code {exc.returncode}: {(exc.stderr or '').strip()}"
            ) from exc
        return completed.stdout


def parse_doc_output(text: str) -> List[Dict[str, Any]]:
    """Return the node list from ``deno doc --json`` output.

    Newer Deno releases wrap nodes as ``{"version": N, "nodes": [...]}``;
    older ones emit a bare list.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"deno doc produced invalid JSON: {exc}") from exc
    if isinstance(data, Mapping):
        data = data.get("nodes")
    if not isinstance(data, list):
        raise ExtractionError("deno doc output does not contain a node list")
    return [dict(node) for node in data if isinstance(node, Mapping)]


def extract_module_doc(nodes: Sequence[Mapping[str, Any]]) -> Optional[str]:
    for node in nodes:
        if node.get("kind") == "moduleDoc":
            js_doc = node.get("jsDoc")
            if isinstance(js_doc, Mapping) and isinstance(js_doc.get("doc"), str):
                return js_doc["doc"]
            return None
    return None


def filter_exports(nodes: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Drop module docs, bare re-exports and underscore-prefixed names."""
    exports: List[Dict[str, Any]] = []
    for node in nodes:
        if node.get("kind") in _SKIPPED_KINDS:
            continue
        if str(node.get("name", "")).startswith("_"):
            continue
        exports.append(dict(node))
    return exports


def count_exports(nodes: Sequence[Mapping[str, Any]]) -> ExportCounts:
    counts = ExportCounts()
    for node in nodes:
        field_name = _COUNT_FIELDS.get(str(node.get("kind", "")))
        if field_name:
            setattr(counts, field_name, getattr(counts, field_name) + 1)
    return counts


def build_package_payload(
    name: str,
    specifier: str,
    version: str,
    nodes: Sequence[Mapping[str, Any]],
    *,
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble the camelCase package document written to ``{name}.json``."""
    payload: Dict[str, Any] = {
        "name": name,
        "specifier": specifier,
        "version": version,
        "exports": filter_exports(nodes),
        "generatedAt": generated_at or _timestamp(),
    }
    module_doc = extract_module_doc(nodes)
    if module_doc is not None:
        payload["moduleDoc"] = module_doc
    return payload


def build_package_document(
    name: str,
    specifier: str,
    version: str,
    nodes: Sequence[Mapping[str, Any]],
    *,
    generated_at: Optional[str] = None,
) -> PackageDocument:
    payload = build_package_payload(name, specifier, version, nodes, generated_at=generated_at)
    return PackageDocument.from_dict(payload)


def package_info(payload: Mapping[str, Any]) -> PackageInfo:
    exports = [node for node in payload.get("exports", []) if isinstance(node, Mapping)]
    return PackageInfo(
        name=str(payload.get("name", "")),
        specifier=str(payload.get("specifier", "")),
        version=str(payload.get("version", "")),
        export_count=len(exports),
        counts=count_exports(exports),
    )


def build_index(infos: Sequence[PackageInfo], *, generated_at: Optional[str] = None) -> PackageIndex:
    return PackageIndex(packages=list(infos), generated_at=generated_at or _timestamp())


class PackageWriter:
    """Writes package documents and keeps ``index.json`` in sync."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.logger = get_logger("extract")

    def write_package(self, payload: Mapping[str, Any]) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.data_dir / f"{payload['name']}.json"
        _write_json(path, payload)
        self.logger.info("Saved %d exports to %s", len(payload.get("exports", [])), path.name)
        return path

    def update_index(self, info: PackageInfo) -> PackageIndex:
        """Insert or replace ``info`` in the index, keeping existing order."""
        index_path = self.data_dir / INDEX_FILENAME
        packages: List[PackageInfo] = []
        if index_path.exists():
            try:
                existing = json.loads(index_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise ExtractionError(f"Invalid JSON in {index_path}: {exc}") from exc
            if isinstance(existing, Mapping):
                packages = PackageIndex.from_dict(existing).packages

        for position, current in enumerate(packages):
            if current.name == info.name:
                packages[position] = info
                break
        else:
            packages.append(info)

        index = build_index(packages)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        _write_json(index_path, index.to_dict())
        self.logger.info("Saved index with %d packages", len(packages))
        return index


def ingest_package(
    data_dir: Path,
    name: str,
    specifier: str,
    version: str,
    *,
    nodes: Optional[Sequence[Mapping[str, Any]]] = None,
    extractor: Optional[DenoDocExtractor] = None,
    module: Optional[str] = None,
) -> PackageInfo:
    """Extract (or take ``nodes``), write ``{name}.json`` and refresh the index.

    ``module`` is the specifier handed to ``deno doc``; it defaults to
    ``jsr:{specifier}@{version}``.
    """
    if nodes is None:
        extractor = extractor or DenoDocExtractor()
        nodes = extractor.run(module or f"jsr:{specifier}@{version}")
    payload = build_package_payload(name, specifier, version, nodes)
    writer = PackageWriter(data_dir)
    writer.write_package(payload)
    info = package_info(payload)
    writer.update_index(info)
    return info


def _write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


__all__ = [
    "DenoDocExtractor",
    "ExtractionError",
    "PackageWriter",
    "build_index",
    "build_package_document",
    "build_package_payload",
    "count_exports",
    "extract_module_doc",
    "filter_exports",
    "ingest_package",
    "package_info",
    "parse_doc_output",
]
