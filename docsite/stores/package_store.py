"""Read access to extracted API data on disk."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..api.links import TypeIndex
from ..logging import get_logger
from ..models import PackageDocument, PackageIndex, PackageInfo

INDEX_FILENAME = "index.json"


class PackageNotFoundError(LookupError):
    """Raised when a package has no data file in the store."""


class PackageDataError(RuntimeError):
    """Raised when a data file exists but cannot be decoded."""


@dataclass
class PackageGroup:
    """Named set of packages for navigation."""

    name: str
    packages: List[PackageInfo] = field(default_factory=list)


class PackageStore:
    """Loads ``index.json`` and ``{name}.json`` documents from ``data_dir``.

    Documents are memoized per package name for the lifetime of the store;
    a build uses one store and treats everything it returns as read-only.
    """

    def __init__(self, data_dir: Path, *, exclude: Sequence[str] = ()) -> None:
        self.data_dir = data_dir
        self.exclude = frozenset(exclude)
        self.logger = get_logger("stores.package")
        self._index: Optional[PackageIndex] = None
        self._documents: Dict[str, PackageDocument] = {}
        self._type_index: Optional[TypeIndex] = None

    def load_index(self) -> PackageIndex:
        if self._index is None:
            path = self.data_dir / INDEX_FILENAME
            if not path.exists():
                self.logger.warning("No package index found at %s", path)
                self._index = PackageIndex()
            else:
                index = PackageIndex.from_dict(self._read_json(path))
                index.packages = [info for info in index.packages if info.name not in self.exclude]
                self._index = index
        return self._index

    def packages(self) -> List[PackageInfo]:
        return list(self.load_index().packages)

    def load_package(self, name: str) -> Optional[PackageDocument]:
        """Return the package document, or None when no data file exists."""
        cached = self._documents.get(name)
        if cached is not None:
            return cached
        path = self.package_path(name)
        if not path.exists():
            self.logger.debug("Package data missing: %s", path)
            return None
        document = PackageDocument.from_dict(self._read_json(path))
        if not document.name:
            document.name = name
        self._documents[name] = document
        return document

    def require_package(self, name: str) -> PackageDocument:
        document = self.load_package(name)
        if document is None:
            raise PackageNotFoundError(f"Package '{name}' not found in {self.data_dir}")
        return document

    def load_all(self) -> List[PackageDocument]:
        """Load every indexed package in index order, skipping missing files."""
        documents: List[PackageDocument] = []
        for info in self.load_index().packages:
            document = self.load_package(info.name)
            if document is None:
                self.logger.warning("Indexed package %s has no data file", info.name)
                continue
            documents.append(document)
        return documents

    def type_index(self) -> TypeIndex:
        """Cross-package type index built in index order (first package wins)."""
        if self._type_index is None:
            self._type_index = TypeIndex.build(self.load_all())
            self.logger.debug("Type index covers %d names", len(self._type_index))
        return self._type_index

    def package_groups(
        self,
        group_prefixes: Mapping[str, str],
        default_group: str = "Core",
    ) -> List[PackageGroup]:
        """Group packages by name prefix; unmatched packages go to ``default_group``.

        The default group comes first, followed by prefix groups in mapping
        order. Empty groups are omitted.
        """
        groups: Dict[str, PackageGroup] = {default_group: PackageGroup(default_group)}
        for group_name in group_prefixes:
            groups.setdefault(group_name, PackageGroup(group_name))
        for info in self.load_index().packages:
            target = default_group
            for group_name, prefix in group_prefixes.items():
                if info.name.startswith(prefix):
                    target = group_name
                    break
            groups[target].packages.append(info)
        return [group for group in groups.values() if group.packages]

    def package_path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _read_json(self, path: Path) -> Mapping[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PackageDataError(f"Invalid JSON in {path}: {exc}") from exc
        except OSError as exc:
            raise PackageDataError(f"Unable to read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PackageDataError(f"{path} must contain a JSON object")
        return data


__all__ = [
    "INDEX_FILENAME",
    "PackageDataError",
    "PackageGroup",
    "PackageNotFoundError",
    "PackageStore",
]
