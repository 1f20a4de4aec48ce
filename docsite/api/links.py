"""Cross-reference resolution for type names.

Every referenced type name is classified as exactly one of local (exported by
the package being rendered), cross-package (exported by another known
package), built-in (listed in the static table) or unresolved. Local wins over
cross-package, which wins over built-in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import PackageDocument, ParamDef, TsTypeDef, TsTypeParamDef
from .builtins import get_builtin_type_url
from .nodes import is_public, sort_key
from .references import extract_param_refs, extract_type_param_refs, extract_type_refs

logger = get_logger("api.links")


class LinkKind(Enum):
    LOCAL = "local"
    CROSS_PACKAGE = "cross-package"
    BUILTIN = "builtin"
    UNRESOLVED = "unresolved"


_GROUP_ORDER = {
    LinkKind.LOCAL: 0,
    LinkKind.CROSS_PACKAGE: 1,
    LinkKind.BUILTIN: 2,
    LinkKind.UNRESOLVED: 3,
}


@dataclass(frozen=True)
class TypeLink:
    """Resolved link target for one type name."""

    name: str
    kind: LinkKind
    href: Optional[str] = None
    package: Optional[str] = None
    specifier: Optional[str] = None

    @property
    def is_linkable(self) -> bool:
        return self.href is not None


class TypeIndex:
    """Maps exported type names to the first package that exports them.

    Packages are registered in order; a later package exporting an already
    registered name is shadowed for linking purposes.
    """

    def __init__(self) -> None:
        self._owners: Dict[str, str] = {}
        self._specifiers: Dict[str, str] = {}

    @classmethod
    def build(cls, packages: Iterable[PackageDocument]) -> "TypeIndex":
        index = cls()
        for package in packages:
            index.register(package)
        return index

    def register(self, package: PackageDocument) -> None:
        self._specifiers.setdefault(package.name, package.specifier)
        for node in package.exports:
            if not is_public(node):
                continue
            owner = self._owners.get(node.name)
            if owner is None:
                self._owners[node.name] = package.name
            elif owner != package.name:
                logger.debug(
                    "Type %s exported by %s is shadowed by %s", node.name, package.name, owner
                )

    def owner(self, type_name: str) -> Optional[str]:
        return self._owners.get(type_name)

    def specifier(self, package_name: str) -> Optional[str]:
        return self._specifiers.get(package_name)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._owners

    def __len__(self) -> int:
        return len(self._owners)


def package_href(base_url: str, package_name: str) -> str:
    return f"{base_url.rstrip('/')}/api/{package_name}"


class LinkResolver:
    """Classifies type names relative to the package being rendered.

    ``inline_local`` selects bare ``#Name`` anchors for local types, used when
    links are embedded in the package's own HTML page.
    """

    def __init__(
        self,
        local_types: Iterable[str],
        type_index: TypeIndex,
        current_package: str,
        *,
        base_url: str = "",
        inline_local: bool = False,
    ) -> None:
        self.local_types = frozenset(local_types)
        self.type_index = type_index
        self.current_package = current_package
        self.base_url = base_url
        self.inline_local = inline_local

    @classmethod
    def for_package(
        cls,
        package: PackageDocument,
        type_index: TypeIndex,
        *,
        base_url: str = "",
        inline_local: bool = False,
    ) -> "LinkResolver":
        local = {node.name for node in package.exports if is_public(node)}
        return cls(local, type_index, package.name, base_url=base_url, inline_local=inline_local)

    def classify(self, name: str) -> TypeLink:
        if name in self.local_types:
            href = f"#{name}" if self.inline_local else f"{package_href(self.base_url, self.current_package)}#{name}"
            return TypeLink(name, LinkKind.LOCAL, href, self.current_package)

        owner = self.type_index.owner(name)
        if owner is not None and owner != self.current_package:
            return TypeLink(
                name,
                LinkKind.CROSS_PACKAGE,
                f"{package_href(self.base_url, owner)}#{name}",
                owner,
                self.type_index.specifier(owner),
            )

        builtin_url = get_builtin_type_url(name)
        if builtin_url is not None:
            return TypeLink(name, LinkKind.BUILTIN, builtin_url)

        return TypeLink(name, LinkKind.UNRESOLVED)

    def resolve_all(self, names: Iterable[str]) -> List[TypeLink]:
        """Classify names and order them local, cross-package, built-in.

        Unresolved names are dropped; each group is sorted by name.
        """
        links = [self.classify(name) for name in set(names)]
        resolved = [link for link in links if link.kind is not LinkKind.UNRESOLVED]
        return sorted(resolved, key=lambda link: (_GROUP_ORDER[link.kind], sort_key(link.name)))


class TypeReferenceCollector:
    """Accumulates type references across a whole package render."""

    def __init__(self, resolver: LinkResolver) -> None:
        self.resolver = resolver
        self._refs: Set[str] = set()

    def add(self, type_name: str) -> None:
        self._refs.add(type_name)

    def update(self, type_names: Iterable[str]) -> None:
        self._refs.update(type_names)

    def extract_from(self, type_def: Optional[TsTypeDef]) -> None:
        self._refs |= extract_type_refs(type_def)

    def extract_from_type_params(self, type_params: Optional[Iterable[TsTypeParamDef]]) -> None:
        self._refs |= extract_type_param_refs(list(type_params or ()))

    def extract_from_params(self, params: Optional[Iterable[ParamDef]]) -> None:
        self._refs |= extract_param_refs(list(params or ()))

    @property
    def references(self) -> frozenset[str]:
        return frozenset(self._refs)

    def links(self) -> List[TypeLink]:
        return self.resolver.resolve_all(self._refs)

    def grouped_links(self) -> Dict[LinkKind, List[TypeLink]]:
        groups: Dict[LinkKind, List[TypeLink]] = {
            LinkKind.LOCAL: [],
            LinkKind.CROSS_PACKAGE: [],
            LinkKind.BUILTIN: [],
        }
        for link in self.links():
            groups[link.kind].append(link)
        return groups


__all__ = [
    "LinkKind",
    "LinkResolver",
    "TypeIndex",
    "TypeLink",
    "TypeReferenceCollector",
    "package_href",
]
