"""Queries over exported doc nodes and their JSDoc."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from ..models import DocNode, JsDoc, JsDocTag

HIDDEN_TAGS = frozenset({"internal", "private"})

_FIRST_SENTENCE = re.compile(r"([^.]+\.)\s")

NodeKey = Tuple[str, str]

# (kind, section title) in display order.
KIND_SECTIONS = (
    ("class", "Classes"),
    ("interface", "Interfaces"),
    ("function", "Functions"),
    ("typeAlias", "Types"),
    ("variable", "Variables"),
    ("enum", "Enums"),
)


class Documented(Protocol):
    js_doc: Optional[JsDoc]


class Member(Protocol):
    name: str
    accessibility: Optional[str]


def sort_key(name: str) -> tuple[str, str]:
    """Collation key approximating a locale-aware comparison.

    Names compare case-insensitively first; on ties lowercase sorts before
    uppercase.
    """
    return (name.casefold(), name.swapcase())


def node_key(node: DocNode) -> NodeKey:
    return (node.kind, node.name)


def is_public(node: DocNode) -> bool:
    """Return True when the node belongs in public documentation."""
    if node.name.startswith("_"):
        return False
    if node.kind == "moduleDoc":
        return False
    tags = node.js_doc.tags if node.js_doc else []
    return not any(tag.kind in HIDDEN_TAGS for tag in tags)


def is_public_member(member: Member) -> bool:
    """Class members are public unless marked private or underscore-prefixed."""
    return member.accessibility != "private" and not member.name.startswith("_")


def public_exports(nodes: Iterable[DocNode]) -> List[DocNode]:
    return [node for node in nodes if is_public(node)]


def group_by_kind(nodes: Iterable[DocNode]) -> Dict[str, List[DocNode]]:
    """Partition nodes by kind, each bucket sorted by name."""
    groups: Dict[str, List[DocNode]] = {}
    for node in nodes:
        groups.setdefault(node.kind, []).append(node)
    for bucket in groups.values():
        bucket.sort(key=lambda node: sort_key(node.name))
    return groups


def deduplicate_by_name(nodes: Iterable[DocNode]) -> List[DocNode]:
    """Keep the first node for each ``(kind, name)`` pair, in order."""
    seen: set[NodeKey] = set()
    result: List[DocNode] = []
    for node in nodes:
        key = node_key(node)
        if key in seen:
            continue
        seen.add(key)
        result.append(node)
    return result


def group_by_name(nodes: Iterable[DocNode]) -> Dict[NodeKey, List[DocNode]]:
    """Group every node, overloads included, by ``(kind, name)``."""
    groups: Dict[NodeKey, List[DocNode]] = {}
    for node in nodes:
        groups.setdefault(node_key(node), []).append(node)
    return groups


def get_description(item: Documented) -> Optional[str]:
    return item.js_doc.doc if item.js_doc else None


def get_description_summary(item: Documented) -> Optional[str]:
    """Return the first sentence of the description, else its first line."""
    doc = get_description(item)
    if not doc:
        return None
    match = _FIRST_SENTENCE.match(doc)
    if match:
        return match.group(1)
    first_line = doc.split("\n", 1)[0].strip()
    return first_line or None


def get_tags_by_kind(item: Documented, kind: str) -> List[JsDocTag]:
    if not item.js_doc:
        return []
    return [tag for tag in item.js_doc.tags if tag.kind == kind]


def get_examples(item: Documented) -> List[str]:
    return [tag.doc for tag in get_tags_by_kind(item, "example") if tag.doc]


def get_param_docs(item: Documented) -> Dict[str, str]:
    """Map parameter names to their ``@param`` text."""
    docs: Dict[str, str] = {}
    for tag in get_tags_by_kind(item, "param"):
        if tag.name and tag.doc:
            docs[tag.name] = tag.doc
    return docs


def get_return_doc(item: Documented) -> Optional[str]:
    tags = get_tags_by_kind(item, "return") or get_tags_by_kind(item, "returns")
    return tags[0].doc if tags else None


__all__ = [
    "KIND_SECTIONS",
    "deduplicate_by_name",
    "get_description",
    "get_description_summary",
    "get_examples",
    "get_param_docs",
    "get_return_doc",
    "get_tags_by_kind",
    "group_by_kind",
    "group_by_name",
    "is_public",
    "is_public_member",
    "node_key",
    "public_exports",
    "sort_key",
]
