"""Structural diff between two SchemaNode forests.

Nodes are matched across snapshots by path first and then by content hash,
so a node whose line moved to another file or directory is reported as a
move (or a rename) instead of an unrelated removal plus addition.
"""

import hashlib
import logging
import re
from collections import defaultdict, deque
from collections.abc import Iterable, Sequence
from typing import Literal

from codoc.models import (
    CONTAINER_KINDS,
    NodeKind,
    RefactorMatch,
    RenamedNode,
    SchemaNode,
    StructuralDiff,
    flatten,
)

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
EXTRACT_CONFIDENCE = 0.8
INLINE_CONFIDENCE = 0.7
SPLIT_CONFIDENCE = 0.75

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")


def comparable_hash(node: SchemaNode) -> str:
    """Content hash, or a shape hash over direct children for hashless containers."""
    if node.content_hash:
        return node.content_hash
    if node.kind in CONTAINER_KINDS and node.children:
        signature = sorted((f"{c.kind.value}:{c.name}" for c in node.children), key=str.lower)
        return hashlib.sha256("|".join(signature).encode("utf-8")).hexdigest()[:16]
    return ""


def container_of(path: str) -> str:
    """Owning file for ``file#member`` paths, parent directory otherwise."""
    if "#" in path:
        return path.partition("#")[0]
    return path.rpartition("/")[0]


def classify_relocation(pair: RenamedNode) -> Literal["rename", "move"]:
    """A pair that stays in its container is a rename, even when only its ``~N`` suffix changed."""
    if container_of(pair.from_node.path) != container_of(pair.to_node.path):
        return "move"
    return "rename"


def name_words(name: str) -> set[str]:
    words: set[str] = set()
    for part in name.split("_"):
        words.update(w.lower() for w in _WORD_RE.findall(part))
    return words


def is_similar_name(a: str, b: str) -> bool:
    left, right = a.lower(), b.lower()
    if left in right or right in left:
        return True
    return len(name_words(a) & name_words(b)) >= 2


def _index_by_path(nodes: Iterable[SchemaNode]) -> dict[str, SchemaNode]:
    index: dict[str, SchemaNode] = {}
    for node in nodes:
        index[node.path] = node
    return index


class StructuralDiffEngine:
    """Classifies changes between an old and a new forest. Stateless."""

    def compare(self, old: Sequence[SchemaNode], new: Sequence[SchemaNode]) -> StructuralDiff:
        old_nodes = flatten(old)
        new_nodes = flatten(new)
        old_by_path = _index_by_path(old_nodes)
        new_by_path = _index_by_path(new_nodes)

        diff = StructuralDiff()
        matched_old: set[SchemaNode] = set()
        matched_new: set[SchemaNode] = set()

        for path, new_node in new_by_path.items():
            old_node = old_by_path.get(path)
            if old_node is None:
                continue
            matched_old.add(old_node)
            matched_new.add(new_node)
            if comparable_hash(old_node) != comparable_hash(new_node):
                diff.modified.append(new_node)

        buckets: defaultdict[str, deque[SchemaNode]] = defaultdict(deque)
        for node in old_nodes:
            if node in matched_old:
                continue
            node_hash = comparable_hash(node)
            if node_hash:
                buckets[node_hash].append(node)

        for node in new_nodes:
            if node in matched_new:
                continue
            node_hash = comparable_hash(node)
            bucket = buckets.get(node_hash) if node_hash else None
            if bucket:
                source = bucket.popleft()
                matched_old.add(source)
                # a duplicate path left over from the path index: unchanged
                if source.path != node.path:
                    diff.renamed.append(RenamedNode(from_node=source, to_node=node, confidence=EXACT_CONFIDENCE))
            elif node.path not in old_by_path:
                diff.added.append(node)

        renamed_from = {pair.from_node for pair in diff.renamed}
        renamed_to = {pair.to_node.path for pair in diff.renamed}
        diff.removed = [n for n in old_nodes if n not in matched_old and n not in renamed_from]
        diff.added = [n for n in diff.added if n.path not in renamed_to]

        logger.debug(
            "Structural diff: %d added, %d removed, %d modified, %d renamed/moved",
            len(diff.added),
            len(diff.removed),
            len(diff.modified),
            len(diff.renamed),
        )
        return diff

    def detect_refactors(self, diff: StructuralDiff) -> list[RefactorMatch]:
        """Best-effort extract / inline / split patterns within single files."""
        added = [n for n in diff.added if n.kind is NodeKind.FUNCTION]
        removed = [n for n in diff.removed if n.kind is NodeKind.FUNCTION]
        modified_by_file: defaultdict[str, list[SchemaNode]] = defaultdict(list)
        for node in diff.modified:
            if node.kind is NodeKind.FUNCTION:
                modified_by_file[node.owner_file_path].append(node)

        matches: list[RefactorMatch] = []
        for node in added:
            hosts = modified_by_file.get(node.owner_file_path)
            if hosts:
                matches.append(RefactorMatch("extract", node, tuple(hosts), EXTRACT_CONFIDENCE))

        for node in removed:
            hosts = modified_by_file.get(node.owner_file_path)
            if hosts:
                matches.append(RefactorMatch("inline", node, tuple(hosts), INLINE_CONFIDENCE))

        for node in removed:
            parts = tuple(
                n for n in added if n.owner_file_path == node.owner_file_path and is_similar_name(node.name, n.name)
            )
            if len(parts) >= 2:
                matches.append(RefactorMatch("split", node, parts, SPLIT_CONFIDENCE))

        return matches


def compare_forests(old: Sequence[SchemaNode], new: Sequence[SchemaNode]) -> StructuralDiff:
    return StructuralDiffEngine().compare(old, new)


def detect_refactors(diff: StructuralDiff) -> list[RefactorMatch]:
    return StructuralDiffEngine().detect_refactors(diff)
