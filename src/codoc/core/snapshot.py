"""Build a SchemaNode forest from a codebase analysis snapshot.

The snapshot comes from an external scanner; this module only maps its
files and elements onto outline nodes so the result can be diffed against
another snapshot or a parsed outline.
"""

import hashlib
import json
import logging
import os
import re
from pathlib import Path

from pydantic import ValidationError

from codoc.core.errors import SnapshotError
from codoc.models import (
    INDENT_UNIT,
    CodebaseSnapshot,
    CodeElement,
    DependencyGraph,
    FileStructure,
    NodeKind,
    SchemaNode,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def element_content_hash(content: str) -> str:
    normalized = _WHITESPACE_RE.sub("", content).lower()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]


def _element_kind(element: CodeElement) -> NodeKind:
    if element.type == "function":
        return NodeKind.FUNCTION
    return NodeKind.COMPONENT


def _ensure_directory(root: SchemaNode, parts: list[str]) -> SchemaNode:
    current = root
    for depth, name in enumerate(parts):
        existing = next(
            (c for c in current.children if c.kind is NodeKind.DIRECTORY and c.name == name),
            None,
        )
        if existing is None:
            existing = SchemaNode(
                kind=NodeKind.DIRECTORY,
                name=name,
                path="/".join(parts[: depth + 1]),
                line_number=0,
                column=depth * INDENT_UNIT,
                content_hash="",
            )
            current.add_child(existing)
        current = existing
    return current


def _add_file(root: SchemaNode, file: FileStructure, graph: DependencyGraph) -> None:
    parts = [p for p in file.path.split("/") if p]
    if not parts:
        logger.warning("Skipping snapshot file with empty path")
        return
    directory = _ensure_directory(root, parts[:-1])
    file_path = "/".join(parts)
    depth = len(parts) - 1

    file_node = SchemaNode(
        kind=NodeKind.FILE,
        name=parts[-1],
        path=file_path,
        line_number=0,
        column=depth * INDENT_UNIT,
        content_hash=file.content_hash,
        extension=os.path.splitext(parts[-1])[1] or None,
    )
    directory.add_child(file_node)

    for element in file.elements:
        dependency = graph.nodes.get(f"{file_path}:{element.name}")
        file_node.add_child(
            SchemaNode(
                kind=_element_kind(element),
                name=element.name,
                path=f"{file_path}#{element.name}",
                line_number=element.line,
                column=(depth + 1) * INDENT_UNIT,
                content_hash=element_content_hash(element.content),
                dependencies=list(dependency.upstream) if dependency else [],
                dependents=list(dependency.downstream) if dependency else [],
                is_exported=element.is_exported,
            )
        )


def _assign_line_numbers(nodes: list[SchemaNode], start: int) -> int:
    line = start
    for node in nodes:
        node.line_number = line
        line = _assign_line_numbers(node.children, line + 1)
    return line


def construct_forest(snapshot: CodebaseSnapshot) -> list[SchemaNode]:
    """Return the top-level nodes of the outline described by ``snapshot``."""
    root = SchemaNode(
        kind=NodeKind.DIRECTORY,
        name="",
        path="",
        line_number=0,
        column=0,
        content_hash="",
    )
    for file in snapshot.files:
        _add_file(root, file, snapshot.dependency_graph)
    for directory in snapshot.directories:
        _ensure_directory(root, [p for p in directory.split("/") if p])

    _assign_line_numbers(root.children, 1)
    logger.debug("Constructed forest from %d file(s)", len(snapshot.files))
    forest = list(root.children)
    for node in forest:
        node.detach()
    return forest


def load_snapshot(path: str | Path) -> CodebaseSnapshot:
    snapshot_path = Path(path)
    try:
        raw = snapshot_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SnapshotError(f"Snapshot not found: {path}") from None
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotError(f"Invalid snapshot {path}: not valid UTF-8 ({exc.reason})") from exc
    try:
        return CodebaseSnapshot.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise SnapshotError(f"Invalid snapshot {path}: {exc}") from exc
