"""Render a StructuralDiff as display lines and as AIChange records."""

import uuid
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from codoc.core.diff import classify_relocation, container_of, detect_refactors
from codoc.core.serialize import render_node_line
from codoc.models import (
    INDENT_UNIT,
    AIChange,
    ChangeElement,
    ChangeType,
    RefactorMatch,
    SchemaNode,
    StructuralDiff,
)

ContentLookup = Callable[[SchemaNode], str | None]


def format_node(node: SchemaNode) -> str:
    return " " * node.column + render_node_line(node)


def container_label(path: str) -> str:
    """Display name of the container that holds ``path``."""
    container = container_of(path)
    if not container:
        return "(top level)"
    # member paths live in a file, everything else in a directory
    return container if "#" in path else f"/{container}"


def _group_moves(diff: StructuralDiff) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for pair in diff.renamed:
        if classify_relocation(pair) == "move":
            groups.setdefault(container_label(pair.to_node.path), []).append(pair.to_node.name)
    return groups


def format_diff(diff: StructuralDiff, refactors: Sequence[RefactorMatch] = ()) -> list[str]:
    lines: list[str] = []

    moves = _group_moves(diff)
    for target, names in moves.items():
        lines.append(f"+ {target} (relocated {len(names)} items)")

    relocated = {pair.to_node.path for pair in diff.renamed}
    for node in diff.added:
        if node.path not in relocated:
            lines.append(f"+ {format_node(node)}")

    renamed_from = {pair.from_node.path for pair in diff.renamed}
    for node in diff.removed:
        if node.path not in renamed_from:
            lines.append(f"- {format_node(node)}")

    for node in diff.modified:
        lines.append(f"~ {format_node(node)}")

    for pair in diff.renamed:
        if pair.from_node.name != pair.to_node.name:
            lines.append(f"→ {pair.from_node.name} → {pair.to_node.name}")

    for match in refactors:
        targets = ", ".join(t.name for t in match.targets)
        lines.append(f"* {match.refactor_type}: {match.source.name} -> {targets} ({match.confidence:.2f})")

    return lines


def _change(
    change_type: ChangeType,
    node: SchemaNode,
    timestamp: datetime,
    content_for: ContentLookup | None,
    **extra: object,
) -> AIChange:
    content = content_for(node) if content_for is not None else None
    return AIChange(
        id=str(uuid.uuid4()),
        type=change_type,
        element=ChangeElement(kind=node.kind, name=node.name, path=node.path),
        line_number=node.line_number,
        indent_level=node.column // INDENT_UNIT,
        content=content if content is not None else render_node_line(node),
        timestamp=timestamp,
        **extra,  # type: ignore[arg-type]
    )


def to_ai_changes(
    diff: StructuralDiff,
    refactors: Sequence[RefactorMatch] | None = None,
    timestamp: datetime | None = None,
    new_content: ContentLookup | None = None,
    old_content: ContentLookup | None = None,
) -> list[AIChange]:
    """Flatten a diff into AIChange records.

    ``refactors`` defaults to the patterns detected on ``diff``. The content
    lookups map a node to the outline text it covers; by default each
    change carries the node's own rendered line.
    """
    stamp = timestamp or datetime.now(timezone.utc)
    if refactors is None:
        refactors = detect_refactors(diff)

    changes: list[AIChange] = []
    changes.extend(_change("add", n, stamp, new_content) for n in diff.added)
    changes.extend(_change("remove", n, stamp, old_content) for n in diff.removed)
    changes.extend(_change("modify", n, stamp, new_content) for n in diff.modified)
    for pair in diff.renamed:
        original = old_content(pair.from_node) if old_content is not None else render_node_line(pair.from_node)
        changes.append(
            _change(
                classify_relocation(pair),
                pair.to_node,
                stamp,
                new_content,
                original_content=original,
                from_path=pair.from_node.path,
                to_path=pair.to_node.path,
                from_name=pair.from_node.name,
                to_name=pair.to_node.name,
                confidence=pair.confidence,
            )
        )
    for match in refactors:
        lookup = new_content if match.refactor_type == "extract" else old_content
        changes.append(
            _change(
                "refactor",
                match.source,
                stamp,
                lookup,
                refactor_type=match.refactor_type,
                targets=[t.path for t in match.targets],
                confidence=match.confidence,
            )
        )
    return changes


def _node_ref(node: SchemaNode) -> dict[str, object]:
    return {"kind": node.kind.value, "name": node.name, "path": node.path, "lineNumber": node.line_number}


def diff_to_dict(diff: StructuralDiff) -> dict[str, object]:
    return {
        "added": [_node_ref(n) for n in diff.added],
        "removed": [_node_ref(n) for n in diff.removed],
        "modified": [_node_ref(n) for n in diff.modified],
        "renamed": [
            {
                "from": _node_ref(pair.from_node),
                "to": _node_ref(pair.to_node),
                "confidence": pair.confidence,
                "classification": classify_relocation(pair),
            }
            for pair in diff.renamed
        ],
    }
