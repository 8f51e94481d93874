from collections.abc import Iterable
from typing import Any

from codoc.models import INDENT_UNIT, NodeKind, SchemaNode


def render_node_line(node: SchemaNode) -> str:
    """Canonical CoDoc text for a single node, without indentation."""
    match node.kind:
        case NodeKind.DIRECTORY:
            return f"/{node.name}"
        case NodeKind.FILE:
            return node.name
        case NodeKind.FUNCTION:
            return f"${node.name}()"
        case NodeKind.COMPONENT:
            return f"%{node.name}"
        case NodeKind.REFERENCE:
            return f"@{node.name}"
        case NodeKind.NOTE:
            return f"# {node.content if node.content is not None else node.name}"
    return node.name


def render_codoc(forest: Iterable[SchemaNode]) -> str:
    """Serialize a forest to outline text, two spaces per nesting level.

    Nodes with an empty name (synthetic roots) are transparent: their
    children are rendered at the root's own depth.
    """
    lines: list[str] = []

    def _render(node: SchemaNode, depth: int) -> None:
        if not node.name:
            for child in node.children:
                _render(child, depth)
            return
        lines.append(" " * (depth * INDENT_UNIT) + render_node_line(node))
        for child in node.children:
            _render(child, depth + 1)

    for root in forest:
        _render(root, 0)
    return "\n".join(lines) + "\n" if lines else ""


def node_to_dict(node: SchemaNode) -> dict[str, Any]:
    """JSON-friendly view of a node and its subtree (camelCase keys)."""
    data: dict[str, Any] = {
        "kind": node.kind.value,
        "name": node.name,
        "path": node.path,
        "lineNumber": node.line_number,
        "column": node.column,
        "contentHash": node.content_hash,
        "dependencies": list(node.dependencies),
        "dependents": list(node.dependents),
    }
    if node.extension is not None:
        data["extension"] = node.extension
    if node.content is not None:
        data["content"] = node.content
    if node.is_exported is not None:
        data["isExported"] = node.is_exported
    data["children"] = [node_to_dict(c) for c in node.children]
    return data
