"""Expected indentation for the line that follows a given outline line."""

import re

from codoc.core.builder import CodocParser, leading_whitespace
from codoc.models import CONTAINER_KINDS, INDENT_UNIT, SchemaNode, flatten

_FILE_LIKE_RE = re.compile(r"\.\w+$")


def _indent_after(node: SchemaNode, line: str) -> int:
    level = leading_whitespace(line) // INDENT_UNIT
    if node.kind in CONTAINER_KINDS:
        return (level + 1) * INDENT_UNIT
    return level * INDENT_UNIT


def fallback_indent(line: str) -> int:
    """Guess from the text alone: directories and files open a new level."""
    level = leading_whitespace(line) // INDENT_UNIT
    trimmed = line.strip()
    if trimmed.startswith("/") or _FILE_LIKE_RE.search(trimmed):
        return (level + 1) * INDENT_UNIT
    return level * INDENT_UNIT


def expected_indent(content: str, line_number: int, parser: CodocParser | None = None) -> int:
    """Number of spaces the line after ``line_number`` (1-based) should start with.

    Blank target lines defer to the closest non-blank line above them.
    """
    if not content.strip():
        return 0

    lines = content.split("\n")
    target = min(max(line_number, 1), len(lines)) - 1
    while target > 0 and not lines[target].strip():
        target -= 1
    current = lines[target]
    if not current.strip():
        return 0

    result = (parser or CodocParser()).parse("\n".join(lines[: target + 1]))
    if result.has_errors or not result.nodes:
        return fallback_indent(current)

    node = next((n for n in flatten(result.nodes) if n.line_number == target + 1), None)
    if node is None:
        return fallback_indent(current)
    return _indent_after(node, current)
