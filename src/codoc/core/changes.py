"""Change analysis between two versions of an outline or a codebase."""

from dataclasses import dataclass, field
from datetime import datetime

from codoc.core.builder import CodocParser, leading_whitespace
from codoc.core.diff import StructuralDiffEngine
from codoc.core.formatter import to_ai_changes
from codoc.core.snapshot import construct_forest
from codoc.models import AIChange, CodebaseSnapshot, Diagnostic, RefactorMatch, SchemaNode, StructuralDiff


@dataclass
class OutlineChangeReport:
    diff: StructuralDiff
    refactors: list[RefactorMatch]
    changes: list[AIChange]
    old_diagnostics: list[Diagnostic] = field(default_factory=list)
    new_diagnostics: list[Diagnostic] = field(default_factory=list)


def extract_node_block(node: SchemaNode, lines: list[str]) -> str:
    """The node's source line plus every following line indented deeper."""
    index = node.line_number - 1
    if index < 0 or index >= len(lines):
        return ""
    if not node.children:
        return lines[index]

    end = index
    for i in range(index + 1, len(lines)):
        line = lines[i]
        if not line.strip():
            continue
        if leading_whitespace(line) <= node.column:
            break
        end = i
    return "\n".join(lines[index : end + 1])


def analyze_outline_changes(
    old_text: str,
    new_text: str,
    timestamp: datetime | None = None,
) -> OutlineChangeReport:
    parser = CodocParser()
    engine = StructuralDiffEngine()
    old = parser.parse(old_text)
    new = parser.parse(new_text)

    diff = engine.compare(old.nodes, new.nodes)
    refactors = engine.detect_refactors(diff)
    old_lines = old_text.split("\n")
    new_lines = new_text.split("\n")
    changes = to_ai_changes(
        diff,
        refactors,
        timestamp=timestamp,
        new_content=lambda n: extract_node_block(n, new_lines),
        old_content=lambda n: extract_node_block(n, old_lines),
    )
    return OutlineChangeReport(
        diff=diff,
        refactors=refactors,
        changes=changes,
        old_diagnostics=old.diagnostics,
        new_diagnostics=new.diagnostics,
    )


def analyze_snapshot_changes(
    before: CodebaseSnapshot,
    after: CodebaseSnapshot,
    timestamp: datetime | None = None,
) -> OutlineChangeReport:
    """Compare a pre-generation snapshot with a post-generation one."""
    engine = StructuralDiffEngine()
    diff = engine.compare(construct_forest(before), construct_forest(after))
    refactors = engine.detect_refactors(diff)
    return OutlineChangeReport(
        diff=diff,
        refactors=refactors,
        changes=to_ai_changes(diff, refactors, timestamp=timestamp),
    )
