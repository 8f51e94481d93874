from codoc.core.builder import CodocParser, compute_content_hash, parse_codoc
from codoc.core.changes import (
    OutlineChangeReport,
    analyze_outline_changes,
    analyze_snapshot_changes,
)
from codoc.core.diff import (
    StructuralDiffEngine,
    classify_relocation,
    comparable_hash,
    compare_forests,
    detect_refactors,
)
from codoc.core.errors import (
    CodocError,
    CodocSyntaxError,
    IncompleteInputError,
    LexError,
    ParseError,
    SnapshotError,
)
from codoc.core.formatter import diff_to_dict, format_diff, to_ai_changes
from codoc.core.indent import expected_indent
from codoc.core.serialize import node_to_dict, render_codoc, render_node_line
from codoc.core.snapshot import construct_forest, load_snapshot

__all__ = [
    "CodocError",
    "CodocParser",
    "CodocSyntaxError",
    "IncompleteInputError",
    "LexError",
    "OutlineChangeReport",
    "ParseError",
    "SnapshotError",
    "StructuralDiffEngine",
    "analyze_outline_changes",
    "analyze_snapshot_changes",
    "classify_relocation",
    "comparable_hash",
    "compare_forests",
    "compute_content_hash",
    "construct_forest",
    "detect_refactors",
    "diff_to_dict",
    "expected_indent",
    "format_diff",
    "load_snapshot",
    "node_to_dict",
    "parse_codoc",
    "render_codoc",
    "render_node_line",
    "to_ai_changes",
]
