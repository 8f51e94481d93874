"""FastMCP server exposing the CoDoc outline tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP
from pydantic import ValidationError

from codoc.core.builder import CodocParser
from codoc.core.changes import analyze_outline_changes, analyze_snapshot_changes
from codoc.core.formatter import diff_to_dict, format_diff
from codoc.core.indent import expected_indent as _expected_indent
from codoc.core.serialize import node_to_dict, render_codoc
from codoc.core.snapshot import construct_forest
from codoc.models import CodebaseSnapshot


def create_mcp_server() -> FastMCP:
    """Create a FastMCP server with the outline tools registered."""

    mcp = FastMCP("codoc", instructions="Parse CoDoc outlines and classify structural changes between versions.")
    parser = CodocParser()

    @mcp.tool()
    async def parse_outline(text: str) -> dict[str, Any]:
        """Parse CoDoc outline text into a node tree with diagnostics."""
        result = parser.parse(text)
        return {
            "nodes": [node_to_dict(n) for n in result.nodes],
            "diagnostics": result.messages,
        }

    @mcp.tool()
    async def diff_outlines(old_text: str, new_text: str) -> dict[str, Any]:
        """Classify structural changes between two versions of an outline."""
        report = analyze_outline_changes(old_text, new_text)
        return {
            "summary": format_diff(report.diff, report.refactors),
            "diff": diff_to_dict(report.diff),
            "changes": [c.model_dump(mode="json", by_alias=True) for c in report.changes],
            "diagnostics": [str(d) for d in report.new_diagnostics],
        }

    @mcp.tool()
    async def diff_snapshots(before: dict[str, Any], after: dict[str, Any]) -> dict[str, Any]:
        """Classify changes between two codebase analysis snapshots."""
        try:
            report = analyze_snapshot_changes(
                CodebaseSnapshot.model_validate(before),
                CodebaseSnapshot.model_validate(after),
            )
        except ValidationError as exc:
            return {"error": f"Invalid snapshot: {exc}"}
        return {
            "summary": format_diff(report.diff, report.refactors),
            "changes": [c.model_dump(mode="json", by_alias=True) for c in report.changes],
        }

    @mcp.tool()
    async def expected_indent(text: str, line: int) -> int:
        """Spaces the line after LINE (1-based) should be indented with."""
        return _expected_indent(text, line, parser)

    @mcp.tool()
    async def render_snapshot(snapshot: dict[str, Any]) -> str:
        """Render an analysis snapshot as CoDoc outline text."""
        try:
            forest = construct_forest(CodebaseSnapshot.model_validate(snapshot))
        except ValidationError as exc:
            return f"Error: invalid snapshot: {exc}"
        return render_codoc(forest)

    return mcp
