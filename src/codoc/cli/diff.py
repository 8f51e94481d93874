import json
from pathlib import Path
from typing import Annotated

import typer

from codoc.cli.output import console, fail, render_diagnostics, render_diff_lines
from codoc.cli.parse import read_outline
from codoc.core.changes import OutlineChangeReport, analyze_outline_changes, analyze_snapshot_changes
from codoc.core.errors import SnapshotError
from codoc.core.formatter import format_diff
from codoc.core.serialize import render_codoc
from codoc.core.snapshot import construct_forest, load_snapshot


def _compare(old: Path, new: Path, from_snapshots: bool) -> OutlineChangeReport:
    if not from_snapshots:
        return analyze_outline_changes(read_outline(old), read_outline(new))
    try:
        return analyze_snapshot_changes(load_snapshot(old), load_snapshot(new))
    except SnapshotError as exc:
        fail(str(exc))
        raise typer.Exit(1) from None


def diff(
    old: Annotated[Path, typer.Argument(help="Earlier outline (or snapshot with --snapshot).")],
    new: Annotated[Path, typer.Argument(help="Later outline (or snapshot with --snapshot).")],
    from_snapshots: Annotated[
        bool, typer.Option("--snapshot", help="Treat inputs as analysis snapshot JSON files.")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the change list as JSON.")] = False,
    exit_code: Annotated[bool, typer.Option(help="Exit with status 1 when there are changes.")] = False,
) -> None:
    """Show the structural changes between two versions."""
    report = _compare(old, new, from_snapshots)

    if as_json:
        payload = [c.model_dump(mode="json", by_alias=True) for c in report.changes]
        console.print_json(json.dumps(payload))
    else:
        render_diff_lines(format_diff(report.diff, report.refactors))
        render_diagnostics(report.new_diagnostics)

    if exit_code and not report.diff.is_empty():
        raise typer.Exit(1)


def snapshot(
    path: Annotated[Path, typer.Argument(help="Analysis snapshot JSON file.")],
) -> None:
    """Render the outline described by an analysis snapshot."""
    try:
        forest = construct_forest(load_snapshot(path))
    except SnapshotError as exc:
        fail(str(exc))
        raise typer.Exit(1) from None
    console.print(render_codoc(forest), end="", highlight=False, markup=False, soft_wrap=True)
