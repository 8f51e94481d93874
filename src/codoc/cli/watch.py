import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from codoc.cli.output import console, fail, render_diagnostics, render_diff_lines
from codoc.core.formatter import format_diff
from codoc.watcher.tracker import OutlineTracker
from codoc.watcher.watchfiles_adapter import OUTLINE_SUFFIX, WatchfilesOutlineWatcher

logger = logging.getLogger(__name__)


def _initial_outlines(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    return sorted(target.rglob(f"*{OUTLINE_SUFFIX}"))


def watch(
    target: Annotated[Path, typer.Argument(help="Outline file or directory containing .codoc files.")] = Path("."),
    debounce: Annotated[int | None, typer.Option(help="Debounce in milliseconds.")] = None,
) -> None:
    """Re-parse outlines on change and print diagnostics and structural diffs."""
    if not target.exists():
        fail(f"{target} does not exist.")
        raise typer.Exit(1)

    tracker = OutlineTracker()
    for outline in _initial_outlines(target):
        try:
            result = tracker.seed(outline.resolve(), outline.read_text(encoding="utf-8"))
        except OSError as exc:
            logger.warning("Cannot read %s: %s", outline, exc)
            continue
        console.print(f"[green]Tracking[/green] {outline} ({len(result.all_nodes)} nodes)")

    async def _on_change(paths: set[Path]) -> None:
        for path in sorted(paths):
            resolved = path.resolve()
            if not resolved.exists():
                tracker.forget(resolved)
                console.print(f"[yellow]Removed[/yellow] {path}")
                continue
            update = tracker.update(resolved, resolved.read_text(encoding="utf-8"))
            console.rule(str(path))
            render_diff_lines(format_diff(update.diff, update.refactors))
            render_diagnostics(update.result.diagnostics)

    async def _run() -> None:
        watcher = WatchfilesOutlineWatcher(target, _on_change, debounce_ms=debounce)
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    console.print(f"Watching {target} (Ctrl+C to stop)")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
