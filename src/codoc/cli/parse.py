import json
from pathlib import Path
from typing import Annotated

import typer

from codoc.cli.output import console, fail, render_diagnostics, render_forest
from codoc.core.builder import parse_codoc
from codoc.core.indent import expected_indent
from codoc.core.serialize import node_to_dict, render_codoc


def read_outline(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        fail(f"Cannot read {path}: {exc.strerror or exc}")
        raise typer.Exit(1) from None
    except UnicodeDecodeError as exc:
        fail(f"Cannot read {path}: not valid UTF-8 ({exc.reason} at byte {exc.start})")
        raise typer.Exit(1) from None


def parse(
    path: Annotated[Path, typer.Argument(help="Path to a .codoc outline.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the node tree as JSON.")] = False,
    normalize: Annotated[bool, typer.Option(help="Print the outline re-rendered in canonical form.")] = False,
    strict: Annotated[bool, typer.Option(help="Exit with status 1 when any line failed to parse.")] = False,
) -> None:
    """Parse an outline and show its node tree and diagnostics."""
    result = parse_codoc(read_outline(path))

    if as_json:
        payload = {
            "nodes": [node_to_dict(n) for n in result.nodes],
            "diagnostics": result.messages,
        }
        console.print_json(json.dumps(payload))
    elif normalize:
        console.print(render_codoc(result.nodes), end="", highlight=False, markup=False, soft_wrap=True)
    else:
        render_forest(result.nodes, str(path))
        console.print(f"({len(result.all_nodes)} nodes, {len(result.diagnostics)} diagnostics)")

    render_diagnostics(result.diagnostics)
    if strict and result.has_errors:
        raise typer.Exit(1)


def indent(
    path: Annotated[Path, typer.Argument(help="Path to a .codoc outline.")],
    line: Annotated[int, typer.Argument(help="1-based line the cursor is on.")],
) -> None:
    """Print the indentation (in spaces) expected on the line after LINE."""
    if line < 1:
        fail("LINE must be 1 or greater.")
        raise typer.Exit(1)
    console.print(expected_indent(read_outline(path), line))
