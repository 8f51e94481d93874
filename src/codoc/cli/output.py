from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from codoc.core.serialize import render_node_line
from codoc.models import Diagnostic, SchemaNode

console = Console()
err_console = Console(stderr=True)

_DIFF_STYLES = {"+": "green", "-": "red", "~": "yellow", "→": "cyan", "*": "magenta"}
_SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "blue"}


def render_forest(nodes: Sequence[SchemaNode], title: str) -> None:
    tree = Tree(f"[bold]{escape(title)}[/bold]")

    def _add(branch: Tree, node: SchemaNode) -> None:
        child = branch.add(f"{escape(render_node_line(node))}  [dim]{escape(node.path)}[/dim]", highlight=False)
        for sub in node.children:
            _add(child, sub)

    for node in nodes:
        _add(tree, node)
    console.print(tree)


def render_diagnostics(diagnostics: Sequence[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        style = _SEVERITY_STYLES.get(diagnostic.severity, "white")
        err_console.print(f"[{style}]{diagnostic.severity}[/{style}] {escape(str(diagnostic))}", highlight=False)


def render_diff_lines(lines: Sequence[str]) -> None:
    if not lines:
        console.print("[green]No structural changes.[/green]")
        return
    for line in lines:
        style = _DIFF_STYLES.get(line[:1], "white")
        console.print(f"[{style}]{escape(line)}[/{style}]", highlight=False)


def fail(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]", highlight=False, soft_wrap=True)
