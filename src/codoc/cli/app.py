from typing import Annotated

import typer

from codoc.cli.diff import diff, snapshot
from codoc.cli.parse import indent, parse
from codoc.cli.serve import serve_app
from codoc.cli.watch import watch
from codoc.config import configure_logging

app = typer.Typer(
    name="codoc",
    help="CoDoc CLI: parse outlines and diff codebase structure.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def main_callback(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (defaults to $CODOC_LOG_LEVEL or WARNING)."),
    ] = None,
) -> None:
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from None


app.command("parse")(parse)
app.command("indent")(indent)
app.command("diff")(diff)
app.command("snapshot")(snapshot)
app.command("watch")(watch)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
