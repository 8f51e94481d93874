import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:
    """Start the MCP server."""
    from codoc.mcp.server import create_mcp_server

    server = create_mcp_server()
    if transport == "stdio":
        # stdout carries the protocol; keep status output on stderr
        Console(stderr=True).print(f"[green]Starting MCP server (transport: {transport})[/green]")
        server.run(transport="stdio")
        return
    console.print(f"[green]Starting MCP server (transport: {transport}) on {host}:{port}[/green]")
    server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]
