"""Command line entry point for the library service."""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.library.runtime.context import get_config

console = Console()

app = typer.Typer(
    help="Library rental service",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command(name="init-db")
def init_db_command() -> None:
    """Create the library tables. Existing tables are kept."""
    from src.library.runtime.init_db import init_db

    init_db()
    console.print("[bold green]Database initialized[/bold green]")


@app.command(name="serve")
def serve(
    host: str | None = typer.Option(None, help="Host to bind; defaults to app.host"),
    port: int | None = typer.Option(None, help="Port to bind; defaults to app.port"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """Start the HTTP API with uvicorn."""
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(
        Panel.fit(
            f"[bold green]Starting Library API on {host}:{port}[/bold green]",
            border_style="green",
        )
    )
    uvicorn.run(
        "src.library.api.http.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        access_log=False,
    )


@app.command(name="show-config")
def show_config() -> None:
    """Print the resolved configuration."""
    config = get_config()
    table = Table(title="Library configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    dumped = config.model_dump(exclude={"database": {"password", "connection_string"}})
    for section, values in dumped.items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))
    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
