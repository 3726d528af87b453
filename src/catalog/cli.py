"""Command line interface for running and inspecting the catalog service."""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from catalog.core.services.database import DbSessionService
from catalog.entities.product import ProductRepository
from catalog.runtime.context import get_config
from catalog.runtime.init_db import init_db

console = Console()

app = typer.Typer(
    help="Product catalog service",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Host to bind to (default from config)"),
    port: int | None = typer.Option(None, help="Port to bind to (default from config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """Start the HTTP server. The schema is created during startup."""
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port
    console.print(
        Panel.fit(
            f"[bold green]Serving product catalog on {host}:{port}[/bold green]",
            border_style="green",
        )
    )
    uvicorn.run(
        "catalog.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        access_log=False,
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the Product table if it is missing."""
    init_db()
    console.print(f"[green]Schema ready[/green] at {get_config().database.url}")


@app.command()
def products() -> None:
    """List the stored products."""
    config = get_config()
    database_service = DbSessionService(config.database, config.app.environment)
    try:
        with database_service.session_scope() as session:
            stored = ProductRepository(session).list_all()
    finally:
        database_service.dispose()

    table = Table(title="Products")
    table.add_column("Id", justify="right")
    table.add_column("Name")
    table.add_column("Unit price", justify="right")
    table.add_column("Currency")
    for product in stored:
        table.add_row(
            str(product.id),
            product.name,
            str(product.unit_price.value),
            product.unit_price.currency.symbol,
        )
    console.print(table)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
