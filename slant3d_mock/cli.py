import click
import uvicorn

from rich.console import Console
from rich.table import Table

from slant3d_mock import __version__
from slant3d_mock.core.config import settings
from slant3d_mock.domain.filaments import get_filaments

console = Console()


@click.group("slant3d-mock", help="Mock Slant3D API development server.")
@click.version_option(__version__, prog_name="slant3d-mock")
def cli():
    pass


@cli.command("serve", help="Run the mock API server.")
@click.option("--host", default=settings.SERVER_HOST, show_default=True)
@click.option("--port", default=settings.SERVER_PORT, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Auto-reload on source changes.")
def serve(host, port, reload):
    console.print(f"[bold green]Mock Slant3D API[/] starting on port {port}")
    console.print(f"  Health check: http://localhost:{port}/health")
    console.print(f"  API info:     http://localhost:{port}/api")
    uvicorn.run(
        "slant3d_mock.main:build_default_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@cli.command("routes", help="List every HTTP route the server exposes.")
def routes():
    from slant3d_mock.main import create_app

    table = Table(title="Routes")
    table.add_column("Method", style="cyan")
    table.add_column("Path", no_wrap=True)
    table.add_column("Name", style="dim")

    for path, operations in create_app().openapi()["paths"].items():
        for method, operation in operations.items():
            table.add_row(method.upper(), path, operation.get("operationId", ""))

    console.print(table)


@cli.command("filaments", help="Print the filament catalogue.")
def filaments():
    table = Table(title="Filaments")
    table.add_column("Filament")
    table.add_column("Profile", style="cyan")
    table.add_column("Hex")
    table.add_column("Tag", style="dim")

    for entry in get_filaments():
        table.add_row(entry["filament"], entry["profile"], f"#{entry['hexColor']}", entry["colorTag"])

    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
