"""unidir CLI main application."""

import typer
from rich.console import Console

from unidir.cli.commands import doctor, users
from unidir.version import __version__

app = typer.Typer(
    name="unidir",
    help="University Directory API CLI",
    add_completion=False,
    no_args_is_help=True,
)

app.add_typer(doctor.app, name="doctor")
app.add_typer(users.app, name="users")

console = Console()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        is_eager=True,
    ),
) -> None:
    """University Directory API.

    Run 'unidir serve' to start the server.
    Run 'unidir doctor' to check a running server.
    """
    if version:
        console.print(f"unidir version {__version__}")
        raise typer.Exit()


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
) -> None:
    """Run the API server."""
    from unidir.runtime.server import run_server

    run_server(host=host, port=port)


if __name__ == "__main__":
    app()
