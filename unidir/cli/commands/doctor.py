"""unidir doctor command - System check."""

import httpx
import typer
from rich.console import Console
from rich.table import Table

from unidir.config.settings import get_settings
from unidir.version import __version__

app = typer.Typer(help="Check directory API status")
console = Console()


def check_server(url: str) -> tuple[bool, str]:
    """Check if the server is accessible.

    Args:
        url: Server base URL

    Returns:
        Tuple of (success, message)
    """
    try:
        response = httpx.get(f"{url}/health", timeout=5.0)
        if response.status_code == 200:
            data = response.json()
            return True, f"v{data['version']}"
        return False, f"HTTP {response.status_code}"
    except httpx.ConnectError:
        return False, "Connection refused"
    except httpx.TimeoutException:
        return False, "Timeout"
    except httpx.HTTPError as e:
        return False, str(e)


@app.callback(invoke_without_command=True)
def doctor(
    ctx: typer.Context,
    url: str = typer.Option(
        None,
        "--url",
        "-u",
        help="Server URL to check",
    ),
) -> None:
    """Check directory API status.

    Verifies that the server answers its health check and reports the
    active configuration.
    """
    settings = get_settings()
    url = url or f"http://{settings.runtime.host}:{settings.runtime.port}"

    console.print()
    console.print("[bold]unidir doctor - System Check[/bold]")
    console.print("=" * 40)
    console.print()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Check", style="cyan")
    table.add_column("Value")
    table.add_column("Status")

    server_ok, server_msg = check_server(url)
    table.add_row(
        "Server:",
        f"{url} ({server_msg})",
        "[green][OK][/green]" if server_ok else "[red][FAIL][/red]",
    )
    table.add_row("CLI Version:", __version__, "[green][OK][/green]")
    table.add_row("Environment:", settings.env.value, "[green][OK][/green]")
    table.add_row("Storage:", settings.storage.backend, "[green][OK][/green]")
    table.add_row(
        "Protected:",
        ", ".join(settings.auth.protected_entities) or "none",
        "[green][OK][/green]" if settings.auth.protected_entities else "[yellow][OPEN][/yellow]",
    )

    console.print(table)
    console.print()

    if server_ok:
        console.print("[green]All checks passed.[/green]")
    else:
        console.print("[yellow]Server unreachable. Run 'unidir serve' to start it.[/yellow]")
        raise typer.Exit(code=1)
