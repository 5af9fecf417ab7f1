"""unidir users commands - Manage directory users."""

import asyncio

import typer
from rich.console import Console

from unidir.auth.passwords import PasswordHasher
from unidir.config.settings import get_settings
from unidir.core.entities import EntityKind, Role
from unidir.core.errors import StoreError
from unidir.core.validation import schema_validator
from unidir.runtime.context import create_store

app = typer.Typer(help="Manage directory users")
console = Console()


@app.command("hash-password")
def hash_password(
    password: str = typer.Argument(..., help="Plaintext password"),
) -> None:
    """Print the bcrypt hash of a password."""
    hasher = PasswordHasher(rounds=get_settings().auth.bcrypt_rounds)
    console.print(hasher.hash(password))


@app.command("create")
def create_user(
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    email: str = typer.Option(..., "--email", "-e", help="Login email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Login password"
    ),
    role: Role = typer.Option(Role.STUDENT, "--role", "-r", help="User role"),
) -> None:
    """Create a user in the configured PostgreSQL store."""
    settings = get_settings()
    if settings.storage.backend != "postgres":
        console.print("[red]Error:[/red] create needs UNIDIR_STORAGE__BACKEND=postgres")
        raise typer.Exit(code=1)

    result = schema_validator(EntityKind.USER.model)(
        {"name": name, "email": email, "password": password, "role": role.value}
    )
    if not result.ok:
        for error in result.errors:
            console.print(f"[red]Invalid {error.field}:[/red] {error.message}")
        raise typer.Exit(code=1)

    record = dict(result.data)
    record["password"] = PasswordHasher(rounds=settings.auth.bcrypt_rounds).hash(record["password"])

    async def _create() -> int:
        store = create_store(settings)
        try:
            return await store.create(EntityKind.USER, record)
        finally:
            await store.close()

    try:
        user_id = asyncio.run(_create())
    except StoreError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    console.print(f"[green]Created user {email} with id {user_id}[/green]")
