"""User CLI commands."""

from pathlib import Path

import click

from surveyrock.auth.password import PasswordService
from surveyrock.auth.store import DuplicateEmailError, UserStore
from surveyrock.persistence import DatabaseConfig


def _resolve_base_path() -> Path:
    cwd = Path.cwd()
    return cwd.parent if cwd.name == "backend" else cwd


@click.group()
def users():
    """User management commands."""
    pass


@users.command()
@click.option("--email", required=True, help="Login email.")
@click.option("--name", required=True, help="Display name.")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option(
    "--role",
    type=click.Choice(["readonly", "user", "admin"]),
    default="user",
    show_default=True,
)
def create(email: str, name: str, password: str, role: str):
    """Create a user in the application database."""
    problem = PasswordService.check_strength(password)
    if problem:
        click.echo(f"Error: {problem}", err=True)
        raise SystemExit(1)

    db_config = DatabaseConfig.from_env(_resolve_base_path())
    sqlite_path = db_config.sqlite_path
    if sqlite_path:
        sqlite_path.parent.mkdir(parents=True, exist_ok=True)

    store = UserStore(db_config.url)
    try:
        user = store.create(email, name, PasswordService().hash(password), role=role)
    except DuplicateEmailError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        store.close()

    click.echo(f"Created {user.role} user {user.email} ({user.id})")
