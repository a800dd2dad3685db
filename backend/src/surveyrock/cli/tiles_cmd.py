"""Tile CLI commands: sql and validate."""

import json
from pathlib import Path

import click

from surveyrock.tiles.builder import EditorState, build_configuration, build_tile_payload
from surveyrock.tiles.loader import TileDefinitionError, TileDefinitionLoader
from surveyrock.tiles.validation import validate_tile


def _load(path: Path) -> tuple[TileDefinitionLoader, EditorState]:
    loader = TileDefinitionLoader(path)
    try:
        state = loader.load()
    except TileDefinitionError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    for field_id in loader.rejected_measures:
        message = f"Warning: '{field_id}' is not numeric and was not added as a measure"
        click.echo(click.style(message, fg="yellow"), err=True)
    return loader, state


@click.group()
def tiles():
    """Tile definition commands."""
    pass


@tiles.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "show_config", is_flag=True, default=False, help="Also print the tile configuration JSON.")
def sql(path: Path, show_config: bool):
    """Print the SQL synthesized for a tile definition."""
    _, state = _load(path)

    query = state.selection.to_sql()
    if query:
        click.echo(query)
    else:
        click.echo("No SQL: select at least one dimension and one measure.", err=True)

    if show_config:
        click.echo(json.dumps(build_configuration(state).to_dict(), indent=2))


@tiles.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dashboard", "dashboard_id", default="", help="Dashboard id to include in the printed payload.")
@click.option("--payload", "show_payload", is_flag=True, default=False, help="Print the tile payload when valid.")
def validate(path: Path, dashboard_id: str, show_payload: bool):
    """Run the save gate against a tile definition."""
    _, state = _load(path)

    error = validate_tile(state)
    if error:
        click.echo(click.style(f"✗ {error.message} ({error.code})", fg="red"))
        raise SystemExit(1)

    click.echo(click.style(f"✓ '{state.title}' is valid ({state.kind.value})", fg="green"))
    if show_payload:
        click.echo(json.dumps(build_tile_payload(state, dashboard_id), indent=2))
