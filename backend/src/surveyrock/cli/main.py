"""SurveyRock CLI entry point."""

import click


@click.group()
def cli():
    """SurveyRock: dashboard tile tooling."""
    pass


# Register subcommand groups
from surveyrock.cli.tiles_cmd import tiles  # noqa: E402
from surveyrock.cli.users_cmd import users  # noqa: E402

cli.add_command(tiles)
cli.add_command(users)
