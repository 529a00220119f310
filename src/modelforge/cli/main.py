"""modelforge CLI entry point."""

import logging
import os

import click

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--log-level",
    default=lambda: os.environ.get("MODELFORGE_LOG_LEVEL", "WARNING"),
    show_default="WARNING",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (env: MODELFORGE_LOG_LEVEL).",
)
def cli(log_level: str):
    """modelforge: model definitions, validation and persistence."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from modelforge.cli.db_cmd import db  # noqa: E402
from modelforge.cli.schema_cmd import schema  # noqa: E402

cli.add_command(schema)
cli.add_command(db)
