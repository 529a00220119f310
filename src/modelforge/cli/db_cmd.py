"""CLI commands for database setup."""

from pathlib import Path

import click

from modelforge.errors import ModelError
from modelforge.persistence.config import DatabaseConfig
from modelforge.persistence.sql import SQLAdapter
from modelforge.schema.loader import SchemaLoader


@click.group()
def db():
    """Database commands."""
    pass


@db.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--url",
    default=None,
    help="Database URL. Defaults to MODELFORGE_DATABASE_URL, then DATABASE_URL.",
)
def init(path: Path, url: str | None):
    """Create a table for every model defined under PATH."""
    config = DatabaseConfig(url) if url else DatabaseConfig.from_env()
    if config.is_memory:
        click.echo(
            "Error: the in-memory store has no tables; pass --url or set "
            "MODELFORGE_DATABASE_URL to a sqlite:// or postgresql:// URL.",
            err=True,
        )
        raise SystemExit(1)
    if not (config.is_sqlite or config.is_postgresql):
        click.echo(f"Error: Unsupported database URL scheme: {config.url}", err=True)
        raise SystemExit(1)

    adapter = SQLAdapter(config.sqlalchemy_url)
    try:
        loader = SchemaLoader(path)
        models = loader.load_all(adapter=adapter)
        if not models:
            click.echo("No models found. Nothing to initialise.")
            return

        click.echo(f"Initialising {len(models)} table(s) at: {config.url}")
        for name in loader.list_models():
            adapter.initialize_model(models[name])
            click.echo(f"  + {name}")
    except ModelError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)
    finally:
        adapter.close()

    click.echo(click.style("Database initialised.", fg="green"))
