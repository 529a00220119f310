"""CLI commands for YAML model definitions."""

from pathlib import Path

import click

from modelforge.core.types import UNSET
from modelforge.errors import SchemaError
from modelforge.schema.loader import SchemaLoader
from modelforge.schema.validator import validate_schema_dir, validate_schema_file


def _load(path: Path) -> SchemaLoader:
    loader = SchemaLoader(path)
    try:
        loader.load_all()
    except SchemaError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


@click.group()
def schema():
    """Model definition commands."""
    pass


@schema.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
def validate(path: Path, strict: bool):
    """Validate a model YAML file or a directory of them."""
    if path.is_dir():
        issues = validate_schema_dir(path, strict=strict)
    else:
        issues = validate_schema_file(path)
        if strict:
            for issue in issues:
                issue.severity = "error"

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    loader = _load(path)
    names = loader.list_models()
    click.echo(f"\nLoaded {len(names)} model(s):")
    for name in names:
        model = loader.get_model(name)
        click.echo(
            f"  ✓ {name} ({len(model.schema)} attributes, primary key: {model.primary_key})"
        )

    click.echo(click.style("\nAll model definitions are valid.", fg="green", bold=True))


@schema.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def show(path: Path):
    """Print the attributes and validators of each model."""
    loader = _load(path)
    for name in loader.list_models():
        model = loader.get_model(name)
        click.echo(click.style(name, bold=True))
        for descriptor in model.schema.values():
            line = f"  {descriptor.name:<16} {descriptor.type.value:<8}"
            if descriptor.primary_key:
                line += " primary key"
            if descriptor.default is not UNSET:
                line += f" default={descriptor.default!r}"
            elif descriptor.default_factory is not None:
                line += f" default={descriptor.initial_value()!r}"
            click.echo(line)
        click.echo(f"  ({len(model.validators)} validator(s))")
