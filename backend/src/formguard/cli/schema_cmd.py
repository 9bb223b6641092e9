"""Schema CLI commands — check."""

from pathlib import Path

import click

from formguard.schemas.checker import check_schema
from formguard.schemas.loader import SchemaLoadError, load_schema


@click.group()
def schema():
    """Schema commands."""
    pass


@schema.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
def check(schema_path: Path, strict: bool):
    """Check a schema file for shape errors, unknown rules and bad expressions."""
    try:
        document = load_schema(schema_path)
    except SchemaLoadError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    issues = check_schema(document)
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

    click.echo(click.style(f"Schema {schema_path.name} is valid.", fg="green", bold=True))
