"""Record validation command."""

import json
from pathlib import Path

import click

from formguard.engine import Validator
from formguard.rules import InvalidPatternError
from formguard.schemas.loader import SchemaLoadError, load_document, load_schema


@click.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("record_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--locale", "-l", default=None, help="Message locale (default: FORMGUARD_DEFAULT_LOCALE or 'en').")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
def validate(schema_path: Path, record_path: Path, locale: str | None, as_json: bool):
    """Validate a JSON/YAML record file against a schema file."""
    try:
        schema = load_schema(schema_path)
        record = load_document(record_path)
        validator = Validator(schema)
    except (SchemaLoadError, InvalidPatternError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    if not isinstance(record, dict):
        click.echo(click.style(f"Error: Record in {record_path} must be a mapping", fg="red"), err=True)
        raise SystemExit(1)

    result = validator.validate(record, locale)

    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        for field_name, messages in result.errors.items():
            for message in messages:
                click.echo(click.style(f"  ✗ {field_name}: {message}", fg="red"))

        if result.valid:
            click.echo(click.style("Record is valid.", fg="green", bold=True))
        else:
            error_count = sum(len(m) for m in result.errors.values())
            click.echo(
                click.style(
                    f"\n{error_count} error(s) in {len(result.errors)} field(s)"
                    + (f", {len(result.cross_errors)} cross-field" if result.cross_errors else ""),
                    fg="red",
                    bold=True,
                )
            )

    if not result.valid:
        raise SystemExit(1)
