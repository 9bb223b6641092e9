"""formguard CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """formguard — declarative form validation CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
from formguard.cli.schema_cmd import schema  # noqa: E402
from formguard.cli.validate_cmd import validate  # noqa: E402

cli.add_command(schema)
cli.add_command(validate)
