"""CLI error handling helpers."""

import click

from cashtrack.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, ValidationError) and error.field:
        click.echo(f"Error: {error} (field: {error.field})", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
