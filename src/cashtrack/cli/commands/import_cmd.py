"""Pending list import command."""

import click

from cashtrack.cli.error_handling import handle_domain_error
from cashtrack.domain.errors import DomainError
from cashtrack.domain.pending_import import PendingImportService


@click.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_pending(ctx, source):
    """Import pending items from pasted spreadsheet text.

    SOURCE is a file, or '-' to read from standard input. The first row must
    name the Plate, Contract Amount Cash, Cleaner Name and Site Name columns;
    cells may be separated by tabs or commas.
    """
    service = PendingImportService(ctx.obj["db"])

    try:
        result = service.import_text(source.read())
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nImport complete:")
    click.echo(f"  Imported: {result['imported']} pending items")
    if result["errors"]:
        click.echo(f"  Errors: {len(result['errors'])}")
        for error in result["errors"]:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_pending)
