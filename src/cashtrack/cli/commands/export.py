"""Collection CSV export command."""

from pathlib import Path

import click

from cashtrack.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from cashtrack.cli.error_handling import handle_domain_error
from cashtrack.domain.csv_export import CollectionExportService
from cashtrack.domain.errors import DomainError
from cashtrack.utils.date_parser import get_date_range


@click.command("export")
@period_options
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    show_default=True,
    help="Directory to write the CSV file into",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the CSV instead of writing a file")
@click.pass_context
def export_collections(
    ctx, start_date: str | None, end_date: str | None, output_dir: str, to_stdout: bool, **periods
):
    """Export collections in a date range to CSV.

    Defaults to the current month.

    Examples:
        cashtrack export --last-month
        cashtrack export --start-date 2024-01-01 --end-date 2024-01-31
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(periods),
        default_range=get_date_range("this-month"),
    )
    if start is None or end is None:
        click.echo("Error: Both --start-date and --end-date are required.", err=True)
        ctx.exit(1)

    try:
        filename, text = CollectionExportService(ctx.obj["db"]).export_collections(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if to_stdout:
        click.echo(text, nl=False)
        return

    path = Path(output_dir) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    click.echo(f"Exported collections to {path}")


def register_commands(cli):
    """Register export command with main CLI."""
    cli.add_command(export_collections)
