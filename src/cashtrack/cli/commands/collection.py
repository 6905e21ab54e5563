"""Collection management commands."""

import click

from cashtrack.cli.date_filters import (
    format_amount,
    parse_amount_or_exit,
    parse_instant_or_exit,
    period_flags,
    period_options,
    resolve_cli_date_range,
    resolve_purge_cutoff,
)
from cashtrack.cli.error_handling import handle_domain_error
from cashtrack.domain.collection import CollectionService
from cashtrack.domain.errors import DomainError


@click.group("collection")
def collection_group():
    """Manage cash collections."""
    pass


@collection_group.command("add")
@click.option("--cleaner", required=True, help="Cleaner name")
@click.option("--site", required=True, help="Site name")
@click.option("--amount", required=True, help="Amount collected (e.g., 250 or 'AED 250.00')")
@click.option("--date", help="Collection date (YYYY-MM-DD, ISO instant, or 'today'); defaults to now")
@click.option("--notes", help="Notes")
@click.pass_context
def add_collection(ctx, cleaner: str, site: str, amount: str, date: str | None, notes: str | None):
    """Record a cash collection.

    Examples:
        cashtrack collection add --cleaner "Ali" --site "Tower A" --amount 250
    """
    service = CollectionService(ctx.obj["db"])
    collected_at = parse_instant_or_exit(ctx, date)
    collected = parse_amount_or_exit(ctx, amount)

    try:
        collection_id = service.create_collection(
            cleaner_name=cleaner, site=site, amount=collected, date=collected_at, notes=notes
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created collection {collection_id}")
    click.echo(f"  Cleaner: {cleaner}")
    click.echo(f"  Site: {site}")
    click.echo(f"  Amount: {format_amount(collected)}")


@collection_group.command("edit")
@click.argument("collection_id")
@click.option("--cleaner", help="Cleaner name")
@click.option("--site", help="Site name")
@click.option("--amount", help="Amount collected")
@click.option("--date", help="Collection date")
@click.option("--notes", help="Notes (empty string to clear)")
@click.pass_context
def edit_collection(
    ctx,
    collection_id: str,
    cleaner: str | None,
    site: str | None,
    amount: str | None,
    date: str | None,
    notes: str | None,
):
    """Update a collection. Only the given fields change."""
    service = CollectionService(ctx.obj["db"])
    try:
        service.update_collection(
            collection_id,
            cleaner_name=cleaner,
            site=site,
            amount=parse_amount_or_exit(ctx, amount),
            date=parse_instant_or_exit(ctx, date),
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated collection {collection_id}")


@collection_group.command("delete")
@click.argument("collection_ids", nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_collections(ctx, collection_ids: tuple[str, ...], yes: bool):
    """Delete one or more collections (all or nothing)."""
    service = CollectionService(ctx.obj["db"])
    if not yes:
        click.confirm(f"Delete {len(collection_ids)} collection(s)?", abort=True)
    try:
        if len(collection_ids) == 1:
            service.delete_collection(collection_ids[0])
            deleted = 1
        else:
            deleted = service.delete_collections(collection_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {deleted} collection(s)")


@collection_group.command("list")
@period_options
@click.pass_context
def list_collections(ctx, start_date: str | None, end_date: str | None, **periods):
    """List collections, newest first."""
    service = CollectionService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags(periods)
    )
    try:
        collections = service.list_collections(start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not collections:
        click.echo("No collections found.")
        return

    click.echo(f"\nFound {len(collections)} collection(s):")
    click.echo("-" * 110)
    click.echo(f"{'ID':<34} {'Date':<12} {'Cleaner':<20} {'Site':<20} {'Amount':>18}")
    click.echo("-" * 110)
    for record in collections:
        click.echo(
            f"{record.id:<34} {record.date.strftime('%Y-%m-%d'):<12} {record.cleaner_name[:20]:<20} "
            f"{record.site[:20]:<20} {format_amount(record.amount):>18}"
        )
        if record.notes:
            click.echo(f"{'':<34} Notes: {record.notes}")


@collection_group.command("purge")
@click.option("--older-than-days", type=int, help="Delete collections older than this many days")
@click.option("--all", "purge_all", is_flag=True, help="Delete every collection")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def purge_collections(ctx, older_than_days: int | None, purge_all: bool, yes: bool):
    """Bulk delete old collections to free up space."""
    cutoff = resolve_purge_cutoff(ctx, older_than_days, purge_all)
    if not yes:
        click.confirm("This permanently deletes collections. Continue?", abort=True)
    try:
        deleted = CollectionService(ctx.obj["db"]).purge_collections(older_than=cutoff)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Purged {deleted} collection(s)")


def register_commands(cli):
    """Register collection commands with main CLI."""
    cli.add_command(collection_group)
