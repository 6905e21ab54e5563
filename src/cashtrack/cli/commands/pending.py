"""Pending item review commands."""

from decimal import Decimal

import click

from cashtrack.cli.date_filters import (
    format_amount,
    parse_amount_or_exit,
    parse_instant_or_exit,
    resolve_purge_cutoff,
)
from cashtrack.cli.error_handling import handle_domain_error
from cashtrack.domain.errors import DomainError
from cashtrack.domain.pending import PendingService


@click.group("pending")
def pending_group():
    """Review pending collection items."""
    pass


@pending_group.command("add")
@click.option("--cleaner", required=True, help="Cleaner name")
@click.option("--site", required=True, help="Site name")
@click.option("--plate", required=True, help="Car plate")
@click.option("--amount", required=True, help="Contract cash amount")
@click.option("--date", help="Item date; defaults to now")
@click.pass_context
def add_item(ctx, cleaner: str, site: str, plate: str, amount: str, date: str | None):
    """Add a pending item by hand."""
    service = PendingService(ctx.obj["db"])
    try:
        item_id = service.create_item(
            cleaner_name=cleaner,
            site=site,
            car_plate=plate,
            amount=parse_amount_or_exit(ctx, amount),
            date=parse_instant_or_exit(ctx, date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created pending item {item_id}")


@pending_group.command("edit")
@click.argument("item_id")
@click.option("--cleaner", help="Cleaner name")
@click.option("--site", help="Site name")
@click.option("--plate", help="Car plate")
@click.option("--amount", help="Contract cash amount")
@click.pass_context
def edit_item(
    ctx,
    item_id: str,
    cleaner: str | None,
    site: str | None,
    plate: str | None,
    amount: str | None,
):
    """Edit a pending item. It stays pending."""
    service = PendingService(ctx.obj["db"])
    try:
        service.update_item(
            item_id,
            cleaner_name=cleaner,
            site=site,
            car_plate=plate,
            amount=parse_amount_or_exit(ctx, amount),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated pending item {item_id}")


@pending_group.command("collect")
@click.argument("item_ids", nargs=-1, required=True)
@click.pass_context
def collect_items(ctx, item_ids: tuple[str, ...]):
    """Confirm pending items as collected.

    Each item becomes a collection record and leaves the pending list.
    """
    service = PendingService(ctx.obj["db"])
    for item_id in item_ids:
        try:
            collection_id = service.collect_item(item_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
        click.echo(f"Collected {item_id} as collection {collection_id}")


@pending_group.command("reject")
@click.argument("item_ids", nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reject_items(ctx, item_ids: tuple[str, ...], yes: bool):
    """Reject pending items without recording a collection."""
    service = PendingService(ctx.obj["db"])
    if not yes:
        click.confirm(f"Reject {len(item_ids)} pending item(s)?", abort=True)
    try:
        if len(item_ids) == 1:
            service.reject_item(item_ids[0])
            rejected = 1
        else:
            rejected = service.reject_items(item_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Rejected {rejected} pending item(s)")


@pending_group.command("list")
@click.pass_context
def list_items(ctx):
    """List pending items grouped by cleaner."""
    grouped = PendingService(ctx.obj["db"]).items_by_cleaner()
    if not grouped:
        click.echo("No pending items.")
        return

    for cleaner_name in sorted(grouped):
        items = grouped[cleaner_name]
        total = sum((item.amount for item in items), Decimal("0"))
        click.echo(f"\n{cleaner_name} ({len(items)} item(s), {format_amount(total)})")
        click.echo("-" * 100)
        for item in items:
            click.echo(
                f"  {item.id:<34} {item.date.strftime('%Y-%m-%d'):<12} {item.car_plate[:12]:<12} "
                f"{item.site[:20]:<20} {format_amount(item.amount):>16}"
            )


@pending_group.command("purge")
@click.option("--older-than-days", type=int, help="Delete pending items older than this many days")
@click.option("--all", "purge_all", is_flag=True, help="Delete every pending item")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def purge_items(ctx, older_than_days: int | None, purge_all: bool, yes: bool):
    """Bulk delete old pending items."""
    cutoff = resolve_purge_cutoff(ctx, older_than_days, purge_all)
    if not yes:
        click.confirm("This permanently deletes pending items. Continue?", abort=True)
    try:
        deleted = PendingService(ctx.obj["db"]).purge_items(older_than=cutoff)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Purged {deleted} pending item(s)")


def register_commands(cli):
    """Register pending commands with main CLI."""
    cli.add_command(pending_group)
