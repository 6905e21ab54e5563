"""Bank deposit commands."""

from pathlib import Path

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
from cashtrack.database.slip_store import file_to_data_uri
from cashtrack.domain.balance import BalanceService
from cashtrack.domain.deposit import DepositService
from cashtrack.domain.errors import DomainError


def _slip_uri_or_exit(ctx, slip: str | None) -> str | None:
    if slip is None:
        return None
    try:
        return file_to_data_uri(Path(slip))
    except OSError as e:
        click.echo(f"Error: Could not read deposit slip: {e}", err=True)
        ctx.exit(1)


@click.group("deposit")
def deposit_group():
    """Manage bank deposits."""
    pass


@deposit_group.command("add")
@click.option("--cleaner", required=True, help="Cleaner name")
@click.option("--site", required=True, help="Site name")
@click.option("--cash", help="Cash amount deposited")
@click.option("--card", help="Card amount deposited")
@click.option("--auth-code", help="Card authorization code")
@click.option("--date", help="Deposit date; defaults to now")
@click.option("--slip", type=click.Path(exists=True, dir_okay=False), help="Deposit slip image")
@click.pass_context
def add_deposit(
    ctx,
    cleaner: str,
    site: str,
    cash: str | None,
    card: str | None,
    auth_code: str | None,
    date: str | None,
    slip: str | None,
):
    """Record a bank deposit against a cleaner's cash in hand.

    Examples:
        cashtrack deposit add --cleaner "Ali" --site "Tower A" --cash 400 --card 100
        cashtrack deposit add --cleaner "Ali" --site "Tower A" --cash 400 --slip slip.jpg
    """
    db = ctx.obj["db"]
    service = DepositService(db, ctx.obj.get("slip_store"))
    cash_amount = parse_amount_or_exit(ctx, cash, "cash amount")
    card_amount = parse_amount_or_exit(ctx, card, "card amount")
    deposited_at = parse_instant_or_exit(ctx, date)
    slip_uri = _slip_uri_or_exit(ctx, slip)

    in_hand = BalanceService(db).cash_in_hand_for(cleaner)
    try:
        deposit_id = service.create_deposit(
            cleaner_name=cleaner,
            site=site,
            cash_amount=cash_amount,
            card_amount=card_amount,
            date=deposited_at,
            auth_code=auth_code,
            slip_data_uri=slip_uri,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    deposit = service.require_deposit(deposit_id)
    click.echo(f"Created deposit {deposit_id}")
    click.echo(f"  Cash in hand before: {format_amount(in_hand)}")
    click.echo(f"  Total deposited: {format_amount(deposit.total_amount)}")
    if deposit.deposit_slip:
        click.echo(f"  Slip: {deposit.deposit_slip}")


@deposit_group.command("edit")
@click.argument("deposit_id")
@click.option("--cleaner", help="Cleaner name")
@click.option("--site", help="Site name")
@click.option("--cash", help="Cash amount deposited")
@click.option("--card", help="Card amount deposited")
@click.option("--auth-code", help="Card authorization code (empty string to clear)")
@click.option("--date", help="Deposit date")
@click.option("--slip", type=click.Path(exists=True, dir_okay=False), help="Replace the deposit slip")
@click.option("--clear-slip", is_flag=True, help="Remove the deposit slip")
@click.pass_context
def edit_deposit(
    ctx,
    deposit_id: str,
    cleaner: str | None,
    site: str | None,
    cash: str | None,
    card: str | None,
    auth_code: str | None,
    date: str | None,
    slip: str | None,
    clear_slip: bool,
):
    """Update a deposit. The total is recomputed from cash and card."""
    db = ctx.obj["db"]
    service = DepositService(db, ctx.obj.get("slip_store"))
    try:
        service.update_deposit(
            deposit_id,
            cleaner_name=cleaner,
            site=site,
            cash_amount=parse_amount_or_exit(ctx, cash, "cash amount"),
            card_amount=parse_amount_or_exit(ctx, card, "card amount"),
            date=parse_instant_or_exit(ctx, date),
            auth_code=auth_code,
            slip_data_uri=_slip_uri_or_exit(ctx, slip),
            clear_slip=clear_slip,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    updated = service.require_deposit(deposit_id)
    in_hand = BalanceService(db).cash_in_hand_for(updated.cleaner_name, editing_deposit=updated)
    click.echo(f"Updated deposit {deposit_id}")
    click.echo(f"  Cash in hand before this deposit: {format_amount(in_hand)}")
    click.echo(f"  Total deposited: {format_amount(updated.total_amount)}")


@deposit_group.command("delete")
@click.argument("deposit_ids", nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_deposits(ctx, deposit_ids: tuple[str, ...], yes: bool):
    """Delete one or more deposits and their slips."""
    service = DepositService(ctx.obj["db"], ctx.obj.get("slip_store"))
    if not yes:
        click.confirm(f"Delete {len(deposit_ids)} deposit(s)?", abort=True)
    try:
        if len(deposit_ids) == 1:
            service.delete_deposit(deposit_ids[0])
            deleted = 1
        else:
            deleted = service.delete_deposits(deposit_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {deleted} deposit(s)")


@deposit_group.command("list")
@period_options
@click.pass_context
def list_deposits(ctx, start_date: str | None, end_date: str | None, **periods):
    """List deposits, newest first."""
    service = DepositService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags(periods)
    )
    try:
        deposits = service.list_deposits(start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not deposits:
        click.echo("No deposits found.")
        return

    click.echo(f"\nFound {len(deposits)} deposit(s):")
    click.echo("-" * 120)
    click.echo(
        f"{'ID':<34} {'Date':<12} {'Cleaner':<20} {'Cash':>14} {'Card':>14} {'Total':>16} Slip"
    )
    click.echo("-" * 120)
    for deposit in deposits:
        click.echo(
            f"{deposit.id:<34} {deposit.date.strftime('%Y-%m-%d'):<12} {deposit.cleaner_name[:20]:<20} "
            f"{deposit.cash_amount:>14,.2f} {deposit.card_amount:>14,.2f} "
            f"{format_amount(deposit.total_amount):>16} {'yes' if deposit.deposit_slip else '-'}"
        )


@deposit_group.command("balance")
@click.argument("cleaner")
@click.pass_context
def show_balance(ctx, cleaner: str):
    """Show a cleaner's current cash in hand."""
    in_hand = BalanceService(ctx.obj["db"]).cash_in_hand_for(cleaner)
    click.echo(f"{cleaner}: {format_amount(in_hand)} in hand")


@deposit_group.command("purge")
@click.option("--older-than-days", type=int, help="Delete deposits older than this many days")
@click.option("--all", "purge_all", is_flag=True, help="Delete every deposit")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def purge_deposits(ctx, older_than_days: int | None, purge_all: bool, yes: bool):
    """Bulk delete old deposits and their slips."""
    cutoff = resolve_purge_cutoff(ctx, older_than_days, purge_all)
    if not yes:
        click.confirm("This permanently deletes deposits and their slips. Continue?", abort=True)
    service = DepositService(ctx.obj["db"], ctx.obj.get("slip_store"))
    try:
        deleted = service.purge_deposits(older_than=cutoff)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Purged {deleted} deposit(s)")


def register_commands(cli):
    """Register deposit commands with main CLI."""
    cli.add_command(deposit_group)
