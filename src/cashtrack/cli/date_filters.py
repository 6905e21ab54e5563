"""CLI helpers for date range and date/amount option parsing."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import click

from cashtrack.utils.amount_parser import parse_amount
from cashtrack.utils.date_parser import get_date_range, parse_date, parse_instant, utc_now

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def period_options(command):
    """Add --start-date, --end-date and the --this-month style flags."""
    for period in reversed(PERIODS):
        label = period.replace("-", " ")
        command = click.option(f"--{period}", is_flag=True, help=f"Filter to {label}")(command)
    command = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')"
    )(command)
    command = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')"
    )(command)
    return command


def period_flags(options: dict) -> dict[str, bool]:
    """Pick the period flags out of a command's keyword arguments."""
    return {period: bool(options.get(period.replace("-", "_"))) for period in PERIODS}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --this-week, --last-month, --last-year, --last-week) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end


def parse_instant_or_exit(ctx, value: str | None, label: str = "date") -> datetime | None:
    """Parse an optional date/time option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_instant(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} format: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx, value: str | None, label: str = "amount") -> Decimal | None:
    """Parse an optional amount option, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} format: {e}", err=True)
        ctx.exit(1)


def resolve_purge_cutoff(ctx, older_than_days: int | None, purge_all: bool) -> datetime | None:
    """Cutoff instant for a purge, or None to purge everything."""
    if (older_than_days is not None) == purge_all:
        click.echo("Error: Specify exactly one of --older-than-days or --all.", err=True)
        ctx.exit(1)
    if purge_all:
        return None
    if older_than_days < 0:
        click.echo("Error: --older-than-days cannot be negative.", err=True)
        ctx.exit(1)
    return utc_now() - timedelta(days=older_than_days)


def format_amount(amount: Decimal) -> str:
    """Render an amount the way the dashboards show it."""
    return f"AED {amount:,.2f}"
