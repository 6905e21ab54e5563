"""Cash-in-hand dashboard command."""

import click

from cashtrack.cli.date_filters import format_amount
from cashtrack.domain.balance import BalanceService, LiveBalance, cleaner_alerts
from cashtrack.domain.entities import CleanerAlert, CleanerSummary

ALERT_LABELS = {
    CleanerAlert.OVER_LIMIT: "Over limit",
    CleanerAlert.OVERDUE: "Overdue",
    CleanerAlert.CLEARED: "Cleared",
}


def format_status(summary: CleanerSummary) -> str:
    alerts = cleaner_alerts(summary)
    if not alerts:
        return "OK"
    return ", ".join(ALERT_LABELS[alert] for alert in alerts)


def format_last_collection(summary: CleanerSummary) -> str:
    if summary.last_collection_date is None:
        return "Never"
    day = summary.last_collection_date.strftime("%Y-%m-%d")
    return f"{day} ({summary.days_since_last_collection}d ago)"


@click.command("dashboard")
@click.option("--alerts-only", is_flag=True, help="Show only cleaners with an alert")
@click.pass_context
def dashboard(ctx, alerts_only: bool):
    """Show each cleaner's cash in hand, highest first."""
    with LiveBalance(ctx.obj["db"]) as balance:
        if balance.error is not None:
            click.echo(f"Error: Could not load balances: {balance.error}", err=True)
            ctx.exit(1)
        summaries = list(balance.summaries)

    if not summaries:
        click.echo("No data available")
        return

    totals = BalanceService.get_totals(summaries)
    click.echo(f"Total cash in hand: {format_amount(totals['cash_in_hand'])}")
    click.echo(f"Cleaners at risk: {totals['at_risk']}")

    if alerts_only:
        summaries = [
            summary
            for summary in summaries
            if any(alert is not CleanerAlert.CLEARED for alert in cleaner_alerts(summary))
        ]

    click.echo("-" * 90)
    click.echo(f"{'Cleaner':<24} {'Cash In Hand':>18}  {'Status':<22} {'Last Collection':<22}")
    click.echo("-" * 90)
    for summary in summaries:
        click.echo(
            f"{summary.name[:24]:<24} {format_amount(summary.cash_in_hand):>18}  "
            f"{format_status(summary):<22} {format_last_collection(summary):<22}"
        )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
