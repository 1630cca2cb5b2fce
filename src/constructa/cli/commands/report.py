"""Report commands."""

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import format_money
from constructa.cli.resolution import current_project_or_exit, resolve_partner_or_exit
from constructa.domain.entities import TransactionType
from constructa.domain.finance import FinanceService
from constructa.utils.date_parser import parse_date
from constructa.utils.money import ZERO


def _period_or_exit(ctx, start_date: str | None, end_date: str | None):
    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    if start and end and start > end:
        click.echo("Error: Start date must be before or equal to end date", err=True)
        ctx.exit(1)

    return start, end


def _period_label(start, end) -> str:
    if start and end:
        return f"{start} to {end}"
    if start:
        return f"from {start}"
    if end:
        return f"until {end}"
    return "all time"


@click.group()
def report_group():
    """Reports over the project ledger."""
    pass


@report_group.command("monthly")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.pass_context
def monthly_report(ctx, start_date: str | None, end_date: str | None):
    """Expenses and contributions per month.

    Examples:
        constructa report monthly --start-date 2024-01-01
    """
    project = current_project_or_exit(ctx)
    start, end = _period_or_exit(ctx, start_date, end_date)

    rows = FinanceService(ctx.obj["db"]).get_monthly_trend(project.id, start, end)
    if not rows:
        click.echo("No transactions found in the specified period.")
        return

    click.echo(f"\nMonthly trend ({_period_label(start, end)})")
    click.echo("=" * 60)
    click.echo(f"{'Month':<10} {'Contributions':>16} {'Expenses':>16} {'Net':>14}")
    click.echo("-" * 60)
    for row in rows:
        click.echo(
            f"{row.month:<10} {format_money(row.contributions):>16} "
            f"{format_money(row.expenses):>16} "
            f"{format_money(row.contributions - row.expenses):>14}"
        )

    click.echo("-" * 60)
    contributions = sum((row.contributions for row in rows), ZERO)
    expenses = sum((row.expenses for row in rows), ZERO)
    click.echo(
        f"{'Total':<10} {format_money(contributions):>16} "
        f"{format_money(expenses):>16} {format_money(contributions - expenses):>14}"
    )


@report_group.command("breakdown")
@click.option(
    "--by",
    "key",
    type=click.Choice(["category", "stage"], case_sensitive=False),
    default="category",
    show_default=True,
    help="Group expenses by category or construction stage",
)
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.pass_context
def breakdown_report(ctx, key: str, start_date: str | None, end_date: str | None):
    """Expense totals per category or construction stage.

    Examples:
        constructa report breakdown --by stage
    """
    project = current_project_or_exit(ctx)
    start, end = _period_or_exit(ctx, start_date, end_date)

    try:
        groups = FinanceService(ctx.obj["db"]).get_expense_breakdown(
            project.id, key.lower(), start, end
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not groups:
        click.echo("No expenses found in the specified period.")
        return

    total = sum((amount for _, amount in groups), ZERO)
    click.echo(f"\nExpenses by {key.lower()} ({_period_label(start, end)})")
    click.echo("=" * 50)
    for label, amount in groups:
        share = amount / total * 100 if total else 0
        click.echo(f"{label:<20} {format_money(amount):>18} {share:6.1f}%")
    click.echo("-" * 50)
    click.echo(f"{'Total':<20} {format_money(total):>18}")


@report_group.command("statement")
@click.argument("partner", metavar="PARTNER")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.pass_context
def statement_report(ctx, partner: str, start_date: str | None, end_date: str | None):
    """Chronological statement of a partner's entries.

    Examples:
        constructa report statement Ana --start-date 2024-01-01
    """
    project = current_project_or_exit(ctx)
    partner_obj = resolve_partner_or_exit(ctx, project, partner)
    start, end = _period_or_exit(ctx, start_date, end_date)

    try:
        statement = FinanceService(ctx.obj["db"]).get_partner_statement(
            project.id, partner_obj.id, start, end
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nStatement of {statement.partner_name} ({_period_label(start, end)})")
    click.echo("=" * 80)
    if not statement.transactions:
        click.echo("No entries found in the specified period.")
        return

    for txn in statement.transactions:
        sign = "-" if txn.type == TransactionType.REFUND else "+"
        click.echo(
            f"{txn.date} | {txn.type.value:12s} | {sign}{format_money(txn.amount):>15s} | "
            f"{txn.description}"
        )

    click.echo("-" * 80)
    click.echo(f"{'Contributions':<25} {format_money(statement.total_contributed):>18}")
    click.echo(f"{'Expenses paid directly':<25} {format_money(statement.total_expenses_paid):>18}")
    click.echo(f"{'Refunds received':<25} {format_money(statement.total_refunds):>18}")
    click.echo(f"{'Net paid in':<25} {format_money(statement.net):>18}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
