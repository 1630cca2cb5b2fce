"""Financial planning commands: budget goals, contributions and credits."""

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import format_money, format_percent, progress_bar
from constructa.cli.resolution import current_project_or_exit, resolve_partner_or_exit
from constructa.domain.entities import MonthlyForecastReport
from constructa.domain.errors import NotFoundError, ValidationError
from constructa.domain.finance import FinanceService
from constructa.utils.amount_parser import parse_amount
from constructa.utils.date_parser import parse_date, parse_month


def _month_or_exit(ctx, month: str) -> str:
    try:
        return parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def _display_report(report: MonthlyForecastReport) -> None:
    click.echo(f"\nBudget goal for {report.month}: {format_money(report.total_amount)}")
    if report.allow_credit_abatement:
        click.echo("Existing credits are used to offset pending payments.")
    click.echo("=" * 100)

    for row in report.partners:
        status = "settled" if row.is_settled else f"pending {format_money(row.pending)}"
        click.echo(
            f"{row.partner_name:<20} {format_percent(row.percentage):>7} "
            f"expected {format_money(row.expected_amount):>14}  "
            f"realized {format_money(row.realized_amount):>14}  "
            f"{progress_bar(row.progress)} {row.progress:5.1f}%  {status}"
        )
        details = []
        if row.cash_contributions:
            details.append(f"cash {format_money(row.cash_contributions)}")
        if row.direct_expenses:
            details.append(f"direct expenses {format_money(row.direct_expenses)}")
        if row.refunds_received:
            details.append(f"refunds {format_money(row.refunds_received)}")
        if row.used_credit:
            details.append(f"credit used {format_money(row.used_credit)}")
        elif row.available_credit and not report.allow_credit_abatement:
            details.append(f"credit available {format_money(row.available_credit)}")
        if details:
            click.echo(f"{'':<20} " + ", ".join(details))

    fulfillment = report.fulfillment
    click.echo("\nBudget fulfillment")
    click.echo("-" * 50)
    click.echo(f"{'Goal':<30} {format_money(fulfillment.total_expected):>18}")
    click.echo(f"{'Realized':<30} {format_money(fulfillment.total_realized):>18}")
    click.echo(f"{'Pending':<30} {format_money(fulfillment.total_pending):>18}")
    if fulfillment.total_credits_used:
        click.echo(f"{'Credits used':<30} {format_money(fulfillment.total_credits_used):>18}")

    liquidity = report.liquidity
    click.echo("\nLiquidity projection")
    click.echo("-" * 50)
    click.echo(f"{'Box balance':<30} {format_money(liquidity.current_box_balance):>18}")
    click.echo(f"{'Expected inflow':<30} {format_money(liquidity.total_projected_cash_inflow):>18}")
    click.echo(f"{'Cash available':<30} {format_money(liquidity.cash_available):>18}")
    click.echo(f"{'Cash needed for goal':<30} {format_money(liquidity.cash_needed_for_budget):>18}")
    click.echo(f"{'Projected ending balance':<30} {format_money(liquidity.projected_ending_balance):>18}")
    if liquidity.is_liquidity_shortfall:
        click.echo(f"\nLiquidity shortfall: {format_money(liquidity.liquidity_gap)} missing to cover the goal.")
    else:
        click.echo(f"\nCash covers the goal with {format_money(liquidity.liquidity_gap)} to spare.")


@click.group()
def forecast_group():
    """Plan monthly budget goals."""
    pass


@forecast_group.command("set")
@click.argument("amount")
@click.option("--month", default="this month", show_default=True, help="Month (YYYY-MM)")
@click.option("--notes", help="Notes")
@click.pass_context
def set_forecast(ctx, amount: str, month: str, notes: str | None):
    """Set the budget goal of a month.

    Replaces the goal if the month already has one.

    Examples:
        constructa forecast set 20000 --month 2024-03
    """
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])
    month = _month_or_exit(ctx, month)

    try:
        total = parse_amount(amount)
        service.set_forecast(project.id, month, total, notes=notes)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Budget goal for {month} set to {format_money(total)}")


@forecast_group.command("show")
@click.option("--month", default="this month", show_default=True, help="Month (YYYY-MM)")
@click.option("--abate-credits", is_flag=True, help="Use existing credits to offset pending payments")
@click.pass_context
def show_forecast(ctx, month: str, abate_credits: bool):
    """Show expected vs realized payments and the liquidity projection."""
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])
    month = _month_or_exit(ctx, month)

    report = service.get_monthly_forecast(project.id, month, allow_credit_abatement=abate_credits)
    if not report.is_configured:
        click.echo(f"Forecast not started for {month}: no budget goal set.")
        click.echo(f"Set one with 'constructa forecast set AMOUNT --month {month}'.")
        return

    _display_report(report)


@forecast_group.command("delete")
@click.option("--month", required=True, help="Month (YYYY-MM)")
@click.pass_context
def delete_forecast(ctx, month: str):
    """Remove the budget goal of a month."""
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])
    month = _month_or_exit(ctx, month)

    try:
        service.delete_forecast(project.id, month)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted budget goal for {month}")


@click.command("contribute")
@click.argument("partner", metavar="PARTNER")
@click.option("--amount", help="Amount (defaults to what is pending this month)")
@click.option("--date", "date_str", default="today", show_default=True, help="Contribution date")
@click.option("--month", default=None, help="Budget month the contribution refers to")
@click.option("--abate-credits", is_flag=True, help="Offset credits when computing the pending default")
@click.pass_context
def contribute(ctx, partner: str, amount: str | None, date_str: str, month: str | None, abate_credits: bool):
    """Record a partner's contribution to the box.

    Without --amount, the partner's pending amount for the month is used.

    Examples:
        constructa contribute Ana --month 2024-03
        constructa contribute Bruno --amount 2500 --date 2024-03-10
    """
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])
    partner_obj = resolve_partner_or_exit(ctx, project, partner)

    try:
        contribution_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    month = _month_or_exit(ctx, month) if month else contribution_date.strftime("%Y-%m")

    if amount is None:
        try:
            value = service.pending_contribution(
                project.id, partner_obj.id, month, allow_credit_abatement=abate_credits
            )
        except NotFoundError:
            click.echo(f"Error: No budget goal set for {month}; pass --amount.", err=True)
            ctx.exit(1)
        except ValidationError:
            click.echo(f"Error: {partner_obj.name} has nothing pending for {month}.", err=True)
            ctx.exit(1)
    else:
        try:
            value = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_id = service.record_contribution(
            project.id, partner_obj.id, value, contribution_date, month=month
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded contribution {transaction_id} of {format_money(value)} "
        f"from {partner_obj.name} (Ref. {month})"
    )


@click.command("refund")
@click.argument("partner", metavar="PARTNER")
@click.option("--amount", help="Amount (defaults to the partner's whole credit)")
@click.option("--date", "date_str", default="today", show_default=True, help="Refund date")
@click.pass_context
def refund(ctx, partner: str, amount: str | None, date_str: str):
    """Refund a partner's credit from the box.

    Examples:
        constructa refund Ana
        constructa refund Ana --amount 500
    """
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])
    partner_obj = resolve_partner_or_exit(ctx, project, partner)

    try:
        refund_date = parse_date(date_str)
        value = parse_amount(amount) if amount is not None else None
        transaction_id = service.record_refund(
            project.id, partner_obj.id, amount=value, date=refund_date
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = service.transactions.get_transaction(transaction_id)
    click.echo(
        f"Recorded refund {transaction_id} of {format_money(txn.amount)} to {partner_obj.name}"
    )


@click.command("credits")
@click.pass_context
def credits(ctx):
    """List partners the project owes money to."""
    project = current_project_or_exit(ctx)
    service = FinanceService(ctx.obj["db"])

    balances = service.list_credits(project.id)
    if not balances:
        click.echo("No partner has credit to receive.")
        return

    click.echo("\nCredits to refund:")
    click.echo("-" * 50)
    for balance in balances:
        click.echo(f"{balance.partner_name:<25} {format_money(balance.balance):>18}")


def register_commands(cli):
    """Register planning commands with main CLI."""
    cli.add_command(forecast_group, name="forecast")
    cli.add_command(contribute)
    cli.add_command(refund)
    cli.add_command(credits)
