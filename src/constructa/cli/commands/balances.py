"""Balance commands."""

import click
from constructa.cli.formatting import format_money
from constructa.cli.resolution import current_project_or_exit
from constructa.domain.finance import FinanceService


@click.command("balances")
@click.pass_context
def show_balances(ctx):
    """Show box balance and every partner's credit or debt.

    A positive balance means the project owes the partner (credit); a
    negative balance means the partner owes the project (debt).
    """
    project = current_project_or_exit(ctx)
    summary = FinanceService(ctx.obj["db"]).get_financial_summary(project.id)

    click.echo(f"\n{project.name}")
    click.echo("=" * 100)
    click.echo(f"{'Total expenses':<20} {format_money(summary.total_expenses):>18}")
    click.echo(f"{'Box balance':<20} {format_money(summary.box_balance):>18}")

    if not summary.partner_balances:
        click.echo("\nNo partners found.")
        return

    click.echo()
    click.echo(
        f"{'Partner':<20} {'Contributed':>14} {'Paid direct':>14} {'Refunds':>14} "
        f"{'Fair share':>14} {'Balance':>14}  Status"
    )
    click.echo("-" * 100)
    for balance in summary.partner_balances.values():
        status = "credit" if balance.is_credit else "debt"
        if balance.balance == 0:
            status = "settled"
        click.echo(
            f"{balance.partner_name:<20} "
            f"{format_money(balance.total_contributed):>14} "
            f"{format_money(balance.total_expenses_paid):>14} "
            f"{format_money(balance.total_refunds_received):>14} "
            f"{format_money(balance.fair_share):>14} "
            f"{format_money(balance.balance):>14}  {status}"
        )


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(show_balances)
