"""Add ledger entry command."""

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import choice_values, format_money
from constructa.cli.resolution import current_project_or_exit, resolve_partner_or_exit
from constructa.domain.entities import (
    ConstructionStage,
    ExpenseCategory,
    PayerType,
    PaymentMethod,
    TransactionType,
)
from constructa.domain.transaction import TransactionService
from constructa.utils.amount_parser import parse_amount
from constructa.utils.date_parser import parse_date

BOX = "box"


@click.command("add")
@click.argument(
    "entry_type",
    type=click.Choice(["contribution", "expense", "refund"], case_sensitive=False),
)
@click.option("--date", required=True, help="Entry date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--amount", required=True, help="Amount (e.g., 1500.00 or 'R$ 1.500,00')")
@click.option("--description", default="", help="Description")
@click.option(
    "--partner",
    help="Partner who contributed or was refunded (name or ID)",
)
@click.option(
    "--paid-by",
    default=BOX,
    show_default=True,
    help="Who paid an expense: 'box' or a partner name/ID",
)
@click.option(
    "--category",
    type=click.Choice(choice_values(ExpenseCategory), case_sensitive=False),
    help="Expense category",
)
@click.option(
    "--stage",
    type=click.Choice(choice_values(ConstructionStage), case_sensitive=False),
    help="Construction stage",
)
@click.option("--supplier", help="Supplier name")
@click.option(
    "--method",
    type=click.Choice(choice_values(PaymentMethod), case_sensitive=False),
    help="Payment method",
)
@click.option("--notes", help="Notes")
@click.pass_context
def add_entry(
    ctx,
    entry_type: str,
    date: str,
    amount: str,
    description: str,
    partner: str | None,
    paid_by: str,
    category: str | None,
    stage: str | None,
    supplier: str | None,
    method: str | None,
    notes: str | None,
):
    """Record a contribution, expense or refund.

    Examples:
        constructa add contribution --partner Ana --date 2024-03-05 --amount 5000
        constructa add expense --date today --amount 1200 --category MATERIAL --supplier "Depósito"
        constructa add expense --date today --amount 300 --paid-by Bruno --description "Cement"
        constructa add refund --partner Ana --date today --amount 800
    """
    db = ctx.obj["db"]
    project = current_project_or_exit(ctx)
    service = TransactionService(db)
    txn_type = TransactionType(entry_type.upper())

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    payer_type = None
    payer_id = None
    beneficiary_id = None
    if txn_type == TransactionType.EXPENSE:
        if partner is not None:
            click.echo("Error: Use --paid-by to name the partner who paid an expense.", err=True)
            ctx.exit(1)
        if paid_by.lower() == BOX:
            payer_type = PayerType.BOX
        else:
            payer_type = PayerType.PARTNER
            payer_id = resolve_partner_or_exit(ctx, project, paid_by).id
    else:
        if partner is None:
            click.echo(f"Error: --partner is required for a {entry_type.lower()}.", err=True)
            ctx.exit(1)
        beneficiary_id = resolve_partner_or_exit(ctx, project, partner).id

    try:
        transaction_id = service.create_transaction(
            project_id=project.id,
            type=txn_type,
            date=txn_date,
            amount=txn_amount,
            description=description,
            payer_type=payer_type,
            payer_id=payer_id,
            beneficiary_id=beneficiary_id,
            category=ExpenseCategory(category.upper()) if category else None,
            stage=ConstructionStage(stage.upper()) if stage else None,
            supplier=supplier,
            payment_method=PaymentMethod(method.upper()) if method else None,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {txn_type.value.lower()} {transaction_id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Amount: {format_money(txn_amount)}")
    if description:
        click.echo(f"  Description: {description}")
    if txn_type == TransactionType.EXPENSE:
        click.echo(f"  Paid by: {'Box' if payer_id is None else paid_by}")
    else:
        click.echo(f"  Partner: {partner}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_entry)
