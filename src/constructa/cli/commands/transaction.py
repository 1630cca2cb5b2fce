"""Transaction management commands."""

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
from constructa.domain.partner import PartnerService
from constructa.domain.transaction import TransactionService
from constructa.utils.amount_parser import parse_amount
from constructa.utils.date_parser import get_month_range, parse_date


@click.group()
def transaction_group():
    """Manage ledger entries."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--month", help="Only entries of a month (YYYY-MM or 'this month')")
@click.option(
    "--type",
    "types",
    multiple=True,
    type=click.Choice(choice_values(TransactionType), case_sensitive=False),
    help="Entry type to show (repeatable)",
)
@click.option("--search", help="Text to find in description, supplier or amount")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    month: str | None,
    types: tuple[str, ...],
    search: str | None,
):
    """List ledger entries, newest first, grouped by month.

    Examples:
        constructa transaction list --month 2024-03
        constructa transaction list --type EXPENSE --search cement
    """
    db = ctx.obj["db"]
    project = current_project_or_exit(ctx)
    service = TransactionService(db)

    if month and (start_date or end_date):
        click.echo("Error: --month cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    start = None
    end = None
    try:
        if month:
            start, end = get_month_range(month)
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    transactions = service.list_transactions(
        project.id,
        start_date=start,
        end_date=end,
        types=[TransactionType(t.upper()) for t in types] or None,
        search=search,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {p.id: p.name for p in PartnerService(db).list_partners(project.id)}

    current = None
    for txn in transactions:
        if txn.month != current:
            current = txn.month
            click.echo(f"\n{current}")
            click.echo("-" * 90)
        if txn.type == TransactionType.EXPENSE:
            if txn.payer_type == PayerType.PARTNER:
                who = names.get(txn.payer_id, f"#{txn.payer_id}")
            else:
                who = "Box"
        else:
            who = names.get(txn.beneficiary_id, f"#{txn.beneficiary_id}")
        click.echo(
            f"{txn.id:5d} | {txn.date} | {txn.type.value:12s} | "
            f"{format_money(txn.amount):>15s} | {who:15s} | {txn.description}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="New date")
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@click.option("--partner", help="New beneficiary for a contribution or refund")
@click.option("--paid-by", help="New payer of an expense: 'box' or a partner name/ID")
@click.option(
    "--category",
    type=click.Choice(choice_values(ExpenseCategory), case_sensitive=False),
    help="New expense category",
)
@click.option(
    "--stage",
    type=click.Choice(choice_values(ConstructionStage), case_sensitive=False),
    help="New construction stage",
)
@click.option("--supplier", help="New supplier name")
@click.option(
    "--method",
    type=click.Choice(choice_values(PaymentMethod), case_sensitive=False),
    help="New payment method",
)
@click.option("--notes", help="New notes")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    amount: str | None,
    description: str | None,
    partner: str | None,
    paid_by: str | None,
    category: str | None,
    stage: str | None,
    supplier: str | None,
    method: str | None,
    notes: str | None,
):
    """Edit a ledger entry.

    Examples:
        constructa transaction update 12 --amount 450.00
        constructa transaction update 12 --paid-by Ana
    """
    db = ctx.obj["db"]
    project = current_project_or_exit(ctx)
    service = TransactionService(db)

    changes = {}
    try:
        if date is not None:
            changes["date"] = parse_date(date)
        if amount is not None:
            changes["amount"] = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if description is not None:
        changes["description"] = description
    if partner is not None:
        changes["beneficiary_id"] = resolve_partner_or_exit(ctx, project, partner).id
    if paid_by is not None:
        if paid_by.lower() == "box":
            changes["payer_type"] = PayerType.BOX
            changes["payer_id"] = None
        else:
            changes["payer_type"] = PayerType.PARTNER
            changes["payer_id"] = resolve_partner_or_exit(ctx, project, paid_by).id
    if category is not None:
        changes["category"] = ExpenseCategory(category.upper())
    if stage is not None:
        changes["stage"] = ConstructionStage(stage.upper())
    if supplier is not None:
        changes["supplier"] = supplier
    if method is not None:
        changes["payment_method"] = PaymentMethod(method.upper())
    if notes is not None:
        changes["notes"] = notes

    if not changes:
        click.echo("Error: No fields specified to update.", err=True)
        ctx.exit(1)

    try:
        service.update_transaction(transaction_id, **changes)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a ledger entry."""
    service = TransactionService(ctx.obj["db"])

    try:
        txn = service.require_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Delete {txn.type.value.lower()} {transaction_id} of {format_money(txn.amount)} on {txn.date}?"
    ):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_transactions(ctx, yes: bool):
    """Delete every transaction and budget goal of the project."""
    project = current_project_or_exit(ctx)
    service = TransactionService(ctx.obj["db"])

    if not yes and not click.confirm(
        f"Delete ALL transactions and budget goals of '{project.name}'?"
    ):
        click.echo("Cancelled.")
        return

    count = service.clear_transactions(project.id)
    click.echo(f"Deleted {count} transaction{'s' if count != 1 else ''}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
