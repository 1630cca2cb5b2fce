"""Supplier management commands."""

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import choice_values
from constructa.cli.resolution import current_project_or_exit
from constructa.domain.entities import ExpenseCategory
from constructa.domain.supplier import SupplierService


@click.group()
def supplier_group():
    """Manage suppliers."""
    pass


@supplier_group.command("add")
@click.argument("name", metavar="SUPPLIER_NAME")
@click.option("--document", help="Tax document (CPF/CNPJ)")
@click.option("--contact", help="Contact information")
@click.option(
    "--category",
    type=click.Choice(choice_values(ExpenseCategory), case_sensitive=False),
    help="Default expense category",
)
@click.pass_context
def add_supplier(ctx, name: str, document: str | None, contact: str | None, category: str | None):
    """Add a supplier.

    Examples:
        constructa supplier add "Depósito Central" --category MATERIAL
    """
    project = current_project_or_exit(ctx)
    service = SupplierService(ctx.obj["db"])

    try:
        supplier_id = service.add_supplier(
            project_id=project.id,
            name=name,
            document=document,
            contact=contact,
            default_category=ExpenseCategory(category.upper()) if category else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added supplier '{name}' (ID: {supplier_id})")


@supplier_group.command("list")
@click.pass_context
def list_suppliers(ctx):
    """List suppliers."""
    project = current_project_or_exit(ctx)
    service = SupplierService(ctx.obj["db"])

    suppliers = service.list_suppliers(project.id)
    if not suppliers:
        click.echo("No suppliers found.")
        return

    click.echo("\nSuppliers:")
    click.echo("-" * 70)
    for s in suppliers:
        category = s.default_category.value if s.default_category else "-"
        click.echo(f"ID: {s.id:3d} | {s.name:25s} | {category:10s} | {s.contact or ''}")


@supplier_group.command("delete")
@click.argument("supplier_id", type=int)
@click.pass_context
def delete_supplier(ctx, supplier_id: int):
    """Delete a supplier by ID."""
    service = SupplierService(ctx.obj["db"])

    try:
        service.delete_supplier(supplier_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted supplier {supplier_id}")


def register_commands(cli):
    """Register supplier commands with main CLI."""
    cli.add_command(supplier_group, name="supplier")
