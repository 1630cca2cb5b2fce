"""Partner management commands."""

from decimal import Decimal

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import format_money, format_percent
from constructa.cli.resolution import current_project_or_exit, resolve_partner_or_exit
from constructa.domain.entities import DistributionType
from constructa.domain.partner import PartnerService
from constructa.utils.amount_parser import parse_amount
from constructa.utils.money import HUNDRED


def _parse_optional_amount(ctx, value: str | None, label: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _warn_unbalanced_percentages(service: PartnerService, project) -> None:
    if project.distribution_type != DistributionType.PERCENTAGE:
        return
    total = service.percentage_total(project.id)
    if total != HUNDRED:
        click.echo(
            f"Warning: partner percentages add up to {format_percent(total)}, not 100%. "
            "Balances will not net to zero across partners.",
            err=True,
        )


@click.group()
def partner_group():
    """Manage partners."""
    pass


@partner_group.command("add")
@click.argument("name", metavar="PARTNER_NAME")
@click.option("--email", default="", help="Contact email")
@click.option("--phone", help="Phone number")
@click.option("--percentage", help="Share of expenses under PERCENTAGE distribution (0-100)")
@click.option("--fixed-value", help="Contribution target under FIXED distribution")
@click.pass_context
def add_partner(
    ctx,
    name: str,
    email: str,
    phone: str | None,
    percentage: str | None,
    fixed_value: str | None,
):
    """Add a partner to the project.

    Examples:
        constructa partner add "Ana" --percentage 60
        constructa partner add "Bruno" --email bruno@example.com --percentage 40
        constructa partner add "Carla" --fixed-value 50000
    """
    project = current_project_or_exit(ctx)
    service = PartnerService(ctx.obj["db"])

    pct = _parse_optional_amount(ctx, percentage, "percentage")
    fixed = _parse_optional_amount(ctx, fixed_value, "fixed value")

    try:
        partner_id = service.add_partner(
            project_id=project.id,
            name=name,
            email=email,
            phone=phone,
            percentage=pct,
            fixed_value=fixed,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added partner '{name}' (ID: {partner_id})")
    _warn_unbalanced_percentages(service, project)


@partner_group.command("list")
@click.pass_context
def list_partners(ctx):
    """List partners and their share."""
    project = current_project_or_exit(ctx)
    service = PartnerService(ctx.obj["db"])

    partners = service.list_partners(project.id)
    if not partners:
        click.echo("No partners found.")
        return

    click.echo(f"\nPartners ({project.distribution_type.value}):")
    click.echo("-" * 70)
    for p in partners:
        if project.distribution_type == DistributionType.PERCENTAGE:
            share = format_percent(p.percentage) if p.percentage is not None else "-"
        else:
            share = format_money(p.fixed_value) if p.fixed_value is not None else "-"
        click.echo(f"ID: {p.id:3d} | {p.name:20s} | Share: {share:>14s} | {p.email}")


@partner_group.command("edit")
@click.argument("partner", metavar="PARTNER")
@click.option("--name", help="New name")
@click.option("--email", help="New email")
@click.option("--phone", help="New phone number")
@click.option("--percentage", help="New percentage (0-100), or empty string to clear")
@click.option("--fixed-value", help="New fixed value, or empty string to clear")
@click.pass_context
def edit_partner(
    ctx,
    partner: str,
    name: str | None,
    email: str | None,
    phone: str | None,
    percentage: str | None,
    fixed_value: str | None,
):
    """Edit a partner.

    PARTNER can be a partner name or ID.

    Examples:
        constructa partner edit "Ana" --percentage 50
        constructa partner edit "Ana" --percentage ""
    """
    project = current_project_or_exit(ctx)
    service = PartnerService(ctx.obj["db"])
    partner_obj = resolve_partner_or_exit(ctx, project, partner)

    # Empty string means clear
    clear_percentage = percentage == ""
    clear_fixed_value = fixed_value == ""
    pct = None if clear_percentage else _parse_optional_amount(ctx, percentage, "percentage")
    fixed = None if clear_fixed_value else _parse_optional_amount(ctx, fixed_value, "fixed value")

    try:
        service.update_partner(
            partner_obj.id,
            name=name,
            email=email,
            phone=phone,
            percentage=pct,
            fixed_value=fixed,
            clear_percentage=clear_percentage,
            clear_fixed_value=clear_fixed_value,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated partner '{name or partner_obj.name}'")
    if pct is not None or clear_percentage:
        _warn_unbalanced_percentages(service, project)


@partner_group.command("delete")
@click.argument("partner", metavar="PARTNER")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_partner(ctx, partner: str, yes: bool):
    """Delete a partner.

    PARTNER can be a partner name or ID. The partner's past transactions
    are kept and still count toward project totals.
    """
    project = current_project_or_exit(ctx)
    service = PartnerService(ctx.obj["db"])
    partner_obj = resolve_partner_or_exit(ctx, project, partner)

    if not yes and not click.confirm(
        f"Are you sure you want to delete partner '{partner_obj.name}' (ID: {partner_obj.id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_partner(partner_obj.id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted partner '{partner_obj.name}'")


def register_commands(cli):
    """Register partner commands with main CLI."""
    cli.add_command(partner_group, name="partner")
