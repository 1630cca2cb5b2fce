"""Project management commands."""

import click
from constructa.cli.error_handling import handle_domain_error
from constructa.cli.formatting import choice_values
from constructa.cli.resolution import current_project_or_exit
from constructa.domain.entities import DistributionType, ProjectStatus
from constructa.domain.project import ProjectService
from constructa.utils.date_parser import parse_date


@click.group()
def project_group():
    """Manage the construction project."""
    pass


@project_group.command("init")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--address", default="", help="Site address")
@click.option("--start-date", help="Start date (YYYY-MM-DD, defaults to today)")
@click.option(
    "--distribution",
    type=click.Choice(choice_values(DistributionType), case_sensitive=False),
    default=DistributionType.PERCENTAGE.value,
    show_default=True,
    help="How costs are shared between partners",
)
@click.pass_context
def init_project(ctx, name: str, address: str, start_date: str | None, distribution: str):
    """Create the project for this workspace.

    Examples:
        constructa project init "Casa da Praia"
        constructa project init "Edifício Sul" --address "Rua A, 10" --distribution FIXED
    """
    db = ctx.obj["db"]
    service = ProjectService(db)

    if db.list_projects():
        click.echo("Error: A project already exists in this workspace.", err=True)
        ctx.exit(1)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    try:
        project_id = service.create_project(
            name=name,
            address=address,
            start_date=start,
            distribution_type=DistributionType(distribution.upper()),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created project '{name}' (ID: {project_id})")


@project_group.command("show")
@click.pass_context
def show_project(ctx):
    """Show project settings."""
    project = current_project_or_exit(ctx)

    click.echo(f"\nProject: {project.name} (ID: {project.id})")
    click.echo("-" * 60)
    click.echo(f"  Address:      {project.address or '-'}")
    click.echo(f"  Start date:   {project.start_date}")
    click.echo(f"  Status:       {project.status.value}")
    click.echo(f"  Distribution: {project.distribution_type.value}")


@project_group.command("set")
@click.option("--name", help="New project name")
@click.option("--address", help="New site address")
@click.option("--start-date", help="New start date")
@click.option(
    "--status",
    type=click.Choice(choice_values(ProjectStatus), case_sensitive=False),
    help="Lifecycle status",
)
@click.option(
    "--distribution",
    type=click.Choice(choice_values(DistributionType), case_sensitive=False),
    help="How costs are shared between partners",
)
@click.pass_context
def set_project(
    ctx,
    name: str | None,
    address: str | None,
    start_date: str | None,
    status: str | None,
    distribution: str | None,
):
    """Update project settings.

    Changing --distribution recomputes every partner's fair share.

    Examples:
        constructa project set --status PAUSED
        constructa project set --distribution FIXED
    """
    project = current_project_or_exit(ctx)
    service = ProjectService(ctx.obj["db"])

    if not any([name, address, start_date, status, distribution]):
        click.echo("Error: Nothing to update. Pass at least one option.", err=True)
        ctx.exit(1)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    try:
        service.update_settings(
            project.id,
            name=name,
            address=address,
            start_date=start,
            status=ProjectStatus(status.upper()) if status else None,
            distribution_type=DistributionType(distribution.upper()) if distribution else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated project '{name or project.name}'")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
