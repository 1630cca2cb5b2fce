"""CLI helpers for project and partner resolution."""

from __future__ import annotations

import click

from constructa.cli.error_handling import handle_domain_error
from constructa.domain.entities import Partner, Project
from constructa.domain.partner import PartnerService
from constructa.domain.project import ProjectService


def current_project_or_exit(ctx: click.Context) -> Project:
    """Return the workspace project, or exit with a CLI error."""
    try:
        return ProjectService(ctx.obj["db"]).current_project()
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_partner_or_exit(
    ctx: click.Context, project: Project, partner: str | int
) -> Partner:
    """Resolve partner name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return PartnerService(ctx.obj["db"]).resolve_partner(project.id, partner)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
