"""Main CLI entry point."""

import logging

import click
from constructa.database.factories import create_sqlite_database

# Import and register all commands at module level
from constructa.cli.commands import (
    project,
    partner,
    supplier,
    add,
    transaction,
    balances,
    forecast,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CONSTRUCTA_DB_PATH environment variable)",
    envvar="CONSTRUCTA_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Constructa - Shared construction-project finances.

    Record contributions, expenses and refunds of investing partners,
    reconcile who owes or is owed money, and plan monthly budget goals.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
project.register_commands(cli)
partner.register_commands(cli)
supplier.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
balances.register_commands(cli)
forecast.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
