"""Main CLI entry point."""

import logging

import click
from payables.database.factories import create_sqlite_database

# Import and register all commands at module level
from payables.cli.commands import (
    supplier,
    account,
    dues,
    pay,
    history,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYABLES_DB_PATH environment variable)",
    envvar="PAYABLES_DB_PATH",
)
@click.option(
    "--tenant",
    help="Tenant the command operates on",
    envvar="PAYABLES_TENANT",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="PAYABLES_LOG_LEVEL",
    help="Logging level",
)
@click.pass_context
def cli(ctx, db_path: str | None, tenant: str | None, log_level: str):
    """Payables - Recurring supplier invoice tracker.

    Register monthly supplier invoices by issue and due day, see which
    occurrences are overdue or upcoming, record payments and browse the
    payment history.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)

        if not tenant or not tenant.strip():
            click.echo("Error: No tenant given. Use --tenant or set PAYABLES_TENANT.", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["tenant"] = tenant.strip()


# Register all commands
supplier.register_commands(cli)
account.register_commands(cli)
dues.register_commands(cli)
pay.register_commands(cli)
history.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
