"""Main CLI entry point."""

import os

import click
from finledger.database.factories import create_database
from finledger.utils.logging import configure_logging

# Import and register all commands at module level
from finledger.cli.commands import (
    account,
    category,
    transaction,
    transfer,
    goal,
    summary,
)


def _default_user() -> str:
    return os.environ.get("USER") or "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides FINLEDGER_DB_PATH environment variable)",
    envvar="FINLEDGER_DB_PATH",
)
@click.option(
    "--db-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="FINLEDGER_DB_URL",
)
@click.option(
    "--user",
    "owner_id",
    help="Acting user; every record read or written belongs to this user",
    envvar="FINLEDGER_USER",
    default=_default_user,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="FINLEDGER_LOG_LEVEL",
    help="Log level for structured logs written to stderr",
)
@click.option("--log-json", is_flag=True, help="Write logs as JSON lines")
@click.pass_context
def cli(ctx, db_path: str | None, db_url: str | None, owner_id: str, log_level: str | None, log_json: bool):
    """Finledger - Personal finance ledger.

    Track accounts, income and expenses, transfers between accounts and
    savings goals. Account balances are kept up to date automatically.
    """
    ctx.ensure_object(dict)

    if log_level is not None or log_json:
        configure_logging(log_level or "WARNING", json_output=log_json)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=db_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner_id"] = owner_id
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
transfer.register_commands(cli)
goal.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
