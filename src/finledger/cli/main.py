"""Main CLI entry point."""

import click

from finledger.database.factories import BACKENDS, create_ledger_store
from finledger.logging_config import configure_logging
from finledger.rates import create_exchange_rate_cache

# Import and register all commands at module level
from finledger.cli.commands import (
    user,
    category,
    expense,
    budget,
    goal,
    invoice,
    convert,
    tip,
)


@click.group()
@click.option(
    "--backend",
    type=click.Choice(BACKENDS, case_sensitive=False),
    envvar="FINLEDGER_BACKEND",
    help="Storage backend (default: sqlite; 'memory' keeps nothing after the command exits)",
)
@click.option(
    "--db-path",
    type=click.Path(),
    envvar="FINLEDGER_DB_PATH",
    help="Path to SQLite database file (overrides FINLEDGER_DB_PATH environment variable)",
)
@click.option(
    "--database-url",
    envvar="FINLEDGER_DATABASE_URL",
    help="SQLAlchemy database URL; takes precedence over --db-path",
)
@click.option(
    "--user",
    envvar="FINLEDGER_USER",
    help="Acting user, by username or ID",
)
@click.option(
    "--log-level",
    envvar="FINLEDGER_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostic output on stderr",
)
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(
    ctx,
    backend: str | None,
    db_path: str | None,
    database_url: str | None,
    user: str | None,
    log_level: str | None,
    log_json: bool,
):
    """Finledger - personal finance ledger.

    Record expenses, budgets, savings goals and invoices, compare spending
    with budgets and convert invoice amounts between currencies.
    """
    ctx.ensure_object(dict)

    if log_level or log_json:
        configure_logging(log_level or "WARNING", json=log_json)

    # Build components only when actually running a command (not for --help).
    # Components already present in ctx.obj were injected by the caller.
    if ctx.invoked_subcommand is not None:
        if "store" not in ctx.obj:
            store = create_ledger_store(
                backend=backend, database_path=db_path, database_url=database_url
            )
            ctx.call_on_close(store.disconnect)
            ctx.obj["store"] = store
        if "rates" not in ctx.obj:
            ctx.obj["rates"] = create_exchange_rate_cache()
        ctx.obj["user"] = user


# Register all commands
user.register_commands(cli)
category.register_commands(cli)
expense.register_commands(cli)
budget.register_commands(cli)
goal.register_commands(cli)
invoice.register_commands(cli)
convert.register_commands(cli)
tip.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
