"""Main CLI entry point."""

import logging

import click
from cashtrack.database.factories import create_slip_store, create_sqlite_database

# Import and register all commands at module level
from cashtrack.cli.commands import (
    collection,
    dashboard,
    deposit,
    export,
    import_cmd,
    pending,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CASHTRACK_DB_PATH environment variable)",
    envvar="CASHTRACK_DB_PATH",
)
@click.option(
    "--slip-dir",
    type=click.Path(file_okay=False),
    help="Directory for deposit slip images (overrides CASHTRACK_SLIP_DIR environment variable)",
    envvar="CASHTRACK_SLIP_DIR",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, slip_dir: str | None, verbose: bool):
    """Cashtrack - cleaner cash collection tracking.

    Record cash collected from cleaners and the bank deposits made against
    it, review imported pending lists, and see each cleaner's cash in hand.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["slip_store"] = create_slip_store(slip_dir=slip_dir)
        ctx.call_on_close(db.disconnect)


# Register all commands
collection.register_commands(cli)
dashboard.register_commands(cli)
deposit.register_commands(cli)
export.register_commands(cli)
import_cmd.register_commands(cli)
pending.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
