"""Main CLI entry point."""

import logging

import click
from taxfiler.database.factories import DB_PATH_ENV, create_sqlite_database

# Import and register all commands at module level
from taxfiler.cli.commands import history, import_cmd, review

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
    """Configure root logging once: -v for INFO, -vv for DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or debug detail (-vv)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Taxfiler - bank statement import for UK self-assessment.

    Import bank CSV exports from UK banks, review the staged transactions and
    undo recent imports.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
history.register_commands(cli)
review.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
