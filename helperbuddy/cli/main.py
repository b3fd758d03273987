"""Main CLI entry point for helperbuddy management commands."""

import click

from helperbuddy.cli.commands import database, reminders, server
from helperbuddy.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="1.0.0", prog_name="helperbuddy")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """HelperBuddy CLI.

    \b
    Quick Start:
      helperbuddy db init                     # Create tables
      helperbuddy serve                       # Run the API and reminder scheduler
      helperbuddy reminders sweep             # Dispatch due reminders once
      helperbuddy reminders list --status failed
    """
    ctx.ensure_object(dict)


cli.add_command(server.serve)
cli.add_command(database.db)
cli.add_command(reminders.reminders)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
