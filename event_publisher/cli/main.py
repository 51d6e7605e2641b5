"""
Publisher CLI entry point.

Main command group for the event publisher CLI.
"""

import click

from event_publisher import __version__


@click.group()
@click.version_option(version=__version__, prog_name="event-publisher")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    Event Publisher - create complete events on the event platform.

    Turns one submission file (event, address, banner, tickets, custom
    checkout fields and coupons) into the platform records it needs.

    Use 'event-publisher COMMAND --help' for more information on a command.
    """
    # Ensure context object exists for subcommands
    ctx.ensure_object(dict)


# Import and register subcommands
from event_publisher.cli.submit import submit, add_tickets  # noqa: E402
from event_publisher.cli.validate import validate  # noqa: E402
from event_publisher.cli.config import config  # noqa: E402

cli.add_command(submit)
cli.add_command(add_tickets)
cli.add_command(validate)
cli.add_command(config)


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
