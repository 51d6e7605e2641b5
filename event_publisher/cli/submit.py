"""
Submit CLI commands.

Creates a full event from a submission file, or adds tickets to an
existing event.
"""

import asyncio
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from event_publisher.config import PublisherConfig
from event_publisher.errors import SubmissionError
from event_publisher.gateway import GatewayError
from event_publisher.main import (
    load_submission,
    load_tickets,
    run_add_tickets,
    run_submission,
    setup_logging,
)
from event_publisher.validation import validate_submission, validate_tickets


def _require_server(ctx: click.Context, config: PublisherConfig) -> None:
    if not config.is_configured:
        click.echo(
            click.style("Error: ", fg="red", bold=True)
            + "No server URL configured."
        )
        click.echo("Run 'event-publisher config set server_url URL' first.")
        ctx.exit(1)


def _echo_errors(title: str, errors: list[str]) -> None:
    click.echo(click.style(title, fg="red", bold=True))
    for error in errors:
        click.echo(f"  • {error}")


def _echo_failure(error: Exception) -> None:
    click.echo(click.style("Error: ", fg="red", bold=True) + str(error))
    created = getattr(error, "created_resources", None)
    if created:
        click.echo()
        click.echo(
            click.style("Warning: ", fg="yellow")
            + "these resources were created before the failure and remain on the server:"
        )
        for resource, resource_id in created:
            click.echo(f"  • {resource} {resource_id}")


def _echo_map(title: str, mapping: dict) -> None:
    if not mapping:
        return
    click.echo(f"  {title}:")
    for name, value in mapping.items():
        click.echo(f"    {name}: {value}")


@click.command("submit")
@click.argument(
    "submission_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--banner",
    "banner_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Banner image to upload (overrides banner_path in the file).",
)
@click.option(
    "--no-validate",
    is_flag=True,
    default=False,
    help="Skip pre-submission validation.",
)
@click.pass_context
def submit(
    ctx: click.Context,
    submission_file: Path,
    banner_path: Optional[Path],
    no_validate: bool,
) -> None:
    """
    Create an event and all of its tickets, fields and coupons.

    Example:

        event-publisher submit festival.yaml --banner banner.png
    """
    config = PublisherConfig()
    setup_logging(config.log_level)
    _require_server(ctx, config)

    try:
        submission = load_submission(submission_file, banner_path)
    except ValidationError as e:
        _echo_errors("Invalid submission file:", [str(err["msg"]) for err in e.errors()])
        ctx.exit(1)
        return

    if not no_validate:
        validation = validate_submission(submission)
        if not validation.is_valid:
            _echo_errors("Submission is invalid:", validation.errors)
            ctx.exit(1)
            return

    click.echo(f"Submitting event '{submission.name}' to {config.server_url}...")

    try:
        result = asyncio.run(run_submission(config, submission))
    except (SubmissionError, GatewayError) as e:
        _echo_failure(e)
        ctx.exit(1)
        return

    click.echo(click.style("Event created: ", fg="green") + str(result.event_id))
    if result.banner_url:
        click.echo(f"  Banner: {result.banner_url}")
    _echo_map("Tickets", result.ticket_map)
    _echo_map("Ticket categories", result.category_map)
    _echo_map("Custom fields by ticket", result.field_ticket_map)
    _echo_map("Coupons by ticket", result.coupon_ticket_map)


@click.command("add-tickets")
@click.argument("event_id")
@click.argument(
    "tickets_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def add_tickets(ctx: click.Context, event_id: str, tickets_file: Path) -> None:
    """
    Add tickets to an existing event.

    Example:

        event-publisher add-tickets evt_123 tickets.yaml
    """
    config = PublisherConfig()
    setup_logging(config.log_level)
    _require_server(ctx, config)

    try:
        tickets = load_tickets(tickets_file)
    except ValidationError as e:
        _echo_errors("Invalid tickets file:", [str(err["msg"]) for err in e.errors()])
        ctx.exit(1)
        return

    validation = validate_tickets(tickets)
    if not validation.is_valid:
        _echo_errors("Tickets are invalid:", validation.errors)
        ctx.exit(1)
        return

    try:
        result = asyncio.run(run_add_tickets(config, event_id, tickets))
    except (SubmissionError, GatewayError) as e:
        _echo_failure(e)
        ctx.exit(1)
        return

    click.echo(click.style(f"{len(result.ticket_map)} ticket(s) added", fg="green"))
    _echo_map("Tickets", result.ticket_map)
    _echo_map("Ticket categories", result.category_map)
