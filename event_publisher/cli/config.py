"""
Config CLI commands.

Shows and edits the publisher configuration file.
"""

import click

from event_publisher.config import ConfigValidationError, PublisherConfig
from event_publisher.status import StatusNames


SETTABLE_KEYS = (
    "server_url",
    "api_key",
    "log_level",
    "request_timeout_seconds",
    "submission_timeout_seconds",
    "utc_offset",
    "status_names.event_draft",
    "status_names.ticket_available",
    "status_names.coupon_available",
)


# ============================================================================
# Config Command Group
# ============================================================================


@click.group()
@click.pass_context
def config(ctx: click.Context) -> None:
    """
    Manage publisher configuration.
    """
    ctx.ensure_object(dict)


@config.command("show")
def show() -> None:
    """
    Display the current configuration.

    Example:

        event-publisher config show
    """
    publisher_config = PublisherConfig()

    click.echo(f"Config file: {publisher_config.config_path}")
    click.echo(f"  server_url: {publisher_config.server_url or '(not set)'}")
    click.echo(f"  api_key: {'(set)' if publisher_config.api_key else '(not set)'}")
    click.echo(f"  log_level: {publisher_config.log_level}")
    click.echo(f"  request_timeout_seconds: {publisher_config.request_timeout_seconds}")
    click.echo(
        f"  submission_timeout_seconds: {publisher_config.submission_timeout_seconds or '(none)'}"
    )
    click.echo(f"  utc_offset: {publisher_config.utc_offset}")
    names = publisher_config.status_names
    click.echo(f"  status_names.event_draft: {names.event_draft}")
    click.echo(f"  status_names.ticket_available: {names.ticket_available}")
    click.echo(f"  status_names.coupon_available: {names.coupon_available}")


@config.command("set")
@click.argument("key", type=click.Choice(SETTABLE_KEYS))
@click.argument("value")
@click.pass_context
def set_value(ctx: click.Context, key: str, value: str) -> None:
    """
    Set one configuration value.

    Example:

        event-publisher config set server_url https://api.example.com
    """
    publisher_config = PublisherConfig()

    try:
        if key == "server_url":
            publisher_config.server_url = value
        elif key == "api_key":
            publisher_config.api_key = value
        elif key == "log_level":
            publisher_config.log_level = value.upper()
        elif key == "request_timeout_seconds":
            publisher_config.request_timeout_seconds = float(value)
        elif key == "submission_timeout_seconds":
            publisher_config.submission_timeout_seconds = float(value) if value else None
        elif key == "utc_offset":
            publisher_config.utc_offset = value
        else:
            field_name = key.split(".", 1)[1]
            current = publisher_config.status_names
            publisher_config.status_names = StatusNames(
                **{
                    "event_draft": current.event_draft,
                    "ticket_available": current.ticket_available,
                    "coupon_available": current.coupon_available,
                    field_name: value,
                }
            )
        publisher_config.validate()
    except (ValueError, ConfigValidationError) as e:
        click.echo(click.style("Error: ", fg="red") + str(e))
        ctx.exit(1)
        return

    publisher_config.save()
    click.echo(click.style("Updated ", fg="green") + key)
