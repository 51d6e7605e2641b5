"""
Validate CLI command.

Checks a submission file without contacting the platform.
"""

from pathlib import Path

import click
from pydantic import ValidationError

from event_publisher.main import load_submission
from event_publisher.validation import validate_submission


@click.command("validate")
@click.argument(
    "submission_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_context
def validate(ctx: click.Context, submission_file: Path) -> None:
    """
    Validate a submission file.

    Example:

        event-publisher validate festival.yaml
    """
    try:
        submission = load_submission(submission_file)
    except ValidationError as e:
        click.echo(click.style("Invalid submission file:", fg="red", bold=True))
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            click.echo(f"  • {location}: {err['msg']}")
        ctx.exit(1)
        return

    result = validate_submission(submission)
    if not result.is_valid:
        click.echo(click.style("Submission is invalid:", fg="red", bold=True))
        for error in result.errors:
            click.echo(f"  • {error}")
        ctx.exit(1)
        return

    click.echo(
        click.style("✓ ", fg="green")
        + f"'{submission.name}' is valid: "
        f"{len(submission.tickets)} ticket(s), "
        f"{len(submission.custom_fields)} custom field(s), "
        f"{len(submission.coupons)} coupon(s)"
    )
