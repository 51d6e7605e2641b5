"""
Pre-submission validation.

Collects every problem of a submission as human-readable messages instead
of stopping at the first one, so a form or the CLI can show them together.
The orchestrator itself does not validate.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from event_publisher.formatting import parse_locale_decimal
from event_publisher.models import (
    CouponInput,
    CustomFieldInput,
    DiscountType,
    EventSubmission,
    TicketInput,
)


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)


def _decimal_or_none(value: str):
    try:
        return parse_locale_decimal(value)
    except ValueError:
        return None


def _parse_local(date: str, time: str):
    try:
        return datetime.strptime(f"{date}T{time}", "%Y-%m-%dT%H:%M")
    except ValueError:
        return None


def validate_tickets(tickets: Sequence[TicketInput]) -> ValidationResult:
    result = ValidationResult()
    seen: set[str] = set()

    for position, ticket in enumerate(tickets, start=1):
        if ticket.name in seen:
            result.errors.append(f'Ticket "{ticket.name}" is duplicated')
        seen.add(ticket.name)

        if not ticket.name.strip():
            result.errors.append(f"Ticket {position}: name is required")

        price = _decimal_or_none(ticket.price)
        if price is None or price < 0:
            result.errors.append(f"Ticket {position}: price must be zero or greater")

        if ticket.quantity <= 0:
            result.errors.append(f"Ticket {position}: quantity must be greater than zero")

        if ticket.min_purchase <= 0:
            result.errors.append(
                f"Ticket {position}: minimum purchase must be greater than zero"
            )

        if ticket.max_purchase is not None and ticket.max_purchase < ticket.min_purchase:
            result.errors.append(
                f"Ticket {position}: maximum purchase must not be below minimum purchase"
            )

        start = _parse_local(ticket.start_date, ticket.start_time)
        end = _parse_local(ticket.end_date, ticket.end_time)
        if start is None:
            result.errors.append(f"Ticket {position}: start date and time are invalid")
        if end is None:
            result.errors.append(f"Ticket {position}: end date and time are invalid")

    return result


def validate_coupons(coupons: Sequence[CouponInput]) -> ValidationResult:
    result = ValidationResult()
    seen: set[str] = set()

    for position, coupon in enumerate(coupons, start=1):
        if coupon.code in seen:
            result.errors.append(f'Coupon with code "{coupon.code}" is duplicated')
        seen.add(coupon.code)

        if not coupon.code.strip():
            result.errors.append(f"Coupon {position}: code is required")

        discount = _decimal_or_none(coupon.discount_value)
        if discount is None or discount <= 0:
            result.errors.append(
                f"Coupon {position}: discount value must be greater than zero"
            )
        elif coupon.discount_type == DiscountType.PERCENTAGE and discount > 100:
            result.errors.append(
                f"Coupon {position}: percentage discount cannot exceed 100%"
            )

        if coupon.max_uses <= 0:
            result.errors.append(
                f"Coupon {position}: maximum uses must be greater than zero"
            )

        start = _parse_local(coupon.start_date, coupon.start_time)
        end = _parse_local(coupon.end_date, coupon.end_time)
        if start is None:
            result.errors.append(f"Coupon {position}: start date and time are invalid")
        if end is None:
            result.errors.append(f"Coupon {position}: end date and time are invalid")
        if start is not None and end is not None and end <= start:
            result.errors.append(
                f"Coupon {position}: end date must be after the start date"
            )

    return result


def validate_custom_fields(fields: Sequence[CustomFieldInput]) -> ValidationResult:
    result = ValidationResult()

    for position, custom_field in enumerate(fields, start=1):
        if not custom_field.name.strip():
            result.errors.append(f"Custom field {position}: name is required")
        if not custom_field.person_types:
            result.errors.append(
                f'Custom field "{custom_field.name}": select at least one person type'
            )

    return result


def validate_submission(submission: EventSubmission) -> ValidationResult:
    """
    Validate a whole submission, including cross-references by ticket name.
    """
    result = ValidationResult()
    result.extend(validate_tickets(submission.tickets))
    result.extend(validate_custom_fields(submission.custom_fields))
    result.extend(validate_coupons(submission.coupons))

    start = _parse_local(submission.start_date, submission.start_time)
    end = _parse_local(submission.end_date, submission.end_time)
    if start is None or end is None:
        result.errors.append("Event start and end date and time are invalid")
    elif end <= start:
        result.errors.append("Event end must be after its start")

    ticket_names = {ticket.name for ticket in submission.tickets}
    for custom_field in submission.custom_fields:
        for name in custom_field.tickets:
            if name not in ticket_names:
                result.errors.append(
                    f'Custom field "{custom_field.name}" references unknown ticket "{name}"'
                )
    for coupon in submission.coupons:
        for name in coupon.tickets:
            if name not in ticket_names:
                result.errors.append(
                    f'Coupon "{coupon.code}" references unknown ticket "{name}"'
                )

    return result
