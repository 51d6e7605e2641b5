"""
Ticket & category step.

Creates one ticket per input ticket, concurrently, creating ticket
categories on demand. Categories are deduplicated by name through a
run-owned NameKeyedMap, so two tickets naming the same new category
produce exactly one category record even while racing.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from event_publisher.envelope import ResponseCode
from event_publisher.errors import CategoryCreateFailed, TicketCreateFailed
from event_publisher.formatting import (
    DEFAULT_UTC_OFFSET,
    TimestampConvention,
    format_timestamp,
    parse_locale_decimal,
)
from event_publisher.gateway import ResourceGateway
from event_publisher.models import TicketInput
from event_publisher.name_map import NameKeyedMap, join_all
from event_publisher.status import StatusResolver
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.tickets")

TICKET_RESOURCE = "ticket"
CATEGORY_RESOURCE = "ticket-event-category"
TICKET_MODULE = "ticket"


@dataclass
class TicketStepResult:
    """
    Identifiers produced by the ticket step.

    Attributes:
        ticket_map: Ticket name -> ticket id
        category_map: Category name -> category id
    """
    ticket_map: dict[str, str] = field(default_factory=dict)
    category_map: dict[str, str] = field(default_factory=dict)


class TicketStep:
    """
    Creates tickets and their categories for one event.

    Attributes:
        convention: Timestamp convention of the call site (RAW_UTC when
            tickets are created with a new event, OFFSET_REWRITTEN when
            they are added to an existing one)
    """

    def __init__(
        self,
        gateway: ResourceGateway,
        statuses: StatusResolver,
        available_status_name: str,
        convention: TimestampConvention = TimestampConvention.RAW_UTC,
        utc_offset: str = DEFAULT_UTC_OFFSET,
    ):
        self._gateway = gateway
        self._statuses = statuses
        self._available_status_name = available_status_name
        self.convention = convention
        self._utc_offset = utc_offset

    async def run(self, event_id: str, tickets: Sequence[TicketInput]) -> TicketStepResult:
        """
        Create every ticket of the list.

        Returns:
            Ticket and category name maps

        Raises:
            StatusNotFound: If the ticket status cannot be resolved
            TicketCreateFailed: If any ticket or category create fails
        """
        if not tickets:
            return TicketStepResult()

        status_id = await self._statuses.resolve(TICKET_MODULE, self._available_status_name)
        categories = NameKeyedMap()

        created = await join_all(
            self._create_ticket(event_id, ticket, index, status_id, categories)
            for index, ticket in enumerate(tickets)
        )

        # Duplicate names collide; the later ticket in the list wins
        ticket_map: dict[str, str] = {}
        for name, ticket_id in created:
            ticket_map[name] = ticket_id

        logger.info(
            "Created %d ticket(s) and %d ticket categories for event %s",
            len(created), len(categories), event_id,
        )
        return TicketStepResult(ticket_map=ticket_map, category_map=categories.to_dict())

    async def _create_ticket(
        self,
        event_id: str,
        ticket: TicketInput,
        index: int,
        status_id: str,
        categories: NameKeyedMap,
    ) -> tuple[str, str]:
        category_id: Optional[str] = None
        if ticket.category:
            category_id = await categories.get_or_create(
                ticket.category,
                lambda: self._create_category(event_id, ticket.category),
            )

        try:
            price = parse_locale_decimal(ticket.price)
            start_date = format_timestamp(
                ticket.start_date, ticket.start_time, self.convention, self._utc_offset
            )
            end_date = format_timestamp(
                ticket.end_date, ticket.end_time, self.convention, self._utc_offset
            )
        except ValueError as e:
            raise TicketCreateFailed(
                f"Failed to create ticket '{ticket.name}': {e}", name=ticket.name
            ) from e

        payload = {
            "event_id": event_id,
            "name": ticket.name,
            "total_quantity": ticket.quantity,
            "remaining_quantity": ticket.quantity,
            "price": price,
            "status_id": status_id,
            "start_date": start_date,
            "end_date": end_date,
            "availability": ticket.availability,
            "min_quantity_per_user": ticket.min_purchase,
            "max_quantity_per_user": ticket.max_purchase,
            "display_order": ticket.display_order or index + 1,
        }
        if category_id is not None:
            payload["ticket_event_category_id"] = category_id

        envelope = await self._gateway.create(TICKET_RESOURCE, payload)
        ticket_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            TicketCreateFailed,
            f"ticket '{ticket.name}'",
            name=ticket.name,
        )
        logger.debug("Created ticket %s (%s)", ticket.name, ticket_id)
        return ticket.name, ticket_id

    async def _create_category(self, event_id: str, name: str) -> str:
        envelope = await self._gateway.create(
            CATEGORY_RESOURCE, {"event_id": event_id, "name": name}
        )
        category_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            CategoryCreateFailed,
            f"ticket category '{name}'",
            name=name,
        )
        logger.debug("Created ticket category %s (%s)", name, category_id)
        return category_id
