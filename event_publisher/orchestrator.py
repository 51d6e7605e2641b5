"""
Event submission orchestrator.

Fans one EventSubmission out into the dependency-ordered sequence of
remote creations:

    address -> event -> [banner] -> tickets -> [custom fields -> field relations]
            -> coupons -> [coupon relations]

Sibling resources inside a stage are created concurrently; stages never
overlap. Any failure aborts the run with that stage's error. Resources
created before the failure are left in place; their (resource, id) pairs
are attached to the raised error as ``created_resources``.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from event_publisher.errors import SubmissionError, SubmissionTimeout
from event_publisher.formatting import DEFAULT_UTC_OFFSET, TimestampConvention
from event_publisher.gateway import RecordingGateway, ResourceGateway
from event_publisher.models import EventSubmission, TicketInput
from event_publisher.progress import SubmissionProgress, SubmissionState
from event_publisher.status import StatusNames, StatusResolver
from event_publisher.steps import (
    AddressStep,
    BannerStep,
    CouponStep,
    CouponTicketRelationStep,
    CustomFieldStep,
    EventStep,
    FieldTicketRelationStep,
    TicketStep,
    TicketStepResult,
)

logger = logging.getLogger("event_publisher.orchestrator")


@dataclass
class SubmissionResult:
    """
    Success descriptor of a completed submission.

    Attributes:
        event_id: Id of the created event
        address_id: Id of the created address (None for online events)
        banner_url: Storage URL of the banner, if one was uploaded
        ticket_map: Ticket name -> ticket id
        category_map: Ticket category name -> category id
        field_ticket_map: Ticket name -> checkout field ids
        coupon_ticket_map: Ticket name -> targeted coupon ids
        field_relations: Number of field <-> ticket relations created
        coupon_relations: Number of coupon <-> ticket relations created
        created_resources: Every (resource, id) created by the run
    """
    event_id: str
    address_id: Optional[str] = None
    banner_url: Optional[str] = None
    ticket_map: dict[str, str] = field(default_factory=dict)
    category_map: dict[str, str] = field(default_factory=dict)
    field_ticket_map: dict[str, list[str]] = field(default_factory=dict)
    coupon_ticket_map: dict[str, list[str]] = field(default_factory=dict)
    field_relations: int = 0
    coupon_relations: int = 0
    created_resources: list[tuple[str, str]] = field(default_factory=list)


class EventSubmissionOrchestrator:
    """
    Runs event submissions against a resource gateway.

    One orchestrator may serve many runs, one at a time: every run resets
    and writes the shared ``progress`` object, so concurrent post_event
    calls queue on a lock. Each run gets fresh name maps, fresh status
    lookups and its own created-resource record.
    """

    def __init__(
        self,
        gateway: ResourceGateway,
        status_names: Optional[StatusNames] = None,
        utc_offset: str = DEFAULT_UTC_OFFSET,
        timeout: Optional[float] = None,
        progress: Optional[SubmissionProgress] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            gateway: Gateway every remote call goes through
            status_names: Status names attached to new records
            utc_offset: Offset used by the offset-rewritten timestamp convention
            timeout: Optional deadline in seconds for a whole run
            progress: State object to publish transitions to
        """
        self._gateway = gateway
        self._status_names = status_names or StatusNames()
        self._utc_offset = utc_offset
        self._timeout = timeout
        self.progress = progress or SubmissionProgress()
        self._run_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def post_event(self, submission: EventSubmission) -> SubmissionResult:
        """
        Create an event and all of its nested resources.

        Returns:
            SubmissionResult with the event id and the derived name maps

        Raises:
            SubmissionError: The first failure detected; no partial result
            GatewayError: If the platform cannot be reached
        """
        async with self._run_lock:
            return await self._submit(submission)

    async def _submit(self, submission: EventSubmission) -> SubmissionResult:
        gateway = RecordingGateway(self._gateway)
        self.progress.reset()
        self.progress.set_loading(True)
        logger.info("Submitting event '%s'", submission.name)

        try:
            if self._timeout is not None:
                try:
                    result = await asyncio.wait_for(
                        self._run(gateway, submission), self._timeout
                    )
                except asyncio.TimeoutError:
                    raise SubmissionTimeout(
                        f"Submission of '{submission.name}' exceeded {self._timeout}s",
                        name=submission.name,
                    )
            else:
                result = await self._run(gateway, submission)
        except Exception as e:
            self._report_failure(e, gateway.created)
            raise
        finally:
            self.progress.set_loading(False)

        result.created_resources = list(gateway.created)
        self.progress.set_state(SubmissionState.SUCCEEDED)
        logger.info(
            "Event '%s' created as %s with %d ticket(s)",
            submission.name, result.event_id, len(result.ticket_map),
        )
        return result

    async def add_tickets(
        self, event_id: str, tickets: Sequence[TicketInput]
    ) -> TicketStepResult:
        """
        Add tickets to an existing event.

        Unlike post_event, ticket timestamps use the offset-rewritten
        convention.

        Raises:
            StatusNotFound: If the ticket status cannot be resolved
            TicketCreateFailed: If any ticket or category create fails
        """
        gateway = RecordingGateway(self._gateway)
        step = TicketStep(
            gateway,
            StatusResolver(gateway),
            self._status_names.ticket_available,
            convention=TimestampConvention.OFFSET_REWRITTEN,
            utc_offset=self._utc_offset,
        )
        try:
            return await step.run(event_id, tickets)
        except Exception as e:
            self._report_failure(e, gateway.created, publish=False)
            raise

    # -------------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------------

    async def _run(
        self, gateway: ResourceGateway, submission: EventSubmission
    ) -> SubmissionResult:
        statuses = StatusResolver(gateway)

        self.progress.set_state(SubmissionState.ADDRESS_PENDING)
        address_id = await AddressStep(gateway).run(submission)

        self.progress.set_state(SubmissionState.EVENT_PENDING)
        event_id = await EventStep(
            gateway, statuses, self._status_names.event_draft
        ).run(submission, address_id)
        result = SubmissionResult(event_id=event_id, address_id=address_id)

        if submission.banner is not None:
            self.progress.set_state(SubmissionState.BANNER_PENDING)
            result.banner_url = await BannerStep(gateway).run(event_id, submission.banner)

        self.progress.set_state(SubmissionState.TICKETS_PENDING)
        tickets = await TicketStep(
            gateway,
            statuses,
            self._status_names.ticket_available,
            convention=TimestampConvention.RAW_UTC,
            utc_offset=self._utc_offset,
        ).run(event_id, submission.tickets)
        result.ticket_map = tickets.ticket_map
        result.category_map = tickets.category_map

        if submission.custom_fields:
            self.progress.set_state(SubmissionState.CUSTOM_FIELDS_PENDING)
            result.field_ticket_map = await CustomFieldStep(gateway).run(
                event_id, submission.custom_fields
            )

            if result.ticket_map and result.field_ticket_map:
                self.progress.set_state(SubmissionState.FIELD_RELATIONS_PENDING)
                result.field_relations = await FieldTicketRelationStep(gateway).run(
                    result.ticket_map, result.field_ticket_map
                )

        if submission.coupons:
            self.progress.set_state(SubmissionState.COUPONS_PENDING)
            result.coupon_ticket_map = await CouponStep(
                gateway,
                statuses,
                self._status_names.coupon_available,
                utc_offset=self._utc_offset,
            ).run(event_id, submission.coupons)

            if result.ticket_map and result.coupon_ticket_map:
                self.progress.set_state(SubmissionState.COUPON_RELATIONS_PENDING)
                result.coupon_relations = await CouponTicketRelationStep(gateway).run(
                    result.ticket_map, result.coupon_ticket_map
                )

        return result

    def _report_failure(
        self,
        error: Exception,
        created: list[tuple[str, str]],
        publish: bool = True,
    ) -> None:
        if isinstance(error, SubmissionError):
            error.created_resources = list(created)
        logger.error("Submission failed: %s", error)
        if created:
            logger.warning(
                "%d resource(s) were created before the failure and were not removed: %s",
                len(created),
                ", ".join(f"{resource}#{resource_id}" for resource, resource_id in created),
            )
        if publish:
            self.progress.set_failed(error)
