"""
Event step: creates the event record every later step hangs off.
"""

import logging
from typing import Optional

from event_publisher.envelope import ResponseCode
from event_publisher.errors import EventCreateFailed
from event_publisher.formatting import compose_utc_timestamp
from event_publisher.gateway import ResourceGateway
from event_publisher.models import EventSubmission
from event_publisher.status import StatusResolver
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.event")

EVENT_RESOURCE = "event"
EVENT_MODULE = "event"


class EventStep:

    def __init__(
        self,
        gateway: ResourceGateway,
        statuses: StatusResolver,
        draft_status_name: str,
    ):
        self._gateway = gateway
        self._statuses = statuses
        self._draft_status_name = draft_status_name

    async def run(self, submission: EventSubmission, address_id: Optional[str]) -> str:
        """
        Create the event in draft status.

        Timestamps are plain UTC concatenations; no offset rewrite applies.

        Raises:
            StatusNotFound: If the draft status cannot be resolved
            EventCreateFailed: If the platform rejects the event
        """
        status_id = await self._statuses.resolve(EVENT_MODULE, self._draft_status_name)

        payload = {
            "name": submission.name,
            "description": submission.description,
            "event_type": submission.event_type.value,
            "status_id": status_id,
            "address_id": address_id,
            "start_date": compose_utc_timestamp(submission.start_date, submission.start_time),
            "end_date": compose_utc_timestamp(submission.end_date, submission.end_time),
        }
        if submission.category_id:
            payload["category_id"] = submission.category_id

        envelope = await self._gateway.create(EVENT_RESOURCE, payload)
        event_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            EventCreateFailed,
            f"event '{submission.name}'",
            name=submission.name,
        )
        logger.debug("Created event %s", event_id)
        return event_id
