"""
Address step: creates the event's address unless the event is online.
"""

import logging
from typing import Optional

from event_publisher.envelope import ResponseCode
from event_publisher.errors import AddressCreateFailed
from event_publisher.gateway import ResourceGateway
from event_publisher.models import EventSubmission
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.address")

ADDRESS_RESOURCE = "address"


class AddressStep:

    def __init__(self, gateway: ResourceGateway):
        self._gateway = gateway

    async def run(self, submission: EventSubmission) -> Optional[str]:
        """
        Create the address of a non-online event.

        Returns:
            The new address id, or None when the event is online

        Raises:
            AddressCreateFailed: If the platform rejects the address
        """
        if submission.is_online or submission.address is None:
            logger.debug("Online event, no address created")
            return None

        address = submission.address
        payload = {
            "street": address.street,
            "number": address.number,
            "neighborhood": address.neighborhood,
            "city": address.city,
            "state": address.state,
            "zip_code": address.zip_code,
        }
        if address.complement:
            payload["complement"] = address.complement
        if address.latitude is not None:
            payload["latitude"] = address.latitude
        if address.longitude is not None:
            payload["longitude"] = address.longitude

        envelope = await self._gateway.create(ADDRESS_RESOURCE, payload)
        address_id = expect_record_id(
            envelope, ResponseCode.CREATE_SUCCESS, AddressCreateFailed, "address"
        )
        logger.debug("Created address %s", address_id)
        return address_id
