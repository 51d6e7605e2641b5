"""
Status resolution.

Statuses are platform records looked up by (module, name), e.g.
("ticket", "Available"). Each submission run resolves them again; nothing
is cached between runs.
"""

import logging
from dataclasses import dataclass

from event_publisher.envelope import ResponseCode, classify
from event_publisher.errors import StatusNotFound
from event_publisher.gateway import ResourceGateway

logger = logging.getLogger("event_publisher.status")

STATUS_RESOURCE = "statuses"


@dataclass(frozen=True)
class StatusNames:
    """
    Human-readable status names attached to newly created records.

    Attributes:
        event_draft: Status given to a newly created event
        ticket_available: Status given to newly created tickets
        coupon_available: Status given to newly created coupons
    """
    event_draft: str = "Draft"
    ticket_available: str = "Available"
    coupon_available: str = "Available"


class StatusResolver:
    """Looks up status identifiers through the gateway search endpoint."""

    def __init__(self, gateway: ResourceGateway):
        self._gateway = gateway

    async def resolve(self, module: str, name: str) -> str:
        """
        Resolve the identifier of the status ``name`` in ``module``.

        Raises:
            StatusNotFound: If the search fails or matches nothing
        """
        envelope = await self._gateway.search(
            STATUS_RESOURCE, {"module": module, "name": name}
        )
        outcome = classify(envelope, ResponseCode.SEARCH_SUCCESS)
        if not outcome.ok:
            raise StatusNotFound(
                f"Failed to look up status '{name}' of module '{module}': {outcome.message}",
                name=name,
                code=outcome.code,
            )

        records = outcome.records
        if not records or not isinstance(records[0], dict) or records[0].get("id") is None:
            raise StatusNotFound(
                f"No status '{name}' found for module '{module}'",
                name=name,
                code=ResponseCode.SEARCH_SUCCESS.value,
            )

        status_id = records[0]["id"]
        logger.debug("Resolved status %s/%s -> %s", module, name, status_id)
        return status_id
