"""
Relation steps.

Materialize many-to-many join records between tickets and the resources
attached to them (checkout fields, coupons). Every ticket name must already
resolve to a created ticket; all pairs are created concurrently.
"""

import logging
from typing import Mapping, Sequence

from event_publisher.envelope import ResponseCode, classify
from event_publisher.errors import RelationCreateFailed, UnresolvedTicketName
from event_publisher.gateway import ResourceGateway
from event_publisher.name_map import join_all

logger = logging.getLogger("event_publisher.steps.relations")


class TicketRelationStep:
    """
    Creates ``resource`` join records of (foreign id, ticket id) pairs.

    Attributes:
        resource: Join collection name
        foreign_key: Payload key carrying the non-ticket side
    """

    def __init__(self, gateway: ResourceGateway, resource: str, foreign_key: str):
        self._gateway = gateway
        self.resource = resource
        self.foreign_key = foreign_key

    async def run(
        self,
        ticket_map: Mapping[str, str],
        attachments: Mapping[str, Sequence[str]],
    ) -> int:
        """
        Create one join record per (attached id, ticket id) pair.

        Args:
            ticket_map: Ticket name -> ticket id
            attachments: Ticket name -> ids of resources attached to it

        Returns:
            Number of join records created

        Raises:
            UnresolvedTicketName: If a ticket name has no created ticket
            RelationCreateFailed: If any join create fails
        """
        if not ticket_map or not attachments:
            return 0

        pairs = []
        for ticket_name, foreign_ids in attachments.items():
            ticket_id = ticket_map.get(ticket_name)
            if ticket_id is None:
                raise UnresolvedTicketName(
                    f"Cannot relate {self.resource}: no ticket named '{ticket_name}'",
                    name=ticket_name,
                )
            pairs.extend((foreign_id, ticket_id) for foreign_id in foreign_ids)

        await join_all(
            self._create_relation(foreign_id, ticket_id)
            for foreign_id, ticket_id in pairs
        )
        logger.info("Created %d %s relation(s)", len(pairs), self.resource)
        return len(pairs)

    async def _create_relation(self, foreign_id: str, ticket_id: str) -> None:
        envelope = await self._gateway.create(
            self.resource, {self.foreign_key: foreign_id, "ticket_id": ticket_id}
        )
        outcome = classify(envelope, ResponseCode.CREATE_SUCCESS)
        if not outcome.ok:
            raise RelationCreateFailed(
                f"Failed to relate {foreign_id} to ticket {ticket_id}: {outcome.message}",
                resource=self.resource,
                code=outcome.code,
            )


class FieldTicketRelationStep(TicketRelationStep):

    def __init__(self, gateway: ResourceGateway):
        super().__init__(gateway, "event-checkout-field-ticket", "event_checkout_field_id")


class CouponTicketRelationStep(TicketRelationStep):

    def __init__(self, gateway: ResourceGateway):
        super().__init__(gateway, "coupon-ticket", "coupon_id")
