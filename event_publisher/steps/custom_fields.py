"""
Custom field step.

Creates one checkout field per (field, person type) pair. Runs strictly
sequentially, field by field and person type by person type, and records
which tickets each created field attaches to.
"""

import logging
from typing import Sequence

from event_publisher.envelope import ResponseCode
from event_publisher.errors import CheckoutFieldCreateFailed, CustomFieldsCreateFailed
from event_publisher.gateway import ResourceGateway
from event_publisher.models import CustomFieldInput, FieldOption
from event_publisher.name_map import NameKeyedMultiMap
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.custom_fields")

CHECKOUT_FIELD_RESOURCE = "event-checkout-field"


class CustomFieldStep:

    def __init__(self, gateway: ResourceGateway):
        self._gateway = gateway

    async def run(
        self, event_id: str, fields: Sequence[CustomFieldInput]
    ) -> dict[str, list[str]]:
        """
        Create the checkout fields of the event.

        Returns:
            Ticket name -> ids of the checkout fields attached to it

        Raises:
            CustomFieldsCreateFailed: If any checkout field create fails
        """
        field_ticket_map = NameKeyedMultiMap()

        try:
            for index, custom_field in enumerate(fields):
                for person_type in custom_field.person_types:
                    field_id = await self._create_field(
                        event_id, custom_field, person_type, index
                    )
                    field_ticket_map.add_all(custom_field.tickets, field_id)
        except CheckoutFieldCreateFailed as e:
            raise CustomFieldsCreateFailed(
                f"Failed to create custom fields: {e}", name=e.name, code=e.code
            ) from e

        logger.info("Created custom fields for event %s", event_id)
        return field_ticket_map.to_dict()

    async def _create_field(
        self,
        event_id: str,
        custom_field: CustomFieldInput,
        person_type: str,
        index: int,
    ) -> str:
        display_order = (
            custom_field.display_order
            if custom_field.display_order is not None
            else index + 1
        )
        payload = {
            "event_id": event_id,
            "name": custom_field.name,
            "type": custom_field.field_type,
            "person_type": person_type,
            "required": custom_field.has_option(FieldOption.REQUIRED),
            "is_unique": custom_field.has_option(FieldOption.IS_UNIQUE),
            "visible_on_ticket": custom_field.has_option(FieldOption.VISIBLE_ON_TICKET),
            "display_order": display_order,
        }

        envelope = await self._gateway.create(CHECKOUT_FIELD_RESOURCE, payload)
        field_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            CheckoutFieldCreateFailed,
            f"checkout field '{custom_field.name}' for {person_type}",
            name=custom_field.name,
        )
        logger.debug(
            "Created checkout field %s/%s (%s)", custom_field.name, person_type, field_id
        )
        return field_id
