"""
Coupon step.

Coupons are split into targeted coupons (restricted to named tickets) and
global coupons. Both partitions run concurrently with each other, and the
coupons of each partition run concurrently too. Targeted coupons record
their id under every ticket name they target.
"""

import logging
from typing import Sequence

from event_publisher.envelope import ResponseCode
from event_publisher.errors import CouponCreateFailed
from event_publisher.formatting import (
    DEFAULT_UTC_OFFSET,
    TimestampConvention,
    format_timestamp,
    parse_locale_decimal,
)
from event_publisher.gateway import ResourceGateway
from event_publisher.models import CouponInput
from event_publisher.name_map import NameKeyedMultiMap, join_all
from event_publisher.status import StatusResolver
from event_publisher.steps.base import expect_record_id

logger = logging.getLogger("event_publisher.steps.coupons")

COUPON_RESOURCE = "coupon"
COUPON_MODULE = "coupon"


class CouponStep:

    def __init__(
        self,
        gateway: ResourceGateway,
        statuses: StatusResolver,
        available_status_name: str,
        utc_offset: str = DEFAULT_UTC_OFFSET,
    ):
        self._gateway = gateway
        self._statuses = statuses
        self._available_status_name = available_status_name
        self._utc_offset = utc_offset

    async def run(
        self, event_id: str, coupons: Sequence[CouponInput]
    ) -> dict[str, list[str]]:
        """
        Create every coupon of the list.

        Returns:
            Ticket name -> ids of the coupons restricted to it

        Raises:
            StatusNotFound: If the coupon status cannot be resolved
            CouponCreateFailed: If any coupon create fails
        """
        if not coupons:
            return {}

        status_id = await self._statuses.resolve(COUPON_MODULE, self._available_status_name)

        targeted = [coupon for coupon in coupons if not coupon.is_global]
        global_coupons = [coupon for coupon in coupons if coupon.is_global]
        coupon_ticket_map = NameKeyedMultiMap()

        await join_all([
            self._create_targeted(event_id, targeted, status_id, coupon_ticket_map),
            self._create_global(event_id, global_coupons, status_id),
        ])

        logger.info(
            "Created %d targeted and %d global coupon(s) for event %s",
            len(targeted), len(global_coupons), event_id,
        )
        return coupon_ticket_map.to_dict()

    async def _create_targeted(
        self,
        event_id: str,
        coupons: list[CouponInput],
        status_id: str,
        coupon_ticket_map: NameKeyedMultiMap,
    ) -> None:
        async def create_and_record(coupon: CouponInput) -> None:
            coupon_id = await self._create_coupon(event_id, coupon, status_id)
            coupon_ticket_map.add_all(coupon.tickets, coupon_id)

        await join_all(create_and_record(coupon) for coupon in coupons)

    async def _create_global(
        self, event_id: str, coupons: list[CouponInput], status_id: str
    ) -> None:
        await join_all(
            self._create_coupon(event_id, coupon, status_id) for coupon in coupons
        )

    async def _create_coupon(
        self, event_id: str, coupon: CouponInput, status_id: str
    ) -> str:
        try:
            discount_value = parse_locale_decimal(coupon.discount_value)
            start_date = format_timestamp(
                coupon.start_date,
                coupon.start_time,
                TimestampConvention.OFFSET_REWRITTEN,
                self._utc_offset,
            )
            end_date = format_timestamp(
                coupon.end_date,
                coupon.end_time,
                TimestampConvention.OFFSET_REWRITTEN,
                self._utc_offset,
            )
        except ValueError as e:
            raise CouponCreateFailed(
                f"Failed to create coupon '{coupon.code}': {e}", name=coupon.code
            ) from e

        payload = {
            "event_id": event_id,
            "status_id": status_id,
            "code": coupon.code,
            "discount_value": discount_value,
            "discount_type": coupon.discount_type.value,
            "max_uses": coupon.max_uses,
            "start_date": start_date,
            "end_date": end_date,
        }

        envelope = await self._gateway.create(COUPON_RESOURCE, payload)
        coupon_id = expect_record_id(
            envelope,
            ResponseCode.CREATE_SUCCESS,
            CouponCreateFailed,
            f"coupon '{coupon.code}'",
            name=coupon.code,
        )
        logger.debug("Created coupon %s (%s)", coupon.code, coupon_id)
        return coupon_id
