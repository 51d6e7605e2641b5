"""
Unit tests for the ticket relation steps.
"""

import pytest

from event_publisher.errors import RelationCreateFailed, UnresolvedTicketName
from event_publisher.steps import CouponTicketRelationStep, FieldTicketRelationStep


TICKET_MAP = {"VIP": "tkt_vip", "Standard": "tkt_std"}


class TestFieldTicketRelationStep:
    """Tests for checkout field to ticket relations."""

    @pytest.mark.asyncio
    async def test_one_record_per_pair(self, fake_gateway):
        step = FieldTicketRelationStep(fake_gateway)

        count = await step.run(TICKET_MAP, {"VIP": ["fld_1", "fld_2"], "Standard": ["fld_1"]})

        assert count == 3
        payloads = fake_gateway.calls_to("create", "event-checkout-field-ticket")
        assert sorted((p["event_checkout_field_id"], p["ticket_id"]) for p in payloads) == [
            ("fld_1", "tkt_std"),
            ("fld_1", "tkt_vip"),
            ("fld_2", "tkt_vip"),
        ]

    @pytest.mark.asyncio
    async def test_pairs_created_concurrently(self, fake_gateway):
        step = FieldTicketRelationStep(fake_gateway)

        await step.run(TICKET_MAP, {"VIP": ["fld_1", "fld_2"]})

        assert fake_gateway.max_in_flight == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "ticket_map,attachments",
        [
            ({}, {"VIP": ["fld_1"]}),
            (TICKET_MAP, {}),
        ],
    )
    async def test_empty_side_is_a_noop(self, fake_gateway, ticket_map, attachments):
        step = FieldTicketRelationStep(fake_gateway)

        assert await step.run(ticket_map, attachments) == 0
        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_unknown_ticket_name(self, fake_gateway):
        step = FieldTicketRelationStep(fake_gateway)

        with pytest.raises(UnresolvedTicketName) as exc_info:
            await step.run(TICKET_MAP, {"Backstage": ["fld_1"]})

        assert exc_info.value.name == "Backstage"
        assert fake_gateway.calls == []


class TestCouponTicketRelationStep:
    """Tests for coupon to ticket relations."""

    @pytest.mark.asyncio
    async def test_payload_keys(self, fake_gateway):
        step = CouponTicketRelationStep(fake_gateway)

        await step.run(TICKET_MAP, {"VIP": ["cpn_1"]})

        assert fake_gateway.calls == [
            ("create", "coupon-ticket", {"coupon_id": "cpn_1", "ticket_id": "tkt_vip"})
        ]

    @pytest.mark.asyncio
    async def test_failure_reports_join_resource(self, fake_gateway):
        fake_gateway.fail_when("create", "coupon-ticket")
        step = CouponTicketRelationStep(fake_gateway)

        with pytest.raises(RelationCreateFailed) as exc_info:
            await step.run(TICKET_MAP, {"VIP": ["cpn_1"], "Standard": ["cpn_1"]})

        assert exc_info.value.resource == "coupon-ticket"
        assert exc_info.value.code == "CREATE_ERROR"
        assert len(fake_gateway.calls_to("create", "coupon-ticket")) == 2
