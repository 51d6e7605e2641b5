"""
Unit tests for the coupon step.
"""

import pytest

from event_publisher.errors import CouponCreateFailed, StatusNotFound
from event_publisher.models import CouponInput
from event_publisher.status import StatusResolver
from event_publisher.steps import CouponStep


@pytest.fixture
def step(fake_gateway):
    return CouponStep(fake_gateway, StatusResolver(fake_gateway), "Available")


def _coupons(coupon_data, *specs):
    return [CouponInput.model_validate(coupon_data(*args)) for args in specs]


class TestCouponStep:
    """Tests for CouponStep.run()."""

    @pytest.mark.asyncio
    async def test_payload_uses_offset_timestamps(self, fake_gateway, step, coupon_data):
        coupons = _coupons(coupon_data, ("OFF5", ["T1"]))

        await step.run("evt_1", coupons)

        payload = fake_gateway.calls_to("create", "coupon")[0]
        assert payload == {
            "event_id": "evt_1",
            "status_id": "sts_coupon_available",
            "code": "OFF5",
            "discount_value": 5,
            "discount_type": "PERCENTAGE",
            "max_uses": 50,
            "start_date": "2025-01-10T09:00:00.000-0300",
            "end_date": "2025-01-31T23:59:00.000-0300",
        }

    @pytest.mark.asyncio
    async def test_fractional_discount(self, fake_gateway, step, coupon_data):
        coupons = [
            CouponInput.model_validate(
                coupon_data("FIX", discount_type="FIXED", discount_value="12,75")
            )
        ]

        await step.run("evt_1", coupons)

        payload = fake_gateway.calls_to("create", "coupon")[0]
        assert payload["discount_value"] == 12.75
        assert payload["discount_type"] == "FIXED"

    @pytest.mark.asyncio
    async def test_custom_offset(self, fake_gateway, coupon_data):
        step = CouponStep(
            fake_gateway, StatusResolver(fake_gateway), "Available", utc_offset="+0100"
        )

        await step.run("evt_1", _coupons(coupon_data, ("OFF5",)))

        payload = fake_gateway.calls_to("create", "coupon")[0]
        assert payload["start_date"].endswith("+0100")

    @pytest.mark.asyncio
    async def test_targeted_coupons_fill_ticket_map(self, fake_gateway, step, coupon_data):
        coupons = _coupons(
            coupon_data,
            ("VIP10", ["VIP", "Backstage"]),
            ("ALL5",),
            ("EARLY", ["VIP"]),
        )

        coupon_ticket_map = await step.run("evt_1", coupons)

        assert {name: sorted(ids) for name, ids in coupon_ticket_map.items()} == {
            "VIP": ["coupon:EARLY", "coupon:VIP10"],
            "Backstage": ["coupon:VIP10"],
        }
        assert len(fake_gateway.calls_to("create", "coupon")) == 3

    @pytest.mark.asyncio
    async def test_global_coupons_leave_map_empty(self, fake_gateway, step, coupon_data):
        coupon_ticket_map = await step.run("evt_1", _coupons(coupon_data, ("ALL5",), ("ALL10",)))

        assert coupon_ticket_map == {}
        assert len(fake_gateway.calls_to("create", "coupon")) == 2

    @pytest.mark.asyncio
    async def test_partitions_run_concurrently(self, fake_gateway, step, coupon_data):
        await step.run("evt_1", _coupons(coupon_data, ("VIP10", ["VIP"]), ("ALL5",)))

        assert fake_gateway.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_empty_list_makes_no_calls(self, fake_gateway, step):
        assert await step.run("evt_1", []) == {}
        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_status_resolved_before_creates(self, fake_gateway, step, coupon_data):
        await step.run("evt_1", _coupons(coupon_data, ("ALL5",)))

        assert fake_gateway.sequence[0] == ("search", "statuses")
        assert fake_gateway.calls[0][2] == {"module": "coupon", "name": "Available"}

    @pytest.mark.asyncio
    async def test_missing_status(self, fake_gateway, step, coupon_data):
        del fake_gateway.statuses[("coupon", "Available")]

        with pytest.raises(StatusNotFound):
            await step.run("evt_1", _coupons(coupon_data, ("ALL5",)))

        assert fake_gateway.calls_to("create", "coupon") == []

    @pytest.mark.asyncio
    async def test_failure_names_coupon(self, fake_gateway, step, coupon_data):
        fake_gateway.fail_when("create", "coupon", lambda payload: payload["code"] == "ALL5")

        with pytest.raises(CouponCreateFailed) as exc_info:
            await step.run("evt_1", _coupons(coupon_data, ("VIP10", ["VIP"]), ("ALL5",)))

        assert exc_info.value.name == "ALL5"
        # The other partition still ran
        assert len(fake_gateway.calls_to("create", "coupon")) == 2

    @pytest.mark.asyncio
    async def test_invalid_discount(self, fake_gateway, step, coupon_data):
        coupons = [CouponInput.model_validate(coupon_data("BAD", discount_value="five"))]

        with pytest.raises(CouponCreateFailed, match="BAD"):
            await step.run("evt_1", coupons)
