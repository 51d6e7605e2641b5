"""
Unit tests for submission models.
"""

import pytest
from pydantic import ValidationError

from event_publisher.models import (
    CouponInput,
    CustomFieldInput,
    EventSubmission,
    EventType,
    FieldOption,
    TicketInput,
)


class TestEventSubmission:
    """Tests for EventSubmission parsing."""

    def test_online_event_without_address(self, online_event_data):
        submission = EventSubmission.model_validate(online_event_data)

        assert submission.is_online
        assert submission.address is None
        assert submission.tickets == []

    @pytest.mark.parametrize("event_type", ["In-person", "Hybrid"])
    def test_address_required_unless_online(self, online_event_data, event_type):
        online_event_data["event_type"] = event_type

        with pytest.raises(ValidationError, match="address is required"):
            EventSubmission.model_validate(online_event_data)

    def test_in_person_event(self, in_person_event_data):
        submission = EventSubmission.model_validate(in_person_event_data)

        assert submission.event_type == EventType.IN_PERSON
        assert submission.address.city == "Curitiba"

    def test_numeric_address_parts_become_strings(self, in_person_event_data):
        in_person_event_data["address"]["number"] = 100

        submission = EventSubmission.model_validate(in_person_event_data)

        assert submission.address.number == "100"

    def test_name_is_stripped(self, online_event_data):
        online_event_data["name"] = "  Workshop  "

        assert EventSubmission.model_validate(online_event_data).name == "Workshop"

    def test_blank_name_rejected(self, online_event_data):
        online_event_data["name"] = "   "

        with pytest.raises(ValidationError):
            EventSubmission.model_validate(online_event_data)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("start_date", "01/02/2025"),
            ("end_time", "9h"),
            ("start_time", "10:00:00"),
            ("end_time", "24:00"),
        ],
    )
    def test_date_and_time_formats(self, online_event_data, key, value):
        online_event_data[key] = value

        with pytest.raises(ValidationError):
            EventSubmission.model_validate(online_event_data)

    def test_submission_is_frozen(self, online_event_data):
        submission = EventSubmission.model_validate(online_event_data)

        with pytest.raises(ValidationError):
            submission.name = "Changed"


class TestNestedInputs:

    def test_ticket_defaults(self, ticket_data):
        data = ticket_data("T1")
        del data["min_purchase"]

        ticket = TicketInput.model_validate(data)

        assert ticket.min_purchase == 1
        assert ticket.availability == "Public"
        assert ticket.category is None

    def test_ticket_has_no_listing_flag(self, ticket_data):
        ticket = TicketInput.model_validate({**ticket_data("T1"), "visible": False})

        assert "visible" not in TicketInput.model_fields
        assert not hasattr(ticket, "visible")

    @pytest.mark.parametrize("value", ["24:00", "99:99", "12:60", "7:30"])
    def test_out_of_range_times_rejected(self, ticket_data, coupon_data, value):
        with pytest.raises(ValidationError):
            TicketInput.model_validate(ticket_data("T1", end_time=value))
        with pytest.raises(ValidationError):
            CouponInput.model_validate(coupon_data("OFF5", end_time=value))

    @pytest.mark.parametrize("value", ["00:00", "09:05", "19:59", "23:59"])
    def test_boundary_times_accepted(self, ticket_data, value):
        assert TicketInput.model_validate(ticket_data("T1", start_time=value)).start_time == value

    def test_numeric_price_becomes_string(self, ticket_data):
        assert TicketInput.model_validate(ticket_data("T1", price=25)).price == "25"

    def test_coupon_without_tickets_is_global(self, coupon_data):
        assert CouponInput.model_validate(coupon_data("ALL5")).is_global
        assert not CouponInput.model_validate(coupon_data("VIP", ["VIP"])).is_global

    def test_unknown_discount_type(self, coupon_data):
        with pytest.raises(ValidationError):
            CouponInput.model_validate(coupon_data("X", discount_type="BOGO"))

    def test_custom_field_options(self, custom_field_data):
        custom_field = CustomFieldInput.model_validate(
            custom_field_data("CPF", ["adult"], ["VIP"], options=["required", "required"])
        )

        assert custom_field.has_option(FieldOption.REQUIRED)
        assert not custom_field.has_option(FieldOption.IS_UNIQUE)
        assert len(custom_field.options) == 1

    def test_unknown_custom_field_option(self, custom_field_data):
        with pytest.raises(ValidationError):
            CustomFieldInput.model_validate(
                custom_field_data("CPF", ["adult"], ["VIP"], options=["hidden"])
            )
