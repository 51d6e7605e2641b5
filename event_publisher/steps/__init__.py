"""
Submission steps, one per remote creation stage.
"""

from event_publisher.steps.address import AddressStep
from event_publisher.steps.banner import BannerStep
from event_publisher.steps.coupons import CouponStep
from event_publisher.steps.custom_fields import CustomFieldStep
from event_publisher.steps.event import EventStep
from event_publisher.steps.relations import (
    CouponTicketRelationStep,
    FieldTicketRelationStep,
    TicketRelationStep,
)
from event_publisher.steps.tickets import TicketStep, TicketStepResult

__all__ = [
    "AddressStep",
    "BannerStep",
    "CouponStep",
    "CouponTicketRelationStep",
    "CustomFieldStep",
    "EventStep",
    "FieldTicketRelationStep",
    "TicketRelationStep",
    "TicketStep",
    "TicketStepResult",
]
