"""
Pydantic models for event submissions.

A submission is the flat input of one event creation run. It is frozen
once parsed: steps read from it but never modify it.

Design:
- Dates are kept as "YYYY-MM-DD" strings and times as "HH:MM" strings,
  exactly as entered; timestamp rendering happens in formatting.py
- Monetary values are kept as locale strings ("10,50") until a step
  converts them for the wire
- Tickets are referenced by name from custom fields and coupons
"""

import enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ============================================================================
# Enums
# ============================================================================


class EventType(str, enum.Enum):
    """Where the event takes place."""
    ONLINE = "Online"
    IN_PERSON = "In-person"
    HYBRID = "Hybrid"


class DiscountType(str, enum.Enum):
    """How a coupon discount is applied."""
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class FieldOption(str, enum.Enum):
    """Boolean flags a checkout field may carry."""
    REQUIRED = "required"
    VISIBLE_ON_TICKET = "visible_on_ticket"
    IS_UNIQUE = "is_unique"


_FROZEN = ConfigDict(frozen=True)


# ============================================================================
# Nested inputs
# ============================================================================


class AddressInput(BaseModel):
    """Physical address of a non-online event."""

    model_config = _FROZEN

    street: str = Field(..., min_length=1)
    number: str = Field(..., min_length=1)
    neighborhood: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    complement: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("number", "zip_code", mode="before")
    @classmethod
    def coerce_to_string(cls, v):
        """YAML/JSON often carry street numbers and zip codes as integers."""
        if isinstance(v, int):
            return str(v)
        return v


class BannerUpload(BaseModel):
    """Binary banner image to attach to the event."""

    model_config = _FROZEN

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = Field(default="image/png")


class TicketInput(BaseModel):
    """
    One ticket of the submission.

    Required:
        name: Ticket name, unique within the submission
        price: Locale decimal string ("10,50")
        quantity: Total tickets on sale
        start_date/start_time, end_date/end_time: Sale window

    Optional:
        min_purchase: Minimum tickets per buyer (default 1)
        max_purchase: Maximum tickets per buyer
        availability: Audience label (default "Public")
        category: Category name; tickets sharing a name share a category
        display_order: Explicit ordering (defaults to 1-based position)
    """

    model_config = _FROZEN

    name: str = Field(..., min_length=1)
    price: str
    quantity: int
    min_purchase: int = Field(default=1)
    max_purchase: Optional[int] = None
    start_date: str = Field(..., pattern=DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_date: str = Field(..., pattern=DATE_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    availability: str = Field(default="Public")
    category: Optional[str] = None
    display_order: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        if isinstance(v, (int, float)):
            return str(v)
        return v


class CustomFieldInput(BaseModel):
    """
    A checkout question asked once per assigned person type.

    ``tickets`` lists the ticket names the field attaches to.
    """

    model_config = _FROZEN

    name: str = Field(..., min_length=1)
    field_type: str = Field(..., min_length=1)
    person_types: List[str] = Field(default_factory=list)
    options: frozenset[FieldOption] = Field(default_factory=frozenset)
    display_order: Optional[int] = None
    tickets: List[str] = Field(default_factory=list)

    def has_option(self, option: FieldOption) -> bool:
        return option in self.options


class CouponInput(BaseModel):
    """A discount coupon; an empty ``tickets`` list makes it global."""

    model_config = _FROZEN

    code: str = Field(..., min_length=1)
    discount_type: DiscountType
    discount_value: str
    max_uses: int
    start_date: str = Field(..., pattern=DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_date: str = Field(..., pattern=DATE_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    tickets: List[str] = Field(default_factory=list)

    @field_validator("discount_value", mode="before")
    @classmethod
    def coerce_discount(cls, v):
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @property
    def is_global(self) -> bool:
        return not self.tickets


# ============================================================================
# Submission
# ============================================================================


class EventSubmission(BaseModel):
    """
    Flat "new event" submission.

    The address is required unless the event is fully online.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Summer Festival",
                "event_type": "In-person",
                "start_date": "2025-02-01",
                "start_time": "10:00",
                "end_date": "2025-02-01",
                "end_time": "22:00",
                "address": {
                    "street": "Rua das Flores",
                    "number": "100",
                    "neighborhood": "Centro",
                    "city": "Curitiba",
                    "state": "PR",
                    "zip_code": "80000-000",
                },
                "tickets": [
                    {
                        "name": "Standard",
                        "price": "100,00",
                        "quantity": 100,
                        "start_date": "2025-01-01",
                        "start_time": "10:00",
                        "end_date": "2025-02-01",
                        "end_time": "12:00",
                    }
                ],
            }
        },
    )

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    event_type: EventType = Field(default=EventType.IN_PERSON)
    category_id: Optional[str] = None
    start_date: str = Field(..., pattern=DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_date: str = Field(..., pattern=DATE_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    address: Optional[AddressInput] = None
    banner: Optional[BannerUpload] = None
    tickets: List[TicketInput] = Field(default_factory=list)
    custom_fields: List[CustomFieldInput] = Field(default_factory=list)
    coupons: List[CouponInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()

    @model_validator(mode="after")
    def require_address_when_not_online(self) -> "EventSubmission":
        if self.event_type != EventType.ONLINE and self.address is None:
            raise ValueError("address is required for events that are not online")
        return self

    @property
    def is_online(self) -> bool:
        return self.event_type == EventType.ONLINE
