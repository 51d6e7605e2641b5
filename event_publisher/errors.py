"""
Submission error taxonomy.

Every failure of an orchestration step is raised as a SubmissionError
subclass naming the remote resource involved and, when known, the
submission-supplied name (ticket name, category name, coupon code...).
"""

from typing import Optional


class SubmissionError(Exception):
    """Base exception for event submission failures."""

    resource: str = ""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        name: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        if resource is not None:
            self.resource = resource
        self.name = name
        self.code = code
        # Filled in by the orchestrator when the run aborts
        self.created_resources: list[tuple[str, str]] = []


# ----------------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------------


class LookupFailed(SubmissionError):
    """Raised when a read-only lookup finds nothing usable."""

    pass


class StatusNotFound(LookupFailed):
    """Raised when no status matches a module/name pair."""

    resource = "statuses"


# ----------------------------------------------------------------------------
# Creates
# ----------------------------------------------------------------------------


class CreateFailed(SubmissionError):
    """Raised when a remote resource could not be created."""

    pass


class AddressCreateFailed(CreateFailed):
    resource = "address"


class EventCreateFailed(CreateFailed):
    resource = "event"


class AttachmentCreateFailed(CreateFailed):
    resource = "event-attachment"


class TicketCreateFailed(CreateFailed):
    resource = "ticket"


class CategoryCreateFailed(TicketCreateFailed):
    """A ticket's category could not be created, failing the ticket step."""

    resource = "ticket-event-category"


class CheckoutFieldCreateFailed(CreateFailed):
    resource = "event-checkout-field"


class CustomFieldsCreateFailed(CreateFailed):
    """Step-level failure wrapping a CheckoutFieldCreateFailed."""

    resource = "event-checkout-field"


class CouponCreateFailed(CreateFailed):
    resource = "coupon"


class RelationCreateFailed(CreateFailed):
    """Raised when a many-to-many join resource could not be created."""

    pass


class UnresolvedTicketName(RelationCreateFailed):
    """A relation references a ticket name that has no created ticket."""

    resource = "ticket"


# ----------------------------------------------------------------------------
# Banner
# ----------------------------------------------------------------------------


class UploadFailed(SubmissionError):
    resource = "upload"


class BannerUpdateFailed(SubmissionError):
    resource = "event-attachment"


# ----------------------------------------------------------------------------
# Run-level
# ----------------------------------------------------------------------------


class SubmissionTimeout(SubmissionError):
    """Raised when a whole submission exceeds its deadline."""

    resource = "event"
