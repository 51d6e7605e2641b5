"""
Shared helpers for submission steps.
"""

from typing import Optional, Type

from event_publisher.envelope import Envelope, ResponseCode, classify
from event_publisher.errors import SubmissionError


def expect_record_id(
    envelope: Envelope,
    expected: ResponseCode,
    error_cls: Type[SubmissionError],
    description: str,
    name: Optional[str] = None,
):
    """
    Return the record id of a successful envelope or raise ``error_cls``.

    Args:
        envelope: Gateway response
        expected: Success code of the operation
        error_cls: Error raised on failure
        description: Human-readable subject used in the error message
        name: Submission-supplied name of the subject, if any

    Raises:
        error_cls: If the envelope is not a success or carries no id
    """
    outcome = classify(envelope, expected)
    if not outcome.ok:
        raise error_cls(
            f"Failed to create {description}: {outcome.message}",
            name=name,
            code=outcome.code,
        )
    if outcome.record_id is None:
        raise error_cls(
            f"Failed to create {description}: response carries no id",
            name=name,
            code=expected.value,
        )
    return outcome.record_id
