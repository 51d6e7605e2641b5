"""
Submission progress state.

Plain owned-state object the orchestrator updates through explicit setters.
UIs and the CLI observe it by polling the attributes or registering a
listener.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import Callable, Optional


logger = logging.getLogger("event_publisher.progress")


class SubmissionState(str, enum.Enum):
    """Orchestration states, in the order a full run visits them."""
    IDLE = "idle"
    ADDRESS_PENDING = "address_pending"
    EVENT_PENDING = "event_pending"
    BANNER_PENDING = "banner_pending"
    TICKETS_PENDING = "tickets_pending"
    CUSTOM_FIELDS_PENDING = "custom_fields_pending"
    FIELD_RELATIONS_PENDING = "field_relations_pending"
    COUPONS_PENDING = "coupons_pending"
    COUPON_RELATIONS_PENDING = "coupon_relations_pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({SubmissionState.SUCCEEDED, SubmissionState.FAILED})

ProgressListener = Callable[["SubmissionProgress"], None]


class SubmissionProgress:
    """
    Progress of one submission run.

    Attributes:
        state: Current orchestration state
        is_loading: True while a run is in flight
        failure: Error that moved the run to FAILED, if any
        history: (state, timestamp) of every transition, oldest first
    """

    def __init__(self) -> None:
        self.state = SubmissionState.IDLE
        self.is_loading = False
        self.failure: Optional[BaseException] = None
        self.history: list[tuple[SubmissionState, datetime]] = []
        self._listeners: list[ProgressListener] = []

    def add_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def set_loading(self, value: bool) -> None:
        self.is_loading = value
        self._notify()

    def set_state(self, state: SubmissionState) -> None:
        logger.info("Submission state: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append((state, datetime.now(timezone.utc)))
        self._notify()

    def set_failed(self, error: BaseException) -> None:
        self.failure = error
        self.set_state(SubmissionState.FAILED)

    def reset(self) -> None:
        self.state = SubmissionState.IDLE
        self.is_loading = False
        self.failure = None
        self.history = []

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def visited_states(self) -> list[SubmissionState]:
        return [state for state, _ in self.history]

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception as e:
                # A broken listener must not abort the submission
                logger.warning("Progress listener failed: %s", e)
