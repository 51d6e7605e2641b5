"""
Response envelope classification.

Every gateway call answers with an envelope whose ``body`` carries a domain
status ``code`` and, on success, a ``result``. The only success test is
"body present and code equals the operation's success code"; this module
owns that test so steps never repeat it.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Optional, Union


class ResponseCode(str, enum.Enum):
    """Operation-specific success codes returned by the platform."""
    CREATE_SUCCESS = "CREATE_SUCCESS"
    UPDATE_SUCCESS = "UPDATE_SUCCESS"
    DELETE_SUCCESS = "DELETE_SUCCESS"
    SEARCH_SUCCESS = "SEARCH_SUCCESS"
    VALIDATE_SUCCESS = "VALIDATE_SUCCESS"


@dataclass(frozen=True)
class Envelope:
    """
    Raw gateway response.

    Attributes:
        body: Decoded response body, or None when the response had none
        status_code: HTTP status code, when the transport has one
    """
    body: Optional[dict[str, Any]]
    status_code: Optional[int] = None

    @property
    def code(self) -> Optional[str]:
        if not isinstance(self.body, dict):
            return None
        return self.body.get("code")

    @property
    def result(self) -> Any:
        if not isinstance(self.body, dict):
            return None
        return self.body.get("result")


@dataclass(frozen=True)
class Success:
    """Envelope matched the expected success code."""
    result: Any = None
    ok: bool = field(default=True, init=False)

    @property
    def record_id(self) -> Optional[str]:
        """Identifier of a single created/updated record."""
        if isinstance(self.result, dict):
            return self.result.get("id")
        return None

    @property
    def records(self) -> list[Any]:
        """Records of a search result (``result.data``)."""
        if isinstance(self.result, dict):
            return list(self.result.get("data") or [])
        return []


@dataclass(frozen=True)
class Failure:
    """Envelope was missing, malformed or carried another code."""
    code: Optional[str] = None
    message: str = ""
    ok: bool = field(default=False, init=False)


Outcome = Union[Success, Failure]


def classify(envelope: Optional[Envelope], expected: ResponseCode) -> Outcome:
    """
    Classify a gateway envelope against the expected success code.

    Args:
        envelope: Envelope returned by the gateway
        expected: Success code for the operation that produced it

    Returns:
        Success carrying the result payload, or Failure carrying the code
    """
    if envelope is None or not isinstance(envelope.body, dict):
        return Failure(code=None, message="Response has no body")

    code = envelope.code
    if code != expected.value:
        message = envelope.body.get("message") or f"Expected {expected.value}, got {code}"
        return Failure(code=code, message=str(message))

    return Success(result=envelope.result)
