"""
Resource gateway for platform communication.

Defines the gateway interface the submission steps consume, an HTTP
implementation on httpx, and a recording wrapper that remembers which
resources a run has created.

Design Pattern: Strategy pattern for pluggable transports
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from event_publisher import __version__
from event_publisher.envelope import Envelope, ResponseCode

logger = logging.getLogger("event_publisher.gateway")


# ============================================================================
# Constants
# ============================================================================

DEFAULT_TIMEOUT = 30.0  # seconds
USER_AGENT = f"EventPublisher/{__version__}"
UPLOAD_RESOURCE = "upload"


# ============================================================================
# Exceptions
# ============================================================================


class GatewayError(Exception):
    """Base exception for transport-level gateway errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GatewayConnectionError(GatewayError):
    """Raised when connection to the platform fails."""

    pass


# ============================================================================
# Interface
# ============================================================================


class ResourceGateway(ABC):
    """
    Abstract interface for single named operations on remote collections.

    Every method returns an Envelope; interpreting it is the caller's job
    (see envelope.classify). Implementations raise GatewayError only when
    no envelope could be obtained at all.
    """

    @abstractmethod
    async def create(self, resource: str, payload: dict[str, Any]) -> Envelope:
        """Create one record in ``resource``."""

    @abstractmethod
    async def update(
        self, resource: str, resource_id: str, payload: dict[str, Any]
    ) -> Envelope:
        """Patch the record ``resource_id`` in ``resource``."""

    @abstractmethod
    async def delete(self, resource: str, resource_id: str) -> Envelope:
        """Delete the record ``resource_id`` from ``resource``."""

    @abstractmethod
    async def search(self, resource: str, filters: dict[str, Any]) -> Envelope:
        """Search ``resource`` with equality filters."""

    @abstractmethod
    async def upload(
        self,
        attachment_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> Envelope:
        """Upload binary content bound to an attachment record."""


# ============================================================================
# HttpResourceGateway Class
# ============================================================================


class HttpResourceGateway(ResourceGateway):
    """
    HTTP gateway for the event platform REST API.

    Attributes:
        server_url: Base URL of the platform API
    """

    def __init__(
        self,
        server_url: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            server_url: Base URL of the platform API
            api_key: Optional bearer token for authenticated requests
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport)

        Raises:
            ValueError: If server_url is empty
        """
        if not server_url:
            raise ValueError("server_url is required")

        self._server_url = server_url.rstrip("/")
        self._timeout = timeout

        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=self._server_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def server_url(self) -> str:
        """Get the server URL."""
        return self._server_url

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def create(self, resource: str, payload: dict[str, Any]) -> Envelope:
        return await self._send("POST", f"/{resource}", json=payload)

    async def update(
        self, resource: str, resource_id: str, payload: dict[str, Any]
    ) -> Envelope:
        return await self._send("PATCH", f"/{resource}/{resource_id}", json=payload)

    async def delete(self, resource: str, resource_id: str) -> Envelope:
        return await self._send("DELETE", f"/{resource}/{resource_id}")

    async def search(self, resource: str, filters: dict[str, Any]) -> Envelope:
        params = {f"where[{key}][v]": value for key, value in filters.items()}
        return await self._send("GET", f"/{resource}", params=params)

    async def upload(
        self,
        attachment_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> Envelope:
        return await self._send(
            "POST",
            f"/{UPLOAD_RESOURCE}",
            data={"attachment_id": attachment_id},
            files={"file": (filename, content, content_type)},
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> Envelope:
        """
        Send one request and wrap the response in an Envelope.

        Raises:
            GatewayConnectionError: If connection to the platform fails
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.ConnectError as e:
            raise GatewayConnectionError(f"Failed to connect to server: {e}")
        except httpx.TimeoutException as e:
            raise GatewayConnectionError(f"Connection timed out: {e}")

        logger.debug("%s %s -> %s", method, path, response.status_code)

        try:
            data = response.json()
        except ValueError:
            return Envelope(body=None, status_code=response.status_code)

        body = data.get("body") if isinstance(data, dict) else None
        return Envelope(body=body, status_code=response.status_code)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "HttpResourceGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


# ============================================================================
# RecordingGateway Class
# ============================================================================


class RecordingGateway(ResourceGateway):
    """
    Gateway wrapper that remembers every successfully created record.

    Used per submission run so that an aborted run can report the remote
    resources it leaves behind.
    """

    def __init__(self, inner: ResourceGateway):
        self._inner = inner
        self.created: list[tuple[str, str]] = []

    async def create(self, resource: str, payload: dict[str, Any]) -> Envelope:
        envelope = await self._inner.create(resource, payload)
        if envelope.code == ResponseCode.CREATE_SUCCESS.value:
            result = envelope.result
            if isinstance(result, dict) and result.get("id") is not None:
                self.created.append((resource, result["id"]))
        return envelope

    async def update(
        self, resource: str, resource_id: str, payload: dict[str, Any]
    ) -> Envelope:
        return await self._inner.update(resource, resource_id, payload)

    async def delete(self, resource: str, resource_id: str) -> Envelope:
        return await self._inner.delete(resource, resource_id)

    async def search(self, resource: str, filters: dict[str, Any]) -> Envelope:
        return await self._inner.search(resource, filters)

    async def upload(
        self,
        attachment_id: str,
        filename: str,
        content: bytes,
        content_type: str,
    ) -> Envelope:
        return await self._inner.upload(attachment_id, filename, content, content_type)
