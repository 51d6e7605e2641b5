"""
Pytest configuration and fixtures for Event Publisher tests.

This module provides shared fixtures for testing submission behaviour,
including an in-memory resource gateway, temporary configuration files,
and submission test data.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from event_publisher.envelope import Envelope
from event_publisher.gateway import ResourceGateway


# ============================================================================
# In-memory Gateway
# ============================================================================


DEFAULT_STATUSES = {
    ("event", "Draft"): "sts_event_draft",
    ("ticket", "Available"): "sts_ticket_available",
    ("coupon", "Available"): "sts_coupon_available",
}


class FakeGateway(ResourceGateway):
    """
    Scripted gateway that records every call in order.

    Created records get readable ids: ``<resource>:<name or code>`` (plus
    ``/<person_type>`` for checkout fields) when the payload carries a name
    or code, ``<resource>:<n>`` otherwise. Every call
    yields to the event loop once so concurrent siblings interleave.

    Attributes:
        calls: (operation, resource, payload) of every call, in call order
        statuses: (module, name) -> status id served by ``search``
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.statuses: dict[tuple[str, str], str] = dict(DEFAULT_STATUSES)
        self._failures: list[tuple[str, str, Callable[[dict], bool]]] = []
        self._counters: dict[str, int] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    def fail_when(
        self,
        operation: str,
        resource: str,
        predicate: Optional[Callable[[dict], bool]] = None,
    ) -> None:
        """Answer matching calls with a failure envelope."""
        self._failures.append((operation, resource, predicate or (lambda payload: True)))

    def calls_to(self, operation: str, resource: str) -> list[dict[str, Any]]:
        return [
            payload for op, res, payload in self.calls
            if op == operation and res == resource
        ]

    @property
    def sequence(self) -> list[tuple[str, str]]:
        return [(op, res) for op, res, _ in self.calls]

    def _should_fail(self, operation: str, resource: str, payload: dict) -> bool:
        return any(
            op == operation and res == resource and predicate(payload)
            for op, res, predicate in self._failures
        )

    def _next_id(self, resource: str, payload: dict) -> str:
        label = payload.get("name") or payload.get("code")
        if label and resource != "event-attachment":
            if payload.get("person_type"):
                label = f"{label}/{payload['person_type']}"
            return f"{resource}:{label}"
        self._counters[resource] = self._counters.get(resource, 0) + 1
        return f"{resource}:{self._counters[resource]}"

    async def _enter(self, operation: str, resource: str, payload: dict) -> None:
        self.calls.append((operation, resource, payload))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1

    async def create(self, resource: str, payload: dict[str, Any]) -> Envelope:
        await self._enter("create", resource, payload)
        if self._should_fail("create", resource, payload):
            return Envelope(body={"code": "CREATE_ERROR", "message": f"{resource} rejected"})
        record = {"id": self._next_id(resource, payload), **payload}
        return Envelope(body={"code": "CREATE_SUCCESS", "result": record}, status_code=201)

    async def update(self, resource: str, resource_id: str, payload: dict[str, Any]) -> Envelope:
        await self._enter("update", resource, {"id": resource_id, **payload})
        if self._should_fail("update", resource, payload):
            return Envelope(body={"code": "UPDATE_ERROR"})
        return Envelope(body={"code": "UPDATE_SUCCESS", "result": {"id": resource_id, **payload}})

    async def delete(self, resource: str, resource_id: str) -> Envelope:
        await self._enter("delete", resource, {"id": resource_id})
        return Envelope(body={"code": "DELETE_SUCCESS", "result": {"id": resource_id}})

    async def search(self, resource: str, filters: dict[str, Any]) -> Envelope:
        await self._enter("search", resource, dict(filters))
        if self._should_fail("search", resource, filters):
            return Envelope(body={"code": "SEARCH_ERROR"})
        status_id = self.statuses.get((filters.get("module"), filters.get("name")))
        data = [{"id": status_id, **filters}] if status_id else []
        return Envelope(body={"code": "SEARCH_SUCCESS", "result": {"data": data}})

    async def upload(
        self, attachment_id: str, filename: str, content: bytes, content_type: str
    ) -> Envelope:
        payload = {"attachment_id": attachment_id, "filename": filename, "size": len(content)}
        await self._enter("upload", "upload", payload)
        if self._should_fail("upload", "upload", payload):
            return Envelope(body={"code": "UPLOAD_ERROR"})
        return Envelope(
            body={
                "code": "CREATE_SUCCESS",
                "result": {"url": f"https://cdn.example.com/banners/{filename}"},
            }
        )


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """In-memory gateway recording every call."""
    return FakeGateway()


@pytest.fixture
def mock_http_client() -> MagicMock:
    """
    Create a mock HTTP client for testing gateway requests.

    Returns:
        Mock httpx.AsyncClient
    """
    client = MagicMock()
    client.request = AsyncMock()
    client.aclose = AsyncMock()
    return client


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for publisher configuration files.

    Yields:
        Path to temporary configuration directory
    """
    with tempfile.TemporaryDirectory(prefix="event_publisher_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def publisher_config_data() -> dict:
    """Sample publisher configuration."""
    return {
        "server_url": "http://localhost:3333",
        "api_key": "pub_key_test_1234567890abcdef",
        "log_level": "DEBUG",
        "request_timeout_seconds": 15,
        "submission_timeout_seconds": 120,
        "utc_offset": "-0300",
        "status_names": {
            "event_draft": "Rascunho",
            "ticket_available": "Disponível",
        },
    }


@pytest.fixture
def publisher_config_file(temp_config_dir: Path, publisher_config_data: dict) -> Path:
    """Write the sample configuration to a temporary YAML file."""
    config_path = temp_config_dir / "publisher-config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(publisher_config_data, f)
    return config_path


@pytest.fixture
def clean_environment(monkeypatch) -> None:
    """
    Remove publisher environment variables to ensure test isolation.
    """
    for name in (
        "EVENT_PUBLISHER_SERVER_URL",
        "EVENT_PUBLISHER_API_KEY",
        "EVENT_PUBLISHER_LOG_LEVEL",
        "EVENT_PUBLISHER_CONFIG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Submission Fixtures
# ============================================================================


def make_ticket(name: str, category: Optional[str] = None, **overrides) -> dict:
    ticket = {
        "name": name,
        "price": "10,50",
        "quantity": 100,
        "min_purchase": 1,
        "max_purchase": 10,
        "start_date": "2025-01-10",
        "start_time": "09:00",
        "end_date": "2025-02-01",
        "end_time": "18:30",
    }
    if category is not None:
        ticket["category"] = category
    ticket.update(overrides)
    return ticket


def make_coupon(code: str, tickets: Optional[list[str]] = None, **overrides) -> dict:
    coupon = {
        "code": code,
        "discount_type": "PERCENTAGE",
        "discount_value": "5,00",
        "max_uses": 50,
        "start_date": "2025-01-10",
        "start_time": "09:00",
        "end_date": "2025-01-31",
        "end_time": "23:59",
        "tickets": tickets or [],
    }
    coupon.update(overrides)
    return coupon


def make_custom_field(
    name: str,
    person_types: list[str],
    tickets: list[str],
    options: Optional[list[str]] = None,
    **overrides,
) -> dict:
    custom_field = {
        "name": name,
        "field_type": "text",
        "person_types": person_types,
        "options": options or [],
        "tickets": tickets,
    }
    custom_field.update(overrides)
    return custom_field


@pytest.fixture
def online_event_data() -> dict:
    """Minimal online event without nested resources."""
    return {
        "name": "Online Workshop",
        "description": "Hands-on session",
        "event_type": "Online",
        "start_date": "2025-02-01",
        "start_time": "10:00",
        "end_date": "2025-02-01",
        "end_time": "12:00",
    }


@pytest.fixture
def in_person_event_data(online_event_data: dict) -> dict:
    """In-person event with an address."""
    data = dict(online_event_data)
    data.update(
        {
            "name": "Summer Festival",
            "event_type": "In-person",
            "address": {
                "street": "Rua das Flores",
                "number": "100",
                "neighborhood": "Centro",
                "city": "Curitiba",
                "state": "PR",
                "zip_code": "80000-000",
                "latitude": -25.43,
                "longitude": -49.27,
            },
        }
    )
    return data


@pytest.fixture
def ticket_data() -> Callable[..., dict]:
    """Factory for ticket input dictionaries."""
    return make_ticket


@pytest.fixture
def coupon_data() -> Callable[..., dict]:
    """Factory for coupon input dictionaries."""
    return make_coupon


@pytest.fixture
def custom_field_data() -> Callable[..., dict]:
    """Factory for custom field input dictionaries."""
    return make_custom_field
