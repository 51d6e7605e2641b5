"""
Runtime entry points.

Logging setup, submission file loading and the async runners the CLI
drives with asyncio.run().
"""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import TypeAdapter

from event_publisher.config import PublisherConfig
from event_publisher.gateway import HttpResourceGateway
from event_publisher.models import EventSubmission, TicketInput
from event_publisher.orchestrator import EventSubmissionOrchestrator, SubmissionResult
from event_publisher.steps import TicketStepResult


# ============================================================================
# Logging Setup
# ============================================================================


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Setup logging for the publisher.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger("event_publisher")


# ============================================================================
# Submission Files
# ============================================================================


def _read_document(path: Path) -> Any:
    """Read a YAML or JSON document."""
    with open(path) as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_submission(path: Path, banner_path: Optional[Path] = None) -> EventSubmission:
    """
    Load an EventSubmission from a YAML/JSON file.

    The banner may be given as ``banner_path`` in the document (relative to
    the document) or overridden by ``banner_path``.

    Raises:
        pydantic.ValidationError: If the document is not a valid submission
        OSError: If a file cannot be read
    """
    data = _read_document(path) or {}
    data.pop("banner", None)

    document_banner = data.pop("banner_path", None)
    if banner_path is None and document_banner:
        banner_path = (path.parent / document_banner).resolve()

    if banner_path is not None:
        content_type = mimetypes.guess_type(banner_path.name)[0] or "application/octet-stream"
        data["banner"] = {
            "filename": banner_path.name,
            "content": banner_path.read_bytes(),
            "content_type": content_type,
        }

    return EventSubmission.model_validate(data)


def load_tickets(path: Path) -> list[TicketInput]:
    """Load a list of tickets from a YAML/JSON file."""
    data = _read_document(path) or []
    if isinstance(data, dict):
        data = data.get("tickets", [])
    return TypeAdapter(list[TicketInput]).validate_python(data)


# ============================================================================
# Runners
# ============================================================================


def _build_orchestrator(
    config: PublisherConfig, gateway: HttpResourceGateway
) -> EventSubmissionOrchestrator:
    return EventSubmissionOrchestrator(
        gateway,
        status_names=config.status_names,
        utc_offset=config.utc_offset,
        timeout=config.submission_timeout_seconds,
    )


async def run_submission(
    config: PublisherConfig, submission: EventSubmission
) -> SubmissionResult:
    """Submit one event with a gateway built from configuration."""
    async with HttpResourceGateway(
        config.server_url,
        api_key=config.api_key or None,
        timeout=config.request_timeout_seconds,
    ) as gateway:
        orchestrator = _build_orchestrator(config, gateway)
        return await orchestrator.post_event(submission)


async def run_add_tickets(
    config: PublisherConfig, event_id: str, tickets: list[TicketInput]
) -> TicketStepResult:
    """Add tickets to an existing event with a gateway built from configuration."""
    async with HttpResourceGateway(
        config.server_url,
        api_key=config.api_key or None,
        timeout=config.request_timeout_seconds,
    ) as gateway:
        orchestrator = _build_orchestrator(config, gateway)
        return await orchestrator.add_tickets(event_id, tickets)
