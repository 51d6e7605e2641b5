"""
Event Publisher - composite event creation client.

This package turns one flat "new event" submission into the ordered set of
remote resource creations the event platform expects: address, event,
banner attachment, ticket categories, tickets, checkout fields, coupons and
the relations that join them.

Key modules:
- orchestrator: Dependency-ordered submission workflow
- steps: One module per remote creation step
- gateway: Resource gateway interface and httpx implementation
- envelope: Response envelope classification
- config: Publisher configuration management
- validation: Pre-submission checks
"""

import os


def _get_version() -> str:
    """
    Get version with priority: EVENT_PUBLISHER_VERSION env var > _version.py > fallback.

    Priority:
    1. EVENT_PUBLISHER_VERSION env var - explicit runtime override
    2. event_publisher._version - written by build scripts
    3. Fallback - unknown version
    """
    env_version = os.environ.get('EVENT_PUBLISHER_VERSION')
    if env_version:
        return env_version

    try:
        from event_publisher._version import __version__ as built_version
        return built_version
    except ImportError:
        pass

    return 'v0.0.0-dev+unknown'


__version__ = _get_version()
