"""
Publisher configuration module.

Manages the platform URL, API key and submission settings. Configuration
is loaded from a YAML file and selectively overridden by environment
variables.
"""

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from platformdirs import user_config_dir

from event_publisher.formatting import DEFAULT_UTC_OFFSET
from event_publisher.status import StatusNames


# ============================================================================
# Constants
# ============================================================================

APP_NAME = "event-publisher"
APP_AUTHOR = "EventPublisher"
CONFIG_FILENAME = "publisher-config.yaml"

# Environment variable names
ENV_SERVER_URL = "EVENT_PUBLISHER_SERVER_URL"
ENV_API_KEY = "EVENT_PUBLISHER_API_KEY"
ENV_LOG_LEVEL = "EVENT_PUBLISHER_LOG_LEVEL"
ENV_CONFIG_PATH = "EVENT_PUBLISHER_CONFIG_PATH"

# Default values
DEFAULT_REQUEST_TIMEOUT = 30.0  # seconds
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# URL validation regex
URL_PATTERN = re.compile(
    r"^https?://"  # http:// or https://
    r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"  # domain
    r"localhost|"  # localhost
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"  # ...or ip
    r"(?::\d+)?"  # optional port
    r"(?:/?|[/?]\S+)$",
    re.IGNORECASE,
)

# Fixed UTC offset, e.g. "-0300"
OFFSET_PATTERN = re.compile(r"^[+-]\d{4}$")


# ============================================================================
# Exceptions
# ============================================================================


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    pass


# ============================================================================
# Helper Functions
# ============================================================================


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory for the current platform.

    Returns:
        Path to the platform-appropriate config directory
    """
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return get_default_config_dir() / CONFIG_FILENAME


# ============================================================================
# PublisherConfig Class
# ============================================================================


class PublisherConfig:
    """
    Publisher configuration manager.

    Configuration sources (in priority order):
    1. Environment variables (server URL, API key, log level)
    2. Configuration file
    3. Default values

    Attributes:
        server_url: Platform API base URL
        api_key: Bearer token for the platform API
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        request_timeout_seconds: Timeout of a single gateway request
        submission_timeout_seconds: Optional deadline of a whole submission
        utc_offset: Offset used by the offset-rewritten timestamp convention
        status_names: Status names attached to newly created records
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config_dir: Optional[Path] = None,
    ):
        """
        Initialize publisher configuration.

        Args:
            config_path: Explicit path to config file (takes precedence)
            config_dir: Directory containing config file
        """
        if config_path:
            self._config_path = Path(config_path)
            self._config_dir = self._config_path.parent
        elif config_dir:
            self._config_dir = Path(config_dir)
            self._config_path = self._config_dir / CONFIG_FILENAME
        else:
            env_path = os.environ.get(ENV_CONFIG_PATH)
            if env_path:
                self._config_path = Path(env_path)
                self._config_dir = self._config_path.parent
            else:
                self._config_dir = get_default_config_dir()
                self._config_path = self._config_dir / CONFIG_FILENAME

        # Initialize with defaults
        self._server_url: str = ""
        self._api_key: str = ""
        self._log_level: str = DEFAULT_LOG_LEVEL
        self.request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT
        self.submission_timeout_seconds: Optional[float] = None
        self.utc_offset: str = DEFAULT_UTC_OFFSET
        self.status_names: StatusNames = StatusNames()

        self._load()

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self._config_path

    # -------------------------------------------------------------------------
    # Configuration Properties
    # -------------------------------------------------------------------------

    @property
    def server_url(self) -> str:
        """Get the server URL."""
        return os.environ.get(ENV_SERVER_URL, self._server_url)

    @server_url.setter
    def server_url(self, value: str) -> None:
        self._server_url = value

    @property
    def api_key(self) -> str:
        """Get the API key."""
        return os.environ.get(ENV_API_KEY, self._api_key)

    @api_key.setter
    def api_key(self, value: str) -> None:
        self._api_key = value

    @property
    def log_level(self) -> str:
        """Get the log level."""
        return os.environ.get(ENV_LOG_LEVEL, self._log_level)

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._log_level = value

    @property
    def is_configured(self) -> bool:
        """Check if a server URL is configured."""
        return bool(self.server_url)

    # -------------------------------------------------------------------------
    # Configuration Management
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        """Load configuration from file."""
        if not self._config_path.exists():
            return

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}")

        self._server_url = data.get("server_url", "")
        self._api_key = data.get("api_key", "")
        self._log_level = data.get("log_level", DEFAULT_LOG_LEVEL)
        self.request_timeout_seconds = data.get(
            "request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT
        )
        self.submission_timeout_seconds = data.get("submission_timeout_seconds")
        self.utc_offset = data.get("utc_offset", DEFAULT_UTC_OFFSET)

        names = data.get("status_names") or {}
        defaults = StatusNames()
        self.status_names = StatusNames(
            event_draft=names.get("event_draft", defaults.event_draft),
            ticket_available=names.get("ticket_available", defaults.ticket_available),
            coupon_available=names.get("coupon_available", defaults.coupon_available),
        )

    def to_dict(self) -> dict:
        return {
            "server_url": self._server_url,
            "api_key": self._api_key,
            "log_level": self._log_level,
            "request_timeout_seconds": self.request_timeout_seconds,
            "submission_timeout_seconds": self.submission_timeout_seconds,
            "utc_offset": self.utc_offset,
            "status_names": {
                "event_draft": self.status_names.event_draft,
                "ticket_available": self.status_names.ticket_available,
                "coupon_available": self.status_names.coupon_available,
            },
        }

    def save(self) -> None:
        """Save configuration to file."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def validate(self) -> None:
        """
        Validate the current configuration.

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if self.server_url and not URL_PATTERN.match(self.server_url):
            raise ConfigValidationError(
                f"Invalid server_url format: {self.server_url}"
            )

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(f"Invalid log_level: {self.log_level}")

        if self.request_timeout_seconds <= 0:
            raise ConfigValidationError(
                f"request_timeout_seconds must be positive, got: {self.request_timeout_seconds}"
            )

        if self.submission_timeout_seconds is not None and self.submission_timeout_seconds <= 0:
            raise ConfigValidationError(
                f"submission_timeout_seconds must be positive, got: {self.submission_timeout_seconds}"
            )

        if not OFFSET_PATTERN.match(self.utc_offset):
            raise ConfigValidationError(
                f"utc_offset must look like -0300, got: {self.utc_offset}"
            )
