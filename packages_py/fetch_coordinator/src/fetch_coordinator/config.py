"""
Configuration for fetch_coordinator.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union
from urllib.parse import urlparse
import os

from .types import CredentialsMode


VALID_CREDENTIALS = ("include", "same-origin", "omit")

# Statuses reported to the user as application-level outages
APPLICATION_ERROR_STATUSES = (408, 444, 500, 503, 504)


@dataclass
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


@dataclass
class CoordinatorConfig:
    """Coordinator configuration."""

    origin: str
    credentials: CredentialsMode = "include"
    online_probe_path: str = "/favicon.ico"
    logout_path: str = "/logout"
    default_error_timeout_ms: int = 20000
    application_error_timeout_ms: int = 40000
    application_error_statuses: Tuple[int, ...] = APPLICATION_ERROR_STATUSES
    auth_expired_status: int = 401
    timeout: Union[TimeoutConfig, float, None] = None
    headers: Dict[str, str] = field(default_factory=dict)
    trace: Optional[bool] = None
    """Print request/response panels to the console. None reads FETCH_COORDINATOR_TRACE."""


@dataclass
class ResolvedConfig:
    """Resolved configuration with defaults applied."""

    origin: str
    credentials: CredentialsMode
    online_probe_url: str
    logout_url: str
    default_error_timeout_ms: int
    application_error_timeout_ms: int
    application_error_statuses: Tuple[int, ...]
    auth_expired_status: int
    timeout: TimeoutConfig
    headers: Dict[str, str]
    trace: bool
    verify_ssl: bool


DEFAULT_TIMEOUT = TimeoutConfig()


def is_ssl_verify_disabled_by_env() -> bool:
    """
    Check if SSL verification is disabled via environment variables.

    Returns True if any of these are set:
    - NODE_TLS_REJECT_UNAUTHORIZED=0
    - SSL_CERT_VERIFY=0
    """
    node_tls = os.environ.get("NODE_TLS_REJECT_UNAUTHORIZED", "")
    ssl_cert_verify = os.environ.get("SSL_CERT_VERIFY", "")
    return node_tls == "0" or ssl_cert_verify == "0"


def is_trace_enabled_by_env() -> bool:
    """Check FETCH_COORDINATOR_TRACE for a truthy value."""
    value = os.environ.get("FETCH_COORDINATOR_TRACE", "")
    return value.lower() in ("1", "true", "yes", "on")


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


def join_origin(origin: str, path: str) -> str:
    """Join an origin and an absolute path."""
    origin = origin.rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return f"{origin}{path}"


def validate_config(config: CoordinatorConfig) -> None:
    """Validate coordinator configuration."""
    if not config.origin:
        raise ValueError("origin is required")

    parsed = urlparse(config.origin)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid origin: {config.origin}")

    if config.credentials not in VALID_CREDENTIALS:
        raise ValueError(
            f"Invalid credentials mode: {config.credentials}. "
            f"Must be one of: {list(VALID_CREDENTIALS)}"
        )

    if config.default_error_timeout_ms <= 0 or config.application_error_timeout_ms <= 0:
        raise ValueError("notification timeouts must be positive")


def resolve_config(config: CoordinatorConfig) -> ResolvedConfig:
    """Resolve config with defaults."""
    validate_config(config)

    origin = config.origin.rstrip("/")
    trace = config.trace if config.trace is not None else is_trace_enabled_by_env()

    return ResolvedConfig(
        origin=origin,
        credentials=config.credentials,
        online_probe_url=join_origin(origin, config.online_probe_path),
        logout_url=join_origin(origin, config.logout_path),
        default_error_timeout_ms=config.default_error_timeout_ms,
        application_error_timeout_ms=config.application_error_timeout_ms,
        application_error_statuses=tuple(config.application_error_statuses),
        auth_expired_status=config.auth_expired_status,
        timeout=normalize_timeout(config.timeout),
        headers=dict(config.headers),
        trace=trace,
        verify_ssl=not is_ssl_verify_disabled_by_env(),
    )
