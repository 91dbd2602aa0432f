"""
Client-side request coordination for httpx.

Coalesces identical in-flight GETs, caches successful payloads, classifies
responses by content type and status, and broadcasts failures on an event bus.
"""
from .types import (
    NETWORK_REQUEST_FAILED,
    ActivityIndicator,
    EventHandler,
    Failure,
    HttpMethod,
    Notification,
    Notifier,
    Outcome,
    PendingRequest,
    RequestSettings,
    ResourceKey,
    ResponseCacheStore,
    Session,
    StatusCategory,
    Success,
    Transport,
)
from .errors import (
    CacheMissError,
    FetchCoordinatorError,
    MissingBodyError,
    MissingURLError,
    RequestFailedError,
)
from .config import (
    APPLICATION_ERROR_STATUSES,
    CoordinatorConfig,
    ResolvedConfig,
    TimeoutConfig,
    resolve_config,
    validate_config,
)
from .stores import (
    NOT_FOUND,
    MemoryResponseCache,
    create_memory_response_cache,
)
from .classifier import ResponseClassifier, categorize_status, snapshot_headers
from .events import ERROR_EVENT, ErrorEventBus
from .auth import (
    AuthHandler,
    BearerAuthHandler,
    CsrfTokenAuthHandler,
    NoAuthHandler,
    create_auth_handler,
)
from .handlers import (
    APPLICATION_ERROR_MESSAGE,
    AUTH_EXPIRED_MESSAGE,
    AuthExpiredHandler,
    ErrorNotificationHandler,
    error_message_from_response,
    register_default_error_handlers,
)
from .transport import HttpxTransport
from .coordinator import LoggingActivityIndicator, RequestCoordinator, encode_uri
from .factory import create_coordinator

__all__ = [
    # Types
    "NETWORK_REQUEST_FAILED",
    "ActivityIndicator",
    "EventHandler",
    "Failure",
    "HttpMethod",
    "Notification",
    "Notifier",
    "Outcome",
    "PendingRequest",
    "RequestSettings",
    "ResourceKey",
    "ResponseCacheStore",
    "Session",
    "StatusCategory",
    "Success",
    "Transport",
    # Errors
    "CacheMissError",
    "FetchCoordinatorError",
    "MissingBodyError",
    "MissingURLError",
    "RequestFailedError",
    # Config
    "APPLICATION_ERROR_STATUSES",
    "CoordinatorConfig",
    "ResolvedConfig",
    "TimeoutConfig",
    "resolve_config",
    "validate_config",
    # Stores
    "NOT_FOUND",
    "MemoryResponseCache",
    "create_memory_response_cache",
    # Classification
    "ResponseClassifier",
    "categorize_status",
    "snapshot_headers",
    # Events
    "ERROR_EVENT",
    "ErrorEventBus",
    # Auth
    "AuthHandler",
    "BearerAuthHandler",
    "CsrfTokenAuthHandler",
    "NoAuthHandler",
    "create_auth_handler",
    # Error handlers
    "APPLICATION_ERROR_MESSAGE",
    "AUTH_EXPIRED_MESSAGE",
    "AuthExpiredHandler",
    "ErrorNotificationHandler",
    "error_message_from_response",
    "register_default_error_handlers",
    # Transport
    "HttpxTransport",
    # Coordinator
    "LoggingActivityIndicator",
    "RequestCoordinator",
    "encode_uri",
    "create_coordinator",
]

__version__ = "1.0.0"
