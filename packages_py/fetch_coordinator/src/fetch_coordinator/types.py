"""
Type definitions for fetch_coordinator.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Literal,
    Optional,
    Protocol,
    TypedDict,
    Union,
)
import asyncio

import httpx


# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]

# Credentials modes understood by the default transport
CredentialsMode = Literal["include", "same-origin", "omit"]

# Reserved raw status for transport-level failures (no response received)
NETWORK_REQUEST_FAILED = "NETWORK_REQUEST_FAILED"


class StatusCategory(str, Enum):
    """Normalized failure categories."""

    NETWORK_UNREACHABLE = "network_unreachable"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    AUTH_EXPIRED = "auth_expired"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ResourceKey:
    """Identity of a logical request, used for coalescing and caching."""

    url: str
    method: str = "GET"


@dataclass
class PendingRequest:
    """A caller waiting on an outstanding transport call."""

    key: ResourceKey
    waiter: "asyncio.Future[Any]"

    def matches(self, key: ResourceKey) -> bool:
        return self.key == key


@dataclass
class Success:
    """Successful classification of a response."""

    payload: Any
    headers: Dict[str, str] = field(default_factory=dict)

    ok: Literal[True] = True


@dataclass
class Failure:
    """Failed classification of a response (or of the transport call itself)."""

    message: str
    status_category: StatusCategory
    raw_status: Union[int, str]
    response: Optional[httpx.Response] = None
    """The raw response, kept for downstream correlation. None for network failures."""

    ok: Literal[False] = False


Outcome = Union[Success, Failure]


class RequestSettings(TypedDict, total=False):
    """Options handed to the transport for one call."""

    method: HttpMethod
    credentials: CredentialsMode
    headers: Dict[str, str]
    body: Union[str, bytes]


class Transport(Protocol):
    """Raw transport primitive: performs exactly one HTTP round trip."""

    async def __call__(self, url: str, options: RequestSettings) -> httpx.Response:
        ...


class ActivityIndicator(Protocol):
    """Busy-indicator signals."""

    def activity_started(self) -> None:
        ...

    def activity_idle(self) -> None:
        ...


class Notification(TypedDict, total=False):
    """Payload handed to Notifier.display_error."""

    title: str
    message: str
    timeout: int
    id: str


class Notifier(Protocol):
    """User-facing notification surface."""

    def display_error(self, notification: Notification) -> None:
        ...


class Session(Protocol):
    """Session/navigation surface used for forced logout."""

    def alert(self, message: str) -> None:
        ...

    def replace(self, url: str) -> None:
        ...


class ResponseCacheStore(ABC):
    """Cache store interface for completed response payloads."""

    @abstractmethod
    def save(self, key: ResourceKey, payload: Any) -> Any:
        """Store a payload and return it unchanged."""
        pass

    @abstractmethod
    def lookup(self, key: ResourceKey) -> Any:
        """Return the stored payload or the NOT_FOUND sentinel."""
        pass

    @abstractmethod
    def has(self, key: ResourceKey) -> bool:
        """Check if a payload is stored for key."""
        pass

    @abstractmethod
    def delete(self, key: ResourceKey) -> bool:
        """Delete a stored payload."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all stored payloads."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Get number of stored payloads."""
        pass


EventHandler = Callable[[Any], None]
"""Event handler type."""
