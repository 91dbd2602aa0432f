"""
Request coordination: cache hits, coalescing of identical in-flight GETs,
waiter fan-out and failure broadcast.
"""
import asyncio
import functools
import json
import logging
from typing import Any, List, Optional, Set
from urllib.parse import quote

import httpx

from .auth import AuthHandler, NoAuthHandler
from .classifier import ResponseClassifier, categorize_status
from .config import CoordinatorConfig, ResolvedConfig, resolve_config
from .errors import (
    CacheMissError,
    MissingBodyError,
    MissingURLError,
    RequestFailedError,
)
from .events import ERROR_EVENT, ErrorEventBus
from .stores.memory import NOT_FOUND, MemoryResponseCache
from .types import (
    NETWORK_REQUEST_FAILED,
    ActivityIndicator,
    EventHandler,
    Failure,
    HttpMethod,
    PendingRequest,
    RequestSettings,
    ResourceKey,
    ResponseCacheStore,
    StatusCategory,
    Success,
    Transport,
)

logger = logging.getLogger("fetch_coordinator.coordinator")

# Characters encodeURI leaves untouched besides alphanumerics and "-_.~"
_URI_SAFE = ";,/?:@&=+$!*'()#"

BODY_REQUIRED_METHODS = ("POST", "PUT")
JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def encode_uri(url: str) -> str:
    """Percent-encode a full url, keeping its reserved characters."""
    return quote(url, safe=_URI_SAFE)


class LoggingActivityIndicator:
    """Default busy indicator: logs transitions."""

    def activity_started(self) -> None:
        logger.debug("activity started")

    def activity_idle(self) -> None:
        logger.debug("activity idle")


class RequestCoordinator:
    """
    Coordinates outgoing requests through one transport.

    - At most one transport call per outstanding GET (url, method); later
      callers attach as waiters and receive the same outcome, in order.
    - Successful payloads are cached per (url, method); failures never touch
      the cache.
    - Failures are raised to the caller and emitted on the "error" event.

    Example:
        coordinator = RequestCoordinator(config, transport=HttpxTransport(config))
        users = await coordinator.get("/api/users", use_cache=True)
    """

    def __init__(
        self,
        config: CoordinatorConfig,
        transport: Transport,
        *,
        auth_handler: Optional[AuthHandler] = None,
        cache: Optional[ResponseCacheStore] = None,
        classifier: Optional[ResponseClassifier] = None,
        event_bus: Optional[ErrorEventBus] = None,
        activity: Optional[ActivityIndicator] = None,
    ) -> None:
        self._config: ResolvedConfig = resolve_config(config)
        self._transport = transport
        self._auth_handler = auth_handler or NoAuthHandler()
        self.cache = cache if cache is not None else MemoryResponseCache()
        self.classifier = classifier or ResponseClassifier()
        self.event = event_bus or ErrorEventBus()
        self._activity = activity or LoggingActivityIndicator()
        self.current_requests: List[PendingRequest] = []
        self._background: Set["asyncio.Task[Any]"] = set()
        self._in_flight = 0

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    # -- events -------------------------------------------------------------

    def on(self, name: str, handler: EventHandler):
        """Subscribe to coordinator events. Returns an unsubscribe callable."""
        return self.event.on(name, handler)

    def off(self, name: str, handler: EventHandler) -> None:
        """Unsubscribe from coordinator events."""
        self.event.off(name, handler)

    # -- cache --------------------------------------------------------------

    def save_request(self, url: str, method: str, payload: Any) -> Any:
        """Store a successful payload; returns it unchanged."""
        return self.cache.save(ResourceKey(url, method), payload)

    async def resolve_from_cache(self, url: str, method: str) -> Any:
        """Return the cached payload for (url, method)."""
        payload = self.cache.lookup(ResourceKey(url, method))
        if payload is NOT_FOUND:
            raise CacheMissError(url, method)
        return payload

    # -- public surface -----------------------------------------------------

    async def is_online(self) -> bool:
        """Probe a same-origin resource; any response at all means online."""
        try:
            await self._transport(self._config.online_probe_url, {})
        except (httpx.TransportError, OSError) as error:
            logger.debug(f"is_online: probe failed: {error!r}")
            return False
        return True

    async def request(
        self,
        url: Optional[str] = None,
        use_cache: bool = False,
        method: HttpMethod = "GET",
        body: Any = None,
    ) -> Any:
        """
        Issue a request, reusing the cache or an in-flight GET where possible.

        Args:
            url: Request url, absolute or relative to the configured origin
            use_cache: Return the last successful payload for (url, method) if present
            method: HTTP method
            body: Request body; dicts and lists are sent as JSON

        Raises:
            MissingURLError: url is None
            MissingBodyError: POST/PUT without a body
            RequestFailedError: transport or classification failure
        """
        if url is None:
            raise MissingURLError()
        if method in BODY_REQUIRED_METHODS and body is None:
            raise MissingBodyError(method)

        # entries are stored under the encoded url start_request saw
        cached_url = encode_uri(url)
        if use_cache and self.cache.has(ResourceKey(cached_url, method)):
            logger.debug(f"request: cache hit for {method} {url}")
            return await self.resolve_from_cache(cached_url, method)

        settings: RequestSettings = {
            "method": method,
            "credentials": self._config.credentials,
        }
        if method != "GET" and isinstance(body, (dict, list)):
            settings["headers"] = dict(JSON_HEADERS)
        if body is not None:
            settings["body"] = json.dumps(body)

        return await self.request_async(url, settings)

    async def request_async(self, url: str, settings: RequestSettings) -> Any:
        """
        Dispatch an authenticated request.

        Non-GET requests always make their own transport call. A GET joins
        the outstanding call for the same url when there is one.
        """
        settings = self._auth_handler.authenticate(settings)
        method = settings.get("method", "GET")
        url = encode_uri(url)

        if method != "GET":
            return await self.start_request(url, settings)

        key = ResourceKey(url, method)
        loop = asyncio.get_running_loop()
        waiter: "asyncio.Future[Any]" = loop.create_future()

        if self._find_pending(key) is None:
            logger.debug(f"request_async: starting {method} {url}")
            self._spawn(self.start_request(url, settings), key)
        else:
            logger.debug(f"request_async: joining in-flight {method} {url}")

        self.current_requests.append(PendingRequest(key=key, waiter=waiter))
        return await waiter

    async def start_request(self, url: str, settings: RequestSettings) -> Any:
        """
        Perform one transport call and settle every waiter for (url, method).

        Side effects (cache write, event emission, waiter settlement, idle
        signal) happen exactly once per call. Waiters are never left behind:
        an unexpected exception or cancellation rejects them too.
        """
        method = settings.get("method", "GET")
        key = ResourceKey(url, method)

        self._begin_activity()
        try:
            return await self._dispatch(key, url, settings)
        except RequestFailedError:
            raise
        except asyncio.CancelledError:
            logger.debug(f"start_request: {method} {url} cancelled")
            self._abandon_pending(key, None)
            raise
        except Exception as error:
            logger.error(f"start_request: {method} {url} raised {error!r}")
            self._abandon_pending(key, error)
            raise
        finally:
            self._end_activity()

    async def _dispatch(self, key: ResourceKey, url: str, settings: RequestSettings) -> Any:
        try:
            response = await self._transport(url, settings)
        except (httpx.TransportError, OSError) as error:
            failed = RequestFailedError(
                Failure(
                    message=str(error) or type(error).__name__,
                    status_category=StatusCategory.NETWORK_UNREACHABLE,
                    raw_status=NETWORK_REQUEST_FAILED,
                )
            )
            self._settle_failure(key, failed)
            raise failed from error

        try:
            outcome = self.classifier.classify(response)
        except Exception as error:
            failed = RequestFailedError(
                Failure(
                    message=str(error),
                    status_category=categorize_status(response.status_code),
                    raw_status=response.status_code,
                    response=response,
                )
            )
            self._settle_failure(key, failed)
            raise failed from error

        if isinstance(outcome, Failure):
            failed = RequestFailedError(outcome)
            self._settle_failure(key, failed)
            raise failed

        payload = self.save_request(url, key.method, outcome.payload)
        for pending in self._take_pending(key):
            if not pending.waiter.done():
                pending.waiter.set_result(payload)
        return payload

    # -- method wrappers ----------------------------------------------------

    async def get(self, url: str, use_cache: bool = False) -> Any:
        """GET request."""
        return await self.request(url, use_cache, "GET")

    async def post(self, url: str, body: Any, use_cache: bool = False) -> Any:
        """POST request."""
        return await self.request(url, use_cache, "POST", body)

    async def put(self, url: str, body: Any, use_cache: bool = False) -> Any:
        """PUT request."""
        return await self.request(url, use_cache, "PUT", body)

    async def patch(self, url: str, body: Any = None, use_cache: bool = False) -> Any:
        """PATCH request."""
        return await self.request(url, use_cache, "PATCH", body)

    async def delete(self, url: str, body: Any = None) -> Any:
        """DELETE request."""
        return await self.request(url, False, "DELETE", body)

    # -- internals ----------------------------------------------------------

    def _find_pending(self, key: ResourceKey) -> Optional[PendingRequest]:
        for pending in self.current_requests:
            if pending.matches(key):
                return pending
        return None

    def _take_pending(self, key: ResourceKey) -> List[PendingRequest]:
        """Remove and return the waiters for key, in attachment order."""
        matched = [p for p in self.current_requests if p.matches(key)]
        self.current_requests = [p for p in self.current_requests if not p.matches(key)]
        return matched

    def _begin_activity(self) -> None:
        self._in_flight += 1
        if self._in_flight == 1:
            self._activity.activity_started()

    def _end_activity(self) -> None:
        self._in_flight -= 1
        if self._in_flight == 0:
            self._activity.activity_idle()

    def _settle_failure(self, key: ResourceKey, error: RequestFailedError) -> None:
        """Broadcast a failure and reject the waiters for key."""
        logger.warning(
            f"start_request: {key.method} {key.url} failed: "
            f"status={error.status!r}, message={error.message!r}"
        )
        self.event.emit(ERROR_EVENT, error)
        for pending in self._take_pending(key):
            if not pending.waiter.done():
                pending.waiter.set_exception(error)

    def _abandon_pending(self, key: ResourceKey, error: Optional[BaseException]) -> None:
        """Reject the waiters for key with error, or cancel them when error is None."""
        for pending in self._take_pending(key):
            if pending.waiter.done():
                continue
            if error is None:
                pending.waiter.cancel()
            else:
                pending.waiter.set_exception(error)

    def _spawn(self, coro, key: ResourceKey) -> None:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(functools.partial(self._on_background_done, key))

    def _on_background_done(self, key: ResourceKey, task: "asyncio.Task[Any]") -> None:
        self._background.discard(task)
        if task.cancelled():
            # a task cancelled before its first step never reached start_request
            self._abandon_pending(key, None)
            return
        # already logged and delivered to the waiters by start_request
        task.exception()
