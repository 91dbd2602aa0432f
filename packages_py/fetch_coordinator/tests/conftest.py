"""Pytest configuration and fixtures for fetch_coordinator tests."""
import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from fetch_coordinator import (
    CoordinatorConfig,
    ErrorEventBus,
    MemoryResponseCache,
    RequestCoordinator,
)

ORIGIN = "https://app.example.com"


def json_response(
    status: int = 200,
    data: Any = None,
    headers: Optional[Dict[str, str]] = None,
    reason: Optional[str] = None,
) -> httpx.Response:
    """Build a JSON response; data defaults to {"foo": "bar"}."""
    extensions = {"reason_phrase": reason.encode()} if reason else {}
    return httpx.Response(
        status_code=status,
        json={"foo": "bar"} if data is None else data,
        headers=headers or {"foo": "bar"},
        extensions=extensions,
    )


def text_response(
    status: int = 200,
    text: str = "hello",
    reason: Optional[str] = None,
) -> httpx.Response:
    """Build a text/html response."""
    extensions = {"reason_phrase": reason.encode()} if reason else {}
    return httpx.Response(
        status_code=status,
        text=text,
        headers={"foo": "bar", "content-type": "text/html"},
        extensions=extensions,
    )


class FakeTransport:
    """
    Transport double.

    Each call invokes handler(url, options) for a fresh response (or raises
    what it raises). When gated, calls block until release() is called.
    """

    def __init__(
        self,
        handler: Optional[Callable[[str, Dict[str, Any]], httpx.Response]] = None,
        gated: bool = False,
    ) -> None:
        self.handler = handler or (lambda url, options: json_response())
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self._gate: Optional[asyncio.Event] = asyncio.Event() if gated else None

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()

    async def __call__(self, url: str, options: Dict[str, Any]) -> httpx.Response:
        self.calls.append((url, options))
        if self._gate is not None:
            await self._gate.wait()
        return self.handler(url, options)


class RecordingActivity:
    """Busy indicator double."""

    def __init__(self) -> None:
        self.events: List[str] = []

    def activity_started(self) -> None:
        self.events.append("started")

    def activity_idle(self) -> None:
        self.events.append("idle")


class RecordingNotifier:
    """Notifier double."""

    def __init__(self) -> None:
        self.notifications: List[Dict[str, Any]] = []

    def display_error(self, notification: Dict[str, Any]) -> None:
        self.notifications.append(dict(notification))


class RecordingSession:
    """Session double."""

    def __init__(self) -> None:
        self.alerts: List[str] = []
        self.locations: List[str] = []

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def replace(self, url: str) -> None:
        self.locations.append(url)


@pytest.fixture
def config() -> CoordinatorConfig:
    """Coordinator config with tracing off."""
    return CoordinatorConfig(origin=ORIGIN, trace=False)


@pytest.fixture
def activity() -> RecordingActivity:
    return RecordingActivity()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture
def make_coordinator(config, activity):
    """Build a coordinator around a given transport."""

    def _make(transport, **kwargs) -> RequestCoordinator:
        kwargs.setdefault("activity", activity)
        kwargs.setdefault("cache", MemoryResponseCache())
        kwargs.setdefault("event_bus", ErrorEventBus())
        return RequestCoordinator(config, transport, **kwargs)

    return _make
