"""
Tests for the standing "error" subscriptions.
"""
import pytest

from fetch_coordinator import (
    APPLICATION_ERROR_MESSAGE,
    AUTH_EXPIRED_MESSAGE,
    NETWORK_REQUEST_FAILED,
    AuthExpiredHandler,
    ErrorEventBus,
    ErrorNotificationHandler,
    Failure,
    RequestFailedError,
    StatusCategory,
    error_message_from_response,
    register_default_error_handlers,
    resolve_config,
)
from conftest import FakeTransport, json_response


def failed(status, message="There has been an error yo") -> RequestFailedError:
    return RequestFailedError(
        Failure(message=message, status_category=StatusCategory.UNKNOWN, raw_status=status)
    )


@pytest.fixture
def bus(config, notifier, session) -> ErrorEventBus:
    bus = ErrorEventBus()
    register_default_error_handlers(bus, resolve_config(config), notifier, session)
    return bus


class TestAuthExpired:
    """401 forces a logout redirect."""

    def test_alerts_and_redirects(self, bus, session, notifier) -> None:
        bus.emit("error", failed(401))

        assert session.alerts == [AUTH_EXPIRED_MESSAGE]
        assert session.locations == ["https://app.example.com/logout"]
        assert notifier.notifications == []

    def test_once_per_event(self, bus, session) -> None:
        bus.emit("error", failed(401))
        bus.emit("error", failed(401))

        assert len(session.alerts) == 2
        assert len(session.locations) == 2

    def test_dict_payload(self, bus, session) -> None:
        """Payloads shaped as {"response": {"status": ...}} are understood."""
        bus.emit("error", {"response": {"status": 401}})
        assert session.locations == ["https://app.example.com/logout"]

    def test_other_status_ignored(self, session) -> None:
        handler = AuthExpiredHandler(session, "https://x/logout")
        handler(failed(403))
        assert session.alerts == []


class TestNotifications:
    """Notification shape per status."""

    def test_default_notification(self, bus, notifier, session) -> None:
        bus.emit("error", failed(400))

        assert notifier.notifications == [
            {"title": "Error:", "message": "There has been an error yo", "timeout": 20000}
        ]
        assert session.locations == []

    @pytest.mark.parametrize("status", [408, 444, 500, 503, 504])
    def test_application_error(self, bus, notifier, status) -> None:
        bus.emit("error", failed(status))

        assert notifier.notifications == [
            {
                "title": "Error:",
                "message": APPLICATION_ERROR_MESSAGE,
                "id": "application-errors",
                "timeout": 40000,
            }
        ]

    def test_network_failure_uses_default(self, bus, notifier) -> None:
        bus.emit("error", failed(NETWORK_REQUEST_FAILED, "connection refused"))

        assert notifier.notifications[0]["timeout"] == 20000
        assert notifier.notifications[0]["message"] == "connection refused"
        assert "id" not in notifier.notifications[0]

    def test_unhandled_status_does_not_raise(self, bus, notifier) -> None:
        bus.emit("error", {"response": {"status": 404}})
        assert notifier.notifications[0]["timeout"] == 20000

    def test_custom_timeouts(self, notifier) -> None:
        handler = ErrorNotificationHandler(
            notifier, default_timeout_ms=1000, application_timeout_ms=2000
        )
        handler(failed(404))
        handler(failed(500))

        assert [n["timeout"] for n in notifier.notifications] == [1000, 2000]

    def test_application_message_text(self) -> None:
        assert APPLICATION_ERROR_MESSAGE == (
            "We're currently experiencing problems with our application. Please wait "
            "a moment and refresh, if the problems persist please contact support."
        )


class TestErrorMessageFromResponse:
    """error_message_from_response()."""

    def test_string(self) -> None:
        assert error_message_from_response("boom") == "boom"

    def test_dict_error_field(self) -> None:
        assert error_message_from_response({"error": "There has been an error yo"}) == (
            "There has been an error yo"
        )

    def test_empty_falls_back(self) -> None:
        assert error_message_from_response(None) == "Something went wrong."
        assert error_message_from_response("") == "Something went wrong."


class TestWiring:
    """Handlers receive coordinator failures end to end."""

    @pytest.mark.asyncio
    async def test_coordinator_401_logs_out(self, make_coordinator, config, notifier, session) -> None:
        coordinator = make_coordinator(
            FakeTransport(lambda url, options: json_response(status=401, data={}))
        )
        register_default_error_handlers(coordinator.event, coordinator.config, notifier, session)

        with pytest.raises(RequestFailedError):
            await coordinator.get("/api/me")

        assert session.locations == ["https://app.example.com/logout"]
        assert notifier.notifications == []

    def test_unsubscribe(self, config, notifier, session) -> None:
        bus = ErrorEventBus()
        unsubscribe = register_default_error_handlers(bus, resolve_config(config), notifier, session)

        unsubscribe()
        bus.emit("error", failed(500))

        assert notifier.notifications == []
        assert bus.listener_count("error") == 0
