"""
Standing subscriptions for the "error" event: forced logout on expired
authentication and user notifications for everything else.
"""
import logging
from typing import Any, Callable, List

from .config import ResolvedConfig
from .events import ERROR_EVENT, ErrorEventBus
from .types import Notification, Notifier, Session

logger = logging.getLogger("fetch_coordinator.handlers")

ERROR_TITLE = "Error:"
APPLICATION_ERRORS_ID = "application-errors"
APPLICATION_ERROR_MESSAGE = (
    "We're currently experiencing problems with our application. "
    "Please wait a moment and refresh, if the problems persist please contact support."
)
AUTH_EXPIRED_MESSAGE = "Your user is not currently authenticated, please log in again."
GENERIC_ERROR_MESSAGE = "Something went wrong."


def error_status(error: Any) -> Any:
    """Status carried by an error event payload, or None."""
    status = getattr(error, "status", None)
    if status is not None:
        return status
    response = getattr(error, "response", None)
    if response is None and isinstance(error, dict):
        response = error.get("response")
    if isinstance(response, dict):
        return response.get("status")
    return getattr(response, "status_code", None)


def error_message_from_response(message: Any) -> str:
    """Extract a displayable message from an error message or decoded body."""
    if isinstance(message, dict):
        message = message.get("error") or message.get("message")
    if message is None or message == "":
        return GENERIC_ERROR_MESSAGE
    return str(message)


def _error_message(error: Any) -> Any:
    if isinstance(error, dict):
        return error.get("message")
    return getattr(error, "message", None) or str(error)


class AuthExpiredHandler:
    """Alerts the user and replaces the location with the logout url on 401."""

    def __init__(self, session: Session, logout_url: str, status: int = 401):
        self._session = session
        self._logout_url = logout_url
        self._status = status

    def __call__(self, error: Any) -> None:
        if error_status(error) != self._status:
            return
        logger.warning(f"AuthExpiredHandler: redirecting to {self._logout_url}")
        self._session.alert(AUTH_EXPIRED_MESSAGE)
        self._session.replace(self._logout_url)


class ErrorNotificationHandler:
    """Shows a titled notification for every failure except expired authentication."""

    def __init__(
        self,
        notifier: Notifier,
        default_timeout_ms: int = 20000,
        application_timeout_ms: int = 40000,
        application_statuses: tuple = (408, 444, 500, 503, 504),
        auth_expired_status: int = 401,
    ):
        self._notifier = notifier
        self._default_timeout_ms = default_timeout_ms
        self._application_timeout_ms = application_timeout_ms
        self._application_statuses = frozenset(application_statuses)
        self._auth_expired_status = auth_expired_status

    def build_notification(self, error: Any) -> Notification:
        status = error_status(error)
        if status in self._application_statuses:
            return Notification(
                title=ERROR_TITLE,
                message=APPLICATION_ERROR_MESSAGE,
                id=APPLICATION_ERRORS_ID,
                timeout=self._application_timeout_ms,
            )
        return Notification(
            title=ERROR_TITLE,
            message=error_message_from_response(_error_message(error)),
            timeout=self._default_timeout_ms,
        )

    def __call__(self, error: Any) -> None:
        if error_status(error) == self._auth_expired_status:
            return
        self._notifier.display_error(self.build_notification(error))


def register_default_error_handlers(
    bus: ErrorEventBus,
    config: ResolvedConfig,
    notifier: Notifier,
    session: Session,
) -> Callable[[], None]:
    """
    Subscribe the logout and notification handlers to the "error" event.

    Returns a callable that removes both subscriptions.
    """
    unsubscribers: List[Callable[[], None]] = [
        bus.on(
            ERROR_EVENT,
            AuthExpiredHandler(session, config.logout_url, config.auth_expired_status),
        ),
        bus.on(
            ERROR_EVENT,
            ErrorNotificationHandler(
                notifier,
                default_timeout_ms=config.default_error_timeout_ms,
                application_timeout_ms=config.application_error_timeout_ms,
                application_statuses=config.application_error_statuses,
                auth_expired_status=config.auth_expired_status,
            ),
        ),
    ]

    def unsubscribe() -> None:
        for remove in unsubscribers:
            remove()

    return unsubscribe
