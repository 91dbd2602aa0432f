"""
Factory functions for creating a wired coordinator.
"""
from typing import Optional

import httpx

from .auth import AuthHandler
from .config import CoordinatorConfig
from .coordinator import RequestCoordinator
from .handlers import register_default_error_handlers
from .transport import HttpxTransport
from .types import ActivityIndicator, Notifier, Session, Transport


def create_coordinator(
    config: CoordinatorConfig,
    *,
    transport: Optional[Transport] = None,
    httpx_client: Optional[httpx.AsyncClient] = None,
    auth_handler: Optional[AuthHandler] = None,
    activity: Optional[ActivityIndicator] = None,
    notifier: Optional[Notifier] = None,
    session: Optional[Session] = None,
) -> RequestCoordinator:
    """
    Create a coordinator with the default httpx transport.

    Args:
        config: Coordinator configuration
        transport: Custom transport (defaults to HttpxTransport)
        httpx_client: httpx.AsyncClient for the default transport
        auth_handler: Auth augmentation applied before every dispatch
        activity: Busy indicator
        notifier: When given together with session, the logout and
            notification handlers are subscribed to the "error" event

    Returns:
        RequestCoordinator instance

    Example:
        coordinator = create_coordinator(
            CoordinatorConfig(origin="https://app.example.com"),
            auth_handler=CsrfTokenAuthHandler(get_token=read_csrf_cookie),
            notifier=toaster,
            session=browser_session,
        )
    """
    if transport is None:
        transport = HttpxTransport(config, httpx_client=httpx_client)

    coordinator = RequestCoordinator(
        config,
        transport,
        auth_handler=auth_handler,
        activity=activity,
    )

    if notifier is not None and session is not None:
        register_default_error_handlers(coordinator.event, coordinator.config, notifier, session)

    return coordinator
