"""
Authentication augmentation applied to request settings before dispatch.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .printer import mask_sensitive
from .types import RequestSettings

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


def _with_header(settings: RequestSettings, name: str, value: str) -> RequestSettings:
    """Copy settings with one extra header; the caller's dict is left untouched."""
    augmented = RequestSettings(**settings)
    headers = dict(settings.get("headers") or {})
    headers[name] = value
    augmented["headers"] = headers
    return augmented


class AuthHandler(ABC):
    """Auth handler interface."""

    @abstractmethod
    def authenticate(self, settings: RequestSettings) -> RequestSettings:
        """Return settings augmented with credentials."""
        ...


class NoAuthHandler(AuthHandler):
    """Leaves settings unchanged."""

    def authenticate(self, settings: RequestSettings) -> RequestSettings:
        return settings


class _TokenAuthHandler(AuthHandler):
    header_name = "Authorization"

    def __init__(
        self,
        token: Optional[str] = None,
        get_token: Optional[TokenProvider] = None,
    ):
        self._token = token
        self._get_token = get_token

    def _resolve_token(self) -> Optional[str]:
        token = None
        if self._get_token:
            token = self._get_token()
        if not token:
            token = self._token
        return token

    def _format(self, token: str) -> str:
        return token

    def authenticate(self, settings: RequestSettings) -> RequestSettings:
        token = self._resolve_token()
        if not token:
            logger.debug(f"{type(self).__name__}.authenticate: no token available")
            return settings
        value = self._format(token)
        logger.debug(
            f"{type(self).__name__}.authenticate: {self.header_name}={mask_sensitive(value, 10)}"
        )
        return _with_header(settings, self.header_name, value)


class CsrfTokenAuthHandler(_TokenAuthHandler):
    """Adds an anti-forgery token header (X-CSRF-Token by default)."""

    def __init__(
        self,
        token: Optional[str] = None,
        get_token: Optional[TokenProvider] = None,
        header_name: str = "X-CSRF-Token",
    ):
        super().__init__(token, get_token)
        self.header_name = header_name


class BearerAuthHandler(_TokenAuthHandler):
    """Adds Authorization: Bearer <token>."""

    def _format(self, token: str) -> str:
        return f"Bearer {token}"


def create_auth_handler(
    auth_type: Optional[str] = None,
    token: Optional[str] = None,
    get_token: Optional[TokenProvider] = None,
    header_name: Optional[str] = None,
) -> AuthHandler:
    """Create auth handler by type: "csrf", "bearer" or None."""
    logger.debug(
        f"create_auth_handler: type={auth_type}, token={mask_sensitive(token, 10)}, "
        f"has_callback={get_token is not None}"
    )
    if auth_type is None:
        return NoAuthHandler()
    if auth_type == "csrf":
        return CsrfTokenAuthHandler(token, get_token, header_name or "X-CSRF-Token")
    if auth_type == "bearer":
        return BearerAuthHandler(token, get_token)
    raise ValueError(f"Invalid auth type: {auth_type}. Must be one of: ['bearer', 'csrf']")
