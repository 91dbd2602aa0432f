"""
Error taxonomy for fetch_coordinator.
"""
from typing import Optional, Union

import httpx

from .types import Failure, StatusCategory


class FetchCoordinatorError(Exception):
    """Base class for all coordinator errors."""


class MissingURLError(FetchCoordinatorError, ValueError):
    """Raised when a request is issued without a url."""

    def __init__(self, message: str = "url is undefined") -> None:
        super().__init__(message)


class MissingBodyError(FetchCoordinatorError, ValueError):
    """Raised when a POST or PUT request is issued without a body."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"this is a {method} request without a body")


class CacheMissError(FetchCoordinatorError, KeyError):
    """Raised when resolving from cache with nothing stored."""

    def __init__(self, url: str, method: str) -> None:
        self.url = url
        self.method = method
        super().__init__(f"no cached response for {method} {url}")

    def __str__(self) -> str:
        return self.args[0]


class RequestFailedError(FetchCoordinatorError):
    """
    A transport or classification failure.

    The same instance is delivered to every waiter, to the error event bus
    and to the direct caller, so ``failure`` keeps the full metadata.
    """

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(failure.message)

    @property
    def message(self) -> str:
        return self.failure.message

    @property
    def response(self) -> Optional[httpx.Response]:
        return self.failure.response

    @property
    def status(self) -> Union[int, str]:
        return self.failure.raw_status

    @property
    def status_category(self) -> StatusCategory:
        return self.failure.status_category

    def __repr__(self) -> str:
        return (
            f"RequestFailedError(message={self.failure.message!r}, "
            f"status={self.failure.raw_status!r}, "
            f"category={self.failure.status_category.value!r})"
        )
