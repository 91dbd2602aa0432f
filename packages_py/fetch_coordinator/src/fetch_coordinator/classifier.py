"""
Response classification.

Turns a raw httpx.Response into a normalized Outcome, branching on the
declared content type (structured JSON vs. plain text) and on the status.
"""
import logging
from typing import Any, Dict, Union

import httpx

from .types import Failure, Outcome, StatusCategory, Success

logger = logging.getLogger("fetch_coordinator.classifier")

HEADERS_FIELD = "_headers"
JSON_MARKER = "json"


def snapshot_headers(headers: httpx.Headers) -> Dict[str, str]:
    """Flatten response headers into a plain name -> value mapping."""
    snapshot: Dict[str, str] = {}
    # items() merges repeated headers, so every name is visited once
    for name, value in headers.items():
        snapshot[name] = value
    return snapshot


def categorize_status(status: Union[int, str]) -> StatusCategory:
    """Map a raw status to a StatusCategory."""
    if not isinstance(status, int):
        return StatusCategory.UNKNOWN
    if status == 401:
        return StatusCategory.AUTH_EXPIRED
    if 400 <= status < 500:
        return StatusCategory.CLIENT_ERROR
    if 500 <= status < 600:
        return StatusCategory.SERVER_ERROR
    return StatusCategory.UNKNOWN


def is_structured(response: httpx.Response) -> bool:
    """Check whether the response declares a JSON content type."""
    content_type = response.headers.get("content-type") or ""
    return JSON_MARKER in content_type.lower()


class ResponseClassifier:
    """
    Classifies raw responses.

    Decode errors (invalid JSON, undecodable text) are not converted into a
    Failure here; they propagate out of classify().
    """

    def classify(self, response: httpx.Response) -> Outcome:
        """Classify a response by content type and status."""
        if is_structured(response):
            return self._handle_json(response)
        return self._handle_text(response)

    def _handle_json(self, response: httpx.Response) -> Outcome:
        data = response.json()
        if response.is_success:
            headers = snapshot_headers(response.headers)
            if isinstance(data, dict):
                data[HEADERS_FIELD] = headers
            return Success(payload=data, headers=headers)

        message = _error_field(data) or response.reason_phrase
        return self._failure(response, message)

    def _handle_text(self, response: httpx.Response) -> Outcome:
        text = response.text
        if response.is_success:
            return Success(payload=text, headers=snapshot_headers(response.headers))
        return self._failure(response, response.reason_phrase)

    def _failure(self, response: httpx.Response, message: str) -> Failure:
        category = categorize_status(response.status_code)
        logger.debug(
            f"ResponseClassifier: status={response.status_code}, "
            f"category={category.value}, message={message!r}"
        )
        return Failure(
            message=message,
            status_category=category,
            raw_status=response.status_code,
            response=response,
        )


def _error_field(data: Any) -> Any:
    if isinstance(data, dict):
        return data.get("error")
    return None
