"""
Default transport built on httpx.
"""
import logging
from typing import Optional

import httpx

from .config import CoordinatorConfig, ResolvedConfig, resolve_config
from .printer import print_request, print_response, print_transport_error
from .types import RequestSettings

logger = logging.getLogger("fetch_coordinator.transport")


class HttpxTransport:
    """
    One-round-trip transport over httpx.AsyncClient.

    Relative urls resolve against the configured origin. Connectivity
    problems surface as httpx.TransportError; every received response is
    returned as-is, whatever its status.
    """

    def __init__(
        self,
        config: CoordinatorConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
    ):
        self._config: ResolvedConfig = resolve_config(config)
        if httpx_client is not None:
            self._client = httpx_client
        else:
            self._client = httpx.AsyncClient(
                base_url=self._config.origin,
                timeout=httpx.Timeout(
                    connect=self._config.timeout.connect,
                    read=self._config.timeout.read,
                    write=self._config.timeout.write,
                    pool=self._config.timeout.connect,
                ),
                verify=self._config.verify_ssl,
            )
        self._closed = False

    async def __call__(self, url: str, options: RequestSettings) -> httpx.Response:
        if self._closed:
            raise RuntimeError("Transport has been closed")

        method = options.get("method", "GET")
        headers = {**self._config.headers, **(options.get("headers") or {})}
        body = options.get("body")

        request = self._client.build_request(
            method=method,
            url=url,
            headers=headers,
            content=body,
        )
        if options.get("credentials", self._config.credentials) == "omit":
            request.headers.pop("cookie", None)

        logger.debug(f"HttpxTransport: method={method}, url={request.url}")
        if self._config.trace:
            print_request(method, str(request.url), request.headers, body)

        try:
            response = await self._client.send(request)
        except httpx.TransportError as error:
            logger.debug(f"HttpxTransport: transport error for {method} {request.url}: {error!r}")
            if self._config.trace:
                print_transport_error(method, str(request.url), error)
            raise

        if self._config.trace:
            print_response(
                response.status_code,
                response.reason_phrase or "",
                str(request.url),
                response.headers,
            )
        return response

    async def aclose(self) -> None:
        """Close the underlying client."""
        self._closed = True
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
