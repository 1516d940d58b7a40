"""Async HTTP client wrapper with timing and response capture."""

import json
import logging
import time
from typing import Any

import httpx

from apirunner.config import get_settings
from apirunner.errors import TransportError
from apirunner.schemas.api_request import RequestOptions, ResponseData

logger = logging.getLogger(__name__)


class APIHttpClient:
    """
    Async HTTP transport for API testing with timing capture.

    Any status code the server answers with becomes a ResponseData. Only a
    request that got no response at all (DNS, connect, timeout, too many
    redirects) raises TransportError.
    """

    def __init__(
        self,
        timeout_ms: int | None = None,
        follow_redirects: bool | None = None,
        verify_ssl: bool | None = None,
        max_redirects: int | None = None,
        max_body_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.timeout_ms = timeout_ms or settings.default_timeout_ms
        self.follow_redirects = settings.follow_redirects if follow_redirects is None else follow_redirects
        self.verify_ssl = settings.verify_ssl if verify_ssl is None else verify_ssl
        self.max_redirects = settings.max_redirects if max_redirects is None else max_redirects
        self.max_body_size = max_body_size or settings.max_body_size
        self._transport = transport
        # verify and max_redirects are client-level settings in httpx
        self._clients: dict[tuple[bool, int], httpx.AsyncClient] = {}

    async def __aenter__(self) -> "APIHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_client(self, verify_ssl: bool, max_redirects: int) -> httpx.AsyncClient:
        """Get or create the async HTTP client for this TLS/redirect combination."""
        key = (verify_ssl, max_redirects)
        client = self._clients.get(key)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_ms / 1000.0),
                verify=verify_ssl,
                max_redirects=max_redirects,
                transport=self._transport,
            )
            self._clients[key] = client
        return client

    async def close(self):
        """Close all HTTP clients."""
        for client in self._clients.values():
            if not client.is_closed:
                await client.aclose()
        self._clients.clear()

    async def send(self, options: RequestOptions) -> ResponseData:
        """
        Execute an HTTP request and return response with timing.

        Args:
            options: Fully resolved request options

        Returns:
            ResponseData with status, headers, parsed body and duration

        Raises:
            TransportError: no response could be obtained
        """
        verify_ssl = options.verify_ssl and self.verify_ssl
        max_redirects = self.max_redirects if options.max_redirects is None else options.max_redirects
        client = self._get_client(verify_ssl, max_redirects)

        kwargs: dict[str, Any] = {
            "method": options.method,
            "url": options.url,
            "headers": options.headers or {},
            "follow_redirects": options.follow_redirects and self.follow_redirects,
        }

        if options.params:
            kwargs["params"] = options.params

        # Strings go out verbatim, anything else as JSON
        if options.data is not None:
            if isinstance(options.data, str):
                kwargs["content"] = options.data.encode()
            else:
                kwargs["json"] = options.data

        if options.timeout:
            kwargs["timeout"] = options.timeout / 1000.0

        start_time = time.perf_counter()

        try:
            response = await client.request(**kwargs)
            body_bytes = response.content
        except httpx.RequestError as e:
            elapsed_ms = int((time.perf_counter() - start_time) * 1000)
            logger.debug("No response from %s after %sms: %r", options.url, elapsed_ms, e)
            raise TransportError(f"No response received: {e}", url=options.url) from e

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)

        if len(body_bytes) > self.max_body_size:
            body_bytes = body_bytes[:self.max_body_size]

        return ResponseData(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            data=self._parse_body(body_bytes, response.headers.get("content-type", "")),
            duration=elapsed_ms,
        )

    def _parse_body(self, body_bytes: bytes, content_type: str) -> Any:
        """Decode the body, parsing it as JSON when it looks like JSON."""
        try:
            body_text = body_bytes.decode("utf-8")
        except UnicodeDecodeError:
            body_text = body_bytes.decode("latin-1")

        if not body_text.strip():
            return body_text

        if "json" in content_type.lower() or body_text.lstrip()[:1] in ("{", "["):
            try:
                return json.loads(body_text)
            except json.JSONDecodeError:
                return body_text

        return body_text
