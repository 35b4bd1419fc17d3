"""
HTTP client for remote services.

Provides a small async wrapper around httpx used to call the Zamar
backend and the LangGraph agent service. Every call opens a short-lived
``httpx.AsyncClient``; there are no retries and no shared connection state.
"""

import logging
from typing import Any, Optional

import httpx

from .exceptions import ExternalServiceError, UpstreamError

logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Async JSON client bound to one remote service.

    Network and decoding failures are raised as ExternalServiceError;
    non-2xx answers from ``forward()`` are raised as UpstreamError carrying
    the remote status and body.
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service = service
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._default_headers = default_headers or {}
        self._transport = transport

    def url_for(self, path: str) -> str:
        """Build the absolute URL for a service path."""
        return f"{self.base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """
        Send a request and return the raw response, whatever its status.

        Args:
            method: HTTP method
            path: Path relative to the service base URL
            token: Bearer token to attach as ``Authorization``
            json: JSON body
            headers: Extra headers

        Raises:
            ExternalServiceError: If the service could not be reached
        """
        request_headers = dict(self._default_headers)
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        if headers:
            request_headers.update(headers)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.request(
                    method,
                    self.url_for(path),
                    headers=request_headers,
                    json=json,
                )
        except httpx.HTTPError as e:
            logger.error(f"{self.service} request failed: {method} {path}: {e}")
            raise ExternalServiceError(
                f"Failed to reach {self.service}",
                service=self.service,
                details={"method": method, "path": path},
            ) from e

    async def forward(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        expect_body: bool = True,
    ) -> Any:
        """
        Send a request and return the decoded JSON body of a 2xx answer.

        Args:
            method: HTTP method
            path: Path relative to the service base URL
            token: Bearer token to attach as ``Authorization``
            json: JSON body
            expect_body: Decode the body of a successful answer

        Returns:
            Decoded JSON, or None when ``expect_body`` is False

        Raises:
            UpstreamError: If the service answered with a non-2xx status
            ExternalServiceError: If the service was unreachable or the
                body was not valid JSON
        """
        response = await self.request(method, path, token=token, json=json)

        if response.is_success and not expect_body:
            return None

        body = self.decode(response, method, path)
        if not response.is_success:
            logger.warning(
                f"{self.service} returned {response.status_code} for {method} {path}"
            )
            raise UpstreamError(self.service, response.status_code, body)
        return body

    def decode(self, response: httpx.Response, method: str, path: str) -> Any:
        """Decode a JSON body, raising ExternalServiceError if it is not JSON."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"{self.service} sent a non-JSON body for {method} {path} "
                f"(status {response.status_code})"
            )
            raise ExternalServiceError(
                f"Invalid response from {self.service}",
                service=self.service,
                details={"method": method, "path": path},
            ) from e
