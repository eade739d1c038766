"""HTTP client wrappers over httpx that raise reconstructed errors.

Error responses produced by ``HttpBridge.write_error`` on the peer come back as
the same typed taxonomy; transport failures surface as connection problems.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from packages.errtrace.errors import connection_problem

from .bridge import HttpBridge


def _request_error(exc: httpx.RequestError, method: str, url: str) -> BaseException:
    """Build a traced connection problem from one transport failure."""
    try:
        request: httpx.Request | None = exc.request
    except RuntimeError:
        request = None
    request_url = str(request.url) if request is not None else url
    request_method = request.method if request is not None else method.upper()
    return connection_problem(
        exc,
        "HTTP request failed for %s %s",
        request_method,
        request_url,
        method=request_method,
        url=request_url,
    )


class HttpClient:
    """Thin synchronous wrapper over ``httpx.Client``."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
        bridge: HttpBridge | None = None,
    ) -> None:
        """Create a new client wrapper; ``client`` is borrowed when given."""
        self._bridge = bridge or HttpBridge()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )

    def close(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one request, raising the peer's error for error statuses."""
        try:
            response = self._client.request(method=method, url=url, **kwargs)
        except httpx.RequestError as exc:
            raise _request_error(exc, method, url) from exc

        error = self._bridge.read_error(response.status_code, response.content)
        if error is not None:
            raise error
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one POST request."""
        return self.request("POST", url, **kwargs)

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """Issue one GET request and decode JSON."""
        return self.request("GET", url, **kwargs).json()

    def post_json(self, url: str, *, json: Any, **kwargs: Any) -> Any:
        """Issue one POST request with a JSON body and decode JSON response."""
        return self.request("POST", url, json=json, **kwargs).json()


class AsyncHttpClient:
    """Thin asynchronous wrapper over ``httpx.AsyncClient``."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
        bridge: HttpBridge | None = None,
    ) -> None:
        """Create a new asynchronous client wrapper."""
        self._bridge = bridge or HttpBridge()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one request, raising the peer's error for error statuses."""
        try:
            response = await self._client.request(method=method, url=url, **kwargs)
        except httpx.RequestError as exc:
            raise _request_error(exc, method, url) from exc

        error = self._bridge.read_error(response.status_code, response.content)
        if error is not None:
            raise error
        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one GET request."""
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one POST request."""
        return await self.request("POST", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """Issue one GET request and decode JSON."""
        return (await self.request("GET", url, **kwargs)).json()
