"""HTTP data source returning a JSON API response as context."""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

import httpx

from severn.data_sources.base import DataSource
from severn.errors import BackendError, DataSourceNoMatch, SerializationError

logger = logging.getLogger(__name__)

RequestMethod = Literal["GET", "POST"]

DEFAULT_TIMEOUT = 30.0


class HttpDataSource(DataSource):
    """Data source that fetches JSON from an HTTP endpoint.

    Build one with ``HttpDataSourceBuilder`` so that the request shape
    is validated up front.
    """

    def __init__(
        self,
        url: str,
        request_method: RequestMethod = "GET",
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.request_method = request_method
        self.body = body
        self.headers = headers or {}
        self.timeout = timeout
        self._transport = transport

    async def retrieve_data(self) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                if self.request_method == "POST":
                    response = await client.post(
                        self.url, json=self.body, headers=self.headers
                    )
                else:
                    response = await client.get(self.url, headers=self.headers)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise BackendError(
                f"{self.request_method} {self.url} failed: {e}", cause=e
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise SerializationError(
                f"Response from {self.url} is not valid JSON: {e}"
            ) from e

        if data is None or data == {} or data == [] or data == "":
            raise DataSourceNoMatch(f"{self.url} returned an empty response")

        logger.debug(f"Retrieved {len(response.content)} bytes from {self.url}")
        return json.dumps(data, indent=2)

    def __repr__(self) -> str:
        return f"HttpDataSource({self.request_method} {self.url})"


class HttpDataSourceBuilder:
    """Builder for ``HttpDataSource``.

    Example:
        source = (
            HttpDataSourceBuilder()
            .url("https://api.example.com/search")
            .request_method("POST")
            .body({"query": "release notes"})
            .build()
        )
    """

    def __init__(self) -> None:
        self._url: str | None = None
        self._request_method: RequestMethod = "GET"
        self._body: Any = None
        self._headers: dict[str, str] = {}
        self._timeout = DEFAULT_TIMEOUT
        self._transport: httpx.AsyncBaseTransport | None = None

    def url(self, url: str) -> HttpDataSourceBuilder:
        self._url = url
        return self

    def request_method(self, request_method: RequestMethod) -> HttpDataSourceBuilder:
        if request_method not in ("GET", "POST"):
            raise ValueError(f"Unsupported request method: {request_method}")
        self._request_method = request_method
        return self

    def body(self, body: Any) -> HttpDataSourceBuilder:
        self._body = body
        return self

    def header(self, name: str, value: str) -> HttpDataSourceBuilder:
        self._headers[name] = value
        return self

    def timeout(self, seconds: float) -> HttpDataSourceBuilder:
        self._timeout = seconds
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> HttpDataSourceBuilder:
        self._transport = transport
        return self

    def build(self) -> HttpDataSource:
        """Validate the request shape and build the data source.

        Raises:
            ValueError: If the URL is missing, a GET has a body,
                or a POST has none.
        """
        if not self._url:
            raise ValueError("You need a URL!")
        if self._request_method == "GET" and self._body is not None:
            raise ValueError("You can't have a GET request with a body!")
        if self._request_method == "POST" and self._body is None:
            raise ValueError("You didn't set a body on your POST request!")

        return HttpDataSource(
            url=self._url,
            request_method=self._request_method,
            body=self._body,
            headers=dict(self._headers),
            timeout=self._timeout,
            transport=self._transport,
        )
