"""Transport layer -- the network side of the caching client.

:class:`Transport` is the protocol :class:`~apicache.client.CachingHttpClient`
depends on: three coroutine request methods that return a tagged response
shape, plus :meth:`~Transport.set_header` for process-wide headers such as
``Authorization``.

:class:`HttpxTransport` implements it over :class:`httpx.AsyncClient`. It
decodes each body once and tags it with
:func:`~apicache.models.classify_body`, and maps HTTP error statuses and
network failures onto the :mod:`apicache.exceptions` hierarchy. It does
not retry.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Union

import httpx

from apicache.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from apicache.models import Envelope, RawPayload, RequestConfig, classify_body
from apicache.output import get_output


class Transport(Protocol):
    """What the caching client needs from the network layer."""

    async def get(self, url: str, **options: Any) -> Union[Envelope, RawPayload]: ...

    async def post(
        self, url: str, body: Any = None, **options: Any
    ) -> Union[Envelope, RawPayload]: ...

    async def delete(self, url: str, **options: Any) -> Union[Envelope, RawPayload]: ...

    def set_header(self, name: str, value: str) -> None: ...


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.AsyncClient`.

    Headers set with :meth:`set_header` are kept on the transport and sent
    with every later request, whichever client issued it. Must be used as
    an async context manager.

    Args:
        base_url: Optional root prepended to relative request URLs.
        config: Timeout and SSL settings.
        http_transport: Optional :class:`httpx.AsyncBaseTransport`, e.g. an
            :class:`httpx.MockTransport` in tests.

    Example::

        async with HttpxTransport("https://api.example.com") as transport:
            shape = await transport.get("/upload?page=1")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[RequestConfig] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url or ""
        self._config = config or RequestConfig()
        self._http_transport = http_transport
        self._headers: dict[str, str] = {"Accept": "application/json"}
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> dict[str, str]:
        """A copy of the headers sent with every request."""
        return dict(self._headers)

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._http_transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport protocol
    # ------------------------------------------------------------------ #

    async def get(self, url: str, **options: Any) -> Union[Envelope, RawPayload]:
        return await self.request("GET", url, **options)

    async def post(
        self, url: str, body: Any = None, **options: Any
    ) -> Union[Envelope, RawPayload]:
        return await self.request("POST", url, json_body=body, **options)

    async def delete(self, url: str, **options: Any) -> Union[Envelope, RawPayload]:
        return await self.request("DELETE", url, **options)

    def set_header(self, name: str, value: str) -> None:
        """Send *name* with every subsequent request made through this transport."""
        self._headers[name] = value

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
    ) -> Union[Envelope, RawPayload]:
        """Send a request and return its body as a tagged response shape.

        Args:
            method: HTTP method (GET, POST, DELETE).
            url: Absolute URL, or a path relative to ``base_url``.
            params: Extra query parameters.
            headers: Extra headers for this request only.
            json_body: JSON-serialisable request body.

        Returns:
            An :class:`~apicache.models.Envelope` or
            :class:`~apicache.models.RawPayload`.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On 5xx and any other 4xx.
            ConnectionError_: On network and timeout errors.
        """
        assert self._client is not None, "Transport not initialised -- use as async context manager"

        merged_headers = {**self._headers, **(headers or {})}
        kwargs: dict[str, Any] = {
            "method": method,
            "url": url,
            "headers": merged_headers,
        }
        if params:
            kwargs["params"] = params
        if json_body is not None:
            kwargs["json"] = json_body

        get_output().debug(f"{method} {url}")
        try:
            response = await self._client.request(**kwargs)
        except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection failed: {exc}") from exc

        self._map_response_error(response)
        return classify_body(_decode_body(response))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)


def _decode_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when possible, else text, ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
