"""Asynchronous HTTP client with transparent, namespaced response caching.

:class:`CachingHttpClient` wraps a :class:`~apicache.client.transport.Transport`
and a shared :class:`~apicache.cache.CacheStore`. Every request goes
through the same steps:

1. **Cache lookup** -- when the client's TTL is positive, the cache key is
   derived from the method, URL, and discriminators, the
   ``(namespace, url)`` bucket is swept, and a live entry is returned
   without touching the network.
2. **Transport call** -- on a miss (or with caching disabled) the request
   is sent. Errors propagate unchanged; nothing is cached or retried.
3. **Cache store** -- when caching is enabled, the tagged response shape
   (the envelope, not the unwrapped payload) is serialised and stored
   with the client's TTL.
4. **Extraction** -- the payload is taken from the shape. Cached and live
   responses go through this same step, so callers cannot tell them
   apart.

Clients are immutable. A different namespace or cache policy means a new
client, produced by :meth:`CachingHttpClient.derive_for_namespace` or
:meth:`CachingHttpClient.derive_cached`. Derived clients share the
transport and the store with their parent.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from apicache.cache import CacheStore, derive_cache_key
from apicache.client.transport import Transport
from apicache.config import is_cache_disabled
from apicache.duration import parse_ttl
from apicache.models import (
    DEFAULT_CACHE_TTL,
    ROOT_NAMESPACE,
    ClientConfig,
    Envelope,
    RawPayload,
    response_adapter,
)
from apicache.output import get_output


class CachingHttpClient:
    """HTTP client that may answer GET/POST/DELETE calls from a TTL cache.

    Args:
        transport: Network layer shared by every derived client.
        store: Cache store shared by every derived client.
        namespace: Logical caller owning this client's cache entries.
        discriminators: Extra pairs folded into every cache key.
        ttl: Cache TTL in milliseconds, or a duration string such as
            ``"5m"``. ``0`` (the default) disables caching.
        cache_disabled: Forces :meth:`derive_cached` to be a no-op when
            ``True`` (or to always apply when ``False``). ``None`` defers to
            the ``CLIENT_HTTP_CACHE_DISABLE`` environment variable.

    Example::

        root = CachingHttpClient(transport, CacheStore())
        uploads = root.derive_for_namespace("UploadService")
        photos = await uploads.derive_cached({}, "5m").get("/upload?page=1")
    """

    def __init__(
        self,
        transport: Transport,
        store: CacheStore,
        namespace: str = ROOT_NAMESPACE,
        discriminators: Optional[Mapping[str, Any]] = None,
        ttl: Union[int, float, str] = 0,
        cache_disabled: Optional[bool] = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._config = ClientConfig(
            namespace=namespace,
            ttl=parse_ttl(ttl),
            discriminators=dict(discriminators or {}),
        )
        self._cache_disabled = cache_disabled

    # ------------------------------------------------------------------ #
    # Read-only state
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def namespace(self) -> str:
        return self._config.namespace

    @property
    def ttl(self) -> float:
        return self._config.ttl

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def store(self) -> CacheStore:
        return self._store

    # ------------------------------------------------------------------ #
    # Derivation
    # ------------------------------------------------------------------ #

    def derive_for_namespace(self, namespace: str = ROOT_NAMESPACE) -> CachingHttpClient:
        """Return a client bound to *namespace*, with caching disabled.

        The new client shares this client's transport and store, so each
        service gets its own cache partition without rewiring.
        """
        return CachingHttpClient(
            self._transport,
            self._store,
            namespace,
            cache_disabled=self._cache_disabled,
        )

    def derive_cached(
        self,
        discriminators: Optional[Mapping[str, Any]] = None,
        ttl: Union[int, float, str] = DEFAULT_CACHE_TTL,
    ) -> CachingHttpClient:
        """Return a client in the same namespace with caching enabled.

        Args:
            discriminators: Pairs folded into the cache key next to the
                method and URL.
            ttl: Milliseconds, or a duration string such as ``"5m"``. An
                unparsable string yields ``0``, which leaves caching off.

        Returns:
            A new client. When the cache opt-out is active the new client
            has caching disabled and otherwise behaves the same.
        """
        disabled = self._cache_disabled
        if disabled is None:
            disabled = is_cache_disabled()
        if disabled:
            get_output().debug(f"Cache disabled, {self.namespace} requests go to the network")
            return CachingHttpClient(
                self._transport,
                self._store,
                self.namespace,
                cache_disabled=self._cache_disabled,
            )

        get_output().debug(f"Setting cache for {self.namespace} (ttl={ttl!r})")
        return CachingHttpClient(
            self._transport,
            self._store,
            self.namespace,
            discriminators=discriminators,
            ttl=ttl,
            cache_disabled=self._cache_disabled,
        )

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    async def get(self, url: str, **options: Any) -> Any:
        """Send a GET request, or answer it from the cache.

        Args:
            url: Request URL, query string included. Also the cache
                resource key.
            **options: Forwarded to the transport.

        Returns:
            The extracted payload.
        """
        return await self._send("GET", url, lambda: self._transport.get(url, **options))

    async def post(self, url: str, body: Any = None, **options: Any) -> Any:
        """Send a POST request, or answer it from the cache.

        The body is not part of the cache key; use discriminators to split
        the cache on it.
        """
        return await self._send(
            "POST", url, lambda: self._transport.post(url, body, **options)
        )

    async def delete(self, url: str, **options: Any) -> Any:
        """Send a DELETE request, or answer it from the cache."""
        return await self._send("DELETE", url, lambda: self._transport.delete(url, **options))

    def set_authentication_token(self, token: str) -> None:
        """Send ``Authorization: Bearer <token>`` with every later request.

        The header is set on the shared transport, so it applies to every
        client derived from the same root, whatever its namespace.
        """
        self._transport.set_header("Authorization", f"Bearer {token}")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(
        self,
        method: str,
        url: str,
        call: Callable[[], Awaitable[Union[Envelope, RawPayload]]],
    ) -> Any:
        output = get_output()

        if not self._config.caching_enabled:
            shape = await call()
            return shape.payload

        key = derive_cache_key(method, url, self._config.discriminators)
        cached = self._lookup(url, key)
        if cached is not None:
            output.debug(f"Cache hit: {self.namespace} {key}")
            return cached.payload

        output.debug(f"Cache miss: {self.namespace} {key}")
        shape = await call()
        self._remember(url, key, shape)
        return shape.payload

    def _lookup(self, url: str, key: str) -> Optional[Union[Envelope, RawPayload]]:
        """Return the cached response shape for *key*, or ``None``."""
        entry = self._store.find(self.namespace, url, key)
        if entry is None:
            return None
        try:
            return response_adapter.validate_json(entry.value)
        except ValidationError:
            get_output().debug(f"Unreadable cache entry for {key}, fetching again")
            return None

    def _remember(self, url: str, key: str, shape: Union[Envelope, RawPayload]) -> None:
        """Store *shape* under *key* with this client's TTL."""
        self._store.sweep_expired(self.namespace, url)
        value = response_adapter.dump_json(shape).decode("utf-8")
        self._store.put(self.namespace, url, key, value, self._config.ttl)
        get_output().debug(f"Cached {key} for {self._config.ttl:g} ms")
