"""HTTP client module for apicache.

Provides :class:`CachingHttpClient`, the async client that answers
requests from a namespaced TTL cache when it can, and the transport it
sends everything else through.

Classes:
    :class:`CachingHttpClient` -- caching wrapper with child derivation.
    :class:`Transport` -- the protocol a network layer must satisfy.
    :class:`HttpxTransport` -- a transport backed by :class:`httpx.AsyncClient`.

Example::

    from apicache.cache import CacheStore
    from apicache.client import CachingHttpClient, HttpxTransport

    async with HttpxTransport("https://api.example.com") as transport:
        client = CachingHttpClient(transport, CacheStore())
        photos = await client.derive_cached({}, "5m").get("/upload")
"""

from apicache.client.http_client import CachingHttpClient
from apicache.client.transport import HttpxTransport, Transport

__all__ = ["CachingHttpClient", "HttpxTransport", "Transport"]
