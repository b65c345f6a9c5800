"""apicache -- an async HTTP client with a namespaced, time-bounded response cache.

A caller takes a :class:`~apicache.client.CachingHttpClient` bound to its
own namespace, optionally derives a cache-enabled variant with a TTL and
key discriminators, and issues requests. Cached responses are served from
an in-memory :class:`~apicache.cache.CacheStore` until they expire; misses
go to the network and are written back.

Typical use::

    async with HttpxTransport("https://api.example.com") as transport:
        root = CachingHttpClient(transport, CacheStore())
        uploads = root.derive_for_namespace("UploadService")
        photos = await uploads.derive_cached({}, "5m").get("/upload?page=1")

Modules:
    cache: the cache store and cache-key derivation.
    client: the caching client and its transports.
    services: API services wired with per-service namespaces.
    app: Typer CLI entry point.
    models: Pydantic models shared across the package.
    config: settings file, environment, and precedence resolution.
    duration: human-readable TTL parsing.
    exceptions: exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich.
"""

__version__ = "0.1.0"
