"""In-memory response caching for apicache.

This package provides :class:`CacheStore`, the namespaced store of expiring
response entries, and :func:`derive_cache_key`, which turns a request's
method, URL, and discriminators into the key an entry is stored under.

Both are consumed by :class:`~apicache.client.CachingHttpClient`. The cache
lives for the lifetime of the process; :meth:`CacheStore.clear` is the only
way to invalidate it wholesale.
"""

from apicache.cache.keys import derive_cache_key
from apicache.cache.store import CacheStore

__all__ = ["CacheStore", "derive_cache_key"]
