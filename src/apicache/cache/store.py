"""In-memory, namespaced store of cached HTTP responses.

The store is a plain mapping ``namespace -> resource -> [CacheEntry, ...]``.
A *namespace* is the logical caller (one per service) and a *resource* is
the literal request URL. Several entries can live in one bucket because
the same URL may be cached under different derived keys (different
methods or discriminators).

Expiry is lazy: nothing runs in the background. Every read and write goes
through :meth:`CacheStore.sweep_expired` first, so a bucket that has been
touched never holds an entry whose ``expired_at`` has passed.

The store is process-local and synchronous. It is shared by reference
between every client derived from the same root client.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from apicache.models import CacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _now_ms() -> float:
    """Current wall-clock time as epoch milliseconds."""
    return time.time() * 1000


class CacheStore:
    """Owned mapping of namespaced, expiring cache entries.

    Args:
        clock: Callable returning the current time in epoch milliseconds.
            Defaults to the system clock; tests pass a fake one.

    Example::

        store = CacheStore()
        store.put("UploadService", "/upload", "method=GET&url=/upload", "[]", ttl=60_000)
        entry = store.find("UploadService", "/upload", "method=GET&url=/upload")
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or _now_ms
        self._state: dict[str, dict[str, Any]] = {}

    @property
    def state(self) -> dict[str, dict[str, Any]]:
        """The raw ``namespace -> resource -> entries`` mapping."""
        return self._state

    def put(
        self,
        namespace: str,
        resource: str,
        key: str,
        value: str,
        ttl: float,
    ) -> None:
        """Append an entry to the ``(namespace, resource)`` bucket.

        The entry expires ``ttl`` milliseconds from now. Buckets are
        created on demand. Entries are not de-duplicated by key;
        :meth:`find` returns the first live match.

        Args:
            namespace: Logical caller owning the entry.
            resource: Request URL the entry belongs to.
            key: Derived cache key.
            value: Serialised response.
            ttl: Time to live in milliseconds.
        """
        bucket = self._bucket(namespace, resource)
        if not isinstance(bucket, list):
            logger.warning(
                "Cache bucket %s %s is not a list, skipping write", namespace, resource
            )
            return
        bucket.append(
            CacheEntry(key=key, value=value, expired_at=self._clock() + ttl)
        )

    def sweep_expired(self, namespace: str, resource: str) -> None:
        """Drop every entry in the bucket whose ``expired_at`` is not in the future.

        Idempotent. Creates the bucket if it is absent. A bucket that is
        not a list is left alone.
        """
        bucket = self._bucket(namespace, resource)
        if not isinstance(bucket, list):
            return

        now = self._clock()
        live = [entry for entry in bucket if entry.expired_at > now]
        if len(live) != len(bucket):
            logger.debug(
                "Evicted %d expired entries from %s %s",
                len(bucket) - len(live), namespace, resource,
            )
        self._state[namespace][resource] = live

    def find(self, namespace: str, resource: str, key: str) -> Optional[CacheEntry]:
        """Return the first live entry stored under *key*, or ``None``.

        Expired entries in the bucket are swept before the lookup.
        """
        self.sweep_expired(namespace, resource)
        bucket = self._bucket(namespace, resource)
        if not isinstance(bucket, list):
            logger.warning(
                "Cache bucket %s %s is not a list, ignoring it", namespace, resource
            )
            return None
        return next((entry for entry in bucket if entry.key == key), None)

    def clear(self) -> None:
        """Drop every namespace by replacing the whole mapping."""
        logger.debug("Clearing %d cache namespaces", len(self._state))
        self._state = {}

    def _bucket(self, namespace: str, resource: str) -> Any:
        """Return the bucket for ``(namespace, resource)``, creating it if absent.

        Returns ``None`` when the namespace itself is not a mapping.
        """
        resources = self._state.setdefault(namespace, {})
        if not isinstance(resources, dict):
            logger.warning("Cache namespace %s is not a mapping, ignoring it", namespace)
            return None
        return resources.setdefault(resource, [])
