"""Service wiring.

Every registered service is constructed with its own child client from
:meth:`~apicache.client.CachingHttpClient.derive_for_namespace`, named after
its registry key. Two services therefore never see each other's cache
entries, even for identical URLs, while still sharing one transport, one
store, and one ``Authorization`` header.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from apicache.cache import CacheStore
from apicache.client import CachingHttpClient, Transport
from apicache.models import Settings
from apicache.services.upload import UploadService

ServiceFactory = Callable[[CachingHttpClient, str], Any]

SERVICES: dict[str, ServiceFactory] = {
    "upload_service": UploadService,
}


def build_services(http: CachingHttpClient, base_url: str = "") -> dict[str, Any]:
    """Construct every registered service with its own namespaced client.

    Args:
        http: Root client; only its transport and store are reused.
        base_url: API root passed to every service.

    Returns:
        Mapping of registry key to service instance.
    """
    return {
        name: factory(http.derive_for_namespace(name), base_url)
        for name, factory in SERVICES.items()
    }


class Api:
    """Entry point bundling the root client, its store, and the services."""

    def __init__(self, http: CachingHttpClient, services: dict[str, Any]) -> None:
        self.http = http
        self.services = services

    @property
    def upload_service(self) -> UploadService:
        return self.services["upload_service"]

    @property
    def store(self) -> CacheStore:
        return self.http.store

    def set_authentication_token(self, token: str) -> None:
        self.http.set_authentication_token(token)

    def clear_cache(self) -> None:
        """Invalidate every cached response of every service."""
        self.http.store.clear()


def create_api(
    transport: Transport,
    settings: Optional[Settings] = None,
    store: Optional[CacheStore] = None,
) -> Api:
    """Wire a root client and all services over *transport*.

    Args:
        transport: An open transport.
        settings: Resolved settings; defaults when omitted.
        store: Cache store to use; a fresh one when omitted.
    """
    settings = settings or Settings()
    http = CachingHttpClient(
        transport,
        store or CacheStore(),
        cache_disabled=True if settings.cache.disabled else None,
    )
    return Api(http, build_services(http, settings.base_url or ""))
