"""Photo upload service.

Thin request builder over a :class:`~apicache.client.CachingHttpClient`
bound to the service's own cache namespace. Only :meth:`UploadService.find_all`
is ever cached, and only when the caller asks for a TTL.
"""

from __future__ import annotations

from typing import Any, Optional, Union
from urllib.parse import urlencode

from apicache.client import CachingHttpClient


def _with_query(url: str, params: list[tuple[str, Any]]) -> str:
    """Append the truthy *params* to *url* as a query string."""
    query = urlencode([(name, value) for name, value in params if value])
    return f"{url}?{query}" if query else url


class UploadService:
    """List, create, and delete uploaded photos.

    Args:
        http: Client bound to this service's namespace.
        base_url: API root, e.g. ``https://api.example.com``.
    """

    def __init__(self, http: CachingHttpClient, base_url: str = "") -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")

    @property
    def http(self) -> CachingHttpClient:
        return self._http

    async def find_all(
        self,
        keyword: Optional[str] = None,
        page: Optional[int] = None,
        size: Optional[int] = None,
        ttl: Union[int, str, None] = None,
    ) -> Any:
        """List photos, optionally filtered by *keyword* and paginated.

        With *ttl* set, the listing is served from the cache for that long.
        """
        url = _with_query(
            f"{self._base_url}/upload",
            [("keyword", keyword), ("page", page), ("size", size)],
        )
        http = self._http.derive_cached({}, ttl) if ttl else self._http
        return await http.get(url)

    async def create_photo(self, label: str, photo_url: str) -> Any:
        return await self._http.post(
            f"{self._base_url}/upload",
            {"label": label, "photoUrl": photo_url},
        )

    async def delete_photo(self, id: Union[int, str, None]) -> Any:
        url = _with_query(f"{self._base_url}/upload", [("id", id)])
        return await self._http.delete(url)
