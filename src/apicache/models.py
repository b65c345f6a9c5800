"""Canonical Pydantic models shared across all apicache modules.

The models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`OutputConfig`, and
    :class:`Settings`.

**Cache models** -- owned by :class:`~apicache.cache.store.CacheStore` and
the caching client:
    :class:`CacheEntry` and :class:`ClientConfig`.

**Response shapes** -- the tagged union a transport produces for every
response body:
    :class:`Envelope` (an API envelope with a ``data`` field) and
    :class:`RawPayload` (any other body). :func:`classify_body` picks the
    variant once, at the transport boundary, so the rest of the code never
    inspects the body shape again.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

ROOT_NAMESPACE = "RootService"
"""Namespace used by a client that was not derived for a specific service."""

DEFAULT_CACHE_TTL = 300_000
"""Default TTL, in milliseconds, applied by ``derive_cached`` (five minutes)."""


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every request made by the transport."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`Settings`."""

    disabled: bool = Field(
        default=False, description="Turn cache derivation into a no-op"
    )
    default_ttl: Union[int, str] = Field(
        default=DEFAULT_CACHE_TTL,
        description="TTL for cached listings: milliseconds or a duration like '5m'",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`Settings`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class Settings(BaseModel):
    """User-wide settings persisted at ``~/.config/apicache/config.json``.

    Loaded and saved by :func:`~apicache.config.load_settings` and
    :func:`~apicache.config.save_settings`. See
    :func:`~apicache.config.resolve_settings` for how environment
    variables and CLI flags are layered on top.
    """

    base_url: Optional[str] = Field(
        default=None, description="API root prepended to every service path"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Cache ---


class CacheEntry(BaseModel):
    """One cached response inside a ``(namespace, resource)`` bucket.

    ``value`` holds the serialised response shape and ``expired_at`` is an
    epoch timestamp in milliseconds. An entry is live while
    ``expired_at > now``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    expired_at: float


class ClientConfig(BaseModel):
    """Cache policy of a single :class:`~apicache.client.CachingHttpClient`.

    Frozen: a client never changes its namespace or cache policy after
    construction. A different policy means a different client, produced by
    ``derive_for_namespace`` or ``derive_cached``.

    A ``ttl`` of ``0`` (the default) disables caching.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str = ROOT_NAMESPACE
    ttl: float = 0
    discriminators: dict[str, Any] = Field(default_factory=dict)

    @property
    def caching_enabled(self) -> bool:
        """``True`` when responses for this client are read from and written to the cache."""
        return self.ttl > 0


# --- Response shapes ---


class Envelope(BaseModel):
    """An API envelope: a JSON object carrying the payload in its ``data`` field.

    The whole object is kept in ``body`` so that a cached envelope looks
    exactly like the one the server sent.
    """

    kind: Literal["envelope"] = "envelope"
    body: dict[str, Any]

    @model_validator(mode="after")
    def _require_data(self) -> Envelope:
        if "data" not in self.body:
            raise ValueError("envelope body has no 'data' field")
        return self

    @property
    def payload(self) -> Any:
        return self.body["data"]


class RawPayload(BaseModel):
    """A response body that is the payload itself."""

    kind: Literal["raw"] = "raw"
    value: Any = None

    @property
    def payload(self) -> Any:
        return self.value


ResponseShape = Annotated[Union[Envelope, RawPayload], Field(discriminator="kind")]

response_adapter: TypeAdapter[Union[Envelope, RawPayload]] = TypeAdapter(ResponseShape)
"""Serialises and restores :data:`ResponseShape` values for the cache."""


def classify_body(body: Any) -> Union[Envelope, RawPayload]:
    """Tag a decoded response body as an :class:`Envelope` or a :class:`RawPayload`.

    A JSON object with a ``data`` key is an envelope, whatever the value of
    ``data``. Everything else (lists, scalars, objects without ``data``,
    ``None`` for empty bodies) is a raw payload.
    """
    if isinstance(body, dict) and "data" in body:
        return Envelope(body=body)
    return RawPayload(value=body)
