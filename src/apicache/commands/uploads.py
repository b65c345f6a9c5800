"""Uploads commands -- list, create, and delete photos.

Each invocation opens one :class:`~apicache.client.HttpxTransport`, wires
the services over it with :func:`~apicache.services.create_api`, runs a
single service call, and renders the payload to stdout.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import typer

from apicache.client import HttpxTransport
from apicache.exceptions import ApicacheError, InvalidUsageError
from apicache.models import Settings
from apicache.output import OutputFormat, error, format_response, get_output
from apicache.services import Api, create_api


uploads_app = typer.Typer(no_args_is_help=True)


def _run(
    ctx: typer.Context,
    action: Callable[[Api], Awaitable[Any]],
    render: Callable[[Any], None] = format_response,
) -> None:
    """Run *action* against a freshly wired :class:`Api` and print its result with *render*.

    Raises:
        typer.Exit: With the error's exit code when an
            :class:`~apicache.exceptions.ApicacheError` is raised.
    """
    obj = ctx.obj or {}
    settings: Settings = obj.get("settings") or Settings()
    token: Optional[str] = obj.get("token")

    async def _call() -> Any:
        if not settings.base_url:
            raise InvalidUsageError(
                "No base URL configured. Pass --base-url or set APICACHE_BASE_URL."
            )
        async with HttpxTransport(config=settings.request) as transport:
            api = create_api(transport, settings)
            if token:
                api.set_authentication_token(token)
            return await action(api)

    try:
        result = asyncio.run(_call())
    except ApicacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if result is not None:
        render(result)


def _render_photos(photos: Any) -> None:
    """Show a photo listing as a table, or as raw JSON in JSON mode."""
    output = get_output()
    if (
        output.format == OutputFormat.JSON
        or not isinstance(photos, list)
        or not all(isinstance(p, dict) for p in photos)
    ):
        output.format_response(photos)
        return

    headers: list[str] = []
    for photo in photos:
        headers.extend(k for k in photo if k not in headers)
    rows = [[_cell(photo.get(h)) for h in headers] for photo in photos]
    output.print_table(headers, rows, title=f"Photos ({len(rows)})")


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


@uploads_app.command("list")
def uploads_list(
    ctx: typer.Context,
    keyword: Optional[str] = typer.Option(None, "--keyword", "-k", help="Filter by label."),
    page: Optional[int] = typer.Option(None, "--page", help="Page number."),
    size: Optional[int] = typer.Option(None, "--size", help="Page size."),
    ttl: Optional[str] = typer.Option(
        None, "--ttl", help="Cache the listing for this long (e.g. 300000 or 5m)."
    ),
) -> None:
    """List uploaded photos.

    Example::

        apicache uploads list --keyword cat --page 2
    """
    settings: Settings = (ctx.obj or {}).get("settings") or Settings()
    effective_ttl: Any = ttl if ttl is not None else settings.cache.default_ttl
    _run(
        ctx,
        lambda api: api.upload_service.find_all(
            keyword=keyword, page=page, size=size, ttl=effective_ttl
        ),
        render=_render_photos,
    )


@uploads_app.command("create")
def uploads_create(
    ctx: typer.Context,
    label: str = typer.Argument(help="Photo label."),
    photo_url: str = typer.Argument(help="URL of the photo."),
) -> None:
    """Create a photo entry."""
    _run(ctx, lambda api: api.upload_service.create_photo(label, photo_url))


@uploads_app.command("delete")
def uploads_delete(
    ctx: typer.Context,
    id: str = typer.Argument(help="Photo id."),
) -> None:
    """Delete a photo by id."""
    _run(ctx, lambda api: api.upload_service.delete_photo(id))
