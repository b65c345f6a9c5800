"""Config commands -- view and modify persisted settings.

Provides the ``apicache config`` sub-command group for reading and updating
the settings file (:class:`~apicache.models.Settings`).
"""

from __future__ import annotations

import typer

from apicache.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the settings stored on disk.

    Example::

        apicache config show --json
    """
    from apicache.config import get_config_dir, load_settings

    info(f"Config directory: {get_config_dir()}")
    format_response(load_settings().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Settings key (dot notation, e.g. 'cache.default_ttl')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a settings value.

    The value is coerced to the type of the current field (bool, int, or
    str) and validated before saving. ``cache.default_ttl`` also accepts
    duration strings such as ``5m``.

    Example::

        apicache config set base_url https://api.example.com
        apicache config set cache.default_ttl 5m
        apicache config set cache.disabled true
    """
    from apicache.config import load_settings, save_settings
    from apicache.models import Settings

    data = load_settings().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int) and value.lstrip("-").isdigit():
        coerced = int(value)
    elif isinstance(current, int) and final_key != "default_ttl":
        error(f"Expected integer for {key}, got: {value}")
        raise typer.Exit(code=2)

    target[final_key] = coerced

    try:
        settings = Settings.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_settings(settings)
    success(f"Set {key} = {coerced}")
