"""Typer application and CLI entry point for apicache.

Registers the ``uploads`` and ``config`` sub-command groups. The root
callback resolves settings, installs the global
:class:`~apicache.output.OutputManager`, routes library logging to stderr,
and stores the resolved settings and bearer token in ``ctx.obj`` for the
sub-commands.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from apicache import __version__
from apicache.commands.config import config_app
from apicache.commands.uploads import uploads_app
from apicache.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="apicache",
    help="Call the photo upload API through a namespaced response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(uploads_app, name="uploads", help="List, create, and delete photos.")
app.add_typer(config_app, name="config", help="Settings management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apicache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API root URL."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", envvar="APICACHE_TOKEN", help="Bearer token sent with every request."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show cache hits, misses, and requests."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Raises:
        typer.Exit: With the error's exit code if settings cannot be loaded.
    """
    from apicache.config import resolve_settings
    from apicache.exceptions import ConfigError
    from apicache.output import OutputFormat, OutputManager, configure_logging, error, set_output

    fmt: Optional[str] = None
    if json_output:
        fmt = OutputFormat.JSON.value
    elif plain_output:
        fmt = OutputFormat.PLAIN.value

    try:
        settings = resolve_settings(cli_base_url=base_url, cli_format=fmt)
    except ConfigError as exc:
        set_output(OutputManager(no_color=no_color))
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    output = OutputManager(
        format=OutputFormat(settings.output.format),
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["token"] = token


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``apicache`` console script.

    :class:`~apicache.exceptions.ApicacheError` instances that escape a
    command cause a clean exit with the error's ``exit_code``.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apicache.exceptions import ApicacheError
        from apicache.output import error

        if isinstance(exc, ApicacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
