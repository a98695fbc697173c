"""Typer application and CLI entry point for swagtree.

This module wires together the top-level Typer application, registers the
``inspect`` and ``config`` sub-command groups, and installs output and logging
from the global flags.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under the
data directory.

See Also:
    :mod:`swagtree.config`: Source and default resolution.
    :mod:`swagtree.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from swagtree import __version__
from swagtree.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="swagtree",
    help="Normalize OpenAPI 3.0/3.1 documents into grouped type trees.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagtree {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~swagtree.output.OutputManager` and the
    ``swagtree`` log handler from the CLI flags, and stores the requested
    format in ``ctx.obj`` for commands that resolve configuration.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational output; only errors are logged.
        verbose: Show debug output and debug-level log records.
    """
    from swagtree.output import OutputFormat, OutputManager, set_output

    configure_logging(verbose=verbose, quiet=quiet, no_color=no_color)

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    fmt = OutputFormat(cli_format or _configured_format())
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["format"] = cli_format
    ctx.obj["verbose"] = verbose


def _configured_format() -> str:
    """Output format from the resolved configuration, ``auto`` if it is unreadable."""
    from swagtree.config import resolve_config
    from swagtree.exceptions import ConfigError

    try:
        return resolve_config().output.format
    except ConfigError as exc:
        logging.getLogger(__name__).warning("Ignoring configured output format: %s", exc)
        return "auto"


def configure_logging(verbose: bool = False, quiet: bool = False, no_color: bool = False) -> None:
    """Send ``swagtree`` log records to stderr through Rich.

    The level is WARNING by default, DEBUG with ``verbose`` and ERROR with
    ``quiet``.  Calling it again replaces the previous handler.
    """
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("swagtree")
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to disk and return the log file path."""
    from swagtree.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def register_commands() -> None:
    """Attach the built-in sub-command groups to :data:`app`."""
    from swagtree.commands.config import config_app
    from swagtree.commands.inspect import inspect_app

    if not app.registered_groups:
        app.add_typer(inspect_app, name="inspect", help="Browse normalized API trees.")
        app.add_typer(config_app, name="config", help="Configuration management.")


def main() -> None:
    """CLI entry point invoked by the ``swagtree`` console script.

    Unhandled :class:`~swagtree.exceptions.SwagtreeError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from swagtree.exceptions import SwagtreeError
        from swagtree.output import error

        if isinstance(exc, SwagtreeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
