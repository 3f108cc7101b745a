"""Typer entry point: global flags and logging setup."""

from __future__ import annotations

import logging
import sys
from enum import Enum

import typer

from podinfo_operator import __version__

LOG_ENV_VAR = "PODINFO_OPERATOR_LOG"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


app = typer.Typer(name="podinfo-operator", no_args_is_help=True, add_completion=False)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"podinfo-operator {__version__}")
        raise typer.Exit


def _level_for(verbose: int, log_level: LogLevel | None) -> int | None:
    """An explicit level wins over ``-v`` counting; ``None`` leaves logging alone."""
    if log_level is not None:
        return logging.getLevelName(log_level.value)
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return None


def _configure_logging(verbose: int, log_level: LogLevel | None = None) -> None:
    level = _level_for(verbose, log_level)
    if level is None:
        return
    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger("podinfo_operator").setLevel(level)


@app.callback()
def main(
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)."
    ),
    log_level: LogLevel | None = typer.Option(
        None,
        "--log-level",
        envvar=LOG_ENV_VAR,
        case_sensitive=False,
        help="Set the operator log level explicitly.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Reconcile MyAppResource objects into podinfo Deployments."""
    del version
    _configure_logging(verbose, log_level)


from podinfo_operator.cli import commands as _commands  # noqa: E402, F401
